from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from newslens.api.dependencies import get_aggregation_service
from newslens.domain.models import AggregateResponse, NewsQuery
from newslens.services.aggregation_svc import AggregationService

router = APIRouter(prefix="/api/news", tags=["news"])
logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def _parse_page(raw: str | None) -> int:
    """Page numbers that are missing or not integers fall back to the first page."""
    try:
        return int(raw) if raw is not None else 1
    except ValueError:
        return 1


def _blank_to_none(value: str | None) -> str | None:
    return value.strip() if value and value.strip() else None


@router.get("/aggregate", response_model=AggregateResponse, response_model_exclude_none=True)
async def aggregate_news(
    response: Response,
    query: str = "",
    country: str | None = None,
    category: str | None = None,
    page: str | None = None,
    aggregation_service: AggregationService = Depends(get_aggregation_service),
):
    """
    Aggregate, cluster and summarise news from every configured provider.

    Provider and summarisation failures are reported in ``warnings``; only a
    failure of the pipeline itself returns HTTP 500.
    """
    response.headers.update(NO_CACHE_HEADERS)
    news_query = NewsQuery(
        query=query.strip(),
        country=_blank_to_none(country),
        category=_blank_to_none(category),
        page=_parse_page(page),
    )
    try:
        return await aggregation_service.aggregate(news_query)
    except Exception as e:
        logger.exception("Aggregation failed for query=%r", news_query.query)
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Failed to aggregate news", "groups": []},
            headers=NO_CACHE_HEADERS,
        )
