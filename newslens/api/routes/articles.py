from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from newslens.api.dependencies import get_synthesis_service
from newslens.core.exceptions import ValidationError
from newslens.domain.models import ArticleSummaryRequest, ArticleSummaryResponse
from newslens.services.synthesis_svc import SynthesisService

router = APIRouter(prefix="/api", tags=["articles"])
logger = logging.getLogger(__name__)


@router.post("/summarize", response_model=ArticleSummaryResponse)
async def summarize_article(
    request: ArticleSummaryRequest,
    synthesis_service: SynthesisService = Depends(get_synthesis_service),
):
    """Extract the key facts of one article; 400 when text or title is missing."""
    try:
        summary = await synthesis_service.summarize_article(request.title, request.text)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception:
        logger.exception("Article summary failed for %r", request.title)
        return JSONResponse(status_code=500, content={"error": "Failed to generate summary"})
    return ArticleSummaryResponse(summary=summary)
