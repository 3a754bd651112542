from __future__ import annotations

from functools import lru_cache

from newslens.core.config import Settings, get_settings
from newslens.domain.models import AggregateResponse
from newslens.services.aggregation_svc import AggregationService
from newslens.services.cluster_svc import ClusterService
from newslens.services.llm_svc import LLMService
from newslens.services.providers import CurrentsProvider, GdeltProvider, GuardianProvider, NewsProvider
from newslens.services.similarity_svc import SimilarityWeights
from newslens.services.synthesis_svc import SynthesisService
from newslens.storage.response_cache import ResponseCache


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    return LLMService(get_settings())


@lru_cache(maxsize=1)
def get_synthesis_service() -> SynthesisService:
    settings = get_settings()
    return SynthesisService(get_llm_service(), batch_size=settings.SYNTHESIS_BATCH_SIZE)


@lru_cache(maxsize=1)
def get_cluster_service() -> ClusterService:
    settings = get_settings()
    return ClusterService(
        SimilarityWeights(
            time_bonus=settings.TIME_BONUS,
            domain_bonus=settings.DOMAIN_BONUS,
            time_window_days=settings.TIME_WINDOW_DAYS,
        )
    )


@lru_cache(maxsize=1)
def get_providers() -> tuple[NewsProvider, ...]:
    settings: Settings = get_settings()
    return (
        GuardianProvider(settings),
        GdeltProvider(settings),
        CurrentsProvider(settings),
    )


@lru_cache(maxsize=1)
def get_response_cache() -> ResponseCache[AggregateResponse] | None:
    ttl = get_settings().RESPONSE_CACHE_TTL_SECONDS
    return ResponseCache(ttl) if ttl > 0 else None


@lru_cache(maxsize=1)
def get_aggregation_service() -> AggregationService:
    settings = get_settings()
    return AggregationService(
        providers=get_providers(),
        cluster_service=get_cluster_service(),
        synthesis_service=get_synthesis_service(),
        threshold=settings.SIMILARITY_THRESHOLD,
        page_size=settings.GROUPS_PER_PAGE,
        provider_timeout=settings.PROVIDER_TIMEOUT_SECONDS,
        cache=get_response_cache(),
    )
