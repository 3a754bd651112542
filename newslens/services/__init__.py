from newslens.services.aggregation_svc import AggregationService
from newslens.services.cluster_svc import ClusterService
from newslens.services.llm_svc import LLMService
from newslens.services.synthesis_svc import SynthesisService

__all__ = [
    "AggregationService",
    "ClusterService",
    "LLMService",
    "SynthesisService",
]
