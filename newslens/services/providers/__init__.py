from newslens.services.providers.base import NewsProvider
from newslens.services.providers.currents_svc import CurrentsProvider
from newslens.services.providers.gdelt_svc import GdeltProvider
from newslens.services.providers.guardian_svc import GuardianProvider

__all__ = [
    "CurrentsProvider",
    "GdeltProvider",
    "GuardianProvider",
    "NewsProvider",
]
