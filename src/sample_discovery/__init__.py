"""Sample discovery: resilient access to an unreliable catalog provider."""

from .container import DiscoveryContainer
from .domain.models import DataSource, DiscoveryRequest, FetchResult

__version__ = "0.1.0"

__all__ = [
    "DataSource",
    "DiscoveryContainer",
    "DiscoveryRequest",
    "FetchResult",
    "__version__",
]
