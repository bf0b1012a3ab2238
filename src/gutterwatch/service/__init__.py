"""Coverage cache orchestration.

Exports:
    CoverageService: Owns the cache and drives the refresh cycle
    ServiceState: Phase of the refresh cycle
"""

from gutterwatch.service.coverage_service import CoverageService, WatchFiles
from gutterwatch.service.state import ServiceState

__all__ = ["CoverageService", "ServiceState", "WatchFiles"]
