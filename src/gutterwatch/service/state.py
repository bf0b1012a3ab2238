"""Coverage service lifecycle states."""

from enum import Enum


class ServiceState(Enum):
    """Phase of the coverage service's refresh cycle."""

    INITIALIZING = "INITIALIZING"
    LOADING = "LOADING"
    RENDERING = "RENDERING"
    READY = "READY"
    ERROR = "ERROR"
