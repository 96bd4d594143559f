"""Service abstractions and implementations for OGC feature and map services."""

from .base import BaseService, detect_service_type, get_service, register_service
from .config import ServiceConfig, WFSConfig, WMSConfig
from .wfs import WFSService
from .wms import WMSService

__all__ = [
    "BaseService",
    "detect_service_type",
    "get_service",
    "register_service",
    "ServiceConfig",
    "WFSConfig",
    "WMSConfig",
    "WFSService",
    "WMSService",
]
