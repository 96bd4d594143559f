"""ogcfetch - clients for OGC WFS feature queries and WMS map tiles."""

from ._version import __version__

from .api import create_bbox, create_wfs_service, create_wms_service, fetch_features, fetch_map_tile
from .auth import ApiKeyAuth, AuthStrategy, BasicAuth, BearerTokenAuth, CookieAuth, build_url, decorate_request
from .errors import (
    ConfigurationError,
    DecodeFailed,
    IoError,
    OgcFetchError,
    RequestFailed,
    TransportError,
    ValidationError,
)
from .service import (
    BaseService,
    ServiceConfig,
    WFSConfig,
    WFSService,
    WMSConfig,
    WMSService,
    detect_service_type,
    get_service,
    register_service,
)
from .tiles import save_tile_to_file
from .types import BBoxTuple, BoundingBox, FeatureQuery, Format, OgcRequest, ServiceTypeEnum, TileQuery

__all__ = [
    "__version__",
    "create_bbox",
    "create_wfs_service",
    "create_wms_service",
    "fetch_features",
    "fetch_map_tile",
    "ApiKeyAuth",
    "AuthStrategy",
    "BasicAuth",
    "BearerTokenAuth",
    "CookieAuth",
    "build_url",
    "decorate_request",
    "ConfigurationError",
    "DecodeFailed",
    "IoError",
    "OgcFetchError",
    "RequestFailed",
    "TransportError",
    "ValidationError",
    "BaseService",
    "ServiceConfig",
    "WFSConfig",
    "WFSService",
    "WMSConfig",
    "WMSService",
    "detect_service_type",
    "get_service",
    "register_service",
    "save_tile_to_file",
    "BBoxTuple",
    "BoundingBox",
    "FeatureQuery",
    "Format",
    "OgcRequest",
    "ServiceTypeEnum",
    "TileQuery",
]
