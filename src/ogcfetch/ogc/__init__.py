"""
OGC (Open Geospatial Consortium) protocol specifics.

This module contains the request builders for WFS and WMS and the GeoJSON
response parser.
"""

from .geojson import GeoJSONParser
from .wfs import WFSRequestAdapter
from .wms import WMSTileAdapter

__all__ = [
    "GeoJSONParser",
    "WFSRequestAdapter",
    "WMSTileAdapter",
]
