"""
High-level user-friendly API for ogcfetch.

This module provides simple functions for one-off requests against WFS and
WMS endpoints without constructing configuration models by hand.
"""

from typing import Any, List, Optional, Union, cast

import requests
from shapely.geometry.base import BaseGeometry

from .auth import AuthStrategy
from .service.config import WFSConfig, WMSConfig
from .service.wfs import WFSService
from .service.wms import WMSService
from .types import BBoxInput, BoundingBox, Format


def create_bbox(
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
    crs: Optional[str] = None,
) -> BoundingBox:
    """
    Create a bounding box from simple coordinates.

    Args:
        min_x: Minimum X coordinate (west)
        min_y: Minimum Y coordinate (south)
        max_x: Maximum X coordinate (east)
        max_y: Maximum Y coordinate (north)
        crs: Optional CRS; WFS requests append it to the bbox value

    Returns:
        BoundingBox object

    Raises:
        ValueError: If coordinates are invalid
    """
    return BoundingBox(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y, crs=crs)


def create_wfs_service(
    url: str,
    auth: Optional[AuthStrategy] = None,
    session: Optional[requests.Session] = None,
    **kwargs: Any,
) -> WFSService:
    """
    Create a WFS client.

    Args:
        url: WFS endpoint
        auth: Optional authentication strategy
        session: Optional pre-configured session to share
        **kwargs: Any ``WFSConfig`` field (version, crs, output_format, timeout, ...)

    Raises:
        ValidationError: For unknown or invalid configuration values
    """
    return cast(WFSService, WFSConfig.from_url(url, auth=auth, **kwargs).build_service(session=session))


def create_wms_service(
    url: str,
    auth: Optional[AuthStrategy] = None,
    session: Optional[requests.Session] = None,
    **kwargs: Any,
) -> WMSService:
    """
    Create a WMS client.

    Args:
        url: WMS endpoint
        auth: Optional authentication strategy
        session: Optional pre-configured session to share
        **kwargs: Any ``WMSConfig`` field (version, crs, styles, timeout, ...)

    Raises:
        ValidationError: For unknown or invalid configuration values
    """
    return cast(WMSService, WMSConfig.from_url(url, auth=auth, **kwargs).build_service(session=session))


def fetch_features(
    url: str,
    layer: str,
    bbox: Optional[BBoxInput] = None,
    max_features: Optional[int] = None,
    auth: Optional[AuthStrategy] = None,
    session: Optional[requests.Session] = None,
    **kwargs: Any,
) -> List[BaseGeometry]:
    """Fetch feature geometries with a throwaway WFS client.

    A session passed in is left open; one created here is closed.
    """
    service = create_wfs_service(url, auth=auth, session=session, **kwargs)
    try:
        return service.fetch_features(layer, bbox=bbox, max_features=max_features)
    finally:
        if session is None:
            service.session.close()


def fetch_map_tile(
    url: str,
    layers: Union[str, List[str]],
    bbox: BBoxInput,
    width: int,
    height: int,
    srs: Optional[str] = None,
    output_format: Union[Format, str] = Format.PNG,
    transparent: bool = False,
    auth: Optional[AuthStrategy] = None,
    session: Optional[requests.Session] = None,
    **kwargs: Any,
) -> bytes:
    """Fetch one map image with a throwaway WMS client."""
    service = create_wms_service(url, auth=auth, session=session, **kwargs)
    try:
        return service.fetch_map_tile(
            layers,
            bbox,
            width,
            height,
            srs=srs,
            output_format=output_format,
            transparent=transparent,
        )
    finally:
        if session is None:
            service.session.close()
