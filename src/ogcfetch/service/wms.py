"""WMS (Web Map Service) client returning encoded map images."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from .base import BaseService, register_service
from ..defaults import DEFAULT_WMS_CRS, DEFAULT_WMS_STYLES, DEFAULT_WMS_VERSION
from ..ogc.wms import WMSTileAdapter
from ..types import BBoxInput, Format, OgcRequest, ServiceTypeEnum, TileQuery

logger = logging.getLogger(__name__)


@register_service(ServiceTypeEnum.WMS)
class WMSService(BaseService):
    """Client for WMS GetMap endpoints."""

    default_version = DEFAULT_WMS_VERSION
    default_crs = DEFAULT_WMS_CRS

    def __init__(self, base_url: str, *, styles: str = DEFAULT_WMS_STYLES, **config: Any) -> None:
        super().__init__(base_url, **config)
        self._styles = styles

    @property
    def styles(self) -> str:
        return self._styles

    def build_tile_request(self, query: TileQuery) -> OgcRequest:
        return WMSTileAdapter.create_tile_request(
            self.base_url,
            query,
            version=self.version,
            crs=self.crs,
            styles=self._styles,
            headers=self._headers,
        )

    def fetch_map_tile(
        self,
        layers: Union[str, List[str]],
        bbox: BBoxInput,
        width: int,
        height: int,
        srs: Optional[str] = None,
        output_format: Union[Format, str] = Format.PNG,
        transparent: bool = False,
    ) -> bytes:
        """
        Fetch a rendered map image.

        Args:
            layers: Layer name or list of layer names
            bbox: Render extent as ``"minx,miny,maxx,maxy"``, tuple or BoundingBox
            width: Output width in pixels
            height: Output height in pixels
            srs: Spatial reference identifier; defaults to the bbox CRS, then
                the client's CRS
            output_format: Image MIME type
            transparent: Request a transparent background

        Returns:
            The response body, unmodified

        Raises:
            ValidationError: For invalid query input, before any request is made
            TransportError: If the server could not be reached
            RequestFailed: For non-success HTTP statuses
        """
        query = self._validate(
            TileQuery,
            layers=layers,
            bbox=bbox,
            width=width,
            height=height,
            crs=srs or None,
            output_format=output_format,
            transparent=transparent,
        )
        response = self.send(self.build_tile_request(query))
        data = response.content
        logger.debug("WMS GetMap returned %d bytes (%s)", len(data), response.headers.get("Content-Type"))
        return data
