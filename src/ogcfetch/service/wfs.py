"""WFS (Web Feature Service) client returning shapely geometries."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from shapely.geometry.base import BaseGeometry

from .base import BaseService, register_service
from ..defaults import DEFAULT_WFS_CRS, DEFAULT_WFS_OUTPUT_FORMAT, DEFAULT_WFS_VERSION
from ..ogc.geojson import GeoJSONParser
from ..ogc.wfs import WFSRequestAdapter
from ..types import BBoxInput, FeatureQuery, OgcRequest, ServiceTypeEnum

logger = logging.getLogger(__name__)


@register_service(ServiceTypeEnum.WFS)
class WFSService(BaseService):
    """Client for WFS GetFeature endpoints that answer with GeoJSON."""

    default_version = DEFAULT_WFS_VERSION
    default_crs = DEFAULT_WFS_CRS

    def __init__(
        self,
        base_url: str,
        *,
        output_format: str = DEFAULT_WFS_OUTPUT_FORMAT,
        **config: Any,
    ) -> None:
        super().__init__(base_url, **config)
        self._output_format = output_format
        self.parser = GeoJSONParser()

    @property
    def output_format(self) -> str:
        return self._output_format

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def build_feature_request(self, query: FeatureQuery) -> OgcRequest:
        return WFSRequestAdapter.create_feature_request(
            self.base_url,
            query,
            version=self.version,
            crs=self.crs,
            output_format=self._output_format,
            headers=self._headers,
        )

    def fetch_features(
        self,
        layer_name: str,
        bbox: Optional[BBoxInput] = None,
        max_features: Optional[int] = None,
    ) -> List[BaseGeometry]:
        """
        Fetch features of one layer and return their geometries.

        Args:
            layer_name: Feature type name, e.g. ``"ns:roads"``
            bbox: Optional ``"minx,miny,maxx,maxy[,crs]"`` string, tuple or
                BoundingBox; a blank string is treated as no filter
            max_features: Optional positive feature limit

        Returns:
            One geometry per returned feature, in response order

        Raises:
            ValidationError: For invalid query input, before any request is made
            TransportError: If the server could not be reached
            RequestFailed: For non-success HTTP statuses
            DecodeFailed: If the body is not GeoJSON or holds no geometry
        """
        query = self._validate(FeatureQuery, layer=layer_name, bbox=bbox, max_features=max_features)
        response = self.send(self.build_feature_request(query))

        # GeoJSON is UTF-8 (RFC 7946); don't let requests guess latin-1 for text/* types
        if "charset" not in response.headers.get("Content-Type", "").lower():
            response.encoding = "utf-8"

        geometries = self.parser.parse_geometries(response.text)
        logger.debug("WFS layer %s returned %d geometries", query.layer, len(geometries))
        return geometries
