"""
GeoJSON response decoding for WFS GetFeature results.
"""

import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from ..errors import DecodeFailed

logger = logging.getLogger(__name__)

GEOMETRY_TYPES = frozenset({
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
})


class GeoJSONParser:
    """Parser for GeoJSON feature responses.

    A FeatureCollection decodes to one geometry per feature, in document
    order. Features whose geometry is null are skipped.
    """

    def parse_geometries(self, content: str) -> List[BaseGeometry]:
        """
        Parse a GeoJSON document into shapely geometries.

        Args:
            content: Response body as text

        Returns:
            Non-empty list of geometries

        Raises:
            DecodeFailed: If the body is not GeoJSON or holds no geometry
        """
        try:
            document = json.loads(content)
        except ValueError as exc:
            report = self._exception_report_text(content)
            if report is not None:
                raise DecodeFailed(f"Server returned an exception report: {report}", cause=exc) from exc
            raise DecodeFailed(f"Invalid GeoJSON content: {exc}", cause=exc) from exc

        if not isinstance(document, dict):
            raise DecodeFailed(f"GeoJSON root must be an object, got {type(document).__name__}")

        geometries = self._decode_object(document)
        if not geometries:
            raise DecodeFailed("GeoJSON response contains no decodable geometry")

        logger.debug("Decoded %d geometries from %s", len(geometries), document.get("type"))
        return geometries

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _decode_object(self, document: Dict[str, Any]) -> List[BaseGeometry]:
        kind = document.get("type")

        if kind == "FeatureCollection":
            features = document.get("features")
            if not isinstance(features, list):
                raise DecodeFailed("FeatureCollection without a 'features' array")
            geometries: List[BaseGeometry] = []
            for feature in features:
                geometry = self._feature_geometry(feature)
                if geometry is not None:
                    geometries.append(geometry)
            return geometries

        if kind == "Feature":
            geometry = self._feature_geometry(document)
            return [geometry] if geometry is not None else []

        if kind in GEOMETRY_TYPES:
            return [self._to_shape(document)]

        raise DecodeFailed(f"Unsupported GeoJSON type: {kind!r}")

    def _feature_geometry(self, feature: Any) -> Optional[BaseGeometry]:
        if not isinstance(feature, dict) or feature.get("type") != "Feature":
            raise DecodeFailed(f"Invalid GeoJSON feature: {feature!r:.200}")
        geometry = feature.get("geometry")
        if geometry is None:
            logger.debug("Skipping feature %r without geometry", feature.get("id"))
            return None
        return self._to_shape(geometry)

    def _to_shape(self, geometry: Any) -> BaseGeometry:
        if not isinstance(geometry, dict) or geometry.get("type") not in GEOMETRY_TYPES:
            raise DecodeFailed(f"Invalid GeoJSON geometry: {geometry!r:.200}")
        try:
            return shape(geometry)
        except (ShapelyError, KeyError, TypeError, ValueError, IndexError) as exc:
            raise DecodeFailed(f"Malformed {geometry['type']} geometry: {exc}", cause=exc) from exc

    def _exception_report_text(self, content: str) -> Optional[str]:
        """Return the message of an OWS ExceptionReport body, if that is what it is."""
        if not content.lstrip().startswith("<"):
            return None
        try:
            root = ET.fromstring(content)
        except ET.ParseError:
            return None

        if not root.tag.endswith(("ExceptionReport", "ServiceExceptionReport")):
            return None

        messages = [
            elem.text.strip()
            for elem in root.iter()
            if elem.tag.endswith(("ExceptionText", "ServiceException")) and elem.text and elem.text.strip()
        ]
        return "; ".join(messages) or "no exception text"
