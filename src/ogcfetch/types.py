"""
Type definitions and models for OGC feature and map requests.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .auth import AuthStrategy, build_url
from .defaults import QUERY_SAFE_CHARS


class ServiceTypeEnum(str, Enum):
    """Service types."""
    WFS = "WFS"
    WMS = "WMS"


class Format(str, Enum):
    """Common WMS output formats."""
    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"
    GEOTIFF = "image/tiff"


BBoxTuple = Tuple[float, float, float, float]


class BoundingBox(BaseModel):
    """Bounding box representation."""
    min_x: float = Field(..., description="Minimum X coordinate")
    min_y: float = Field(..., description="Minimum Y coordinate")
    max_x: float = Field(..., description="Maximum X coordinate")
    max_y: float = Field(..., description="Maximum Y coordinate")
    crs: Optional[str] = Field(default=None, description="Optional CRS the coordinates are expressed in")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_coordinates(self):
        """Validate that coordinates are finite and min is less than max."""
        for value in (self.min_x, self.min_y, self.max_x, self.max_y):
            if not math.isfinite(value):
                raise ValueError('bbox coordinates must be finite numbers')
        if self.min_x >= self.max_x:
            raise ValueError('min_x must be less than max_x')
        if self.min_y >= self.max_y:
            raise ValueError('min_y must be less than max_y')
        return self

    @classmethod
    def from_tuple(cls, bbox: Sequence[Any], crs: Optional[str] = None) -> "BoundingBox":
        """Create BoundingBox from a ``(min_x, min_y, max_x, max_y[, crs])`` sequence."""
        if len(bbox) == 5:
            crs = crs or (str(bbox[4]) if bbox[4] else None)
        elif len(bbox) != 4:
            raise ValueError(f"Invalid bbox: {bbox!r}. Expected (min_x, min_y, max_x, max_y)")
        return cls(min_x=bbox[0], min_y=bbox[1], max_x=bbox[2], max_y=bbox[3], crs=crs)

    @classmethod
    def from_string(cls, bbox: str) -> "BoundingBox":
        """
        Create BoundingBox from the comma separated form used in OGC query strings.

        Args:
            bbox: ``"minx,miny,maxx,maxy"`` with an optional trailing CRS,
                e.g. ``"10.0,48.0,11.0,49.0,EPSG:4326"``

        Returns:
            BoundingBox object
        """
        parts = [part.strip() for part in bbox.split(",")]
        if len(parts) not in (4, 5):
            raise ValueError(f"Invalid bbox string: {bbox!r}. Expected 'minx,miny,maxx,maxy[,crs]'")
        try:
            coords = [float(part) for part in parts[:4]]
        except ValueError as exc:
            raise ValueError(f"Invalid bbox coordinates: {bbox!r}") from exc
        crs = parts[4] if len(parts) == 5 and parts[4] else None
        return cls(min_x=coords[0], min_y=coords[1], max_x=coords[2], max_y=coords[3], crs=crs)

    def to_tuple(self) -> BBoxTuple:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def to_param(self, include_crs: bool = False) -> str:
        """Serialize as a BBOX query value."""
        value = ",".join(repr(coord) for coord in self.to_tuple())
        if include_crs and self.crs:
            value = f"{value},{self.crs}"
        return value


def coerce_bbox(value: Any) -> Any:
    """Normalise the accepted bbox inputs; blank strings mean "no bbox"."""
    if value is None or isinstance(value, (BoundingBox, dict)):
        return value
    if isinstance(value, str):
        return BoundingBox.from_string(value) if value.strip() else None
    if isinstance(value, (tuple, list)):
        return BoundingBox.from_tuple(value)
    raise ValueError(f"Invalid bbox format: {value!r}. Expected string, tuple or BoundingBox")


class FeatureQuery(BaseModel):
    """Parameters of a single WFS GetFeature call."""
    layer: str = Field(..., min_length=1, description="Feature type name")
    bbox: Optional[BoundingBox] = Field(None, description="Optional spatial filter")
    max_features: Optional[int] = Field(None, gt=0, description="Optional feature count limit")

    model_config = ConfigDict(frozen=True)

    @field_validator("layer")
    @classmethod
    def layer_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("layer must not be blank")
        return value

    @field_validator("bbox", mode="before")
    @classmethod
    def parse_bbox(cls, value: Any) -> Any:
        return coerce_bbox(value)


class TileQuery(BaseModel):
    """Parameters of a single WMS GetMap call.

    ``crs`` may be left unset when the bbox carries its own CRS; the bbox CRS
    is then used. A bbox CRS that contradicts an explicit ``crs`` is rejected.
    """
    layers: str = Field(..., min_length=1, description="Comma separated layer names")
    bbox: BoundingBox
    width: int = Field(..., gt=0, description="Image width in pixels")
    height: int = Field(..., gt=0, description="Image height in pixels")
    crs: Optional[str] = Field(None, min_length=1, description="Spatial reference identifier")
    output_format: str = Field(default=Format.PNG.value, min_length=1, description="Image MIME type")
    transparent: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("layers", mode="before")
    @classmethod
    def join_layers(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(str(layer).strip() for layer in value)
        return value

    @field_validator("layers", "crs")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("value must not be blank")
        return value

    @field_validator("bbox", mode="before")
    @classmethod
    def parse_bbox(cls, value: Any) -> Any:
        return coerce_bbox(value)

    @field_validator("output_format", mode="before")
    @classmethod
    def format_value(cls, value: Any) -> Any:
        return value.value if isinstance(value, Format) else value

    @model_validator(mode="before")
    @classmethod
    def crs_from_bbox(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("crs") is None:
            bbox = coerce_bbox(data.get("bbox"))
            if isinstance(bbox, BoundingBox) and bbox.crs:
                data = {**data, "bbox": bbox, "crs": bbox.crs}
        return data

    @model_validator(mode="after")
    def crs_matches_bbox(self):
        if self.bbox.crs and self.crs and self.bbox.crs.upper() != self.crs.upper():
            raise ValueError(f"bbox CRS {self.bbox.crs} does not match requested CRS {self.crs}")
        return self


class OgcRequest(BaseModel):
    """A fully described OGC GET request, before authentication is applied."""

    url: str
    params: List[Tuple[str, str]]
    headers: Dict[str, str] = Field(default_factory=dict)
    service_type: Optional[ServiceTypeEnum] = None

    model_config = ConfigDict(frozen=True)

    def query_string(self) -> str:
        return urlencode(self.params, safe=QUERY_SAFE_CHARS)

    @property
    def full_url(self) -> str:
        """Base URL joined with the protocol query string."""
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{self.query_string()}"

    def to_url(self, auth: Optional[AuthStrategy] = None) -> str:
        """Final request URL, with any URL-borne credentials appended."""
        return build_url(auth, self.full_url)

    def param(self, name: str) -> Optional[str]:
        for key, value in self.params:
            if key == name:
                return value
        return None


BBoxInput = Union[str, BBoxTuple, BoundingBox]
