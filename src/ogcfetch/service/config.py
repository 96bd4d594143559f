"""Configuration helpers for constructing service instances."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..auth import AuthStrategy
from ..defaults import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    DEFAULT_WFS_CRS,
    DEFAULT_WFS_OUTPUT_FORMAT,
    DEFAULT_WFS_VERSION,
    DEFAULT_WMS_CRS,
    DEFAULT_WMS_STYLES,
    DEFAULT_WMS_VERSION,
)
from ..errors import ValidationError
from ..types import ServiceTypeEnum
from .base import BaseService, get_service

ConfigT = TypeVar("ConfigT", bound="ServiceConfig")


class ServiceConfig(BaseModel):
    """Serializable configuration describing how to build a service instance."""

    base_url: str = Field(..., description="Base endpoint URL for the service")
    service_type: ServiceTypeEnum = Field(..., description="Type of service to instantiate")
    auth: Optional[AuthStrategy] = Field(None, description="Authentication strategy, if any")
    version: Optional[str] = Field(None, description="Protocol version; the service default when unset")
    crs: Optional[str] = Field(None, description="Default coordinate reference system for requests")
    timeout: Optional[float] = Field(DEFAULT_TIMEOUT, description="Per-request timeout in seconds")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent of the session created for the service")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Additional HTTP headers to include"
    )

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_url(cls: Type[ConfigT], url: str, **kwargs: Any) -> ConfigT:
        """Build a configuration for `url`; unknown keyword arguments are rejected."""

        try:
            return cls(base_url=url, **kwargs)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid {cls.__name__}: {exc}", cause=exc) from exc

    def build_service(self, session: Optional[requests.Session] = None) -> BaseService:
        """Create the appropriate service implementation for this configuration."""

        return get_service(
            self.base_url,
            service_type=self.service_type,
            session=session,
            **self.service_kwargs(),
        )

    def service_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments used when instantiating the service."""

        kwargs: Dict[str, Any] = {
            "timeout": self.timeout,
            "user_agent": self.user_agent,
        }
        if self.auth is not None:
            kwargs["auth"] = self.auth
        if self.version is not None:
            kwargs["version"] = self.version
        if self.crs is not None:
            kwargs["crs"] = self.crs
        if self.headers:
            kwargs["headers"] = dict(self.headers)
        return kwargs


class WFSConfig(ServiceConfig):
    """Configuration helper for Web Feature Services."""

    service_type: ServiceTypeEnum = Field(
        default=ServiceTypeEnum.WFS, description="Service type constant"
    )
    version: Optional[str] = Field(default=DEFAULT_WFS_VERSION, description="WFS protocol version")
    crs: Optional[str] = Field(default=DEFAULT_WFS_CRS, description="srsname requested for features")
    output_format: str = Field(default=DEFAULT_WFS_OUTPUT_FORMAT, description="GetFeature outputFormat")

    def service_kwargs(self) -> Dict[str, Any]:
        kwargs = super().service_kwargs()
        kwargs["output_format"] = self.output_format
        return kwargs


class WMSConfig(ServiceConfig):
    """Configuration helper for Web Map Services."""

    service_type: ServiceTypeEnum = Field(
        default=ServiceTypeEnum.WMS, description="Service type constant"
    )
    version: Optional[str] = Field(default=DEFAULT_WMS_VERSION, description="WMS protocol version")
    crs: Optional[str] = Field(default=DEFAULT_WMS_CRS, description="Default CRS for GetMap")
    styles: str = Field(default=DEFAULT_WMS_STYLES, description="Value of the styles parameter")

    def service_kwargs(self) -> Dict[str, Any]:
        kwargs = super().service_kwargs()
        kwargs["styles"] = self.styles
        return kwargs
