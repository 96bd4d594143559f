"""Service registry and base abstractions for OGC feature and map services."""

from __future__ import annotations

from abc import ABC
from http.cookiejar import DefaultCookiePolicy
import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import parse_qs, urljoin, urlparse

import requests
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..auth import AuthStrategy, decorate_request
from ..defaults import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..errors import ConfigurationError, RequestFailed, TransportError, ValidationError
from ..types import OgcRequest, ServiceTypeEnum

logger = logging.getLogger(__name__)

__all__ = [
    "BaseService",
    "coerce_auth",
    "register_service",
    "detect_service_type",
    "get_service",
]

ModelT = TypeVar("ModelT", bound=BaseModel)

_AUTH_ADAPTER: TypeAdapter[Any] = TypeAdapter(Optional[AuthStrategy])


def coerce_auth(auth: Union[AuthStrategy, Mapping[str, Any], None]) -> Optional[AuthStrategy]:
    """Accept an auth strategy instance or its mapping form (``{"kind": "basic", ...}``)."""

    try:
        return _AUTH_ADAPTER.validate_python(auth)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid auth configuration: {exc}", cause=exc) from exc


class BaseService(ABC):
    """Abstract base class for OGC service clients.

    A service owns a shared ``requests.Session`` (the transport), a base URL
    and an optional auth strategy. None of these change after construction;
    every per-call value travels in the query model, so one instance can be
    used from several threads at once.

    A caller-supplied session keeps whatever cookies the server sets, but
    the client never sends cookies from the session jar; only ``CookieAuth``
    produces a ``Cookie`` header.
    """

    service_type: ServiceTypeEnum
    default_version: str
    default_crs: str

    def __init__(
        self,
        base_url: str,
        *,
        auth: Union[AuthStrategy, Mapping[str, Any], None] = None,
        session: Optional[requests.Session] = None,
        version: Optional[str] = None,
        crs: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self._base_url = self._normalise_base_url(base_url)
        self._auth = coerce_auth(auth)
        self._version = version or self.default_version
        self._crs = crs or self.default_crs
        self._timeout = timeout
        self._headers = dict(headers or {})

        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = user_agent
            # refuse Set-Cookie so the jar stays empty across calls
            session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self._session = session

    @classmethod
    def from_url(cls, url: str, **config: Any) -> "BaseService":
        """Factory hook for constructing a service from a URL."""

        return cls(url, **config)

    def __repr__(self) -> str:
        auth_kind = self._auth.kind if self._auth is not None else None
        return f"{type(self).__name__}({self._base_url!r}, version={self._version!r}, auth={auth_kind!r})"

    # ------------------------------------------------------------------
    # Read-only configuration
    # ------------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def auth(self) -> Optional[AuthStrategy]:
        return self._auth

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def version(self) -> str:
        return self._version

    @property
    def crs(self) -> str:
        return self._crs

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    # ------------------------------------------------------------------
    # Request execution
    # ------------------------------------------------------------------
    def send(self, request: OgcRequest) -> requests.Response:
        """
        Execute ``request`` and return the successful response.

        Auth is applied in two phases: URL-borne credentials while the final
        URL is built, header-borne credentials on the prepared request.
        Redirects are followed here rather than by the session so header
        credentials are re-applied on every hop that stays on the same host.
        Cookies held in the session jar are never sent.

        Raises:
            TransportError: If no response was received, or on a redirect loop
            RequestFailed: If the status is outside [200, 300); the body is not read
        """

        label = request.service_type.value if request.service_type else "OGC"
        url = request.to_url(self._auth)
        # logged before auth so API keys stay out of the logs
        logger.debug("%s request %s", label, request.full_url)

        auth = self._auth
        response = self._dispatch(label, url, request.headers, auth)
        redirects = 0
        while response.is_redirect:
            if redirects >= self._session.max_redirects:
                response.close()
                raise TransportError(f"{label} request to {self._base_url} exceeded {redirects} redirects")
            target = urljoin(url, self._session.get_redirect_target(response))
            if auth is not None and self._session.should_strip_auth(url, target):
                logger.debug("%s redirect leaves %s, dropping credentials", label, urlparse(url).hostname)
                auth = None
            logger.debug("%s request redirected with status %s", label, response.status_code)
            response.close()
            url = target
            response = self._dispatch(label, url, request.headers, auth)
            redirects += 1

        if not 200 <= response.status_code < 300:
            logger.debug("%s request failed with status %s", label, response.status_code)
            raise RequestFailed(
                response.status_code,
                f"{label} request failed with status {response.status_code}",
                url=request.full_url,
            )
        return response

    def _dispatch(
        self,
        label: str,
        url: str,
        headers: Dict[str, str],
        auth: Optional[AuthStrategy],
    ) -> requests.Response:
        prepared = self._session.prepare_request(requests.Request("GET", url, headers=headers))
        # only CookieAuth may put a Cookie header on the wire
        prepared.headers.pop("Cookie", None)
        prepared = decorate_request(auth, prepared)
        settings = self._session.merge_environment_settings(prepared.url, {}, None, None, None)

        try:
            return self._session.send(prepared, timeout=self._timeout, allow_redirects=False, **settings)
        except requests.RequestException as exc:
            # str(exc) repeats the request URL, API key included
            raise TransportError(
                f"{label} request to {self._base_url} failed: {type(exc).__name__}",
                cause=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _validate(model: Type[ModelT], **values: Any) -> ModelT:
        try:
            return model(**values)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid {model.__name__}: {exc}", cause=exc) from exc

    @staticmethod
    def _normalise_base_url(base_url: str) -> str:
        url = (base_url or "").strip().rstrip("?&")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError(f"Invalid service URL: {base_url!r}")
        return url


# ----------------------------------------------------------------------
# Service registry utilities
# ----------------------------------------------------------------------

_SERVICE_REGISTRY: Dict[ServiceTypeEnum, Type[BaseService]] = {}


def register_service(service_type: ServiceTypeEnum):
    """Decorator for registering service implementations."""

    def decorator(cls: Type[BaseService]) -> Type[BaseService]:
        _SERVICE_REGISTRY[service_type] = cls
        cls.service_type = service_type
        return cls

    return decorator


def detect_service_type(url: str, fallback: Optional[ServiceTypeEnum] = None) -> ServiceTypeEnum:
    """Infer the service type from the URL or query string."""

    parsed = urlparse(url)
    lower_path = parsed.path.lower()
    query = parse_qs(parsed.query.lower())

    if "service" in query:
        try:
            return ServiceTypeEnum(query["service"][0].upper())
        except ValueError:
            pass

    if "wfs" in lower_path:
        return ServiceTypeEnum.WFS
    if "wms" in lower_path:
        return ServiceTypeEnum.WMS

    if fallback is not None:
        return fallback

    raise ConfigurationError(f"Unable to detect service type from URL: {url}")


def get_service(
    url: str,
    *,
    service_type: Optional[ServiceTypeEnum] = None,
    **config: Any,
) -> BaseService:
    """Instantiate the appropriate service implementation for `url`."""

    detected_type = service_type or detect_service_type(url)

    try:
        service_cls = _SERVICE_REGISTRY[detected_type]
    except KeyError as exc:
        raise ConfigurationError(f"No service registered for type {detected_type}") from exc

    return service_cls.from_url(url, **config)
