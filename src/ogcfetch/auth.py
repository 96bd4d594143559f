"""
Authentication strategies for OGC service requests.

Credentials reach the server in one of two places, and each strategy is
resolved in exactly one of two phases:

1. ``build_url`` runs while the request URL is being constructed. Only
   :class:`ApiKeyAuth` acts here, appending ``&<param_name>=<key>``.
2. ``decorate_request`` runs on the prepared request. :class:`BasicAuth`,
   :class:`BearerTokenAuth` and :class:`CookieAuth` set headers here.

Each phase ignores the strategies that belong to the other one, so callers
must run both; running only the header phase silently drops an API key.
"""

from typing import Annotated, Literal, Optional, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from requests import PreparedRequest
from requests.auth import HTTPBasicAuth

from .errors import ConfigurationError

__all__ = [
    "BasicAuth",
    "BearerTokenAuth",
    "ApiKeyAuth",
    "CookieAuth",
    "AuthStrategy",
    "build_url",
    "decorate_request",
]


class BasicAuth(BaseModel):
    """HTTP Basic credentials."""

    kind: Literal["basic"] = "basic"
    username: str
    password: SecretStr

    model_config = ConfigDict(frozen=True)


class BearerTokenAuth(BaseModel):
    """Token sent as ``Authorization: Bearer <token>``."""

    kind: Literal["bearer"] = "bearer"
    token: SecretStr

    model_config = ConfigDict(frozen=True)


class ApiKeyAuth(BaseModel):
    """API key sent as an extra query parameter."""

    kind: Literal["api_key"] = "api_key"
    param_name: str = Field(..., min_length=1)
    key: SecretStr

    model_config = ConfigDict(frozen=True)


class CookieAuth(BaseModel):
    """Raw ``Cookie`` header value, e.g. a session cookie copied from a browser."""

    kind: Literal["cookie"] = "cookie"
    cookie: SecretStr

    model_config = ConfigDict(frozen=True)


AuthStrategy = Annotated[
    Union[BasicAuth, BearerTokenAuth, ApiKeyAuth, CookieAuth],
    Field(discriminator="kind"),
]


def build_url(auth: Optional[AuthStrategy], url: str) -> str:
    """
    Apply URL-borne credentials to ``url``.

    Args:
        auth: Configured strategy, or None
        url: Request URL including its protocol query string

    Returns:
        The URL, extended with the API key parameter for :class:`ApiKeyAuth`
        and unchanged for every other strategy
    """
    if not isinstance(auth, ApiKeyAuth):
        return url

    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode({auth.param_name: auth.key.get_secret_value()})}"


def decorate_request(auth: Optional[AuthStrategy], request: PreparedRequest) -> PreparedRequest:
    """
    Apply header-borne credentials to a prepared request.

    :class:`ApiKeyAuth` is not handled here; it was applied by ``build_url``.
    """
    if isinstance(auth, BasicAuth):
        return HTTPBasicAuth(auth.username, auth.password.get_secret_value())(request)
    if isinstance(auth, BearerTokenAuth):
        request.headers["Authorization"] = f"Bearer {auth.token.get_secret_value()}"
    elif isinstance(auth, CookieAuth):
        request.headers["Cookie"] = auth.cookie.get_secret_value()
    elif auth is not None and not isinstance(auth, ApiKeyAuth):
        raise ConfigurationError(f"Unsupported auth strategy: {type(auth).__name__}")
    return request
