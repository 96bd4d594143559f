import io
from unittest.mock import patch

import pytest
import requests

from ogcfetch import api
from ogcfetch.auth import ApiKeyAuth, BasicAuth, BearerTokenAuth
from ogcfetch.defaults import DEFAULT_USER_AGENT, DEFAULT_WFS_CRS
from ogcfetch.errors import ConfigurationError, RequestFailed, TransportError, ValidationError
from ogcfetch.service.base import detect_service_type, get_service
from ogcfetch.service.config import WFSConfig, WMSConfig
from ogcfetch.service.wfs import WFSService
from ogcfetch.service.wms import WMSService
from ogcfetch.types import ServiceTypeEnum

WFS_URL = "http://example.com/geoserver/wfs"
WMS_URL = "http://example.com/arcgis/MapServer/WMSServer"


def test_detect_service_type_from_query():
    assert detect_service_type("http://example.com/ows?service=wms") == ServiceTypeEnum.WMS


def test_detect_service_type_from_path():
    assert detect_service_type(WFS_URL) == ServiceTypeEnum.WFS
    assert detect_service_type(WMS_URL) == ServiceTypeEnum.WMS


def test_detect_service_type_fallback_and_failure():
    assert detect_service_type("http://example.com/ows", fallback=ServiceTypeEnum.WFS) == ServiceTypeEnum.WFS
    with pytest.raises(ConfigurationError):
        detect_service_type("http://example.com/ows")


def test_get_service_uses_registry():
    assert isinstance(get_service(WFS_URL), WFSService)
    assert isinstance(get_service("http://example.com/ows", service_type=ServiceTypeEnum.WMS), WMSService)


def test_defaults_are_applied():
    service = WFSService(WFS_URL)

    assert service.version == "2.0.0"
    assert service.crs == DEFAULT_WFS_CRS
    assert service.output_format == "GEOJSON"
    assert service.auth is None
    assert service.session.headers["User-Agent"] == DEFAULT_USER_AGENT


def test_supplied_session_is_shared_untouched():
    session = requests.Session()
    session.headers["User-Agent"] = "custom/1.0"

    first = WFSService(WFS_URL, session=session)
    second = WMSService(WMS_URL, session=session)

    assert first.session is second.session is session
    assert session.headers["User-Agent"] == "custom/1.0"


def test_configuration_is_read_only():
    service = WMSService(WMS_URL, auth=BasicAuth(username="u", password="p"))

    for attribute in ("base_url", "auth", "version", "crs", "session", "styles"):
        with pytest.raises(AttributeError):
            setattr(service, attribute, None)


def test_headers_property_returns_copy():
    service = WFSService(WFS_URL, headers={"Accept": "application/json"})

    service.headers["Accept"] = "text/html"

    assert service.headers == {"Accept": "application/json"}


@pytest.mark.parametrize("url", ["", "example.com/wfs", "ftp://example.com/wfs", "http://"])
def test_invalid_base_url_rejected(url):
    with pytest.raises(ValidationError):
        WFSService(url)


def test_trailing_query_separator_is_stripped():
    assert WFSService(WFS_URL + "?").base_url == WFS_URL


def test_repr_hides_credentials():
    service = WFSService(WFS_URL, auth=ApiKeyAuth(param_name="apikey", key="k-42"))

    assert "k-42" not in repr(service)
    assert "api_key" in repr(service)


def test_auth_mapping_is_accepted():
    service = WFSService(WFS_URL, auth={"kind": "bearer", "token": "t"})

    assert service.auth is not None
    assert service.auth.kind == "bearer"


def test_wfs_config_builds_service():
    config = WFSConfig.from_url(WFS_URL, crs="EPSG:4326", version="1.1.0", auth={"kind": "cookie", "cookie": "a=b"})

    service = config.build_service()

    assert isinstance(service, WFSService)
    assert service.crs == "EPSG:4326"
    assert service.version == "1.1.0"
    assert service.auth == config.auth


def test_wms_config_builds_service_with_session():
    session = requests.Session()
    config = WMSConfig.from_url(WMS_URL, styles="", timeout=5)

    service = config.build_service(session=session)

    assert isinstance(service, WMSService)
    assert service.session is session
    assert service.styles == ""
    assert service.timeout == 5


def test_invalid_query_fails_before_any_request():
    service = WFSService(WFS_URL)

    with patch.object(service.session, "send") as send:
        with pytest.raises(ValidationError):
            service.fetch_features("ns:roads", max_features=0)
        with pytest.raises(ValidationError):
            service.fetch_features("", bbox="1,2,3,4")
        with pytest.raises(ValidationError):
            service.fetch_features("ns:roads", bbox="1,2,3")

    send.assert_not_called()


def test_invalid_tile_query_fails_before_any_request():
    service = WMSService(WMS_URL)

    with patch.object(service.session, "send") as send:
        with pytest.raises(ValidationError):
            service.fetch_map_tile("relief", "0,0,10,10", 0, 256)

    send.assert_not_called()


def test_transport_failure_is_wrapped():
    service = WFSService(WFS_URL)
    failure = requests.ConnectionError("name resolution failed")

    with patch.object(service.session, "send", side_effect=failure):
        with pytest.raises(TransportError) as excinfo:
            service.fetch_features("ns:roads")

    assert excinfo.value.cause is failure
    assert excinfo.value.retryable is True


def test_timeout_is_passed_to_transport():
    service = WMSService(WMS_URL, timeout=2.5)
    response = requests.Response()
    response.status_code = 200
    response._content = b"img"

    with patch.object(service.session, "send", return_value=response) as send:
        assert service.fetch_map_tile("relief", "0,0,10,10", 16, 16) == b"img"

    assert send.call_args.kwargs["timeout"] == 2.5


@pytest.mark.parametrize("status, retryable", [(400, False), (404, False), (500, True), (503, True)])
def test_request_failed_retryability(status, retryable):
    assert RequestFailed(status).retryable is retryable


def test_redirect_status_is_not_success():
    service = WMSService(WMS_URL)
    response = requests.Response()
    response.status_code = 304
    response._content = b""

    with patch.object(service.session, "send", return_value=response):
        with pytest.raises(RequestFailed) as excinfo:
            service.fetch_map_tile("relief", "0,0,10,10", 16, 16)

    assert excinfo.value.status == 304


def _redirect(location):
    response = requests.Response()
    response.status_code = 302
    response.headers["Location"] = location
    response.raw = io.BytesIO(b"")
    return response


def _ok(body=b"img"):
    response = requests.Response()
    response.status_code = 200
    response._content = body
    return response


@pytest.mark.parametrize(
    "location, keeps_credentials",
    [
        ("/arcgis/MapServer/WMSServer/", True),
        ("https://example.com/arcgis/MapServer/WMSServer", True),
        ("https://mirror.example.org/wms", False),
    ],
)
def test_redirect_reapplies_credentials_only_on_same_host(location, keeps_credentials):
    service = WMSService(WMS_URL, auth=BearerTokenAuth(token="tok"))

    with patch.object(service.session, "send", side_effect=[_redirect(location), _ok()]) as send:
        assert service.fetch_map_tile("relief", "0,0,10,10", 16, 16) == b"img"

    first, second = (call.args[0] for call in send.call_args_list)
    assert first.headers["Authorization"] == "Bearer tok"
    assert ("Authorization" in second.headers) is keeps_credentials
    assert all(call.kwargs["allow_redirects"] is False for call in send.call_args_list)


def test_session_jar_cookies_are_never_sent():
    session = requests.Session()
    session.cookies.set("srv", "from-earlier-call")
    service = WFSService(WFS_URL, session=session)

    with patch.object(session, "send", return_value=_ok(b'{"type": "Point", "coordinates": [0, 0]}')) as send:
        service.fetch_features("ns:roads")

    assert "Cookie" not in send.call_args.args[0].headers


def test_owned_session_refuses_cookies():
    service = WFSService(WFS_URL)

    assert service.session.cookies.get_policy().is_not_allowed("example.com")


def test_config_rejects_unknown_fields():
    with pytest.raises(ValidationError, match="timout"):
        WFSConfig.from_url(WFS_URL, timout=5)


def test_api_rejects_unknown_keywords():
    with pytest.raises(ValidationError):
        api.create_wms_service(WMS_URL, stlyes="")


def test_api_uses_supplied_session():
    session = requests.Session()

    service = api.create_wfs_service(WFS_URL, session=session, crs="EPSG:4326")

    assert service.session is session
    assert service.crs == "EPSG:4326"


def test_api_one_shot_leaves_supplied_session_open():
    session = requests.Session()

    with patch.object(session, "send", return_value=_ok()), patch.object(session, "close") as close:
        api.fetch_map_tile(WMS_URL, "relief", "0,0,10,10", 16, 16, session=session)

    close.assert_not_called()
