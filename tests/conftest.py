"""
Shared test configuration, fixtures, and markers for ogcfetch tests.
"""

import pytest
import requests
from pytest_httpserver import HTTPServer


def pytest_configure(config):
    """Configure test markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (>1s)")
    config.addinivalue_line("markers", "net: marks tests requiring network")
    config.addinivalue_line("markers", "contract: marks tests against a local HTTP server")
    config.addinivalue_line("markers", "property: marks property-based tests")
    config.addinivalue_line("markers", "unit: marks unit tests (fast, pure logic)")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture
def fake_server():
    """Programmable server for testing statuses, headers and bodies."""
    with HTTPServer(host="127.0.0.1", port=0) as server:
        yield server


@pytest.fixture
def session():
    """Session that ignores proxy settings from the environment."""
    http_session = requests.Session()
    http_session.trust_env = False
    yield http_session
    http_session.close()


@pytest.fixture
def point_feature():
    """Single GeoJSON Feature."""
    return {
        "type": "Feature",
        "id": "wells.1",
        "geometry": {"type": "Point", "coordinates": [645945.1, 5720831.6]},
        "properties": {"name": "Well 1"},
    }


@pytest.fixture
def feature_collection(point_feature):
    """FeatureCollection with a point, a polygon and a feature without geometry."""
    return {
        "type": "FeatureCollection",
        "features": [
            point_feature,
            {
                "type": "Feature",
                "id": "parcels.7",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]],
                },
                "properties": {},
            },
            {"type": "Feature", "id": "orphan.3", "geometry": None, "properties": {}},
        ],
    }


@pytest.fixture
def png_bytes():
    """Minimal PNG signature plus filler; content is never inspected."""
    return b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 4
