"""Named protocol defaults shared by the OGC clients.

Every value here can be overridden per client; nothing in the request
builders hardcodes a server-specific setting.
"""

from ._version import __version__

# WFS GetFeature
DEFAULT_WFS_VERSION = "2.0.0"
DEFAULT_WFS_OUTPUT_FORMAT = "GEOJSON"
DEFAULT_WFS_CRS = "EPSG:25832"

# WMS GetMap
DEFAULT_WMS_VERSION = "1.3.0"
DEFAULT_WMS_CRS = "EPSG:4326"
DEFAULT_WMS_STYLES = "default"

# Transport
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"ogcfetch/{__version__}"

# Characters left unescaped in query values (BBOX lists, EPSG codes, MIME types)
QUERY_SAFE_CHARS = ",:/"
