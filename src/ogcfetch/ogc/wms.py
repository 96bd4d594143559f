"""
WMS (Web Map Service) GetMap request construction.
"""

from typing import Dict, List, Optional, Tuple

from ..defaults import DEFAULT_WMS_CRS, DEFAULT_WMS_STYLES, DEFAULT_WMS_VERSION
from ..types import OgcRequest, ServiceTypeEnum, TileQuery


class WMSTileAdapter:
    """Adapter for WMS tile requests."""

    @staticmethod
    def create_tile_request(
        base_url: str,
        query: TileQuery,
        version: str = DEFAULT_WMS_VERSION,
        crs: str = DEFAULT_WMS_CRS,
        styles: str = DEFAULT_WMS_STYLES,
        headers: Optional[Dict[str, str]] = None,
    ) -> OgcRequest:
        """
        Create a WMS GetMap request.

        Args:
            base_url: WMS service base URL
            query: Validated tile query
            version: WMS protocol version
            crs: CRS used when the query does not name one
            styles: Value of the ``styles`` parameter
            headers: Extra HTTP headers to send

        Returns:
            Request description for the WMS service
        """
        # WMS 1.1.x names the reference system SRS, 1.3.0 renamed it to CRS
        crs_param = 'SRS' if version.startswith('1.1') else 'CRS'

        params: List[Tuple[str, str]] = [
            ('SERVICE', 'WMS'),
            ('VERSION', version),
            ('REQUEST', 'GetMap'),
            ('LAYERS', query.layers),
            ('BBOX', query.bbox.to_param()),
            ('WIDTH', str(query.width)),
            ('HEIGHT', str(query.height)),
            (crs_param, query.crs or crs),
            ('FORMAT', query.output_format),
            ('TRANSPARENT', 'true' if query.transparent else 'false'),
            ('styles', styles),
        ]

        return OgcRequest(
            url=base_url,
            params=params,
            headers=dict(headers or {}),
            service_type=ServiceTypeEnum.WMS,
        )
