"""
WFS (Web Feature Service) GetFeature request construction.
"""

from typing import Dict, List, Optional, Tuple

from ..defaults import DEFAULT_WFS_CRS, DEFAULT_WFS_OUTPUT_FORMAT, DEFAULT_WFS_VERSION
from ..types import FeatureQuery, OgcRequest, ServiceTypeEnum


class WFSRequestAdapter:
    """Adapter for WFS GetFeature requests."""

    @staticmethod
    def create_feature_request(
        base_url: str,
        query: FeatureQuery,
        version: str = DEFAULT_WFS_VERSION,
        crs: str = DEFAULT_WFS_CRS,
        output_format: str = DEFAULT_WFS_OUTPUT_FORMAT,
        headers: Optional[Dict[str, str]] = None,
    ) -> OgcRequest:
        """
        Create a WFS GetFeature request.

        Parameters are emitted in a fixed order: service, version, request,
        typeName, outputFormat, srsname, then bbox and count when the query
        provides them.

        Args:
            base_url: WFS service base URL
            query: Validated feature query
            version: WFS protocol version
            crs: CRS requested for the returned geometries
            output_format: Requested output format
            headers: Extra HTTP headers to send

        Returns:
            Request description for the WFS service
        """
        params: List[Tuple[str, str]] = [
            ('service', 'WFS'),
            ('version', version),
            ('request', 'GetFeature'),
            ('typeName', query.layer),
            ('outputFormat', output_format),
            ('srsname', crs),
        ]

        if query.bbox is not None:
            params.append(('bbox', query.bbox.to_param(include_crs=True)))

        if query.max_features is not None:
            # WFS 1.x predates the "count" parameter
            count_param = 'maxFeatures' if version.startswith('1.') else 'count'
            params.append((count_param, str(query.max_features)))

        return OgcRequest(
            url=base_url,
            params=params,
            headers=dict(headers or {}),
            service_type=ServiceTypeEnum.WFS,
        )
