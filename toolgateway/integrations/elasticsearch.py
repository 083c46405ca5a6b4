"""
File: elasticsearch.py
Purpose: Elasticsearch REST client for cluster health, index listing and Lucene log search.
When Used: Built once per configured cluster (the `node` URL) by the instance registry.
Why Created: Log search is the main way chat users dig into failed deployments; the REST API is
             small enough that the shared httpx base client covers it.
"""
from typing import List, Optional, Dict, Any
from urllib.parse import quote

from toolgateway.integrations.base import BaseIntegration
from toolgateway.models.instances import ElasticsearchInstanceConfig
from toolgateway.models.schemas import ToolStatus

DEFAULT_SEARCH_SIZE = 20


class ElasticsearchIntegration(BaseIntegration):
    """Elasticsearch REST API integration"""

    def __init__(self, config: ElasticsearchInstanceConfig, **kwargs):
        kwargs.setdefault("verify", config.verify_tls)
        super().__init__(config, **kwargs)

    @property
    def name(self) -> str:
        return "elasticsearch"

    async def health_check(self) -> ToolStatus:
        try:
            response = await self.get("/_cluster/health")
            if response.status_code == 200 and response.json().get("status") in ("green", "yellow"):
                return ToolStatus.HEALTHY
            return ToolStatus.UNHEALTHY
        except Exception:
            return ToolStatus.UNHEALTHY

    async def get_version(self) -> Optional[str]:
        try:
            response = await self.get("/")
            if response.status_code == 200:
                return response.json().get("version", {}).get("number")
        except Exception:
            pass
        return None

    async def get_cluster_health(self) -> Dict[str, Any]:
        return await self.get_json("/_cluster/health")

    async def list_indices(self) -> List[Dict[str, Any]]:
        return await self.get_json("/_cat/indices", params={"format": "json"})

    async def search_logs(self, index: str, query: str, size: int = DEFAULT_SEARCH_SIZE) -> List[Dict[str, Any]]:
        """Newest-first hits for a Lucene query"""
        data = await self.get_json(
            f"/{quote(index, safe='*,-_')}/_search",
            params={"q": query, "size": size, "sort": "@timestamp:desc"},
        )
        return data.get("hits", {}).get("hits", [])
