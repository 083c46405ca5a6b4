"""
Grafana HTTP API Integration
"""
from typing import List, Optional, Dict, Any

from toolgateway.integrations.base import BaseIntegration
from toolgateway.models.instances import GrafanaInstanceConfig
from toolgateway.models.schemas import ToolStatus


class GrafanaIntegration(BaseIntegration):
    """Grafana API integration (service account token)"""

    def __init__(self, config: GrafanaInstanceConfig, **kwargs):
        super().__init__(config, **kwargs)

    @property
    def name(self) -> str:
        return "grafana"

    async def health_check(self) -> ToolStatus:
        try:
            response = await self.get("/api/health")
            if response.status_code == 200 and response.json().get("database") == "ok":
                return ToolStatus.HEALTHY
            return ToolStatus.UNHEALTHY
        except Exception:
            return ToolStatus.UNHEALTHY

    async def get_version(self) -> Optional[str]:
        try:
            response = await self.get("/api/health")
            if response.status_code == 200:
                return response.json().get("version")
        except Exception:
            pass
        return None

    async def search_dashboards(self, query: str) -> List[Dict[str, Any]]:
        hits = await self.get_json("/api/search", params={"query": query, "type": "dash-db", "limit": 20})
        # Grafana returns relative URLs
        return [{**hit, "url": f"{self.base_url}{hit.get('url', '')}"} for hit in hits]

    async def get_dashboard(self, uid: str) -> Dict[str, Any]:
        dashboard = await self.get_json(f"/api/dashboards/uid/{uid}")
        meta = dashboard.get("meta") or {}
        if meta.get("url"):
            meta["url"] = f"{self.base_url}{meta['url']}"
        return dashboard

    async def list_datasources(self) -> List[Dict[str, Any]]:
        return await self.get_json("/api/datasources")
