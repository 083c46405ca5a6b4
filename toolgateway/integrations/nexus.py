"""
File: nexus.py
Purpose: Nexus Repository Manager REST API client for repositories, component search and system
         status.
When Used: Built once per configured Nexus instance; backs the Nexus tools and the /connectivity
           health check.
"""
from typing import List, Optional, Dict, Any

from toolgateway.errors import BackendFault
from toolgateway.integrations.base import BaseIntegration
from toolgateway.models.instances import NexusInstanceConfig
from toolgateway.models.schemas import ToolStatus


class NexusIntegration(BaseIntegration):
    """Nexus Repository Manager API integration"""

    def __init__(self, config: NexusInstanceConfig, **kwargs):
        super().__init__(config, **kwargs)

    @property
    def name(self) -> str:
        return "nexus"

    async def health_check(self) -> ToolStatus:
        try:
            response = await self.get("/service/rest/v1/status")
            if response.status_code == 200:
                return ToolStatus.HEALTHY
            return ToolStatus.UNHEALTHY
        except Exception:
            return ToolStatus.UNHEALTHY

    async def get_version(self) -> Optional[str]:
        try:
            response = await self.get("/service/rest/v1/status")
            server = response.headers.get("Server", "")
            if server.startswith("Nexus/"):
                return server.split("/", 1)[1].split(" ", 1)[0]
        except Exception:
            pass
        return None

    # ========================================================================
    # Repositories
    # ========================================================================

    async def list_repositories(self) -> List[Dict[str, Any]]:
        return await self.get_json("/service/rest/v1/repositories")

    async def get_repository_details(self, repo_name: str) -> Dict[str, Any]:
        for repo in await self.list_repositories():
            if repo.get("name") == repo_name:
                return repo
        raise BackendFault(f"Repository '{repo_name}' not found.")

    # ========================================================================
    # Components
    # ========================================================================

    async def search_artifacts(self, query: str) -> List[Dict[str, Any]]:
        data = await self.get_json("/service/rest/v1/search", params={"q": query})
        return data.get("items", [])

    async def list_artifacts(self, repo_name: str, group: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"repository": repo_name}
        if group:
            params["group"] = group
        data = await self.get_json("/service/rest/v1/search", params=params)
        return data.get("items", [])

    async def get_component(self, component_id: str) -> Dict[str, Any]:
        return await self.get_json(f"/service/rest/v1/components/{component_id}")

    # ========================================================================
    # System
    # ========================================================================

    async def get_system_status(self) -> Dict[str, Any]:
        """Health of each Nexus subsystem (blob stores, database, thread pools...)"""
        return await self.get_json("/service/rest/v1/status/check")
