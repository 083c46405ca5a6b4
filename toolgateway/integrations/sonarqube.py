"""
SonarQube API Integration
"""
from typing import List, Optional, Dict, Any

from toolgateway.integrations.base import BaseIntegration
from toolgateway.models.instances import SonarQubeInstanceConfig
from toolgateway.models.schemas import ToolStatus

OVERVIEW_METRICS = "bugs,vulnerabilities,code_smells,coverage,duplicated_lines_density"
ISSUE_PAGE_SIZE = 10


class SonarQubeIntegration(BaseIntegration):
    """SonarQube API integration"""

    def __init__(self, config: SonarQubeInstanceConfig, **kwargs):
        super().__init__(config, **kwargs)

    @property
    def name(self) -> str:
        return "sonarqube"

    def _get_headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def _get_auth(self) -> Optional[tuple]:
        # Token-based auth: token as username, empty password
        return (self.config.api_token, "")

    async def health_check(self) -> ToolStatus:
        try:
            response = await self.get("/api/system/status")
            if response.status_code == 200 and response.json().get("status") == "UP":
                return ToolStatus.HEALTHY
            return ToolStatus.UNHEALTHY
        except Exception:
            return ToolStatus.UNHEALTHY

    async def get_version(self) -> Optional[str]:
        try:
            response = await self.get("/api/system/status")
            if response.status_code == 200:
                return response.json().get("version")
        except Exception:
            pass
        return None

    # ========================================================================
    # Projects
    # ========================================================================

    async def list_projects(self) -> List[Dict[str, Any]]:
        data = await self.get_json("/api/components/search", params={"qualifiers": "TRK"})
        return data.get("components", [])

    async def get_project_overview(self, project_key: str) -> Dict[str, Any]:
        data = await self.get_json(
            "/api/measures/component",
            params={"component": project_key, "metricKeys": OVERVIEW_METRICS},
        )
        return {
            "projectKey": project_key,
            "dashboardUrl": f"{self.base_url}/dashboard?id={project_key}",
            "measures": data.get("component", {}).get("measures", []),
        }

    # ========================================================================
    # Quality Gates
    # ========================================================================

    async def get_quality_gate_status(self, project_key: str) -> Dict[str, Any]:
        data = await self.get_json("/api/qualitygates/project_status", params={"projectKey": project_key})
        return data.get("projectStatus", {})

    async def list_quality_gates(self) -> List[Dict[str, Any]]:
        data = await self.get_json("/api/qualitygates/list")
        return data.get("qualitygates", [])

    # ========================================================================
    # Issues
    # ========================================================================

    async def search_issues(self, project_key: str, issue_type: str) -> List[Dict[str, Any]]:
        data = await self.get_json(
            "/api/issues/search",
            params={"componentKeys": project_key, "types": issue_type, "ps": ISSUE_PAGE_SIZE},
        )
        return data.get("issues", [])

    async def search_code_smells(self, project_key: str) -> List[Dict[str, Any]]:
        return await self.search_issues(project_key, "CODE_SMELL")

    async def search_vulnerabilities(self, project_key: str) -> List[Dict[str, Any]]:
        return await self.search_issues(project_key, "VULNERABILITY")

    async def search_hotspots(self, project_key: str) -> List[Dict[str, Any]]:
        data = await self.get_json("/api/hotspots/search", params={"projectKey": project_key, "ps": ISSUE_PAGE_SIZE})
        return data.get("hotspots", [])
