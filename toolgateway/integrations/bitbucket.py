"""
File: bitbucket.py
Purpose: Bitbucket Server REST API 1.0 client (projects, repositories, pull requests and
         read-only file browsing).
When Used: Built once per configured Bitbucket instance by the instance registry.
"""
from typing import List, Optional, Dict, Any
from urllib.parse import quote

from toolgateway.errors import ArgumentValidationError
from toolgateway.integrations.base import BaseIntegration
from toolgateway.models.instances import BitbucketInstanceConfig
from toolgateway.models.schemas import ToolStatus

API = "/rest/api/1.0"


def _segment(value: str) -> str:
    # Dot segments would be collapsed by URL normalization
    if value.strip(".") == "":
        raise ArgumentValidationError(None, f"Invalid path segment: '{value}'")
    return quote(value, safe='')


def repo_path(project_key: str, repo_slug: Optional[str] = None) -> str:
    """Escaped /projects/<key>[/repos/<slug>] path under the REST API root"""
    path = f"{API}/projects/{_segment(project_key)}"
    if repo_slug is not None:
        path += f"/repos/{_segment(repo_slug)}"
    return path


class BitbucketIntegration(BaseIntegration):
    """Bitbucket Server API integration"""

    def __init__(self, config: BitbucketInstanceConfig, **kwargs):
        super().__init__(config, **kwargs)

    @property
    def name(self) -> str:
        return "bitbucket"

    def _get_auth(self) -> Optional[tuple]:
        # HTTP access tokens are sent as bearer tokens
        return None

    async def health_check(self) -> ToolStatus:
        try:
            response = await self.get("/status")
            if response.status_code == 200 and response.json().get("state") == "RUNNING":
                return ToolStatus.HEALTHY
            return ToolStatus.UNHEALTHY
        except Exception:
            return ToolStatus.UNHEALTHY

    async def get_version(self) -> Optional[str]:
        try:
            response = await self.get(f"{API}/application-properties")
            if response.status_code == 200:
                return response.json().get("version")
        except Exception:
            pass
        return None

    async def list_projects(self) -> List[Dict[str, Any]]:
        data = await self.get_json(f"{API}/projects", params={"limit": 100})
        return data.get("values", [])

    async def list_repositories(self, project_key: str) -> List[Dict[str, Any]]:
        data = await self.get_json(f"{repo_path(project_key)}/repos", params={"limit": 100})
        return data.get("values", [])

    async def get_repository(self, project_key: str, repo_slug: str) -> Dict[str, Any]:
        return await self.get_json(repo_path(project_key, repo_slug))

    async def get_pull_requests(self, project_key: str, repo_slug: str, state: str = "OPEN") -> List[Dict[str, Any]]:
        data = await self.get_json(
            f"{repo_path(project_key, repo_slug)}/pull-requests",
            params={"state": state, "limit": 50},
        )
        return data.get("values", [])

    async def get_file_content(
        self,
        project_key: str,
        repo_slug: str,
        file_path: str,
        at: Optional[str] = None
    ) -> str:
        """File content rebuilt from the browse API's line list"""
        params: Dict[str, Any] = {"limit": 10000}
        if at:
            params["at"] = at
        path = "/".join(_segment(part) for part in file_path.strip("/").split("/"))
        data = await self.get_json(f"{repo_path(project_key, repo_slug)}/browse/{path}", params=params)
        lines = data.get("lines") or []
        return "\n".join(line.get("text", "") for line in lines)
