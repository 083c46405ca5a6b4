"""
File: jenkins.py
Purpose: Jenkins REST API client for jobs, builds, queue and nodes. Folder jobs are addressed
         with slash-separated names ("team/service") and expanded to Jenkins' /job/a/job/b paths.
When Used: Built once per configured Jenkins instance by the instance registry; its methods back
           the Jenkins tools and the /connectivity health check.
Why Created: Wraps Jenkins' REST API into the BaseIntegration pattern so the gateway can list
             jobs, inspect builds, fetch console output and trigger builds.
"""
from typing import Optional, Dict, Any, List
from urllib.parse import quote

from toolgateway.integrations.base import BaseIntegration
from toolgateway.models.instances import JenkinsInstanceConfig
from toolgateway.models.schemas import ToolStatus


def job_path(job_name: str) -> str:
    """'team/service' -> '/job/team/job/service'"""
    parts = [p for p in job_name.strip("/").split("/") if p]
    return "".join(f"/job/{quote(p, safe='')}" for p in parts)


class JenkinsIntegration(BaseIntegration):
    """Jenkins REST API integration"""

    def __init__(self, config: JenkinsInstanceConfig, **kwargs):
        super().__init__(config, **kwargs)

    @property
    def name(self) -> str:
        return "jenkins"

    async def health_check(self) -> ToolStatus:
        try:
            response = await self.get("/api/json")
            if response.status_code == 200:
                return ToolStatus.HEALTHY
            # 403 with X-Jenkins header means Jenkins is running but requires auth
            if response.status_code == 403 and response.headers.get("X-Jenkins"):
                return ToolStatus.HEALTHY
            return ToolStatus.UNHEALTHY
        except Exception:
            return ToolStatus.UNHEALTHY

    async def get_version(self) -> Optional[str]:
        try:
            response = await self.get("/api/json")
            return response.headers.get("X-Jenkins")
        except Exception:
            return None

    # ========================================================================
    # System
    # ========================================================================

    async def get_system_info(self) -> Dict[str, Any]:
        return await self.get_json("/api/json")

    async def list_nodes(self) -> List[Dict[str, Any]]:
        data = await self.get_json("/computer/api/json", params={"tree": "computer[displayName,offline,idle,numExecutors]"})
        return data.get("computer", [])

    async def get_queue(self) -> List[Dict[str, Any]]:
        data = await self.get_json("/queue/api/json")
        return data.get("items", [])

    # ========================================================================
    # Jobs
    # ========================================================================

    async def list_jobs(self, folder: Optional[str] = None) -> List[Dict[str, Any]]:
        """List jobs at the root or inside a folder"""
        prefix = job_path(folder) if folder else ""
        data = await self.get_json(f"{prefix}/api/json", params={"tree": "jobs[name,url,color]"})
        return data.get("jobs", [])

    async def get_job_details(self, job_name: str) -> Dict[str, Any]:
        return await self.get_json(f"{job_path(job_name)}/api/json")

    async def get_job_config(self, job_name: str) -> str:
        """Raw config.xml of a job"""
        return await self.get_text(f"{job_path(job_name)}/config.xml")

    async def build_job(self, job_name: str) -> int:
        """Queue a build; returns the HTTP status Jenkins answered with"""
        response = await self.post(f"{job_path(job_name)}/build")
        self._raise_for_status(response)
        return response.status_code

    # ========================================================================
    # Builds
    # ========================================================================

    async def get_last_build(self, job_name: str) -> Dict[str, Any]:
        return await self.get_json(f"{job_path(job_name)}/lastBuild/api/json")

    async def get_build_info(self, job_name: str, build_number: int) -> Dict[str, Any]:
        return await self.get_json(f"{job_path(job_name)}/{build_number}/api/json")

    async def get_build_status(self, job_name: str, build_number: int) -> str:
        """SUCCESS, FAILURE, ... or BUILDING while the build runs"""
        build = await self.get_build_info(job_name, build_number)
        if build.get("result"):
            return build["result"]
        return "BUILDING" if build.get("building") else "UNKNOWN"

    async def get_build_console(self, job_name: str, build_number: int) -> str:
        return await self.get_text(f"{job_path(job_name)}/{build_number}/consoleText")
