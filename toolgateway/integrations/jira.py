"""
Jira Software API Integration (project-restricted)
"""
from typing import Optional, Dict, Any

from toolgateway.integrations.base import BaseIntegration
from toolgateway.models.instances import JiraInstanceConfig
from toolgateway.models.schemas import ToolStatus

DESCRIPTION_PREVIEW = 500


class JiraIntegration(BaseIntegration):
    """Jira REST API v2 integration bound to one allowed project"""

    def __init__(self, config: JiraInstanceConfig, **kwargs):
        super().__init__(config, **kwargs)

    @property
    def name(self) -> str:
        return "jira"

    @property
    def project_key(self) -> str:
        return self.config.allowed_project_key

    async def health_check(self) -> ToolStatus:
        try:
            response = await self.get("/rest/api/2/serverInfo")
            if response.status_code == 200:
                return ToolStatus.HEALTHY
            return ToolStatus.UNHEALTHY
        except Exception:
            return ToolStatus.UNHEALTHY

    async def get_version(self) -> Optional[str]:
        try:
            response = await self.get("/rest/api/2/serverInfo")
            if response.status_code == 200:
                return response.json().get("version")
        except Exception:
            pass
        return None

    # ========================================================================
    # Project
    # ========================================================================

    async def get_project_details(self) -> Dict[str, Any]:
        return await self.get_json(f"/rest/api/2/project/{self.project_key}")

    async def get_project_components(self) -> Any:
        return await self.get_json(f"/rest/api/2/project/{self.project_key}/components")

    async def get_project_versions(self) -> Any:
        return await self.get_json(f"/rest/api/2/project/{self.project_key}/versions")

    # ========================================================================
    # Issues
    # ========================================================================

    async def get_issue(self, issue_key: str) -> Dict[str, Any]:
        return await self.get_json(f"/rest/api/2/issue/{issue_key}")

    async def get_issue_comments(self, issue_key: str) -> Dict[str, Any]:
        return await self.get_json(f"/rest/api/2/issue/{issue_key}/comment")

    async def summarize_issue(self, issue_key: str) -> str:
        """Plain-text digest of an issue for chat clients"""
        issue = await self.get_issue(issue_key)
        return format_issue_summary(issue)


def _display_name(person: Optional[Dict[str, Any]], fallback: str) -> str:
    if person and person.get("displayName"):
        return person["displayName"]
    return fallback


def format_issue_summary(issue: Dict[str, Any]) -> str:
    fields = issue.get("fields", {})
    priority = fields.get("priority") or {}
    status = fields.get("status") or {}

    lines = [
        f"Ticket: {issue.get('key')}",
        f"Summary: {fields.get('summary')}",
        f"Status: {status.get('name', 'Unknown')}",
        f"Priority: {priority.get('name') or 'None'}",
        f"Assignee: {_display_name(fields.get('assignee'), 'Unassigned')}",
        f"Reporter: {_display_name(fields.get('reporter'), 'Unknown')}",
        f"Created: {fields.get('created')}",
        f"Updated: {fields.get('updated')}",
    ]
    summary = "\n".join(lines) + "\n"

    description = fields.get("description")
    if description:
        preview = description[:DESCRIPTION_PREVIEW]
        if len(description) > DESCRIPTION_PREVIEW:
            preview += "..."
        summary += f"\nDescription:\n{preview}\n"

    comments = (fields.get("comment") or {}).get("comments") or []
    if comments:
        last = comments[-1]
        summary += f"\nLatest Comment ({_display_name(last.get('author'), 'Unknown')}):\n{last.get('body', '')}\n"

    return summary
