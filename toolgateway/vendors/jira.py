"""
Jira vendor plugin. Every Jira instance is pinned to one project (allowedProjectKey); issue
tools are checked against it by the dispatcher before Jira is contacted.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.integrations.jira import JiraIntegration
from toolgateway.models.instances import JiraInstanceConfig


class JiraProject(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str
    name: Optional[str] = None


class JiraIssue(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str
    fields: Dict[str, Any]


ISSUE_KEY = {"type": "string", "description": "Issue key, e.g. DEVOPS-123"}


async def get_project_details(client: JiraIntegration, args: Dict[str, Any]):
    return await client.get_project_details()


async def get_project_components(client: JiraIntegration, args: Dict[str, Any]):
    return await client.get_project_components()


async def get_project_versions(client: JiraIntegration, args: Dict[str, Any]):
    return await client.get_project_versions()


async def get_issue(client: JiraIntegration, args: Dict[str, Any]):
    return await client.get_issue(args["issueKey"])


async def summarize_issue(client: JiraIntegration, args: Dict[str, Any]):
    return await client.summarize_issue(args["issueKey"])


async def get_issue_comments(client: JiraIntegration, args: Dict[str, Any]):
    return await client.get_issue_comments(args["issueKey"])


PLUGIN = VendorPlugin(
    name="jira",
    display_name="Jira",
    config_model=JiraInstanceConfig,
    client_factory=JiraIntegration,
    tools=(
        list_instances_tool("Jira"),
        ToolSpec(
            name="get_project_details",
            description="Get details of the project this instance is restricted to",
            capability=get_project_details,
            result_type=JiraProject,
        ),
        ToolSpec(
            name="get_project_components",
            description="List components of the restricted project",
            capability=get_project_components,
            result_type=List[Dict[str, Any]],
        ),
        ToolSpec(
            name="get_project_versions",
            description="List versions (releases) of the restricted project",
            capability=get_project_versions,
            result_type=List[Dict[str, Any]],
        ),
        ToolSpec(
            name="get_issue",
            description="Get details of a specific issue",
            capability=get_issue,
            properties={"issueKey": ISSUE_KEY},
            required=("issueKey",),
            result_type=JiraIssue,
        ),
        ToolSpec(
            name="summarize_issue",
            description="Get an AI-friendly summary of an issue",
            capability=summarize_issue,
            properties={"issueKey": ISSUE_KEY},
            required=("issueKey",),
            result_type=str,
        ),
        ToolSpec(
            name="get_issue_comments",
            description="Get comments for an issue",
            capability=get_issue_comments,
            properties={"issueKey": ISSUE_KEY},
            required=("issueKey",),
            result_type=Dict[str, Any],
        ),
    ),
)
