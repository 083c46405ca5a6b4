"""
SonarQube vendor plugin. Instances may set allowedProjectKey to pin them to one project.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.integrations.sonarqube import SonarQubeIntegration
from toolgateway.models.instances import SonarQubeInstanceConfig


class SonarProject(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str
    name: Optional[str] = None


class SonarIssue(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str
    rule: Optional[str] = None
    severity: Optional[str] = None
    message: Optional[str] = None


class ProjectOverview(BaseModel):
    projectKey: str
    dashboardUrl: str
    measures: List[Dict[str, Any]]


class QualityGateStatus(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str


PROJECT_KEY = {"type": "string", "description": "SonarQube project key"}


async def list_projects(client: SonarQubeIntegration, args: Dict[str, Any]):
    return await client.list_projects()


async def get_project_overview(client: SonarQubeIntegration, args: Dict[str, Any]):
    return await client.get_project_overview(args["projectKey"])


async def get_quality_gate_status(client: SonarQubeIntegration, args: Dict[str, Any]):
    return await client.get_quality_gate_status(args["projectKey"])


async def list_quality_gates(client: SonarQubeIntegration, args: Dict[str, Any]):
    return await client.list_quality_gates()


async def search_code_smells(client: SonarQubeIntegration, args: Dict[str, Any]):
    return await client.search_code_smells(args["projectKey"])


async def search_vulnerabilities(client: SonarQubeIntegration, args: Dict[str, Any]):
    return await client.search_vulnerabilities(args["projectKey"])


async def search_hotspots(client: SonarQubeIntegration, args: Dict[str, Any]):
    return await client.search_hotspots(args["projectKey"])


def _project_tool(name: str, description: str, capability, result_type) -> ToolSpec:
    return ToolSpec(
        name=name,
        description=description,
        capability=capability,
        properties={"projectKey": PROJECT_KEY},
        required=("projectKey",),
        result_type=result_type,
    )


PLUGIN = VendorPlugin(
    name="sonarqube",
    display_name="SonarQube",
    config_model=SonarQubeInstanceConfig,
    client_factory=SonarQubeIntegration,
    tools=(
        list_instances_tool("SonarQube"),
        ToolSpec(
            name="list_projects",
            description="List accessible projects",
            capability=list_projects,
            result_type=List[SonarProject],
        ),
        _project_tool("get_project_overview", "Get project overview metrics and dashboard URL",
                      get_project_overview, ProjectOverview),
        _project_tool("get_quality_gate_status", "Get Quality Gate status for a project",
                      get_quality_gate_status, QualityGateStatus),
        ToolSpec(
            name="list_quality_gates",
            description="List the Quality Gates defined on the server",
            capability=list_quality_gates,
            result_type=List[Dict[str, Any]],
        ),
        _project_tool("search_code_smells", "Search for Code Smells", search_code_smells, List[SonarIssue]),
        _project_tool("search_vulnerabilities", "Search for Vulnerabilities", search_vulnerabilities, List[SonarIssue]),
        _project_tool("search_hotspots", "Search for Security Hotspots", search_hotspots, List[Dict[str, Any]]),
    ),
)
