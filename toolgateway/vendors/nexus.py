"""
Nexus Repository Manager vendor plugin
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.integrations.nexus import NexusIntegration
from toolgateway.models.instances import NexusInstanceConfig


class NexusRepository(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    format: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None


class NexusComponent(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    repository: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None


REPO_NAME = {"type": "string", "description": "Repository name"}


async def list_repositories(client: NexusIntegration, args: Dict[str, Any]):
    return await client.list_repositories()


async def get_repository_details(client: NexusIntegration, args: Dict[str, Any]):
    return await client.get_repository_details(args["repoName"])


async def search_artifacts(client: NexusIntegration, args: Dict[str, Any]):
    return await client.search_artifacts(args["query"])


async def list_artifacts(client: NexusIntegration, args: Dict[str, Any]):
    return await client.list_artifacts(args["repoName"], args.get("group"))


async def get_component(client: NexusIntegration, args: Dict[str, Any]):
    return await client.get_component(args["componentId"])


async def get_system_status(client: NexusIntegration, args: Dict[str, Any]):
    return await client.get_system_status()


PLUGIN = VendorPlugin(
    name="nexus",
    display_name="Nexus",
    config_model=NexusInstanceConfig,
    client_factory=NexusIntegration,
    tools=(
        list_instances_tool("Nexus"),
        ToolSpec(
            name="list_repositories",
            description="List all repositories in a Nexus instance",
            capability=list_repositories,
            result_type=List[NexusRepository],
        ),
        ToolSpec(
            name="get_repository_details",
            description="Get details of a specific repository",
            capability=get_repository_details,
            properties={"repoName": REPO_NAME},
            required=("repoName",),
            result_type=NexusRepository,
        ),
        ToolSpec(
            name="search_artifacts",
            description="Search for artifacts",
            capability=search_artifacts,
            properties={"query": {"type": "string", "description": "Free-text search"}},
            required=("query",),
            result_type=List[NexusComponent],
        ),
        ToolSpec(
            name="list_artifacts",
            description="List artifacts in a repository, optionally filtered by group",
            capability=list_artifacts,
            properties={"repoName": REPO_NAME, "group": {"type": "string"}},
            required=("repoName",),
            result_type=List[NexusComponent],
        ),
        ToolSpec(
            name="get_component",
            description="Get component details by ID",
            capability=get_component,
            properties={"componentId": {"type": "string"}},
            required=("componentId",),
            result_type=NexusComponent,
        ),
        ToolSpec(
            name="get_system_status",
            description="Get Nexus system status",
            capability=get_system_status,
            result_type=Dict[str, Any],
        ),
    ),
)
