"""
Bitbucket Server vendor plugin (read-only)
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.integrations.bitbucket import BitbucketIntegration
from toolgateway.models.instances import BitbucketInstanceConfig


class BitbucketProject(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str
    name: Optional[str] = None


class BitbucketRepository(BaseModel):
    model_config = ConfigDict(extra="allow")

    slug: str
    name: Optional[str] = None


class BitbucketPullRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    title: Optional[str] = None
    state: Optional[str] = None


PROJECT_KEY = {"type": "string", "description": "Bitbucket project key"}
REPO_SLUG = {"type": "string", "description": "Repository slug"}


async def list_projects(client: BitbucketIntegration, args: Dict[str, Any]):
    return await client.list_projects()


async def list_repositories(client: BitbucketIntegration, args: Dict[str, Any]):
    return await client.list_repositories(args["projectKey"])


async def get_repository(client: BitbucketIntegration, args: Dict[str, Any]):
    return await client.get_repository(args["projectKey"], args["repoSlug"])


async def get_pull_requests(client: BitbucketIntegration, args: Dict[str, Any]):
    return await client.get_pull_requests(args["projectKey"], args["repoSlug"], args.get("state") or "OPEN")


async def get_file_content(client: BitbucketIntegration, args: Dict[str, Any]):
    return await client.get_file_content(args["projectKey"], args["repoSlug"], args["filePath"], args.get("at"))


PLUGIN = VendorPlugin(
    name="bitbucket",
    display_name="Bitbucket",
    config_model=BitbucketInstanceConfig,
    client_factory=BitbucketIntegration,
    tools=(
        list_instances_tool("Bitbucket"),
        ToolSpec(
            name="list_projects",
            description="List projects in a Bitbucket instance",
            capability=list_projects,
            result_type=List[BitbucketProject],
        ),
        ToolSpec(
            name="list_repositories",
            description="List repositories in a project",
            capability=list_repositories,
            properties={"projectKey": PROJECT_KEY},
            required=("projectKey",),
            result_type=List[BitbucketRepository],
        ),
        ToolSpec(
            name="get_repository",
            description="Get details of a repository",
            capability=get_repository,
            properties={"projectKey": PROJECT_KEY, "repoSlug": REPO_SLUG},
            required=("projectKey", "repoSlug"),
            result_type=BitbucketRepository,
        ),
        ToolSpec(
            name="get_pull_requests",
            description="Get pull requests for a repository",
            capability=get_pull_requests,
            properties={
                "projectKey": PROJECT_KEY,
                "repoSlug": REPO_SLUG,
                "state": {
                    "type": "string",
                    "enum": ["OPEN", "DECLINED", "MERGED", "ALL"],
                    "description": "Default: OPEN",
                },
            },
            required=("projectKey", "repoSlug"),
            result_type=List[BitbucketPullRequest],
        ),
        ToolSpec(
            name="get_file_content",
            description="Get the content of a file (read-only)",
            capability=get_file_content,
            properties={
                "projectKey": PROJECT_KEY,
                "repoSlug": REPO_SLUG,
                "filePath": {"type": "string"},
                "at": {"type": "string", "description": "Commit or tag ref"},
            },
            required=("projectKey", "repoSlug", "filePath"),
            result_type=str,
        ),
    ),
)
