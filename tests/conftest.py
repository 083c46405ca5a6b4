"""
Shared fixtures: stub vendor plugins whose clients record every call, so tests can check
which instance was contacted and how many times, without any network.
"""
import asyncio
import dataclasses
from typing import Any, Dict, List, Optional

import pytest
from pydantic import BaseModel

from toolgateway.config import InstanceConfig, Settings
from toolgateway.gateway.engine import Gateway
from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.models.instances import ProjectRestrictedConfig
from toolgateway.models.schemas import ToolStatus


class StubConfig(InstanceConfig):
    api_token: Optional[str] = None


class StubRestrictedConfig(ProjectRestrictedConfig):
    api_token: Optional[str] = None


class FakeClient:
    def __init__(self, config: InstanceConfig):
        self.config = config
        self.calls: List[tuple] = []
        self.closed = False

    async def health_check(self) -> ToolStatus:
        return ToolStatus.HEALTHY

    async def get_version(self) -> Optional[str]:
        return "2.0"

    async def close(self):
        self.closed = True


class SpyFactory:
    """Client factory that remembers every client it built"""

    def __init__(self):
        self.built: List[FakeClient] = []

    def __call__(self, config: InstanceConfig, **kwargs) -> FakeClient:
        client = FakeClient(config)
        self.built.append(client)
        return client

    def built_names(self) -> List[str]:
        return [c.config.name for c in self.built]

    def calls(self) -> List[tuple]:
        return [call for c in self.built for call in c.calls]


class Job(BaseModel):
    name: str


async def get_build_status(client: FakeClient, args: Dict[str, Any]):
    client.calls.append(("get_build_status", client.config.name, args["jobName"], args["buildNumber"]))
    return "SUCCESS"


async def list_jobs(client: FakeClient, args: Dict[str, Any]):
    client.calls.append(("list_jobs", client.config.name))
    return [{"name": "api"}, {"name": "web"}]


async def broken_jobs(client: FakeClient, args: Dict[str, Any]):
    client.calls.append(("broken_jobs", client.config.name))
    return [{"title": "no name here"}]


async def explode(client: FakeClient, args: Dict[str, Any]):
    client.calls.append(("explode", client.config.name))
    raise RuntimeError("connection reset by peer")


async def slow_echo(client: FakeClient, args: Dict[str, Any]):
    await asyncio.sleep(args.get("delay") or 0)
    client.calls.append(("slow_echo", client.config.name, args["tag"]))
    return args["tag"]


async def get_issue(client: FakeClient, args: Dict[str, Any]):
    client.calls.append(("get_issue", client.config.name, args["issueKey"]))
    return {"key": args["issueKey"], "fields": {"summary": "Pipeline is red"}}


async def get_project(client: FakeClient, args: Dict[str, Any]):
    client.calls.append(("get_project", client.config.name, args["projectKey"]))
    return {"key": args["projectKey"]}


CI_PLUGIN = VendorPlugin(
    name="ci",
    display_name="CI",
    config_model=StubConfig,
    client_factory=SpyFactory(),
    tools=(
        list_instances_tool("CI"),
        ToolSpec(
            name="get_build_status",
            description="Status of one build",
            capability=get_build_status,
            properties={"jobName": {"type": "string"}, "buildNumber": {"type": "integer"}},
            required=("jobName", "buildNumber"),
            result_type=str,
        ),
        ToolSpec(
            name="list_jobs",
            description="List jobs",
            capability=list_jobs,
            result_type=List[Job],
        ),
        ToolSpec(
            name="broken_jobs",
            description="Returns a payload of the wrong shape",
            capability=broken_jobs,
            result_type=List[Job],
        ),
        ToolSpec(name="explode", description="Always fails", capability=explode),
        ToolSpec(
            name="slow_echo",
            description="Echo a tag after a delay",
            capability=slow_echo,
            properties={
                "tag": {"type": "string"},
                "delay": {"type": "number"},
                "mode": {"type": "string", "enum": ["fast", "slow"]},
            },
            required=("tag",),
        ),
    ),
)

TRACKER_PLUGIN = VendorPlugin(
    name="tracker",
    display_name="Tracker",
    config_model=StubRestrictedConfig,
    client_factory=SpyFactory(),
    tools=(
        list_instances_tool("Tracker"),
        ToolSpec(
            name="get_issue",
            description="Get an issue",
            capability=get_issue,
            properties={"issueKey": {"type": "string"}},
            required=("issueKey",),
        ),
        ToolSpec(
            name="get_project",
            description="Get a project",
            capability=get_project,
            properties={"projectKey": {"type": "string"}},
            required=("projectKey",),
        ),
    ),
)

CI_INSTANCES = [
    StubConfig(name="prod", base_url="https://ci.example.com"),
    StubConfig(name="staging", base_url="https://ci-staging.example.com"),
]

TRACKER_INSTANCES = [
    StubRestrictedConfig(name="devops", base_url="https://tracker.example.com", allowed_project_key="DEVOPS"),
    StubRestrictedConfig(name="open", base_url="https://tracker.example.com"),
]


@pytest.fixture
def ci_spy() -> SpyFactory:
    return SpyFactory()


@pytest.fixture
def tracker_spy() -> SpyFactory:
    return SpyFactory()


@pytest.fixture
def ci_plugin(ci_spy) -> VendorPlugin:
    return dataclasses.replace(CI_PLUGIN, client_factory=ci_spy)


@pytest.fixture
def tracker_plugin(tracker_spy) -> VendorPlugin:
    return dataclasses.replace(TRACKER_PLUGIN, client_factory=tracker_spy)


@pytest.fixture
def gateway(ci_plugin) -> Gateway:
    """Single-vendor gateway: tool names are not prefixed"""
    return Gateway([ci_plugin], {"ci": CI_INSTANCES})


@pytest.fixture
def tracker_gateway(tracker_plugin) -> Gateway:
    return Gateway([tracker_plugin], {"tracker": TRACKER_INSTANCES})


@pytest.fixture
def multi_gateway(ci_plugin, tracker_plugin) -> Gateway:
    """Two vendors: tool names are prefixed with the vendor name"""
    return Gateway(
        [ci_plugin, tracker_plugin],
        {"ci": CI_INSTANCES, "tracker": TRACKER_INSTANCES},
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, vendors="ci", sse_ping_interval=0.1)
