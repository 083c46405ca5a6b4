"""
Unit tests for ToolCatalogue
"""
import pytest

from toolgateway.errors import ConfigError
from toolgateway.gateway.catalogue import ToolCatalogue
from toolgateway.gateway.plugin import ToolSpec


def test_single_vendor_names_are_plain(gateway):
    names = [d.name for d in gateway.catalogue.list()]

    assert names == ["list_instances", "get_build_status", "list_jobs", "broken_jobs", "explode", "slow_echo"]
    assert gateway.catalogue.categories() == ["ci"]


def test_multi_vendor_names_are_prefixed(multi_gateway):
    names = [d.name for d in multi_gateway.catalogue.list()]

    assert "ci_list_instances" in names
    assert "tracker_list_instances" in names
    assert "tracker_get_issue" in names
    assert "get_issue" not in names
    assert multi_gateway.catalogue.categories() == ["ci", "tracker"]


def test_payload_shape_and_instance_selector(gateway):
    payload = {tool["name"]: tool for tool in gateway.catalogue.payload()}

    status = payload["get_build_status"]
    assert set(status) == {"name", "description", "inputSchema"}
    assert status["inputSchema"]["type"] == "object"
    assert status["inputSchema"]["required"] == ["jobName", "buildNumber"]
    assert status["inputSchema"]["properties"]["instance"]["type"] == "string"
    assert "instance" not in status["inputSchema"]["required"]

    # list_instances works on the registry and takes no instance
    assert "instance" not in payload["list_instances"]["inputSchema"]["properties"]


def test_payload_filtered_by_category(multi_gateway):
    tracker_only = multi_gateway.catalogue.payload(["tracker"])

    assert tracker_only
    assert all(tool["name"].startswith("tracker_") for tool in tracker_only)
    assert multi_gateway.catalogue.payload(["missing"]) == []


def test_find(gateway):
    entry = gateway.catalogue.find("list_jobs")

    assert entry is not None
    assert entry.vendor == "ci"
    assert gateway.catalogue.find("nope") is None


def test_duplicate_tool_names_rejected(ci_plugin):
    async def noop(client, args):
        return None

    doubled = ci_plugin.__class__(
        name=ci_plugin.name,
        display_name=ci_plugin.display_name,
        config_model=ci_plugin.config_model,
        client_factory=ci_plugin.client_factory,
        tools=ci_plugin.tools + (ToolSpec(name="list_jobs", description="again", capability=noop),),
    )

    with pytest.raises(ConfigError, match="duplicate tool name 'list_jobs'"):
        ToolCatalogue.from_plugins([doubled])
