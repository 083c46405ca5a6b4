"""
End-to-end tests for the vendor plugins: real integrations behind the gateway, with the HTTP
layer replaced by httpx.MockTransport
"""
import json

import httpx
import pytest

from toolgateway.config import Settings
from toolgateway.errors import ConfigError
from toolgateway.gateway.engine import Gateway
from toolgateway.models.instances import (
    BitbucketInstanceConfig,
    ElasticsearchInstanceConfig,
    JenkinsInstanceConfig,
    JiraInstanceConfig,
    SonarQubeInstanceConfig,
)
from toolgateway.vendors import PLUGINS, bitbucket, elasticsearch, jenkins, jira, sonarqube

EXPECTED_TOOLS = {
    "jenkins": {"list_instances", "list_jobs", "get_job_details", "get_job_config", "get_last_build",
                "get_build_info", "get_build_status", "get_build_console", "build_job", "get_queue",
                "list_nodes", "get_system_info"},
    "jira": {"list_instances", "get_project_details", "get_project_components", "get_project_versions",
             "get_issue", "summarize_issue", "get_issue_comments"},
    "bitbucket": {"list_instances", "list_projects", "list_repositories", "get_repository",
                  "get_pull_requests", "get_file_content"},
    "nexus": {"list_instances", "list_repositories", "get_repository_details", "search_artifacts",
              "list_artifacts", "get_component", "get_system_status"},
    "sonarqube": {"list_instances", "list_projects", "get_project_overview", "get_quality_gate_status",
                  "list_quality_gates", "search_code_smells", "search_vulnerabilities", "search_hotspots"},
    "grafana": {"list_instances", "search_dashboards", "get_dashboard_details", "list_datasources"},
    "elasticsearch": {"list_instances", "get_cluster_health", "list_indices", "search_logs"},
}


def mock_transport(routes, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        answer = routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)
    return httpx.MockTransport(handler)


@pytest.mark.parametrize("vendor", sorted(EXPECTED_TOOLS))
def test_plugin_tool_sets(vendor):
    plugin = PLUGINS[vendor]

    assert set(plugin.tool_names()) == EXPECTED_TOOLS[vendor]
    # Every plugin builds a valid catalogue on its own
    gateway = Gateway([plugin], {vendor: [_any_instance(plugin)]})
    assert len(gateway.catalogue) == len(EXPECTED_TOOLS[vendor])


def _any_instance(plugin):
    return plugin.config_model.model_validate({
        "name": "one",
        "baseUrl": "https://backend.example.com",
        "node": "https://backend.example.com",
        "username": "u",
        "apiToken": "t",
        "allowedProjectKey": "DEVOPS",
    })


@pytest.mark.asyncio
async def test_jenkins_build_status_through_gateway():
    seen = []
    transport = mock_transport({"/job/api/42/api/json": {"number": 42, "result": "SUCCESS"}}, seen)
    gateway = Gateway(
        [jenkins.PLUGIN],
        {"jenkins": [
            JenkinsInstanceConfig(name="prod", base_url="https://prod.ci", api_token="a"),
            JenkinsInstanceConfig(name="dev", base_url="https://dev.ci", api_token="b"),
        ]},
        client_options={"transport": transport},
    )

    result = await gateway.dispatcher.dispatch(
        "get_build_status", {"instance": "dev", "jobName": "api", "buildNumber": 42}
    )

    assert result.to_payload() == {"content": [{"type": "text", "text": "SUCCESS"}], "isError": False}
    assert [r.url.host for r in seen] == ["dev.ci"]
    await gateway.aclose()


@pytest.mark.asyncio
async def test_jenkins_list_jobs_result_is_checked():
    transport = mock_transport({"/api/json": {"jobs": [{"url": "https://ci/job/x"}]}})
    gateway = Gateway(
        [jenkins.PLUGIN],
        {"jenkins": [JenkinsInstanceConfig(name="prod", base_url="https://ci", api_token="a")]},
        client_options={"transport": transport},
    )

    result = await gateway.dispatcher.dispatch("list_jobs", {})

    assert result.is_error is True
    assert result.message.startswith("Malformed response from jenkins for 'list_jobs'")


@pytest.mark.asyncio
async def test_jira_restriction_blocks_other_projects():
    seen = []
    transport = mock_transport({"/rest/api/2/issue/DEVOPS-1": {"key": "DEVOPS-1", "fields": {}}}, seen)
    gateway = Gateway(
        [jira.PLUGIN],
        {"jira": [JiraInstanceConfig(
            name="main", base_url="https://jira", username="u", api_token="t", allowed_project_key="DEVOPS",
        )]},
        client_options={"transport": transport},
    )

    denied = await gateway.dispatcher.dispatch("get_issue", {"issueKey": "SECRET-9"})
    allowed = await gateway.dispatcher.dispatch("get_issue", {"issueKey": "DEVOPS-1"})

    assert denied.is_error is True
    assert denied.message.startswith("Access denied for this instance")
    assert allowed.is_error is False
    assert json.loads(allowed.content[0].text)["key"] == "DEVOPS-1"
    assert [r.url.path for r in seen] == ["/rest/api/2/issue/DEVOPS-1"]


@pytest.mark.asyncio
async def test_bitbucket_state_enum_and_restriction():
    seen = []
    transport = mock_transport(
        {"/rest/api/1.0/projects/PLAT/repos/api/pull-requests": {"values": [{"id": 1, "title": "Fix"}]}},
        seen,
    )
    gateway = Gateway(
        [bitbucket.PLUGIN],
        {"bitbucket": [BitbucketInstanceConfig(
            name="main", base_url="https://bb", api_token="t", allowed_project_key="PLAT",
        )]},
        client_options={"transport": transport},
    )

    bad_state = await gateway.dispatcher.dispatch(
        "get_pull_requests", {"projectKey": "PLAT", "repoSlug": "api", "state": "CLOSED"}
    )
    other_project = await gateway.dispatcher.dispatch(
        "get_pull_requests", {"projectKey": "CORE", "repoSlug": "api"}
    )
    merged = await gateway.dispatcher.dispatch(
        "get_pull_requests", {"projectKey": "PLAT", "repoSlug": "api", "state": "MERGED"}
    )

    assert bad_state.is_error is True and "state" in bad_state.message
    assert other_project.is_error is True
    assert merged.is_error is False
    assert len(seen) == 1
    assert seen[0].url.params["state"] == "MERGED"
    assert seen[0].headers["Authorization"] == "Bearer t"


@pytest.mark.asyncio
async def test_elasticsearch_default_size():
    seen = []
    transport = mock_transport({"/app-*/_search": {"hits": {"hits": []}}}, seen)
    gateway = Gateway(
        [elasticsearch.PLUGIN],
        {"elasticsearch": [ElasticsearchInstanceConfig.model_validate(
            {"name": "logs", "node": "https://es:9200", "username": "e", "apiToken": "p"}
        )]},
        client_options={"transport": transport},
    )

    result = await gateway.dispatcher.dispatch("search_logs", {"index": "app-*", "query": "level:ERROR"})

    assert result.is_error is False
    assert json.loads(result.content[0].text) == []
    assert seen[0].url.params["size"] == "20"


@pytest.mark.asyncio
async def test_sonarqube_listing_narrowed_to_allowed_project():
    transport = mock_transport({"/api/components/search": {"components": [{"key": "ABC"}, {"key": "XYZ"}]}})
    gateway = Gateway(
        [sonarqube.PLUGIN],
        {"sonarqube": [
            SonarQubeInstanceConfig(name="pinned", base_url="https://sonar", api_token="t", allowed_project_key="ABC"),
            SonarQubeInstanceConfig(name="open", base_url="https://sonar", api_token="t"),
        ]},
        client_options={"transport": transport},
    )

    pinned = await gateway.dispatcher.dispatch("list_projects", {})
    unrestricted = await gateway.dispatcher.dispatch("list_projects", {"instance": "open"})

    assert [p["key"] for p in json.loads(pinned.content[0].text)] == ["ABC"]
    assert [p["key"] for p in json.loads(unrestricted.content[0].text)] == ["ABC", "XYZ"]


@pytest.mark.asyncio
async def test_bitbucket_listing_narrowed_to_allowed_project():
    transport = mock_transport({"/rest/api/1.0/projects": {"values": [{"key": "PLAT"}, {"key": "CORE"}]}})
    gateway = Gateway(
        [bitbucket.PLUGIN],
        {"bitbucket": [BitbucketInstanceConfig(
            name="main", base_url="https://bb", api_token="t", allowed_project_key="PLAT",
        )]},
        client_options={"transport": transport},
    )

    result = await gateway.dispatcher.dispatch("list_projects", {})

    assert result.is_error is False
    assert json.loads(result.content[0].text) == [{"key": "PLAT"}]


@pytest.mark.asyncio
async def test_bitbucket_path_segments_are_escaped():
    seen = []
    transport = mock_transport({}, seen)
    gateway = Gateway(
        [bitbucket.PLUGIN],
        {"bitbucket": [BitbucketInstanceConfig(name="main", base_url="https://bb", api_token="t")]},
        client_options={"transport": transport},
    )

    escaped = await gateway.dispatcher.dispatch("get_repository", {"projectKey": "PLAT", "repoSlug": "api/../admin"})
    dotted = await gateway.dispatcher.dispatch("get_repository", {"projectKey": "..", "repoSlug": "api"})
    traversal = await gateway.dispatcher.dispatch(
        "get_file_content", {"projectKey": "PLAT", "repoSlug": "api", "filePath": "../../users"}
    )

    assert escaped.is_error is True
    assert seen[0].url.raw_path.decode().startswith("/rest/api/1.0/projects/PLAT/repos/api%2F..%2Fadmin")
    assert dotted.message == "Invalid path segment: '..'"
    assert traversal.message == "Invalid path segment: '..'"
    assert len(seen) == 1


def test_gateway_from_settings(tmp_path):
    (tmp_path / "jenkins.config.json").write_text(json.dumps({
        "instances": [{"name": "prod", "baseUrl": "https://ci", "apiToken": "t"}]
    }))
    (tmp_path / "jira.config.json").write_text(json.dumps({
        "instances": [{"name": "main", "baseUrl": "https://jira", "username": "u",
                       "apiToken": "t", "allowedProjectKey": "DEVOPS"}]
    }))

    gateway = Gateway.from_settings(Settings(_env_file=None, vendors="jenkins,jira", config_dir=str(tmp_path)))

    assert gateway.vendor_names() == ["jenkins", "jira"]
    assert gateway.instance_names() == {"jenkins": ["prod"], "jira": ["main"]}
    assert gateway.catalogue.find("jira_summarize_issue") is not None
    assert gateway.catalogue.find("summarize_issue") is None


def test_gateway_from_settings_fails_on_bad_file(tmp_path):
    (tmp_path / "jenkins.config.json").write_text(json.dumps({"instances": [{"name": "prod"}]}))

    with pytest.raises(ConfigError, match="instances.0.baseUrl"):
        Gateway.from_settings(Settings(_env_file=None, vendors="jenkins", config_dir=str(tmp_path)))
