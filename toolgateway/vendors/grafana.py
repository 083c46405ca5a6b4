"""
Grafana vendor plugin
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.integrations.grafana import GrafanaIntegration
from toolgateway.models.instances import GrafanaInstanceConfig


class DashboardSearchHit(BaseModel):
    model_config = ConfigDict(extra="allow")

    uid: str
    title: Optional[str] = None
    url: str


class Dashboard(BaseModel):
    model_config = ConfigDict(extra="allow")

    dashboard: Dict[str, Any]
    meta: Dict[str, Any] = {}


class DataSource(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    type: Optional[str] = None


async def search_dashboards(client: GrafanaIntegration, args: Dict[str, Any]):
    return await client.search_dashboards(args["query"])


async def get_dashboard_details(client: GrafanaIntegration, args: Dict[str, Any]):
    return await client.get_dashboard(args["uid"])


async def list_datasources(client: GrafanaIntegration, args: Dict[str, Any]):
    return await client.list_datasources()


PLUGIN = VendorPlugin(
    name="grafana",
    display_name="Grafana",
    config_model=GrafanaInstanceConfig,
    client_factory=GrafanaIntegration,
    tools=(
        list_instances_tool("Grafana"),
        ToolSpec(
            name="search_dashboards",
            description="Search for Grafana dashboards",
            capability=search_dashboards,
            properties={"query": {"type": "string"}},
            required=("query",),
            result_type=List[DashboardSearchHit],
        ),
        ToolSpec(
            name="get_dashboard_details",
            description="Get dashboard details by UID",
            capability=get_dashboard_details,
            properties={"uid": {"type": "string"}},
            required=("uid",),
            result_type=Dashboard,
        ),
        ToolSpec(
            name="list_datasources",
            description="List available data sources",
            capability=list_datasources,
            result_type=List[DataSource],
        ),
    ),
)
