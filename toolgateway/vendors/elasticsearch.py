"""
Elasticsearch vendor plugin
"""
from typing import Any, Dict, List

from toolgateway.gateway.plugin import ToolSpec, VendorPlugin, list_instances_tool
from toolgateway.integrations.elasticsearch import DEFAULT_SEARCH_SIZE, ElasticsearchIntegration
from toolgateway.models.instances import ElasticsearchInstanceConfig


async def get_cluster_health(client: ElasticsearchIntegration, args: Dict[str, Any]):
    return await client.get_cluster_health()


async def list_indices(client: ElasticsearchIntegration, args: Dict[str, Any]):
    return await client.list_indices()


async def search_logs(client: ElasticsearchIntegration, args: Dict[str, Any]):
    size = int(args.get("size") or DEFAULT_SEARCH_SIZE)
    return await client.search_logs(args["index"], args["query"], size=size)


PLUGIN = VendorPlugin(
    name="elasticsearch",
    display_name="Elasticsearch",
    config_model=ElasticsearchInstanceConfig,
    client_factory=ElasticsearchIntegration,
    tools=(
        list_instances_tool("Elasticsearch"),
        ToolSpec(
            name="get_cluster_health",
            description="Get cluster health status",
            capability=get_cluster_health,
            result_type=Dict[str, Any],
        ),
        ToolSpec(
            name="list_indices",
            description="List all indices",
            capability=list_indices,
            result_type=List[Dict[str, Any]],
        ),
        ToolSpec(
            name="search_logs",
            description="Search logs using Lucene query syntax",
            capability=search_logs,
            properties={
                "index": {"type": "string", "description": "Index pattern (e.g. logs-*)"},
                "query": {"type": "string", "description": "Lucene query (e.g. level:ERROR AND message:failed)"},
                "size": {"type": "integer", "description": f"Maximum hits (default {DEFAULT_SEARCH_SIZE})"},
            },
            required=("index", "query"),
            result_type=List[Dict[str, Any]],
        ),
    ),
)
