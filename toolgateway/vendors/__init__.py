"""
File: toolgateway/vendors/__init__.py
Purpose: Registry of the vendor plugins this gateway can serve.
When Used: Gateway.from_settings looks up each name listed in VENDORS here.
"""
from typing import Dict

from toolgateway.errors import ConfigError
from toolgateway.gateway.plugin import VendorPlugin
from toolgateway.vendors import bitbucket, elasticsearch, grafana, jenkins, jira, nexus, sonarqube

PLUGINS: Dict[str, VendorPlugin] = {
    module.PLUGIN.name: module.PLUGIN
    for module in (jenkins, jira, nexus, sonarqube, bitbucket, grafana, elasticsearch)
}


def get_plugin(name: str) -> VendorPlugin:
    plugin = PLUGINS.get(name)
    if plugin is None:
        raise ConfigError(
            f"unknown vendor '{name}'. Available: {', '.join(PLUGINS)}",
            source="VENDORS",
        )
    return plugin
