"""
File: toolgateway/gateway/engine.py
Purpose: Composition root for the gateway core -- turns enabled vendor plugins and their config
    files into instance registries, the tool catalogue and the dispatcher.
When Used: Built once in the FastAPI lifespan (toolgateway/main.py) and stored on app.state;
    tests build it directly from stub plugins and in-memory instance lists.
"""
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from toolgateway.config import InstanceConfig, Settings, load_instances
from toolgateway.gateway.catalogue import ToolCatalogue
from toolgateway.gateway.dispatcher import Dispatcher
from toolgateway.gateway.plugin import VendorPlugin
from toolgateway.gateway.registry import InstanceRegistry

logger = logging.getLogger(__name__)


class Gateway:
    def __init__(
        self,
        plugins: Sequence[VendorPlugin],
        instances: Mapping[str, Sequence[InstanceConfig]],
        client_options: Optional[Dict] = None,
    ):
        self.plugins: List[VendorPlugin] = list(plugins)
        options = client_options or {}
        self.registries: Dict[str, InstanceRegistry] = {}
        for plugin in self.plugins:
            factory = plugin.client_factory
            if options:
                factory = _bind_options(plugin.client_factory, options)
            self.registries[plugin.name] = InstanceRegistry(plugin.name, instances[plugin.name], factory)

        self.catalogue = ToolCatalogue.from_plugins(self.plugins)
        self.dispatcher = Dispatcher(self.catalogue, self.registries)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Gateway":
        """Load every enabled vendor's config file; raises ConfigError on the first bad one"""
        from toolgateway.vendors import get_plugin

        plugins = [get_plugin(name) for name in settings.enabled_vendors()]
        instances = {
            plugin.name: load_instances(settings.config_path_for(plugin.name), plugin.config_model)
            for plugin in plugins
        }
        gateway = cls(plugins, instances, client_options={"timeout": settings.http_timeout})
        logger.info(
            f"Gateway ready: {len(gateway.catalogue)} tools across {', '.join(p.name for p in plugins)}"
        )
        return gateway

    def vendor_names(self) -> List[str]:
        return [plugin.name for plugin in self.plugins]

    def instance_names(self) -> Dict[str, List[str]]:
        return {name: registry.names() for name, registry in self.registries.items()}

    async def aclose(self) -> None:
        for registry in self.registries.values():
            await registry.aclose()


def _bind_options(factory, options: Dict):
    def build(config: InstanceConfig):
        return factory(config, **options)
    return build
