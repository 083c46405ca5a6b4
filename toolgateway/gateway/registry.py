"""
File: toolgateway/gateway/registry.py
Purpose: Maps instance names to lazily constructed backend clients for one vendor and picks the
    default instance when a tool call does not name one.
When Used: The dispatcher resolves every instance-scoped tool call through the vendor's registry;
    /health and /connectivity read instance names and clients from it.
Why Created: Replaces the per-vendor client maps. Client construction is memoized per instance
    with a lock so two concurrent first calls never build two live clients.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from toolgateway.config import InstanceConfig
from toolgateway.errors import ConfigError, InstanceNotFoundError
from toolgateway.gateway.plugin import ClientFactory

logger = logging.getLogger(__name__)


class InstanceHandle:
    """One configured instance plus its backend client, built on first use"""

    def __init__(self, vendor: str, config: InstanceConfig, client_factory: ClientFactory):
        self.vendor = vendor
        self.config = config
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def restriction(self):
        return self.config.restriction()

    @property
    def has_client(self) -> bool:
        return self._client is not None

    async def get_client(self) -> Any:
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                logger.info(f"Creating {self.vendor} client for instance '{self.name}' ({self.config.base_url})")
                self._client = self._client_factory(self.config)
        return self._client

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None and hasattr(client, "close"):
            await client.close()


class InstanceRegistry:
    """Named instances of one vendor, in configuration order"""

    def __init__(self, vendor: str, instances: Sequence[InstanceConfig], client_factory: ClientFactory):
        if not instances:
            raise ConfigError(f"no {vendor} instances configured")
        self.vendor = vendor
        self._handles: Dict[str, InstanceHandle] = {}
        for config in instances:
            if config.name in self._handles:
                raise ConfigError(f"duplicate {vendor} instance name '{config.name}'")
            self._handles[config.name] = InstanceHandle(vendor, config, client_factory)
        self._default = instances[0].name

    def names(self) -> List[str]:
        return list(self._handles.keys())

    def handles(self) -> List[InstanceHandle]:
        return list(self._handles.values())

    @property
    def default_name(self) -> str:
        return self._default

    def resolve(self, name: Optional[str] = None) -> InstanceHandle:
        if name is None:
            return self._handles[self._default]
        handle = self._handles.get(name)
        if handle is None:
            raise InstanceNotFoundError(self.vendor, name, self.names())
        return handle

    async def aclose(self) -> None:
        for handle in self._handles.values():
            try:
                await handle.aclose()
            except Exception as e:
                logger.warning(f"Failed to close {self.vendor} client '{handle.name}': {e}")
