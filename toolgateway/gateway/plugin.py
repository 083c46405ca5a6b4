"""
File: toolgateway/gateway/plugin.py
Purpose: The per-vendor plugin record -- config model, client factory and tool specs -- that
    parameterizes the single generic gateway engine.
When Used: Each module under toolgateway/vendors builds one VendorPlugin; the Gateway turns the
    enabled plugins into instance registries and the tool catalogue at startup.
Why Created: Jenkins, Jira, Nexus and friends all follow the same shape (list of instances, a
    REST client per instance, a handful of read-mostly tools). Describing each vendor as data
    removes the per-vendor copies of registry and dispatch code.
"""
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Type

from toolgateway.config import InstanceConfig
from toolgateway.models.schemas import ToolDescriptor

# (client or registry, arguments) -> data
Capability = Callable[[Any, Dict[str, Any]], Awaitable[Any]]
ClientFactory = Callable[..., Any]

INSTANCE_PROPERTY = {
    "type": "string",
    "description": "Name of the configured instance (defaults to the first one)",
}


def input_schema(
    properties: Optional[Dict[str, Dict[str, Any]]] = None,
    required: Sequence[str] = (),
    instance_scoped: bool = True,
) -> Dict[str, Any]:
    """Build a JSON-Schema object contract, adding the optional `instance` selector"""
    props: Dict[str, Any] = {}
    if instance_scoped:
        props["instance"] = dict(INSTANCE_PROPERTY)
    props.update(properties or {})
    schema: Dict[str, Any] = {"type": "object", "properties": props}
    if required:
        schema["required"] = list(required)
    return schema


@dataclass(frozen=True)
class ToolSpec:
    """One tool: its public contract plus the capability that implements it"""
    name: str
    description: str
    capability: Capability
    properties: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    required: Tuple[str, ...] = ()
    # Loose result type (pydantic-compatible) checked before wrapping; None skips the check
    result_type: Any = None
    # False for tools that operate on the registry itself (list_instances)
    instance_scoped: bool = True

    @property
    def input_schema(self) -> Dict[str, Any]:
        return input_schema(self.properties, self.required, self.instance_scoped)

    def descriptor(self, name: Optional[str] = None) -> ToolDescriptor:
        return ToolDescriptor(
            name=name or self.name,
            description=self.description,
            input_schema=self.input_schema,
        )


@dataclass(frozen=True)
class VendorPlugin:
    name: str
    display_name: str
    config_model: Type[InstanceConfig]
    client_factory: ClientFactory
    tools: Tuple[ToolSpec, ...]

    def tool_names(self) -> List[str]:
        return [t.name for t in self.tools]


async def _list_instances(registry, arguments: Dict[str, Any]) -> List[str]:
    return registry.names()


def list_instances_tool(display_name: str) -> ToolSpec:
    return ToolSpec(
        name="list_instances",
        description=f"List all configured {display_name} instances",
        capability=_list_instances,
        result_type=List[str],
        instance_scoped=False,
    )
