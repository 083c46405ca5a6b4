"""
File: toolgateway/gateway/dispatcher.py
Purpose: Resolves a (tool name, arguments) pair to exactly one backend invocation and normalizes
    the outcome into a ToolCallResult.
When Used: Called by the REST router (POST /call-tool) and by the streaming session bridge
    (JSON-RPC tools/call) for every tool call.
Why Created: Single request/response engine shared by both surfaces. It never raises: unknown
    tools, bad arguments, unknown instances, access denials and backend faults all come back as
    error envelopes, so one failing call cannot affect other in-flight calls.

Steps per call:
    1. look up the tool in the catalogue
    2. validate arguments against its input schema
    3. resolve the instance (explicit `instance` argument or the vendor default)
    4. apply the instance restriction, before any backend traffic
    5. invoke the capability once (no retries)
    6. check the result against the tool's result type, narrow listings to the restriction,
       then wrap it
"""
import time
import logging
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from toolgateway.errors import AccessDeniedError, BackendFault, GatewayError, UnknownToolError
from toolgateway.gateway.catalogue import CatalogueEntry, ToolCatalogue
from toolgateway.gateway.registry import InstanceRegistry
from toolgateway.gateway.validation import validate_arguments
from toolgateway.models.schemas import ToolCallResult

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _result_adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


class Dispatcher:
    """Stateless tool-call engine over a catalogue and per-vendor registries"""

    def __init__(self, catalogue: ToolCatalogue, registries: Mapping[str, InstanceRegistry]):
        self.catalogue = catalogue
        self.registries = dict(registries)

    async def dispatch(self, tool_name: str, arguments: Optional[Any] = None) -> ToolCallResult:
        start_time = time.time()
        instance_name: Optional[str] = None
        try:
            entry = self.catalogue.find(tool_name)
            if entry is None:
                raise UnknownToolError(tool_name)

            args = validate_arguments(entry.descriptor.input_schema, arguments)
            data, instance_name = await self._execute(entry, args)
            result = ToolCallResult.success(data)
        except GatewayError as e:
            logger.warning(f"Tool '{tool_name}' failed: {e}")
            result = ToolCallResult.failure(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error while dispatching '{tool_name}'")
            result = ToolCallResult.failure(str(e) or type(e).__name__)

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Tool call {tool_name} instance={instance_name or '-'} "
            f"ok={not result.is_error} elapsed_ms={elapsed_ms:.1f}"
        )
        return result

    async def _execute(self, entry: CatalogueEntry, args: Dict[str, Any]):
        registry = self.registries[entry.vendor]
        spec = entry.spec

        if not spec.instance_scoped:
            data = await spec.capability(registry, args)
            return self._check_result(entry, data), None

        handle = registry.resolve(args.get("instance"))

        restriction = handle.restriction
        if restriction is not None:
            reason = restriction.check(spec.name, args)
            if reason:
                raise AccessDeniedError(reason)

        client = await handle.get_client()
        try:
            data = await spec.capability(client, args)
        except GatewayError:
            raise
        except Exception as e:
            raise BackendFault(str(e) or type(e).__name__) from e
        data = self._check_result(entry, data)
        if restriction is not None:
            data = restriction.filter_result(spec.name, data)
        return data, handle.name

    def _check_result(self, entry: CatalogueEntry, data: Any) -> Any:
        result_type = entry.spec.result_type
        if result_type is None:
            return data
        try:
            _result_adapter(result_type).validate_python(data)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(p) for p in first["loc"]) or "<root>"
            raise BackendFault(
                f"Malformed response from {entry.vendor} for '{entry.spec.name}': {location}: {first['msg']}"
            ) from e
        # Pass the vendor payload through untouched once it has the expected shape
        return data
