"""
File: toolgateway/services/jsonrpc.py
Purpose: JSON-RPC 2.0 method handling for the streaming surface (initialize, ping, tools/list,
    tools/call) on top of the shared tool catalogue and dispatcher.
When Used: POST /messages decodes a frame with decode_message() and hands it to
    JsonRpcHandler.handle() on the session's own task; the response is queued on that session.
Why Created: Keeps protocol framing out of the router so the same handler can be exercised
    directly in tests, and so tools/list and tools/call reuse exactly the payloads the REST
    surface serves.
"""
import json
import logging
from typing import Any, Dict, Optional

from toolgateway.errors import TransportError
from toolgateway.gateway.engine import Gateway

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def error_response(request_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def result_response(request_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def decode_message(body: bytes) -> Dict[str, Any]:
    """Parse one JSON-RPC frame; raises TransportError carrying the JSON-RPC error code"""
    try:
        message = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise TransportError(f"Parse error: {e}", code=PARSE_ERROR) from e

    if not isinstance(message, dict):
        raise TransportError("Invalid Request: expected a JSON object", code=INVALID_REQUEST)
    request_id = message.get("id")
    if message.get("jsonrpc") != "2.0":
        raise TransportError("Invalid Request: jsonrpc must be '2.0'", code=INVALID_REQUEST, request_id=request_id)
    if not isinstance(message.get("method"), str) or not message["method"]:
        raise TransportError("Invalid Request: method is required", code=INVALID_REQUEST, request_id=request_id)
    return message


class JsonRpcHandler:
    """Answers JSON-RPC requests for one gateway"""

    def __init__(self, gateway: Gateway, server_name: str, server_version: str):
        self.gateway = gateway
        self.server_name = server_name
        self.server_version = server_version

    async def handle(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the response for a request, or None for a notification"""
        method = message["method"]
        params = message.get("params") or {}
        is_notification = "id" not in message
        request_id = message.get("id")

        if is_notification:
            logger.debug(f"Notification {method}")
            return None

        if not isinstance(params, dict):
            return error_response(request_id, INVALID_PARAMS, "params must be an object")

        if method == "initialize":
            return result_response(request_id, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": self.server_name, "version": self.server_version},
            })
        if method == "ping":
            return result_response(request_id, {})
        if method == "tools/list":
            return result_response(request_id, {"tools": self.gateway.catalogue.payload()})
        if method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str) or not name:
                return error_response(request_id, INVALID_PARAMS, "Tool name required")
            result = await self.gateway.dispatcher.dispatch(name, params.get("arguments"))
            return result_response(request_id, result.to_payload())

        return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
