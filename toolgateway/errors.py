"""
File: toolgateway/errors.py
Purpose: Exception taxonomy for the gateway. Everything except ConfigError and TransportError is
    recoverable per call and ends up as an error envelope for the caller.
"""
from typing import Any, Optional


class GatewayError(Exception):
    """Base class for all gateway errors"""


class ConfigError(GatewayError):
    """Configuration could not be loaded; fatal at startup"""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class UnknownToolError(GatewayError):
    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class ArgumentValidationError(GatewayError):
    """Tool arguments do not satisfy the tool's input schema"""

    def __init__(self, field: Optional[str], message: str):
        self.field = field
        super().__init__(message)


class InstanceNotFoundError(GatewayError):
    def __init__(self, vendor: str, instance: str, available: list):
        self.instance = instance
        super().__init__(
            f"{vendor} instance '{instance}' not found. Available: {', '.join(available)}"
        )


class AccessDeniedError(GatewayError):
    def __init__(self, detail: str):
        super().__init__(f"Access denied for this instance: {detail}")


class BackendFault(GatewayError):
    """Network, HTTP or payload failure reported by a backend client"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class TransportError(GatewayError):
    """Malformed protocol frame or message for a session that does not exist"""

    def __init__(self, message: str, code: Optional[int] = None, request_id: Any = None):
        # JSON-RPC error code, when the frame got far enough to have one
        self.code = code
        self.request_id = request_id
        super().__init__(message)
