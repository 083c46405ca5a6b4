"""
File: toolgateway/models/schemas.py
Purpose: Pydantic schemas shared by the dispatcher and both protocol surfaces -- tool
    descriptors, the tool-call result envelope, the REST request body, and the connectivity
    report models.
When Used: Imported by the catalogue, dispatcher, routers and session bridge.
Why Created: One envelope model serialized the same way everywhere guarantees that a tool call
    looks identical whether it arrived over REST or over the streaming session.
"""
import json
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


# ============================================================================
# Tool Catalogue Schemas
# ============================================================================

class ToolDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(alias="inputSchema")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# ============================================================================
# Tool Call Schemas
# ============================================================================

class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallResult(BaseModel):
    """Uniform result envelope: Ok carries content, Error carries isError and message"""
    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent]
    is_error: bool = Field(default=False, alias="isError")
    message: Optional[str] = None

    @classmethod
    def success(cls, data: Any) -> "ToolCallResult":
        if isinstance(data, str):
            text = data
        else:
            text = json.dumps(data, indent=2, default=str)
        return cls(content=[TextContent(text=text)])

    @classmethod
    def failure(cls, message: str) -> "ToolCallResult":
        return cls(
            content=[TextContent(text=f"Error: {message}")],
            is_error=True,
            message=message,
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CallToolRequest(BaseModel):
    """REST body for POST /call-tool; both fields optional so a missing name is a 400, not a 422"""
    name: Optional[str] = None
    arguments: Optional[Any] = None


# ============================================================================
# Connectivity Schemas
# ============================================================================

class ToolStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class ConnectivityResult(BaseModel):
    vendor: str
    instance: str
    base_url: str
    status: ToolStatus
    version: Optional[str] = None
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class ConnectivityReport(BaseModel):
    timestamp: str
    total: int
    healthy: int
    unhealthy: int
    unknown: int
    instances: List[ConnectivityResult] = []
