"""
REST compatibility layer - stateless tool listing and tool calls
Provides a single endpoint for non-streaming clients to call any tool
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from toolgateway.gateway.engine import Gateway
from toolgateway.models.schemas import CallToolRequest
from toolgateway.routers import get_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tools"])


@router.get("/tools")
async def list_tools(categories: Optional[str] = None, gateway: Gateway = Depends(get_gateway)):
    """List tool descriptors, optionally only for some vendors (?categories=jenkins,jira)"""
    wanted = None
    if categories:
        wanted = [c.strip() for c in categories.split(",") if c.strip()]
    return {"tools": gateway.catalogue.payload(wanted)}


@router.get("/categories")
async def list_categories(gateway: Gateway = Depends(get_gateway)):
    return {"categories": gateway.catalogue.categories()}


@router.post("/call-tool")
async def call_tool(body: Optional[CallToolRequest] = None, gateway: Gateway = Depends(get_gateway)):
    """
    Unified tool call endpoint.

    Example request:
    ```json
    {"name": "get_build_status", "arguments": {"instance": "prod", "jobName": "api", "buildNumber": 42}}
    ```

    Tool-level failures still answer 200; check `isError` in the envelope.
    """
    if body is None or not body.name:
        return JSONResponse(status_code=400, content={"error": "Tool name required"})

    try:
        result = await gateway.dispatcher.dispatch(body.name, body.arguments)
    except Exception as e:
        logger.exception(f"Call to '{body.name}' failed outside the dispatcher")
        return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})

    return result.to_payload()
