"""
File: __init__.py
Purpose: Package initializer for the routers module that exposes the FastAPI APIRouter instances
    for both protocol surfaces (REST and streaming) and the connectivity checks.
When Used: Imported by toolgateway/main.py when the application is assembled.
"""
from fastapi import Request

from toolgateway.gateway.engine import Gateway


def get_gateway(request: Request) -> Gateway:
    """Dependency: the gateway built for this application"""
    return request.app.state.gateway
