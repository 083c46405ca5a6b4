"""
Connectivity Router - Check connectivity to every configured instance
"""
import asyncio
import time
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from toolgateway.gateway.engine import Gateway
from toolgateway.gateway.registry import InstanceHandle
from toolgateway.models.schemas import ConnectivityReport, ConnectivityResult, ToolStatus
from toolgateway.routers import get_gateway

router = APIRouter(prefix="/connectivity", tags=["Tool Connectivity"])


async def _check_instance(handle: InstanceHandle) -> ConnectivityResult:
    """Check connectivity for a single instance, reusing its registry client"""
    start = time.time()
    try:
        client = await handle.get_client()
        status = await client.health_check()
        version = await client.get_version()
        latency = (time.time() - start) * 1000
        return ConnectivityResult(
            vendor=handle.vendor,
            instance=handle.name,
            base_url=handle.config.base_url,
            status=status,
            version=version,
            latency_ms=round(latency, 1),
        )
    except Exception as e:
        latency = (time.time() - start) * 1000
        return ConnectivityResult(
            vendor=handle.vendor,
            instance=handle.name,
            base_url=handle.config.base_url,
            status=ToolStatus.UNHEALTHY,
            latency_ms=round(latency, 1),
            error=str(e),
        )


async def _report(handles: List[InstanceHandle]) -> ConnectivityReport:
    results = await asyncio.gather(*[_check_instance(h) for h in handles])

    healthy = sum(1 for r in results if r.status == ToolStatus.HEALTHY)
    unhealthy = sum(1 for r in results if r.status == ToolStatus.UNHEALTHY)
    unknown = sum(1 for r in results if r.status == ToolStatus.UNKNOWN)

    return ConnectivityReport(
        timestamp=datetime.now().isoformat(),
        total=len(results),
        healthy=healthy,
        unhealthy=unhealthy,
        unknown=unknown,
        instances=list(results),
    )


@router.get("", response_model=ConnectivityReport)
async def check_all_connectivity(gateway: Gateway = Depends(get_gateway)):
    """Check connectivity to all configured instances concurrently"""
    handles = [h for registry in gateway.registries.values() for h in registry.handles()]
    return await _report(handles)


@router.get("/{vendor}", response_model=ConnectivityReport)
async def check_vendor_connectivity(vendor: str, gateway: Gateway = Depends(get_gateway)):
    """Check connectivity to the instances of one vendor"""
    registry = gateway.registries.get(vendor)
    if registry is None:
        raise HTTPException(status_code=404, detail=f"Vendor '{vendor}' not configured")
    return await _report(registry.handles())
