"""
File: toolgateway/routers/streaming.py
Purpose: Streaming surface -- JSON-RPC 2.0 over server-sent events.
When Used: Clients GET /sse to open a session, read the `endpoint` event, then POST each JSON-RPC
    message to /messages?session_id=<id>. Responses come back on the SSE stream as `message`
    events, tagged with the request id.

Protocol:
    1. Client connects to GET /sse
    2. Server sends: event: endpoint / data: /messages?session_id=xxx
    3. Client POSTs JSON-RPC to /messages?session_id=xxx (202 Accepted)
    4. Server streams responses back via the SSE connection, in completion order
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from toolgateway.errors import TransportError
from toolgateway.services.jsonrpc import INTERNAL_ERROR, JsonRpcHandler, decode_message, error_response
from toolgateway.services.sessions import Session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Streaming"])


@router.get("/sse")
async def open_stream(request: Request):
    """Open a streaming session"""
    settings = request.app.state.settings
    sessions = request.app.state.sessions
    session = sessions.open()
    endpoint = f"{settings.messages_path}?session_id={session.id}"

    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"SSE connect from {client_ip}, session {session.id}")

    async def event_stream():
        try:
            async for chunk in session.events(endpoint, settings.sse_ping_interval):
                yield chunk
        finally:
            await sessions.close(session.id)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/messages")
async def post_message(request: Request, session_id: Optional[str] = None):
    """Accept one JSON-RPC message for an open session"""
    session = request.app.state.sessions.get(session_id)
    if session is None:
        logger.warning(f"Message for unknown session {session_id or '-'}")
        return JSONResponse(status_code=400, content={"error": "No active connection"})

    body = await request.body()
    try:
        message = decode_message(body)
    except TransportError as e:
        logger.warning(f"Rejected frame on session {session.id}: {e}")
        return JSONResponse(status_code=400, content=error_response(e.request_id, e.code, str(e)))

    session.spawn(_answer(request.app.state.rpc, session, message))
    return PlainTextResponse("Accepted", status_code=202)


async def _answer(handler: JsonRpcHandler, session: Session, message: Dict[str, Any]) -> None:
    try:
        response = await handler.handle(message)
    except Exception as e:
        logger.exception(f"JSON-RPC {message.get('method')} failed on session {session.id}")
        if "id" not in message:
            return
        response = error_response(message.get("id"), INTERNAL_ERROR, str(e) or type(e).__name__)
    if response is not None:
        await session.send(response)
