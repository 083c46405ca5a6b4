"""
Tests for the streaming surface: sessions, the SSE event stream and JSON-RPC over /messages
"""
import asyncio
import json

import httpx
import pytest
import pytest_asyncio
from starlette.requests import Request

from toolgateway.main import create_app
from toolgateway.routers import streaming
from toolgateway.services.jsonrpc import JsonRpcHandler, PROTOCOL_VERSION
from toolgateway.services.sessions import Session, SessionManager, format_event

ENDPOINT = "/messages?session_id=test"


def parse_event(chunk: str) -> dict:
    """Decode a `message` event frame into its JSON payload"""
    lines = chunk.strip().split("\n")
    assert lines[0] == "event: message"
    return json.loads("".join(line[len("data: "):] for line in lines[1:]))


async def next_chunk(stream, timeout: float = 2.0) -> str:
    return await asyncio.wait_for(stream.__anext__(), timeout=timeout)


def rpc(method: str, request_id=None, **params) -> dict:
    message = {"jsonrpc": "2.0", "method": method, "params": params}
    if request_id is not None:
        message["id"] = request_id
    return message


@pytest.fixture
def app(gateway, settings):
    return create_app(gateway, settings)


@pytest_asyncio.fixture
async def http(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://gateway") as client:
        yield client


# ============================================================================
# Sessions
# ============================================================================

def test_format_event():
    assert format_event("/messages?session_id=x", event="endpoint") == "event: endpoint\ndata: /messages?session_id=x\n\n"
    assert format_event("a\nb") == "data: a\ndata: b\n\n"


@pytest.mark.asyncio
async def test_session_stream_starts_with_endpoint_then_pings():
    session = Session("abc")
    stream = session.events(ENDPOINT, ping_interval=0.05)

    assert await next_chunk(stream) == f"event: endpoint\ndata: {ENDPOINT}\n\n"
    assert await next_chunk(stream) == ": ping\n\n"

    await session.send({"jsonrpc": "2.0", "id": 1, "result": {}})
    assert parse_event(await next_chunk(stream)) == {"jsonrpc": "2.0", "id": 1, "result": {}}


@pytest.mark.asyncio
async def test_session_close_cancels_in_flight_calls():
    session = Session()
    stream = session.events(ENDPOINT, ping_interval=5)
    await next_chunk(stream)

    task = session.spawn(asyncio.sleep(10))
    assert session.pending == 1

    await session.close()

    assert task.cancelled()
    assert session.pending == 0
    with pytest.raises(StopAsyncIteration):
        await next_chunk(stream)


@pytest.mark.asyncio
async def test_session_manager_keeps_sessions_apart():
    manager = SessionManager()
    first = manager.open()
    second = manager.open()

    assert first.id != second.id
    assert len(manager) == 2
    assert manager.get(first.id) is first
    assert manager.get(None) is None
    assert manager.get("unknown") is None

    await manager.close(first.id)

    assert first.closed is True
    assert second.closed is False
    assert first.id not in manager
    await manager.close_all()
    assert len(manager) == 0


# ============================================================================
# JSON-RPC handler
# ============================================================================

@pytest.mark.asyncio
async def test_initialize_and_ping(gateway):
    handler = JsonRpcHandler(gateway, "DevOps Tool Gateway", "1.0.0")

    init = await handler.handle(rpc("initialize", 1, protocolVersion=PROTOCOL_VERSION))
    ping = await handler.handle(rpc("ping", "p"))

    assert init["id"] == 1
    assert init["result"]["protocolVersion"] == PROTOCOL_VERSION
    assert init["result"]["serverInfo"] == {"name": "DevOps Tool Gateway", "version": "1.0.0"}
    assert "tools" in init["result"]["capabilities"]
    assert ping == {"jsonrpc": "2.0", "id": "p", "result": {}}


@pytest.mark.asyncio
async def test_tools_list_matches_rest_payload(gateway):
    handler = JsonRpcHandler(gateway, "gw", "1")

    response = await handler.handle(rpc("tools/list", 2))

    assert response["result"] == {"tools": gateway.catalogue.payload()}


@pytest.mark.asyncio
async def test_protocol_errors(gateway, ci_spy):
    handler = JsonRpcHandler(gateway, "gw", "1")

    unknown = await handler.handle(rpc("resources/list", 3))
    nameless = await handler.handle(rpc("tools/call", 4, arguments={}))
    notification = await handler.handle(rpc("notifications/initialized"))

    assert unknown["error"]["code"] == -32601
    assert nameless["error"]["code"] == -32602
    assert notification is None
    assert ci_spy.built == []


# ============================================================================
# HTTP: GET /sse and POST /messages
# ============================================================================

@pytest.mark.asyncio
async def test_sse_handshake_registers_and_releases_session(app):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/sse",
        "headers": [],
        "query_string": b"",
        "client": ("127.0.0.1", 50000),
        "app": app,
    }
    response = await streaming.open_stream(Request(scope))

    first = await next_chunk(response.body_iterator)
    assert first.startswith("event: endpoint\ndata: /messages?session_id=")
    session_id = first.strip().split("session_id=")[1]
    assert session_id in app.state.sessions

    await response.body_iterator.aclose()
    assert session_id not in app.state.sessions


@pytest.mark.asyncio
async def test_messages_without_session(http):
    missing = await http.post("/messages", json=rpc("ping", 1))
    unknown = await http.post("/messages", params={"session_id": "nope"}, json=rpc("ping", 1))

    for response in (missing, unknown):
        assert response.status_code == 400
        assert response.json() == {"error": "No active connection"}


@pytest.mark.asyncio
async def test_messages_rejects_malformed_frames(app, http):
    session = app.state.sessions.open()
    params = {"session_id": session.id}

    not_json = await http.post("/messages", params=params, content=b"{nope")
    not_rpc = await http.post("/messages", params=params, json={"id": 9, "method": "ping"})

    assert not_json.status_code == 400
    assert not_json.json()["error"]["code"] == -32700
    assert not_rpc.status_code == 400
    assert not_rpc.json()["error"]["code"] == -32600
    assert not_rpc.json()["id"] == 9


@pytest.mark.asyncio
async def test_tools_call_response_arrives_on_stream(app, http, ci_spy):
    session = app.state.sessions.open()
    stream = session.events(ENDPOINT, ping_interval=5)
    await next_chunk(stream)

    accepted = await http.post(
        "/messages",
        params={"session_id": session.id},
        json=rpc("tools/call", 7, name="get_build_status",
                 arguments={"instance": "staging", "jobName": "api", "buildNumber": 42}),
    )

    assert accepted.status_code == 202
    message = parse_event(await next_chunk(stream))
    assert message["id"] == 7
    assert message["result"] == {"content": [{"type": "text", "text": "SUCCESS"}], "isError": False}
    assert ci_spy.calls() == [("get_build_status", "staging", "api", 42)]


@pytest.mark.asyncio
async def test_calls_complete_out_of_order(app, http):
    session = app.state.sessions.open()
    stream = session.events(ENDPOINT, ping_interval=5)
    await next_chunk(stream)
    params = {"session_id": session.id}

    await http.post("/messages", params=params,
                    json=rpc("tools/call", "slow", name="slow_echo", arguments={"tag": "slow", "delay": 0.3}))
    await http.post("/messages", params=params,
                    json=rpc("tools/call", "fast", name="slow_echo", arguments={"tag": "fast"}))

    first = parse_event(await next_chunk(stream))
    second = parse_event(await next_chunk(stream))

    assert (first["id"], first["result"]["content"][0]["text"]) == ("fast", "fast")
    assert (second["id"], second["result"]["content"][0]["text"]) == ("slow", "slow")


@pytest.mark.asyncio
async def test_sessions_do_not_see_each_other(app, http):
    alice = app.state.sessions.open()
    bob = app.state.sessions.open()
    alice_stream = alice.events(ENDPOINT, ping_interval=5)
    bob_stream = bob.events(ENDPOINT, ping_interval=0.1)
    await next_chunk(alice_stream)
    await next_chunk(bob_stream)

    await http.post("/messages", params={"session_id": alice.id}, json=rpc("ping", 1))

    assert parse_event(await next_chunk(alice_stream))["id"] == 1
    # Bob only gets his keep-alive
    assert await next_chunk(bob_stream) == ": ping\n\n"


@pytest.mark.asyncio
async def test_streaming_and_rest_envelopes_are_identical(app, http):
    session = app.state.sessions.open()
    stream = session.events(ENDPOINT, ping_interval=5)
    await next_chunk(stream)
    call = {"name": "get_build_status", "arguments": {"jobName": "api"}}

    rest = await http.post("/call-tool", json=call)
    await http.post("/messages", params={"session_id": session.id}, json=rpc("tools/call", 1, **call))
    streamed = parse_event(await next_chunk(stream))

    assert rest.json()["isError"] is True
    assert streamed["result"] == rest.json()
