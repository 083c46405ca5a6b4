"""
File: toolgateway/services/sessions.py
Purpose: Per-connection state for the streaming surface -- one Session per open SSE stream, each
    with its own outbound queue and its own set of in-flight call tasks.
When Used: GET /sse opens a session and drains its event stream; POST /messages looks the
    session up by the id announced in the handshake and spawns a handler task on it.
Why Created: Sessions live in an explicit id -> Session map, so a second client connecting
    never steals or replaces the first client's stream, and closing one stream only cancels
    the calls that belong to it.
"""
import json
import uuid
import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Dict, Optional, Set

logger = logging.getLogger(__name__)

# Wakes the event stream when the session is closed
_CLOSED = object()


def format_event(data: str, event: Optional[str] = None) -> str:
    """Serialize one server-sent event frame"""
    lines = []
    if event:
        lines.append(f"event: {event}")
    for line in data.splitlines() or [""]:
        lines.append(f"data: {line}")
    return "\n".join(lines) + "\n\n"


class Session:
    """One streaming connection"""

    def __init__(self, session_id: Optional[str] = None):
        self.id = session_id or uuid.uuid4().hex
        self._queue: asyncio.Queue = asyncio.Queue()
        self._tasks: Set[asyncio.Task] = set()
        self.closed = False

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def send(self, message: Dict[str, Any]) -> None:
        if self.closed:
            logger.debug(f"Dropping message for closed session {self.id}")
            return
        await self._queue.put(message)

    def spawn(self, coro: Awaitable) -> asyncio.Task:
        """Run one message handler on its own task, tracked for cancellation"""
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def events(self, endpoint: str, ping_interval: float) -> AsyncIterator[str]:
        """Endpoint announcement first, then queued messages with keep-alive pings in between"""
        yield format_event(endpoint, event="endpoint")
        while not self.closed:
            try:
                message = await asyncio.wait_for(self._queue.get(), timeout=ping_interval)
            except asyncio.TimeoutError:
                yield ": ping\n\n"
                continue
            if message is _CLOSED:
                break
            yield format_event(json.dumps(message), event="message")

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._queue.put_nowait(_CLOSED)
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info(f"Session {self.id} closed, cancelling {len(tasks)} in-flight call(s)")
            await asyncio.gather(*tasks, return_exceptions=True)


class SessionManager:
    """session_id -> Session map for every open stream"""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def open(self) -> Session:
        session = Session()
        while session.id in self._sessions:
            session = Session()
        self._sessions[session.id] = session
        logger.info(f"Session {session.id} opened ({len(self._sessions)} active)")
        return session

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    async def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        await session.close()
        logger.info(f"Session {session_id} disconnected ({len(self._sessions)} active)")

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
