"""A broadcast chat room over websockets with unique user names."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from aiohttp import WSMsgType, web

log = logging.getLogger(__name__)

_NAME_TAKEN = "Username already taken."


@dataclass
class ChatState:
    """Names in use and the queues of every subscribed connection."""

    user_set: set[str] = field(default_factory=set)
    _subscribers: set[asyncio.Queue[str]] = field(default_factory=set)

    def claim_username(self, name: str) -> bool:
        """Take ``name`` if it is free; return whether it was taken now."""
        if name in self.user_set:
            return False
        self.user_set.add(name)
        return True

    def release_username(self, name: str) -> None:
        """Make ``name`` available to new clients again."""
        self.user_set.discard(name)

    def _subscribe(self) -> asyncio.Queue[str]:
        queue: asyncio.Queue[str] = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def _unsubscribe(self, queue: asyncio.Queue[str]) -> None:
        self._subscribers.discard(queue)

    def _broadcast(self, message: str) -> None:
        for queue in self._subscribers:
            queue.put_nowait(message)


CHAT_STATE_KEY = web.AppKey("chat_state", ChatState)
"""Application key under which the shared chat state lives."""


async def _read_username(ws: web.WebSocketResponse, state: ChatState) -> str | None:
    async for message in ws:
        if message.type == WSMsgType.ERROR:
            return None
        if message.type == WSMsgType.TEXT:
            name = message.data
            if state.claim_username(name):
                return name
            await ws.send_str(_NAME_TAKEN)
            return None
    return None


async def _forward(queue: asyncio.Queue[str], ws: web.WebSocketResponse) -> None:
    while True:
        message = await queue.get()
        try:
            await ws.send_str(message)
        except (ConnectionResetError, RuntimeError):
            return


async def _relay(ws: web.WebSocketResponse, state: ChatState, username: str) -> None:
    async for message in ws:
        if message.type != WSMsgType.TEXT:
            return
        state._broadcast(f"{username}: {message.data}")


async def websocket_handler(request: web.Request) -> web.WebSocketResponse:
    """Join a client to the chat once it sends a free user name."""
    state = request.app[CHAT_STATE_KEY]
    ws = web.WebSocketResponse()
    await ws.prepare(request)

    username = await _read_username(ws, state)
    if username is None:
        await ws.close()
        return ws

    queue = state._subscribe()
    joined = f"{username} joined."
    log.debug(joined)
    state._broadcast(joined)

    send_task = asyncio.create_task(_forward(queue, ws))
    recv_task = asyncio.create_task(_relay(ws, state, username))
    try:
        await asyncio.wait({send_task, recv_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (send_task, recv_task):
            task.cancel()
        await asyncio.gather(send_task, recv_task, return_exceptions=True)
        state._unsubscribe(queue)
        left = f"{username} left."
        log.debug(left)
        state._broadcast(left)
        state.release_username(username)

    await ws.close()
    return ws