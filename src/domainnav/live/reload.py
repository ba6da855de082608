"""Data file watching for live reload.

Monitors the JSON data file for changes made outside the server, reloads
it into the running store and notifies connected WebSocket clients so
they can refetch navigation.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from domainnav.store.json_file import JsonFileStore

logger = logging.getLogger(__name__)


class DataReloader:
    """Reloads a JSON file store whenever its file changes on disk."""

    def __init__(self, store: JsonFileStore) -> None:
        """Initialize the reloader.

        Args:
            store: Store whose data file is watched
        """
        self._store = store
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_file())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for reload notifications."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_file(self) -> None:
        data_file = self._store.path
        data_file.parent.mkdir(parents=True, exist_ok=True)
        async for changes in awatch(data_file.parent):
            if self._is_relevant(changes, data_file):
                await self.reload()

    @staticmethod
    def _is_relevant(changes: set[tuple[Change, str]], data_file: Path) -> bool:
        """Whether a change batch touched the data file (deletions ignored)."""
        target = data_file.resolve()
        for change_type, path_str in changes:
            if change_type == Change.deleted:
                continue
            if Path(path_str).resolve() == target:
                return True
        return False

    async def reload(self) -> bool:
        """Reload the store and broadcast a reload event.

        An unreadable file leaves the current contents in place.

        Returns:
            True if the store was reloaded
        """
        async with self._store.transaction():
            try:
                self._store.reload()
            except (OSError, ValueError) as e:
                logger.error(f"Keeping previous content, reload failed: {e}")
                return False

        logger.info(f"Reloaded content from {self._store.path}")
        await self._broadcast_reload()
        return True

    async def _broadcast_reload(self) -> None:
        if not self._connections:
            return

        message = json.dumps({"type": "reload"})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(reloader: DataReloader) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket.

    Args:
        reloader: DataReloader instance

    Returns:
        List of route definitions
    """
    return [web.get("/ws/live-reload", reloader.handle_websocket)]
