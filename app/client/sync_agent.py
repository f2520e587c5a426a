"""
Offline sync agent.

Replays queued mutations once the client is back online. Each item moves
PENDING -> IN_FLIGHT, then is deleted when the server accepts it or goes
back to PENDING when the replay fails. Delivery is at-least-once: a replay
whose response is lost is sent again on the next sweep.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.client.api_client import LearningApiClient
from app.client.config import client_settings
from app.client.errors import ApiError, AuthenticationRequired
from app.client.offline_store import OfflineStore

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    synced: int = 0
    failed: int = 0
    remaining: int = 0


class OfflineSyncAgent:
    """
    Drives sweeps of the offline queue.

    Sweeps run when connectivity comes back, on a periodic timer and on
    request. Only one sweep runs at a time; a trigger that arrives while a
    sweep is running returns None without replaying anything.
    """

    def __init__(
        self,
        client: LearningApiClient,
        store: OfflineStore,
        interval: Optional[float] = None,
        content_ttl: Optional[float] = None,
    ):
        self.client = client
        self.store = store
        self.interval = interval if interval is not None else client_settings.SYNC_INTERVAL_SECONDS
        self.content_ttl = content_ttl if content_ttl is not None else client_settings.OFFLINE_CONTENT_TTL_SECONDS
        self._lock = asyncio.Lock()
        self._timer: Optional[asyncio.Task] = None

        released = self.store.release_in_flight()
        if released:
            logger.info(f"Returned {released} interrupted items to the queue")

    @property
    def online(self) -> bool:
        return self.client.online

    async def set_online(self, online: bool) -> Optional[SyncReport]:
        """Record a connectivity change. Going online triggers a sweep."""
        was_online = self.client.online
        self.client.online = online
        if online and not was_online:
            logger.info("Connection restored, syncing offline data")
            return await self.sweep()
        if not online and was_online:
            logger.info("Connection lost, queueing mutations locally")
        return None

    async def request_sync(self) -> Optional[SyncReport]:
        return await self.sweep()

    async def sweep(self) -> Optional[SyncReport]:
        """
        Replay every pending item, progress first, then game scores.

        Store calls run in a worker thread so the event loop keeps serving
        other requests while SQLite commits.

        Returns:
            SyncReport, or None when another sweep is already running
        """
        if self._lock.locked():
            logger.info("Sync already in progress, skipping")
            return None

        async with self._lock:
            report = SyncReport()
            if not self.client.online:
                report.remaining = await asyncio.to_thread(self.store.queue_size)
                return report

            progress = await asyncio.to_thread(self.store.pending_progress)
            scores = await asyncio.to_thread(self.store.pending_scores)
            for item in progress + scores:
                await asyncio.to_thread(self.store.mark_in_flight, item.id)
                try:
                    await self.client.replay(item)
                except AuthenticationRequired as exc:
                    await asyncio.to_thread(self.store.mark_failed, item.id, exc.message)
                    report.failed += 1
                    logger.warning(f"Replay of {item.kind} {item.id} rejected: {exc.message}; stopping sync")
                    break
                except (ApiError, httpx.TransportError) as exc:
                    await asyncio.to_thread(self.store.mark_failed, item.id, str(exc))
                    report.failed += 1
                    logger.warning(f"Failed to sync {item.kind} {item.id}: {exc}")
                else:
                    await asyncio.to_thread(self.store.acknowledge, item.id)
                    report.synced += 1

            report.remaining = await asyncio.to_thread(self.store.queue_size)
            logger.info(f"Sync finished: synced={report.synced} failed={report.failed} remaining={report.remaining}")
            return report

    # ---- periodic timer ----

    def start(self) -> None:
        """Start the periodic sweep timer on the running event loop."""
        if self._timer is None or self._timer.done():
            self._timer = asyncio.create_task(self._run_periodic())

    async def stop(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        try:
            await self._timer
        except asyncio.CancelledError:
            pass
        self._timer = None

    async def _run_periodic(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if self.client.online:
                await self.sweep()

    # ---- offline content ----

    async def download_for_offline(self, content_type: str, content_id: str = "") -> bool:
        """
        Fetch content and keep it for offline use.

        Args:
            content_type: "subject", "game" or "achievements"
            content_id: Subject name, "subject/game_id" for games, ignored for achievements
        """
        if content_type == "subject":
            content = await self.client.get_subject_details(content_id)
        elif content_type == "game":
            subject, game_id = content_id.split("/", 1)
            content = await self.client.get_game_config(subject, game_id)
        elif content_type == "achievements":
            content = await self.client.get_achievements()
        else:
            raise ValueError(f"Unknown offline content type: {content_type}")

        if not content or (isinstance(content, dict) and content.get("offline")):
            logger.error(f"Failed to download {content_type} {content_id} for offline use")
            return False

        self.store.store_content(content_type, content_id, content, self.content_ttl)
        logger.info(f"Downloaded {content_type} {content_id} for offline use")
        return True

    def offline_content(self, content_type: str, content_id: str = "") -> Optional[Any]:
        return self.store.get_content(content_type, content_id)

    def cleanup(self) -> int:
        return self.store.cleanup_expired_content()
