"""
Subnet scanner: runs scan sessions and publishes results in completion order
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from http_helper import create_probe_session
from .models import DiscoveredEndpoint, ScanSession, ScanUpdate
from .network_discovery import NetworkDiscovery, SubnetResolutionError

logger = logging.getLogger(__name__)

ScanListener = Callable[[ScanUpdate], Awaitable[None]]


class SubnetScanner:
    """Discovers HTTP-speaking devices on the caller's /24 subnet"""

    def __init__(self, config: dict, network: Optional[NetworkDiscovery] = None):
        self.config = config
        self.network = network or NetworkDiscovery(config)
        self.max_concurrent_probes = config.get('max_concurrent_probes', 256)

        self.session: Optional[ScanSession] = None
        self.listeners: List[ScanListener] = []
        self._session_counter = 0
        self._scan_task: Optional[asyncio.Task] = None

    def add_listener(self, listener: ScanListener):
        """Add async callback receiving every ScanUpdate"""
        self.listeners.append(listener)

    def remove_listener(self, listener: ScanListener):
        if listener in self.listeners:
            self.listeners.remove(listener)

    @property
    def is_scanning(self) -> bool:
        return self.session is not None and self.session.is_scanning

    def get_status(self) -> dict:
        if self.session is None:
            return ScanSession(session_id=0).snapshot()
        return self.session.snapshot()

    def launch_scan(self) -> asyncio.Task:
        """
        Start a scan in the background, cancelling any scan still running.
        Returns the task driving the new session.
        """
        if self._scan_task and not self._scan_task.done():
            logger.info("Restarting scan: cancelling the running session")
            self._scan_task.cancel()
        self._scan_task = asyncio.create_task(self.start_scan())
        return self._scan_task

    async def start_scan(self) -> ScanSession:
        """
        Run one full scan session and return it once every probe has settled.
        Subnet resolution failures are recorded on the session, never raised.
        """
        self._session_counter += 1
        session = ScanSession(session_id=self._session_counter, is_scanning=True)
        self.session = session

        logger.info(f"[SCAN {session.session_id}] Starting subnet discovery")
        await self._publish(session, "started")

        try:
            try:
                session.subnet = await self.network.resolve_subnet()
            except SubnetResolutionError as e:
                session.error = str(e)
                logger.error(f"[SCAN {session.session_id}] Cannot determine subnet: {e}")
                await self._publish(session, "error", error=session.error)
                return session

            pairs = self.network.candidate_pairs(session.subnet)
            session.total_probes = len(pairs)
            logger.info(f"[SCAN {session.session_id}] Probing {len(pairs)} endpoints on "
                        f"{session.subnet}.0/24 (concurrency: {self.max_concurrent_probes or 'unbounded'})")

            await self._run_probes(session, pairs)

            duration = time.time() - session.started_at
            logger.info(f"[SCAN {session.session_id}] Complete: {len(session.results)} endpoints "
                        f"from {session.completed} probes in {duration:.1f}s")
            await self._publish(session, "complete")
            return session

        finally:
            session.is_scanning = False
            session.finished_at = time.time()

    async def _run_probes(self, session: ScanSession, pairs):
        semaphore = asyncio.Semaphore(self.max_concurrent_probes) if self.max_concurrent_probes else None

        async with create_probe_session(self.max_concurrent_probes) as http:

            async def probe(host: str, port: int):
                if semaphore is None:
                    alive = await self.network.probe_endpoint(http, host, port)
                else:
                    async with semaphore:
                        alive = await self.network.probe_endpoint(http, host, port)
                await self._record(session, host, port, alive)

            tasks = [asyncio.create_task(probe(host, port)) for host, port in pairs]
            try:
                results = await asyncio.gather(*tasks, return_exceptions=True)
            except asyncio.CancelledError:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        for result in results:
            if isinstance(result, Exception):
                logger.error(f"[SCAN {session.session_id}] Probe task crashed: {result!r}")

    async def _record(self, session: ScanSession, host: str, port: int, alive: bool):
        # Runs between suspension points, so the mutation below is atomic on the loop
        endpoint = None
        if alive:
            endpoint = DiscoveredEndpoint(host=host, port=port)
            session.results.append(endpoint)
        session.completed += 1

        if endpoint:
            logger.info(f"[OK] Found {endpoint.label}")
            await self._publish(session, "endpoint", endpoint=endpoint)
        await self._publish(session, "progress")

        if session.completed % 250 == 0:
            logger.debug(f"[SCAN {session.session_id}] Progress: {session.completed}/"
                         f"{session.total_probes} ({session.progress_percent}%)")

    def select_endpoint(self, host: str, port: int) -> DiscoveredEndpoint:
        """Return the discovered endpoint relabelled with its URL"""
        if self.session is not None:
            for endpoint in self.session.results:
                if endpoint.host == host and endpoint.port == port:
                    return endpoint.as_selected()
        raise KeyError(f"{host}:{port} was not discovered in the current scan")

    async def _publish(self, session: ScanSession, kind: str,
                       endpoint: Optional[DiscoveredEndpoint] = None, error: Optional[str] = None):
        update = ScanUpdate(
            kind=kind,
            session_id=session.session_id,
            progress_percent=session.progress_percent,
            completed=session.completed,
            total_probes=session.total_probes,
            endpoint=endpoint,
            error=error
        )
        for listener in list(self.listeners):
            try:
                await listener(update)
            except Exception as e:
                logger.error(f"Scan listener failed: {e}")

    async def close(self):
        if self._scan_task and not self._scan_task.done():
            self._scan_task.cancel()
            try:
                await self._scan_task
            except asyncio.CancelledError:
                pass
        self._scan_task = None
