"""
Per-pane connectivity prober
WebSocket handshake first, HTTP fetch fallback for public hosts, optional periodic keep-alive
"""

import asyncio
import logging
import re
import time
from typing import Optional, Set
from urllib.parse import urlsplit

import aiohttp

from http_helper import create_connectivity_session
from .models import ConnectionStatus, ProbeResult, ProbeState

logger = logging.getLogger(__name__)

PRIVATE_HOST_PATTERNS = [
    re.compile(r'^192\.168\.'),
    re.compile(r'^10\.'),
    re.compile(r'^172\.(1[6-9]|2[0-9]|3[01])\.'),
    re.compile(r'^localhost(:|$)', re.IGNORECASE),
]

_SCHEME_PREFIX = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*://')

PROBE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError)


def extract_hostname(target: str) -> str:
    """
    Bare hostname of a target URL.
    Falls back to stripping the scheme and cutting at the first '/' when the
    target does not parse as an absolute URL.
    """
    try:
        hostname = urlsplit(target).hostname
    except ValueError:
        hostname = None
    if hostname:
        return hostname
    stripped = _SCHEME_PREFIX.sub('', target.strip(), count=1)
    return stripped.split('/', 1)[0]

def is_private_host(hostname: str) -> bool:
    return any(pattern.match(hostname) for pattern in PRIVATE_HOST_PATTERNS)

def build_websocket_url(target: str, hostname: str) -> str:
    scheme = 'wss' if target.strip().lower().startswith('https') else 'ws'
    return f"{scheme}://{hostname}"

def build_fallback_url(target: str) -> str:
    target = target.strip()
    if _SCHEME_PREFIX.match(target):
        return target
    return f"http://{target}"


class ConnectivityProber:
    """Reachability and latency monitor for a single pane target"""

    def __init__(self, target: str, config: Optional[dict] = None):
        config = config or {}
        self.interval = config.get('interval_ms', 2000) / 1000.0
        self.handshake_timeout = config.get('handshake_timeout_ms', 2000) / 1000.0
        self.fallback_timeout = config.get('fallback_timeout_ms', 5000) / 1000.0

        self.state = ProbeState(target=target)

        self._schedule_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        # Bumped on stop/retarget; results from older generations are dropped
        self._generation = 0

    @property
    def target(self) -> str:
        return self.state.target

    @property
    def status(self) -> ConnectionStatus:
        return self.state.status

    @property
    def latency_ms(self) -> Optional[int]:
        return self.state.latency_ms

    @property
    def active(self) -> bool:
        return self.state.active

    async def probe_once(self) -> ProbeResult:
        """Run one reachability check against the current target"""
        generation = self._generation
        target = self.state.target
        start = time.monotonic()
        self.state.status = ConnectionStatus.CHECKING

        hostname = extract_hostname(target)
        method = None
        latency_ms = None

        async with create_connectivity_session() as session:
            ws = await self._open_websocket(session, build_websocket_url(target, hostname))
            if ws is not None:
                latency_ms = round((time.monotonic() - start) * 1000)
                method = "websocket"
                await self._close_websocket(ws)
            elif is_private_host(hostname):
                logger.debug(f"Handshake failed for private host {hostname}, skipping HTTP fallback")
            elif await self._fallback_fetch(session, build_fallback_url(target)):
                latency_ms = round((time.monotonic() - start) * 1000)
                method = "http"

        if method:
            result = ProbeResult(target, ConnectionStatus.CONNECTED, latency_ms, method)
        else:
            result = ProbeResult(target, ConnectionStatus.DISCONNECTED)

        if generation == self._generation:
            self.state.status = result.status
            self.state.latency_ms = result.latency_ms
            self.state.last_checked = time.time()
            logger.debug(f"Probe {target}: {result.status.value}"
                         + (f" via {method} in {latency_ms}ms" if method else ""))
        else:
            logger.debug(f"Discarding stale probe result for {target}")

        return result

    async def _open_websocket(self, session: aiohttp.ClientSession,
                              ws_url: str) -> Optional[aiohttp.ClientWebSocketResponse]:
        """WebSocket handshake raced against the handshake timeout"""
        try:
            return await asyncio.wait_for(session.ws_connect(ws_url, autoping=False),
                                          timeout=self.handshake_timeout)
        except PROBE_ERRORS as e:
            logger.debug(f"WebSocket handshake to {ws_url} failed: {e!r}")
            return None

    async def _close_websocket(self, ws: aiohttp.ClientWebSocketResponse):
        try:
            await asyncio.wait_for(ws.close(), timeout=self.handshake_timeout)
        except PROBE_ERRORS as e:
            logger.debug(f"Closing probe websocket failed: {e!r}")

    async def _fallback_fetch(self, session: aiohttp.ClientSession, url: str) -> bool:
        """Any settled HTTP response counts as reachable"""
        try:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.fallback_timeout)):
                return True
        except PROBE_ERRORS as e:
            logger.debug(f"HTTP fallback to {url} failed: {e!r}")
            return False

    # ================== PERIODIC PROBING ==================

    def start_periodic(self):
        """Probe immediately, then every interval until stopped"""
        if self._schedule_task is not None:
            return
        self.state.active = True
        self._spawn_probe()
        self._schedule_task = asyncio.create_task(self._schedule_loop())
        logger.debug(f"Periodic probing started for {self.state.target} every {self.interval}s")

    async def _schedule_loop(self):
        while True:
            await asyncio.sleep(self.interval)
            self._spawn_probe()

    def _spawn_probe(self):
        task = asyncio.create_task(self.probe_once())
        self._inflight.add(task)
        task.add_done_callback(self._probe_finished)

    def _probe_finished(self, task: asyncio.Task):
        self._inflight.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Connectivity probe for {self.state.target} crashed: {task.exception()!r}")

    def stop(self):
        """Cancel the pending schedule and reset state; in-flight probes are left to finish"""
        if self._schedule_task is not None:
            self._schedule_task.cancel()
            self._schedule_task = None
            logger.debug(f"Periodic probing stopped for {self.state.target}")
        self._generation += 1
        self.state.active = False
        self.state.reset()

    def toggle(self) -> bool:
        """Flip periodic probing; returns the new active flag"""
        if self.state.active:
            self.stop()
        else:
            self.start_periodic()
        return self.state.active

    def set_target(self, target: str):
        """Switch target, restarting the schedule if it was running"""
        was_active = self.state.active
        if was_active:
            self.stop()
        self._generation += 1
        self.state.target = target
        self.state.reset()
        if was_active:
            self.start_periodic()

    async def close(self):
        """Tear down: stop scheduling and cancel probes still in flight"""
        self.stop()
        pending = list(self._inflight)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._inflight.clear()
