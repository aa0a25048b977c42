# HTTP Helper for reachability probes
# Session configuration for subnet scanning, public IP lookup and pane connectivity checks

import aiohttp
import logging

logger = logging.getLogger(__name__)

def create_probe_session(max_connections: int = 0) -> aiohttp.ClientSession:
    """
    Create aiohttp session for raw host:port presence probes (always HTTP)
    Timeouts are applied per request so each probe owns its own deadline
    """
    connector = aiohttp.TCPConnector(
        limit=max_connections,      # 0 = no pool-level queueing, admission is done by the caller
        ssl=False,                  # Presence only, certificates are irrelevant
        force_close=True,           # One-shot connections, never reused
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=None)
    )

def create_lookup_session(timeout_seconds: float = 5) -> aiohttp.ClientSession:
    """
    Create aiohttp session for the public IP lookup service (HTTPS, verified)
    """
    connector = aiohttp.TCPConnector(
        limit=2,
        force_close=True,
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    )

def create_connectivity_session() -> aiohttp.ClientSession:
    """
    Create aiohttp session for a single pane connectivity probe
    Handshake and fallback deadlines are enforced by the prober
    """
    connector = aiohttp.TCPConnector(
        limit_per_host=2,
        ssl=False,                  # Reachability, not trust: accept self-signed pane targets
        force_close=True,
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=None)
    )
