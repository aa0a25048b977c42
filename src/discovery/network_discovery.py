"""
Network discovery primitives: public IP lookup, candidate generation and presence probes
"""

import asyncio
import aiohttp
import ipaddress
import logging
from typing import List, Tuple, Dict

from http_helper import create_lookup_session

logger = logging.getLogger(__name__)


class SubnetResolutionError(Exception):
    """The caller's subnet could not be determined; fatal to a scan session"""


class NetworkDiscovery:
    """Brute-force HTTP presence probing over a guessed /24 subnet"""

    def __init__(self, config: dict):
        self.config = config
        self.ip_lookup_url = config.get('ip_lookup_url', 'https://api.ipify.org?format=json')
        self.ip_lookup_timeout = config.get('ip_lookup_timeout_seconds', 5)
        self.ports: List[int] = list(config.get('ports', [80, 443, 8080, 3000, 5000, 8000, 8888]))
        self.host_range: List[int] = list(config.get('host_range', [1, 254]))
        self.probe_timeout = config.get('probe_timeout_ms', 1000) / 1000.0

    async def resolve_public_ip(self) -> str:
        """Ask the IP echo service for the caller's address"""
        try:
            async with create_lookup_session(self.ip_lookup_timeout) as session:
                async with session.get(self.ip_lookup_url) as response:
                    if response.status < 200 or response.status >= 300:
                        raise SubnetResolutionError(
                            f"IP lookup failed with HTTP {response.status}")
                    data = await response.json(content_type=None)
        except SubnetResolutionError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise SubnetResolutionError(f"IP lookup request failed: {e}") from e
        except ValueError as e:
            raise SubnetResolutionError(f"IP lookup returned invalid JSON: {e}") from e

        ip = data.get('ip') if isinstance(data, dict) else None
        if not isinstance(ip, str) or not ip:
            raise SubnetResolutionError("IP lookup response has no 'ip' field")
        return ip

    async def resolve_subnet(self) -> str:
        ip = await self.resolve_public_ip()
        return self.subnet_from_ip(ip)

    @staticmethod
    def subnet_from_ip(ip: str) -> str:
        """First three octets of a dotted-quad address"""
        try:
            address = ipaddress.IPv4Address(ip.strip())
        except ValueError:
            raise SubnetResolutionError(f"Not a dotted-quad address: {ip!r}")
        return '.'.join(str(address).split('.')[:3])

    def generate_hosts(self, subnet: str) -> List[str]:
        start, end = self.host_range
        return [f"{subnet}.{i}" for i in range(start, end + 1)]

    def candidate_pairs(self, subnet: str) -> List[Tuple[str, int]]:
        """Every (host, port) pair to probe, in enumeration order"""
        return [(host, port) for host in self.generate_hosts(subnet) for port in self.ports]

    async def probe_endpoint(self, session: aiohttp.ClientSession, host: str, port: int) -> bool:
        """
        Presence probe: True if any HTTP response settles before the deadline.
        Status and body are ignored.
        """
        url = f"http://{host}:{port}"
        try:
            async with session.get(url,
                                   allow_redirects=False,
                                   timeout=aiohttp.ClientTimeout(total=self.probe_timeout)):
                return True
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            logger.debug(f"Probe failed for {url}: {e!r}")
            return False

    def get_status(self) -> Dict:
        return {
            "ip_lookup_url": self.ip_lookup_url,
            "ports": self.ports,
            "host_range": self.host_range,
            "probe_timeout_ms": int(self.probe_timeout * 1000)
        }
