"""
Tests for the network discovery primitives.

Probes and IP lookups run against real sockets on 127.0.0.1 using
aiohttp's TestServer.
"""

import socket

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from discovery.network_discovery import NetworkDiscovery, SubnetResolutionError
from http_helper import create_probe_session


def _unused_port() -> int:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


def _app(handler) -> web.Application:
    app = web.Application()
    app.router.add_get("/", handler)
    return app


@pytest.fixture
def discovery():
    return NetworkDiscovery({})


# =============================================================================
# CANDIDATES
# =============================================================================

class TestCandidates:
    def test_subnet_from_ip(self):
        assert NetworkDiscovery.subnet_from_ip("203.0.113.77") == "203.0.113"

    @pytest.mark.parametrize("bad", ["", "not-an-ip", "10.0.0", "2001:db8::1", "300.1.1.1"])
    def test_subnet_from_invalid_ip(self, bad):
        with pytest.raises(SubnetResolutionError):
            NetworkDiscovery.subnet_from_ip(bad)

    def test_default_candidate_space(self, discovery):
        pairs = discovery.candidate_pairs("203.0.113")
        assert len(pairs) == 1778
        assert len(set(pairs)) == 1778
        assert pairs[0] == ("203.0.113.1", 80)
        assert pairs[-1] == ("203.0.113.254", 8888)
        assert {port for _, port in pairs} == {80, 443, 8080, 3000, 5000, 8000, 8888}

    def test_configured_range_and_ports(self):
        discovery = NetworkDiscovery({"host_range": [10, 12], "ports": [22, 80]})
        assert discovery.candidate_pairs("10.0.0") == [
            ("10.0.0.10", 22), ("10.0.0.10", 80),
            ("10.0.0.11", 22), ("10.0.0.11", 80),
            ("10.0.0.12", 22), ("10.0.0.12", 80),
        ]


# =============================================================================
# PRESENCE PROBE
# =============================================================================

class TestProbeEndpoint:
    @pytest.mark.asyncio
    async def test_any_response_counts_as_alive(self, discovery):
        async def handler(request):
            return web.Response(status=403, text="forbidden")

        async with TestServer(_app(handler), host="127.0.0.1") as server:
            async with create_probe_session() as session:
                assert await discovery.probe_endpoint(session, "127.0.0.1", server.port) is True

    @pytest.mark.asyncio
    async def test_refused_connection_is_not_alive(self, discovery):
        async with create_probe_session() as session:
            assert await discovery.probe_endpoint(session, "127.0.0.1", _unused_port()) is False

    @pytest.mark.asyncio
    async def test_slow_response_times_out(self):
        import asyncio

        discovery = NetworkDiscovery({"probe_timeout_ms": 100})

        async def handler(request):
            await asyncio.sleep(1.0)
            return web.Response(text="late")

        async with TestServer(_app(handler), host="127.0.0.1") as server:
            async with create_probe_session() as session:
                assert await discovery.probe_endpoint(session, "127.0.0.1", server.port) is False


# =============================================================================
# PUBLIC IP LOOKUP
# =============================================================================

class TestResolveSubnet:
    @pytest.mark.asyncio
    async def test_resolves_first_three_octets(self):
        async def handler(request):
            return web.json_response({"ip": "198.51.100.23"})

        async with TestServer(_app(handler), host="127.0.0.1") as server:
            discovery = NetworkDiscovery({"ip_lookup_url": f"http://127.0.0.1:{server.port}/"})
            assert await discovery.resolve_subnet() == "198.51.100"

    @pytest.mark.asyncio
    async def test_plain_text_content_type_is_accepted(self):
        async def handler(request):
            return web.Response(text='{"ip": "192.0.2.5"}', content_type="text/plain")

        async with TestServer(_app(handler), host="127.0.0.1") as server:
            discovery = NetworkDiscovery({"ip_lookup_url": f"http://127.0.0.1:{server.port}/"})
            assert await discovery.resolve_public_ip() == "192.0.2.5"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        web.json_response({"ip": "1.2.3.4"}, status=500),
        web.Response(text="<html>oops</html>"),
        web.json_response({"address": "1.2.3.4"}),
        web.json_response(["1.2.3.4"]),
        web.json_response({"ip": "2001:db8::1"}),
    ])
    async def test_bad_responses_are_fatal(self, response):
        async def handler(request):
            return response

        async with TestServer(_app(handler), host="127.0.0.1") as server:
            discovery = NetworkDiscovery({"ip_lookup_url": f"http://127.0.0.1:{server.port}/"})
            with pytest.raises(SubnetResolutionError):
                await discovery.resolve_subnet()

    @pytest.mark.asyncio
    async def test_network_error_is_fatal(self):
        discovery = NetworkDiscovery({"ip_lookup_url": f"http://127.0.0.1:{_unused_port()}/"})
        with pytest.raises(SubnetResolutionError):
            await discovery.resolve_subnet()
