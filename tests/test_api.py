"""
Tests for the HTTP API routes.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from api.main_api import WindowManagerAPI
from bookmarks.store import BookmarkStore
from config_loader import get_sample_config
from connectivity.models import ConnectionStatus, ProbeResult
from discovery.manager import SubnetScanner
from discovery.models import DiscoveredEndpoint, ScanSession
from discovery.network_discovery import NetworkDiscovery
from workspace.manager import WorkspaceManager


class StaticNetwork(NetworkDiscovery):
    """Three hosts on port 80; only .2 answers"""

    def __init__(self):
        super().__init__({"host_range": [1, 3], "ports": [80]})

    async def resolve_subnet(self) -> str:
        return "198.51.100"

    async def probe_endpoint(self, session, host, port) -> bool:
        return host == "198.51.100.2"


@pytest.fixture
def components(tmp_path):
    config = get_sample_config()
    config['bookmarks']['file'] = str(tmp_path / "bookmarks.json")
    scanner = SubnetScanner(config['discovery'], network=StaticNetwork())
    workspace = WorkspaceManager(config['workspace'], config['connectivity'])
    bookmarks = BookmarkStore(config['bookmarks'])
    for prober in workspace.probers.values():
        prober.probe_once = AsyncMock(
            return_value=ProbeResult("http://example.com", ConnectionStatus.CONNECTED, 12, "websocket"))
    return config, scanner, workspace, bookmarks


@pytest.fixture
def client(components):
    api = WindowManagerAPI(*components)
    with TestClient(api.app) as client:
        yield client


# =============================================================================
# DISCOVERY
# =============================================================================

class TestDiscoveryRoutes:
    def test_status_before_scan(self, client):
        response = client.get("/api/discovery/status")
        assert response.status_code == 200
        body = response.json()
        assert body['results'] == []
        assert body['is_scanning'] is False
        assert body['progress_percent'] == 0

    def test_stream_reports_scan_in_order(self, client):
        with client.websocket_connect("/api/discovery/stream") as ws:
            assert client.post("/api/discovery/scan").status_code == 200
            events = []
            while True:
                event = ws.receive_json()
                events.append(event)
                if event['kind'] == 'complete':
                    break

        kinds = [e['kind'] for e in events]
        assert kinds[0] == 'started'
        endpoints = [e['endpoint'] for e in events if e['kind'] == 'endpoint']
        assert [(e['host'], e['port']) for e in endpoints] == [("198.51.100.2", 80)]
        assert events[-1]['progress_percent'] == 100
        assert events[-1]['completed'] == 3

        body = client.get("/api/discovery/status").json()
        assert body['progress_percent'] == 100
        assert body['subnet'] == "198.51.100"
        assert body['results'][0]['label'] == "Device at 198.51.100.2:80"

    def test_select_endpoint_navigates_pane(self, client, components):
        _, scanner, workspace, _ = components
        scanner.session = ScanSession(session_id=1,
                                      results=[DiscoveredEndpoint(host="192.168.1.50", port=3000)])

        response = client.post("/api/discovery/select",
                               json={"host": "192.168.1.50", "port": 3000, "pane_id": "window2"})

        assert response.status_code == 200
        assert response.json()['label'] == "http://192.168.1.50:3000"
        assert workspace.get_pane("window2").url == "http://192.168.1.50:3000"

    def test_select_unknown_endpoint(self, client):
        response = client.post("/api/discovery/select", json={"host": "10.0.0.1", "port": 80})
        assert response.status_code == 404


# =============================================================================
# PANES
# =============================================================================

class TestPaneRoutes:
    def test_list_and_change_layout(self, client):
        assert len(client.get("/api/panes").json()['panes']) == 4

        response = client.put("/api/panes/layout", json={"layout": "2"})
        assert response.status_code == 200
        assert [p['pane_id'] for p in response.json()['panes']] == ["window1", "window2"]

        assert client.put("/api/panes/layout", json={"layout": "5"}).status_code == 400

    def test_navigate_and_color(self, client):
        response = client.put("/api/panes/window1/url", json={"url": "http://example.com"})
        assert response.json()['url'] == "http://example.com"

        response = client.put("/api/panes/window1/color", json={"color": "green"})
        assert response.json()['color_hex'] == "#44ff44"

        assert client.put("/api/panes/window1/color", json={"color": "teal"}).status_code == 400
        assert client.put("/api/panes/window7/url", json={"url": "http://x"}).status_code == 404

    def test_toggle_requires_target(self, client):
        assert client.post("/api/panes/window1/connectivity/toggle").status_code == 400

    def test_toggle_and_retarget(self, client):
        client.put("/api/panes/window1/connectivity/target", json={"target": "http://example.com"})

        body = client.post("/api/panes/window1/connectivity/toggle").json()
        assert body['active'] is True

        body = client.put("/api/panes/window1/connectivity/target",
                          json={"target": "http://other.example.com"}).json()
        assert body['active'] is True
        assert body['target'] == "http://other.example.com"

        body = client.post("/api/panes/window1/connectivity/toggle").json()
        assert body['active'] is False
        assert body['status'] == "disconnected"
        assert body['latency_ms'] is None

    def test_single_probe(self, client):
        client.put("/api/panes/window2/url", json={"url": "http://example.com"})
        body = client.post("/api/panes/window2/connectivity/probe").json()
        assert body['status'] == "connected"
        assert body['latency_ms'] == 12


# =============================================================================
# BOOKMARKS & SYSTEM
# =============================================================================

class TestBookmarkRoutes:
    def test_add_list_load_delete(self, client, components):
        _, _, workspace, _ = components
        response = client.post("/api/bookmarks", json={
            "url": "http://nas.local:5000", "target_window": "window3", "window_color": "blue"})
        assert response.status_code == 201
        assert response.json()['title'] == "http://nas.local:5000"

        listed = client.get("/api/bookmarks").json()
        assert [b['index'] for b in listed] == [0]

        assert client.post("/api/bookmarks/0/load").json()['pane_id'] == "window3"
        assert workspace.get_pane("window3").url == "http://nas.local:5000"

        response = client.post("/api/bookmarks/0/load", json={"pane_id": "window1"})
        assert response.json()['pane_id'] == "window1"

        assert client.delete("/api/bookmarks/0").status_code == 200
        assert client.delete("/api/bookmarks/0").status_code == 404
        assert client.get("/api/bookmarks").json() == []

    def test_add_rejects_unknown_color_and_window(self, client):
        response = client.post("/api/bookmarks", json={
            "url": "http://a.example.com", "target_window": "window1", "window_color": "teal"})
        assert response.status_code == 400

        response = client.post("/api/bookmarks", json={
            "url": "http://a.example.com", "target_window": "window9"})
        assert response.status_code == 400

        assert client.get("/api/bookmarks").json() == []

    def test_failed_write_returns_500_and_keeps_list(self, client):
        client.post("/api/bookmarks", json={"url": "http://a.example.com", "target_window": "window1"})

        with patch("bookmarks.store.open", side_effect=OSError("disk full"), create=True):
            response = client.post("/api/bookmarks", json={
                "url": "http://b.example.com", "target_window": "window1"})
        assert response.status_code == 500

        assert [b['url'] for b in client.get("/api/bookmarks").json()] == ["http://a.example.com"]


class TestSystemRoutes:
    def test_health(self, client):
        body = client.get("/api/system/health").json()
        assert body['status'] == "healthy"
        assert body['panes']['layout'] == "4"
        assert body['discovery']['is_scanning'] is False
        assert body['bookmarks'] == 0
