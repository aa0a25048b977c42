"""
Window Manager Server - Main orchestrator for all services
"""

import asyncio
import logging
from typing import Optional

import uvicorn

from config_loader import load_config, setup_logging
from discovery.manager import SubnetScanner
from workspace.manager import WorkspaceManager
from bookmarks.store import BookmarkStore
from api.main_api import WindowManagerAPI

logger = logging.getLogger(__name__)

class WindowManagerServer:
    """Owns the scanner, panes and bookmark store, and serves them over HTTP"""

    def __init__(self, config_path: str = "config/config.yaml", config: Optional[dict] = None):
        self.config = config if config is not None else load_config(config_path)
        setup_logging(self.config)

        self.scanner = SubnetScanner(self.config['discovery'])
        self.workspace = WorkspaceManager(self.config['workspace'], self.config['connectivity'])
        self.bookmarks = BookmarkStore(self.config['bookmarks'])
        self.api = WindowManagerAPI(self.config, self.scanner, self.workspace, self.bookmarks)

        self.running = False
        self._server: Optional[uvicorn.Server] = None

    async def start(self):
        """Start the API server; returns when it shuts down"""
        logger.info("Starting window manager server...")
        try:
            self.running = True
            await self._start_api_server()
        except Exception as e:
            logger.error(f"Server startup failed: {e}")
            raise
        finally:
            await self.stop()

    async def stop(self):
        """Stop all services gracefully"""
        if not self.running:
            return
        logger.info("Stopping server...")
        self.running = False

        if self._server is not None:
            self._server.should_exit = True

        # Cancels a running scan and every pane's periodic probing
        await self.scanner.close()
        await self.workspace.close()

        logger.info("Server stopped")

    async def _start_api_server(self):
        """Start the FastAPI server"""
        config = uvicorn.Config(
            self.api.app,
            host=self.config['api']['host'],
            port=self.config['api']['port'],
            log_level="info",
            access_log=False  # We handle our own logging
        )

        self._server = uvicorn.Server(config)

        logger.info(f"Starting API server on {self.config['api']['host']}:{self.config['api']['port']}")
        logger.info(f"API documentation: http://localhost:{self.config['api']['port']}/docs")
        logger.info(f"Layout {self.workspace.layout} with {len(self.workspace.list_panes())} panes, "
                    f"{len(self.bookmarks.list())} bookmarks loaded")

        await self._server.serve()

    def request_shutdown(self):
        """Ask the API server to exit; start() then tears down the rest"""
        if self._server is not None:
            self._server.should_exit = True
        else:
            asyncio.create_task(self.stop())
