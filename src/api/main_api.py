"""
Main FastAPI application setup
Local HTTP API for the multi-pane window manager: discovery, pane connectivity and bookmarks
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Dict
import logging

from .bookmark_routes import create_bookmark_routes
from .discovery_routes import create_discovery_routes
from .pane_routes import create_pane_routes
from .system_routes import create_system_routes

logger = logging.getLogger(__name__)


class WindowManagerAPI:
    """Local HTTP API backing the pane grid UI"""

    def __init__(self, config: Dict, scanner, workspace, bookmarks):
        self.config = config
        self.scanner = scanner
        self.workspace = workspace
        self.bookmarks = bookmarks
        self.app = FastAPI(
            title="Window Manager Local Server",
            description="Subnet discovery, pane connectivity monitoring and bookmarks",
            version="1.0.0"
        )
        self._setup_middleware()
        self._setup_routes()

    def _setup_middleware(self):
        origins = self.config.get('api', {}).get('cors_origins', ['*'])
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _setup_routes(self):
        """Setup FastAPI routes using modular approach"""
        self.app.include_router(create_system_routes(self.config, self.scanner,
                                                     self.workspace, self.bookmarks))
        self.app.include_router(create_discovery_routes(self.scanner, self.workspace))
        self.app.include_router(create_pane_routes(self.workspace))
        self.app.include_router(create_bookmark_routes(self.bookmarks, self.workspace))
