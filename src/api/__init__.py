"""
API module for discovery, panes and bookmarks
"""

from .main_api import WindowManagerAPI
from .discovery_routes import create_discovery_routes
from .pane_routes import create_pane_routes
from .bookmark_routes import create_bookmark_routes
from .system_routes import create_system_routes

__all__ = ['WindowManagerAPI', 'create_discovery_routes', 'create_pane_routes',
           'create_bookmark_routes', 'create_system_routes']
