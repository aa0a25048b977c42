"""
ASGI entry point for uvicorn
This module exposes the FastAPI app for use with uvicorn command line
"""

import logging
import os

from config_loader import load_config, setup_logging
from discovery.manager import SubnetScanner
from workspace.manager import WorkspaceManager
from bookmarks.store import BookmarkStore
from api.main_api import WindowManagerAPI

# Load configuration
config = load_config(os.environ.get('CONFIG_FILE', 'config/config.yaml'))
setup_logging(config)

logger = logging.getLogger(__name__)

logger.info("Initializing application components...")

scanner = SubnetScanner(config['discovery'])
workspace = WorkspaceManager(config['workspace'], config['connectivity'])
bookmarks = BookmarkStore(config['bookmarks'])

api = WindowManagerAPI(config, scanner, workspace, bookmarks)

# Expose the FastAPI app for uvicorn
app = api.app

@app.on_event("shutdown")
async def shutdown_event():
    """Cancel running scans and pane probers on shutdown"""
    logger.info("Shutting down application...")
    await scanner.close()
    await workspace.close()
    logger.info("Application shut down complete")

logger.info("ASGI app ready for uvicorn")
