"""
System health and monitoring API routes
"""

from fastapi import APIRouter
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

def create_system_routes(config, scanner=None, workspace=None, bookmarks=None):
    """Create system monitoring routes"""
    router = APIRouter(prefix="/api/system", tags=["system"])

    @router.get("/health")
    async def system_health():
        """System health check"""
        try:
            scan_health = None
            if scanner:
                status = scanner.get_status()
                scan_health = {
                    "is_scanning": status['is_scanning'],
                    "progress_percent": status['progress_percent'],
                    "endpoints_found": len(status['results']),
                    "last_error": status['error']
                }

            panes_health = None
            if workspace:
                panes_health = {
                    "layout": workspace.layout,
                    "monitored": [
                        {"pane_id": pane.pane_id, **workspace.get_prober(pane.pane_id).state.to_dict()}
                        for pane in workspace.list_panes()
                    ]
                }

            return {
                "status": "healthy",
                "discovery": scan_health,
                "panes": panes_health,
                "bookmarks": len(bookmarks.list()) if bookmarks else None,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

    @router.get("/config")
    async def get_discovery_config():
        """Effective probe settings"""
        return {
            "discovery": config.get('discovery', {}),
            "connectivity": config.get('connectivity', {})
        }

    return router
