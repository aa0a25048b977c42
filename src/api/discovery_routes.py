"""
Subnet discovery API routes
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from discovery.models import ScanUpdate

logger = logging.getLogger(__name__)

# Response models
class EndpointResponse(BaseModel):
    host: str
    port: int
    label: str
    url: str
    discovered_at: float

class ScanStatusResponse(BaseModel):
    session_id: int
    subnet: Optional[str]
    results: List[EndpointResponse]
    is_scanning: bool
    progress_percent: int
    completed: int
    total_probes: int
    error: Optional[str]
    started_at: float
    finished_at: Optional[float]

# Request models
class SelectEndpointRequest(BaseModel):
    host: str
    port: int
    pane_id: Optional[str] = None

def create_discovery_routes(scanner, workspace=None):
    """Create subnet discovery routes"""
    router = APIRouter(prefix="/api/discovery", tags=["discovery"])

    @router.get("/status", response_model=ScanStatusResponse)
    async def get_scan_status():
        """Current scan session: results in discovery order plus progress"""
        return scanner.get_status()

    @router.post("/scan", response_model=ScanStatusResponse)
    async def start_scan():
        """Start a new scan, discarding any previous results"""
        try:
            scanner.launch_scan()
            # Let the new session register before reporting it
            await asyncio.sleep(0)
            return scanner.get_status()
        except Exception as e:
            logger.error(f"Error starting scan: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/select", response_model=EndpointResponse)
    async def select_endpoint(request: SelectEndpointRequest):
        """Resolve a discovered endpoint to its URL, optionally loading it into a pane"""
        try:
            endpoint = scanner.select_endpoint(request.host, request.port)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))

        if request.pane_id:
            if workspace is None:
                raise HTTPException(status_code=503, detail="Workspace not available")
            try:
                workspace.navigate(request.pane_id, endpoint.url)
            except KeyError as e:
                raise HTTPException(status_code=404, detail=str(e))

        return endpoint.to_dict()

    @router.websocket("/stream")
    async def stream_scan(websocket: WebSocket):
        """Push scan updates in completion order"""
        queue: asyncio.Queue = asyncio.Queue()

        async def enqueue(update: ScanUpdate):
            queue.put_nowait(update)

        # Subscribe before accepting so no update is missed once the client is connected
        scanner.add_listener(enqueue)
        last_percent = None
        try:
            await websocket.accept()
            while True:
                update = await queue.get()
                # Collapse progress ticks to one message per percent
                if update.kind == "progress":
                    if update.progress_percent == last_percent:
                        continue
                    last_percent = update.progress_percent
                elif update.kind == "started":
                    last_percent = None
                await websocket.send_json(update.to_dict())
        except WebSocketDisconnect:
            logger.info("Discovery stream client disconnected")
        finally:
            scanner.remove_listener(enqueue)

    return router
