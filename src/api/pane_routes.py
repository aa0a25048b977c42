"""
Pane layout, navigation and connectivity API routes
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

# Request models
class LayoutRequest(BaseModel):
    layout: str  # "1", "2" or "4"

class UrlRequest(BaseModel):
    url: str

class ColorRequest(BaseModel):
    color: str

class TargetRequest(BaseModel):
    target: str

# Response models
class PaneResponse(BaseModel):
    pane_id: str
    url: str
    color: str
    color_hex: str

class LayoutResponse(BaseModel):
    layout: str
    panes: List[PaneResponse]

class ConnectivityResponse(BaseModel):
    pane_id: str
    target: str
    status: str
    latency_ms: Optional[int] = None
    active: bool
    last_checked: Optional[float] = None


def create_pane_routes(workspace):
    """Create pane routes"""
    router = APIRouter(prefix="/api/panes", tags=["panes"])

    def _prober(pane_id: str):
        try:
            return workspace.get_prober(pane_id)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))

    def _connectivity(pane_id: str, prober) -> dict:
        return {"pane_id": pane_id, **prober.state.to_dict()}

    @router.get("", response_model=LayoutResponse)
    async def list_panes():
        return {
            "layout": workspace.layout,
            "panes": [p.to_dict() for p in workspace.list_panes()]
        }

    @router.put("/layout", response_model=LayoutResponse)
    async def set_layout(request: LayoutRequest):
        try:
            panes = await workspace.set_layout(request.layout)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"layout": workspace.layout, "panes": [p.to_dict() for p in panes]}

    @router.put("/{pane_id}/url", response_model=PaneResponse)
    async def navigate(pane_id: str, request: UrlRequest):
        try:
            return workspace.navigate(pane_id, request.url).to_dict()
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @router.put("/{pane_id}/color", response_model=PaneResponse)
    async def set_color(pane_id: str, request: ColorRequest):
        try:
            return workspace.set_color(pane_id, request.color).to_dict()
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    # === CONNECTIVITY ===

    @router.get("/{pane_id}/connectivity", response_model=ConnectivityResponse)
    async def get_connectivity(pane_id: str):
        return _connectivity(pane_id, _prober(pane_id))

    @router.post("/{pane_id}/connectivity/toggle", response_model=ConnectivityResponse)
    async def toggle_connectivity(pane_id: str):
        prober = _prober(pane_id)
        if not prober.target and not prober.active:
            raise HTTPException(status_code=400, detail="Pane has no target to monitor")
        prober.toggle()
        return _connectivity(pane_id, prober)

    @router.put("/{pane_id}/connectivity/target", response_model=ConnectivityResponse)
    async def set_connectivity_target(pane_id: str, request: TargetRequest):
        prober = _prober(pane_id)
        prober.set_target(request.target)
        return _connectivity(pane_id, prober)

    @router.post("/{pane_id}/connectivity/probe", response_model=ConnectivityResponse)
    async def probe_connectivity(pane_id: str):
        """Run a single probe and wait for its result"""
        prober = _prober(pane_id)
        if not prober.target:
            raise HTTPException(status_code=400, detail="Pane has no target to probe")
        try:
            result = await prober.probe_once()
        except Exception as e:
            logger.error(f"Probe failed for pane {pane_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        response = _connectivity(pane_id, prober)
        # A concurrent retarget may have fenced the state; report what was measured
        response.update(target=result.target, status=result.status.value,
                        latency_ms=result.latency_ms)
        return response

    return router
