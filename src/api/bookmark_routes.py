"""
Bookmark API routes
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import List, Optional
import logging

from workspace.models import COLORS, LAYOUT_CONFIGS

logger = logging.getLogger(__name__)

# Every pane id any layout can show
PANE_IDS = sorted({pane_id for panes in LAYOUT_CONFIGS.values() for pane_id in panes})

class BookmarkRequest(BaseModel):
    url: str
    target_window: str
    title: Optional[str] = None
    window_color: str = "default"

class BookmarkResponse(BaseModel):
    index: int
    url: str
    title: str
    target_window: str
    window_color: str

class LoadBookmarkRequest(BaseModel):
    pane_id: Optional[str] = None  # defaults to the bookmark's own window


def create_bookmark_routes(store, workspace=None):
    """Create bookmark routes"""
    router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])

    @router.get("", response_model=List[BookmarkResponse])
    async def list_bookmarks():
        return [{"index": i, **b.to_dict()} for i, b in enumerate(store.list())]

    @router.post("", response_model=BookmarkResponse, status_code=201)
    async def add_bookmark(request: BookmarkRequest):
        if request.window_color not in COLORS:
            raise HTTPException(status_code=400,
                                detail=f"Invalid color '{request.window_color}'. Must be one of: {list(COLORS)}")
        if request.target_window not in PANE_IDS:
            raise HTTPException(status_code=400,
                                detail=f"Invalid window '{request.target_window}'. Must be one of: {PANE_IDS}")
        try:
            bookmark = store.add(url=request.url, target_window=request.target_window,
                                 title=request.title, window_color=request.window_color)
        except OSError as e:
            logger.error(f"Failed to persist bookmark: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return {"index": len(store.list()) - 1, **bookmark.to_dict()}

    @router.delete("/{index}", response_model=BookmarkResponse)
    async def delete_bookmark(index: int):
        try:
            bookmark = store.delete(index)
        except IndexError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except OSError as e:
            logger.error(f"Failed to persist bookmark deletion: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return {"index": index, **bookmark.to_dict()}

    @router.post("/{index}/load")
    async def load_bookmark(index: int, request: Optional[LoadBookmarkRequest] = None):
        """Open a bookmark in its window, or in an explicitly chosen pane"""
        if workspace is None:
            raise HTTPException(status_code=503, detail="Workspace not available")
        try:
            bookmark = store.get(index)
        except IndexError as e:
            raise HTTPException(status_code=404, detail=str(e))

        pane_id = (request.pane_id if request and request.pane_id else bookmark.target_window)
        try:
            pane = workspace.navigate(pane_id, bookmark.url)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return pane.to_dict()

    return router
