"""
Workspace manager: pane layout, per-pane color and URL, and the connectivity prober each pane owns
"""

import logging
from typing import Dict, List, Optional

from connectivity.prober import ConnectivityProber
from .models import LAYOUT_CONFIGS, COLORS, Pane

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """Owns the panes of the current layout and tears them down when they disappear"""

    def __init__(self, config: Dict, connectivity_config: Optional[Dict] = None):
        self.config = config
        self.connectivity_config = connectivity_config or {}
        self.layout: str = str(config.get('default_layout', '4'))
        if self.layout not in LAYOUT_CONFIGS:
            raise ValueError(f"Unknown layout: {self.layout}")

        self.panes: Dict[str, Pane] = {}
        self.probers: Dict[str, ConnectivityProber] = {}
        for pane_id in LAYOUT_CONFIGS[self.layout]:
            self._create_pane(pane_id)

    def _create_pane(self, pane_id: str):
        self.panes[pane_id] = Pane(pane_id=pane_id)
        self.probers[pane_id] = ConnectivityProber("", self.connectivity_config)
        logger.debug(f"Pane {pane_id} created")

    async def _destroy_pane(self, pane_id: str):
        prober = self.probers.pop(pane_id, None)
        if prober:
            await prober.close()
        self.panes.pop(pane_id, None)
        logger.debug(f"Pane {pane_id} destroyed")

    def list_panes(self) -> List[Pane]:
        return [self.panes[pane_id] for pane_id in LAYOUT_CONFIGS[self.layout]]

    def get_pane(self, pane_id: str) -> Pane:
        if pane_id not in self.panes:
            raise KeyError(f"Unknown pane: {pane_id}")
        return self.panes[pane_id]

    def get_prober(self, pane_id: str) -> ConnectivityProber:
        if pane_id not in self.probers:
            raise KeyError(f"Unknown pane: {pane_id}")
        return self.probers[pane_id]

    async def set_layout(self, layout: str) -> List[Pane]:
        layout = str(layout)
        if layout not in LAYOUT_CONFIGS:
            raise ValueError(f"Invalid layout '{layout}'. Must be one of: {list(LAYOUT_CONFIGS)}")

        wanted = LAYOUT_CONFIGS[layout]
        for pane_id in [p for p in self.panes if p not in wanted]:
            await self._destroy_pane(pane_id)
        for pane_id in wanted:
            if pane_id not in self.panes:
                self._create_pane(pane_id)

        if layout != self.layout:
            logger.info(f"Layout changed: {self.layout} -> {layout}")
        self.layout = layout
        return self.list_panes()

    def navigate(self, pane_id: str, url: str) -> Pane:
        """Point a pane at a URL; its prober follows the new target"""
        pane = self.get_pane(pane_id)
        pane.url = url
        self.probers[pane_id].set_target(url)
        logger.info(f"Pane {pane_id} navigated to {url}")
        return pane

    def set_color(self, pane_id: str, color: str) -> Pane:
        pane = self.get_pane(pane_id)
        if color not in COLORS:
            raise ValueError(f"Invalid color '{color}'. Must be one of: {list(COLORS)}")
        pane.color = color
        return pane

    async def close(self):
        for pane_id in list(self.panes):
            await self._destroy_pane(pane_id)
