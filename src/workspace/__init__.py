"""
Workspace module for grid panes
"""

from .manager import WorkspaceManager
from .models import Pane, LAYOUT_CONFIGS, COLORS

__all__ = ['WorkspaceManager', 'Pane', 'LAYOUT_CONFIGS', 'COLORS']
