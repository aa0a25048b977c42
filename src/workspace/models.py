"""
Pane layout and color definitions
"""

from typing import Dict, List, Any
from dataclasses import dataclass

LAYOUT_CONFIGS: Dict[str, List[str]] = {
    '1': ['window1'],
    '2': ['window1', 'window2'],
    '4': ['window1', 'window2', 'window3', 'window4'],
}

COLORS: Dict[str, str] = {
    'default': '#404040',
    'red': '#ff4444',
    'blue': '#4444ff',
    'yellow': '#ffff44',
    'green': '#44ff44',
    'cyan': '#44ffff',
    'magenta': '#ff44ff',
    'pink': '#ff99cc',
    'grey': '#888888',
    'black': '#000000',
}

@dataclass
class Pane:
    """One iframe-hosted web view in the grid"""
    pane_id: str
    url: str = ""
    color: str = "default"

    @property
    def color_hex(self) -> str:
        return COLORS[self.color]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pane_id": self.pane_id,
            "url": self.url,
            "color": self.color,
            "color_hex": self.color_hex
        }
