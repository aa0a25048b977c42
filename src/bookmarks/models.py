"""
Bookmark record
"""

from typing import Dict, Any
from dataclasses import dataclass, asdict

@dataclass
class Bookmark:
    url: str
    title: str
    target_window: str
    window_color: str = "default"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bookmark":
        # Accept both the stored snake_case form and the browser camelCase form
        return cls(
            url=data['url'],
            title=data.get('title') or data['url'],
            target_window=data.get('target_window', data.get('targetWindow', 'window1')),
            window_color=data.get('window_color', data.get('windowColor', 'default'))
        )
