"""
Discovery data structures and models
"""

import time
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field, replace

@dataclass(frozen=True)
class DiscoveredEndpoint:
    """A host:port pair that answered a presence probe"""
    host: str
    port: int
    label: str = ""
    discovered_at: float = field(default_factory=time.time, compare=False)

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, 'label', f"Device at {self.host}:{self.port}")

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def as_selected(self) -> "DiscoveredEndpoint":
        """Copy whose label is the canonical URL, handed to pane navigation"""
        return replace(self, label=self.url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "label": self.label,
            "url": self.url,
            "discovered_at": self.discovered_at
        }

@dataclass
class ScanSession:
    """State of one discovery run; replaced on every new scan"""
    session_id: int
    subnet: Optional[str] = None
    total_probes: int = 0
    completed: int = 0
    results: List[DiscoveredEndpoint] = field(default_factory=list)
    error: Optional[str] = None
    is_scanning: bool = False
    started_at: float = field(default_factory=time.time)
    finished_at: Optional[float] = None

    @property
    def progress_percent(self) -> int:
        if self.total_probes <= 0:
            return 0
        return (self.completed * 100) // self.total_probes

    @property
    def settled(self) -> bool:
        return self.total_probes > 0 and self.completed == self.total_probes

    def snapshot(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "subnet": self.subnet,
            "results": [r.to_dict() for r in self.results],
            "is_scanning": self.is_scanning,
            "progress_percent": self.progress_percent,
            "completed": self.completed,
            "total_probes": self.total_probes,
            "error": self.error,
            "started_at": self.started_at,
            "finished_at": self.finished_at
        }

@dataclass
class ScanUpdate:
    """Event published to scan listeners"""
    kind: str  # "started", "endpoint", "progress", "error", "complete"
    session_id: int
    progress_percent: int
    completed: int
    total_probes: int
    endpoint: Optional[DiscoveredEndpoint] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "session_id": self.session_id,
            "progress_percent": self.progress_percent,
            "completed": self.completed,
            "total_probes": self.total_probes,
            "endpoint": self.endpoint.to_dict() if self.endpoint else None,
            "error": self.error
        }
