"""
Connectivity prober state and results
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum

class ConnectionStatus(Enum):
    """Tri-state connection status shown as a colored dot per pane"""
    DISCONNECTED = "disconnected"
    CHECKING = "checking"
    CONNECTED = "connected"

@dataclass
class ProbeResult:
    """Outcome of a single connectivity probe"""
    target: str
    status: ConnectionStatus
    latency_ms: Optional[int] = None
    method: Optional[str] = None  # "websocket", "http", or None on failure

@dataclass
class ProbeState:
    """Per-pane prober state"""
    target: str
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    latency_ms: Optional[int] = None
    active: bool = False
    last_checked: Optional[float] = None

    def reset(self):
        self.status = ConnectionStatus.DISCONNECTED
        self.latency_ms = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "status": self.status.value,
            "latency_ms": self.latency_ms,
            "active": self.active,
            "last_checked": self.last_checked
        }
