"""
Connectivity module for per-pane reachability checks
"""

from .models import ConnectionStatus, ProbeResult, ProbeState
from .prober import ConnectivityProber, extract_hostname, is_private_host

__all__ = ['ConnectivityProber', 'ConnectionStatus', 'ProbeResult', 'ProbeState',
           'extract_hostname', 'is_private_host']
