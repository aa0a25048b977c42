"""
Discovery module for local subnet device discovery
"""

from .manager import SubnetScanner
from .models import DiscoveredEndpoint, ScanSession, ScanUpdate
from .network_discovery import NetworkDiscovery, SubnetResolutionError

__all__ = ['SubnetScanner', 'DiscoveredEndpoint', 'ScanSession', 'ScanUpdate',
           'NetworkDiscovery', 'SubnetResolutionError']
