"""
Services module
"""

from .window_server import WindowManagerServer

__all__ = ['WindowManagerServer']
