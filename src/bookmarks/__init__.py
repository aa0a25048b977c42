"""
Bookmarks module
"""

from .models import Bookmark
from .store import BookmarkStore

__all__ = ['Bookmark', 'BookmarkStore']
