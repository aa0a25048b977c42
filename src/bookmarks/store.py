"""
Bookmark store: a flat ordered list kept under one key of a JSON file
Read once at startup, rewritten wholesale on every change
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .models import Bookmark

logger = logging.getLogger(__name__)


class BookmarkStore:

    def __init__(self, config: Dict):
        self.path = Path(config.get('file', 'data/bookmarks.json'))
        self.storage_key = config.get('storage_key', 'bookmarks')
        self.bookmarks: List[Bookmark] = self._load()

    def _load(self) -> List[Bookmark]:
        if not self.path.exists():
            logger.info(f"No bookmark file at {self.path}, starting empty")
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            records = data.get(self.storage_key, []) if isinstance(data, dict) else []
            bookmarks = [Bookmark.from_dict(r) for r in records]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to read bookmarks from {self.path}: {e}")
            return []

        logger.info(f"Loaded {len(bookmarks)} bookmarks from {self.path}")
        return bookmarks

    def _save(self, bookmarks: List[Bookmark]):
        data = {}
        if self.path.exists():
            # Unreadable is an error; only unparseable content may be replaced
            with open(self.path, 'r', encoding='utf-8') as f:
                try:
                    existing = json.load(f)
                except ValueError as e:
                    logger.warning(f"Overwriting corrupt bookmark file {self.path}: {e}")
                    existing = None
            if isinstance(existing, dict):
                data = existing

        data[self.storage_key] = [b.to_dict() for b in bookmarks]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)

    def list(self) -> List[Bookmark]:
        return list(self.bookmarks)

    def get(self, index: int) -> Bookmark:
        if not 0 <= index < len(self.bookmarks):
            raise IndexError(f"No bookmark at index {index}")
        return self.bookmarks[index]

    def add(self, url: str, target_window: str, title: Optional[str] = None,
            window_color: str = "default") -> Bookmark:
        bookmark = Bookmark(url=url, title=title or url, target_window=target_window,
                            window_color=window_color)
        bookmarks = self.bookmarks + [bookmark]
        self._save(bookmarks)
        self.bookmarks = bookmarks
        logger.info(f"Bookmark added: {bookmark.title} -> {bookmark.url}")
        return bookmark

    def delete(self, index: int) -> Bookmark:
        bookmark = self.get(index)
        bookmarks = self.bookmarks[:index] + self.bookmarks[index + 1:]
        self._save(bookmarks)
        self.bookmarks = bookmarks
        logger.info(f"Bookmark deleted: {bookmark.title}")
        return bookmark
