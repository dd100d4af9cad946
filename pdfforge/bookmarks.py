"""Bookmarks and the outline tree built from them."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from .objects import Dictionary, Name, PdfString, Reference


@dataclass
class Bookmark:
    """An outline entry pointing at a page.

    ``format`` is 0, 1 for italic, 2 for bold, 3 for bold italic;
    ``color`` is an RGB triple.
    """

    title: str
    color: tuple = (0.0, 0.0, 0.0)
    format: int = 0
    page: tuple = (0, 0)
    children: list = field(default_factory=list)
    id: int = 0


class BookmarkTree:
    """Bookmarks kept by id, with the ids of the top-level entries in order."""

    def __init__(self):
        self.max_bookmark_id = 0
        self.roots: list[int] = []
        self.table: dict[int, Bookmark] = {}

    def add(self, bookmark: Bookmark, parent=None) -> int:
        """Register ``bookmark`` under ``parent`` (or at the top) and return its id."""
        self.max_bookmark_id += 1
        bookmark_id = self.max_bookmark_id
        bookmark.id = bookmark_id
        if parent is not None:
            parent_bookmark = self.table.get(parent)
            if parent_bookmark is not None:
                parent_bookmark.children.append(bookmark_id)
        else:
            self.roots.append(bookmark_id)
        self.table[bookmark_id] = bookmark
        return bookmark_id

    def _fix_pages(self, ids, first: bool):
        for bookmark_id in ids:
            bookmark = self.table.get(bookmark_id)
            if bookmark is None:
                return (0, 0)
            page = bookmark.page
            if page[0] == 0 and bookmark.children:
                page = self._fix_pages(list(bookmark.children), False)
                bookmark.page = page
            if not first and page[0] != 0:
                return page
            if first and bookmark.children:
                self._fix_pages(list(bookmark.children), True)
        return (0, 0)

    def adjust_zero_pages(self) -> None:
        """Point bookmarks whose page is ``(0, _)`` at the page of their first child."""
        self._fix_pages(list(self.roots), True)

    def _outline_children(self, next_id, parent_id, ids, processed):
        first = last = None
        for bookmark_id in ids:
            child_id = Reference(next(next_id), 0)
            info_id = Reference(next(next_id), 0)
            bookmark = self.table[bookmark_id]

            info = Dictionary()
            info.set("D", [Reference(*bookmark.page), Name("Fit")])
            info.set("S", "GoTo")

            if bookmark.title.isascii():
                title = bookmark.title.encode("ascii")
            else:
                title = b"\xfe\xff" + bookmark.title.encode("utf-16-be")

            child = Dictionary()
            child.set("Parent", parent_id)
            child.set("Title", PdfString(title))
            child.set("A", info_id)
            child.set("F", int(bookmark.format))
            child.set("C", [float(component) for component in bookmark.color])

            if first is None:
                first = child_id
            else:
                processed[last].set("Next", child_id)
                child.set("Prev", last)
            last = child_id

            if bookmark.children:
                c_first, c_last, c_count = self._outline_children(
                    next_id, child_id, bookmark.children, processed
                )
                if c_first is not None:
                    child.set("First", c_first)
                if c_last is not None:
                    child.set("Last", c_last)
                child.set("Count", c_count)

            processed[child_id] = child
            processed[info_id] = info
        return first, last, len(ids)

    def build_outline(self, document):
        """Add outline objects to ``document`` and return the outline's id, or None."""
        if not self.roots:
            return None
        next_id = itertools.count(document.max_id + 1)
        outline_id = Reference(next(next_id), 0)
        processed: dict[Reference, Dictionary] = {}
        first, last, count = self._outline_children(next_id, outline_id, self.roots, processed)

        outline = Dictionary()
        if first is not None:
            outline.set("First", first)
        if last is not None:
            outline.set("Last", last)
        outline.set("Count", count)

        for object_id, obj in processed.items():
            document.objects[object_id] = obj
        document.objects[outline_id] = outline
        document.max_id = max([outline_id.num, *(object_id.num for object_id in processed)])
        return outline_id