"""The in-memory PDF document: objects, trailer, page tree and bookmarks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .bookmarks import Bookmark, BookmarkTree
from .objects import (
    Dictionary,
    ObjectNotFoundError,
    ObjectTypeError,
    PdfError,
    Reference,
    Stream,
    _to_object,
    _variant,
)
from .pages import DEREF_LIMIT, PageAccess
from .resources import ResourceAccess


def _as_reference(object_id) -> Reference:
    return object_id if isinstance(object_id, Reference) else Reference(*object_id)


@dataclass(eq=False)
class Document(PageAccess, ResourceAccess):
    """A PDF document, or a single incremental update of one."""

    version: str = "1.4"
    binary_mark: bytes = b"\xbb\xad\xc0\xde"
    trailer: Dictionary = field(default_factory=Dictionary)
    objects: dict = field(default_factory=dict)
    max_id: int = 0
    bookmarks: BookmarkTree = field(default_factory=BookmarkTree)
    xref_start: int = 0

    @classmethod
    def with_version(cls, version) -> "Document":
        """Create an empty document declaring the given PDF version."""
        return cls(version=str(version))

    @classmethod
    def new_from_prev(cls, prev: "Document") -> "Document":
        """Create an empty incremental update on top of ``prev``."""
        trailer = prev.trailer.copy()
        trailer.set("Prev", int(prev.xref_start))
        bookmarks = BookmarkTree()
        bookmarks.max_bookmark_id = prev.bookmarks.max_bookmark_id
        return cls(trailer=trailer, max_id=prev.max_id, bookmarks=bookmarks)

    def dereference(self, obj):
        """Follow ``obj`` through references.

        Return ``(last_id, target)``; ``last_id`` is None when ``obj`` was not
        a reference.
        """
        last_id = None
        hops = 0
        while isinstance(obj, Reference):
            last_id = obj
            try:
                obj = self.objects[obj]
            except KeyError:
                raise ObjectNotFoundError(obj) from None
            hops += 1
            if hops > DEREF_LIMIT:
                from .objects import ReferenceLimitError

                raise ReferenceLimitError()
        return last_id, obj

    def get_object(self, id):
        """Return the object stored under ``id``, following references."""
        object_id = _as_reference(id)
        try:
            obj = self.objects[object_id]
        except KeyError:
            raise ObjectNotFoundError(object_id) from None
        return self.dereference(obj)[1]

    def has_object(self, id) -> bool:
        return _as_reference(id) in self.objects

    def get_dictionary(self, id) -> Dictionary:
        obj = self.get_object(id)
        if not isinstance(obj, Dictionary):
            raise ObjectTypeError("Dictionary", _variant(obj))
        return obj

    def get_dict_in_dict(self, node: Dictionary, key) -> Dictionary:
        """Return the dictionary stored in ``node`` under ``key``, direct or referenced."""
        value = node.get(key)
        if isinstance(value, Reference):
            return self.get_dictionary(value)
        if isinstance(value, Dictionary):
            return value
        raise ObjectTypeError("Dictionary", _variant(value))

    def traverse_objects(self, action: Callable) -> list:
        """Visit every object reachable from the trailer, calling ``action`` on each.

        Return the ids of all referenced objects in the order first met.
        """
        refs: list[Reference] = []
        seen: set[Reference] = set()

        def visit(obj):
            action(obj)
            if isinstance(obj, list):
                for item in list(obj):
                    visit(item)
            elif isinstance(obj, Dictionary):
                for value in list(obj.values()):
                    visit(value)
            elif isinstance(obj, Stream):
                for value in list(obj.dict.values()):
                    visit(value)
            elif isinstance(obj, Reference) and obj not in seen:
                seen.add(obj)
                refs.append(obj)

        for value in list(self.trailer.values()):
            visit(value)
        index = 0
        while index < len(refs):
            target = self.objects.get(refs[index])
            if target is not None:
                visit(target)
            index += 1
        return refs

    def get_encrypted(self) -> Dictionary:
        """Return the encryption dictionary named by the trailer."""
        value = self.trailer.get(b"Encrypt")
        if not isinstance(value, Reference):
            raise ObjectTypeError("Reference", _variant(value))
        return self.get_dictionary(value)

    def is_encrypted(self) -> bool:
        try:
            self.get_encrypted()
        except PdfError:
            return False
        return True

    def catalog(self) -> Dictionary:
        """Return the document catalog, the root of the object graph."""
        value = self.trailer.get(b"Root")
        if not isinstance(value, Reference):
            raise ObjectTypeError("Reference", _variant(value))
        return self.get_dictionary(value)

    def new_object_id(self) -> Reference:
        self.max_id += 1
        return Reference(self.max_id, 0)

    def add_object(self, obj) -> Reference:
        """Store ``obj`` under a fresh id and return the id."""
        object_id = self.new_object_id()
        self.objects[object_id] = _to_object(obj)
        return object_id

    def set_object(self, id, obj) -> None:
        self.objects[_as_reference(id)] = _to_object(obj)

    def remove_object(self, object_id) -> None:
        """Drop references to ``object_id`` from the /Annots of every page.

        Every page must carry an /Annots array.
        """
        target = _as_reference(object_id)
        for page_id in self.get_pages().values():
            page = self.get_dictionary(page_id)
            annots = page.get(b"Annots")
            if not isinstance(annots, list):
                raise ObjectTypeError("Array", _variant(annots))
            annots[:] = [
                item for item in annots if not (isinstance(item, Reference) and item == target)
            ]

    def get_or_create_resources(self, page_id):
        """Return the page's /Resources object, creating an empty one if absent."""
        page = self.get_dictionary(page_id)
        if page.has(b"Resources"):
            resources = page.get(b"Resources")
            if isinstance(resources, Reference):
                return self.get_object(resources)
        else:
            page.set(b"Resources", Dictionary())
        return page.get(b"Resources")

    def _resources_dict(self, page_id):
        try:
            resources = self.get_or_create_resources(page_id)
        except PdfError:
            return None
        return resources if isinstance(resources, Dictionary) else None

    def add_xobject(self, page_id, xobject_name, xobject_id) -> None:
        """Register an XObject under ``xobject_name`` in the page's resources."""
        resources = self._resources_dict(page_id)
        if resources is None:
            return
        if not resources.has(b"XObject"):
            resources.set("XObject", Dictionary())
        xobjects = resources.get(b"XObject")
        if isinstance(xobjects, Reference):
            xobjects = self.get_object(xobjects)
        if not isinstance(xobjects, Dictionary):
            raise ObjectTypeError("Dictionary", _variant(xobjects))
        xobjects.set(xobject_name, _as_reference(xobject_id))

    def add_graphics_state(self, page_id, gs_name, gs_id) -> None:
        """Register a graphics state under ``gs_name`` in the page's resources."""
        resources = self._resources_dict(page_id)
        if resources is None:
            return
        if not resources.has(b"ExtGState"):
            resources.set("ExtGState", Dictionary())
        states = resources.get(b"ExtGState")
        if not isinstance(states, Dictionary):
            raise ObjectTypeError("Dictionary", _variant(states))
        states.set(gs_name, _as_reference(gs_id))

    def add_bookmark(self, bookmark: Bookmark, parent=None) -> int:
        return self.bookmarks.add(bookmark, parent)

    def adjust_zero_pages(self) -> None:
        """Point bookmarks without a page at the page of their first child."""
        self.bookmarks.adjust_zero_pages()

    def build_outline(self):
        """Write the bookmarks as outline objects; return the outline id or None."""
        return self.bookmarks.build_outline(self)