"""Walking the page tree and reading or extending page content."""

from __future__ import annotations

from .objects import (
    Dictionary,
    ObjectTypeError,
    PageNumberNotFoundError,
    PdfError,
    Reference,
    Stream,
)

DEREF_LIMIT = 128
PAGE_TREE_DEPTH_LIMIT = 256


def _kids_of(document, page_tree_id):
    """Return the /Kids array of a page tree node, or None when there is none."""
    try:
        kids = document.get_dictionary(page_tree_id).get_deref(b"Kids", document)
    except PdfError:
        return None
    return kids if isinstance(kids, list) else None


class PageTreeIter:
    """Iterate over the page object ids of a document in page order.

    The walk is bounded by the number of objects in the document and by a
    maximum tree depth, so malformed or cyclic page trees still terminate.
    """

    def __init__(self, document):
        self._document = document
        self._stack: list[tuple[list, int]] = []
        self._kids = None
        self._pos = 0
        self._limit = len(document.objects)
        try:
            root = document.catalog().get(b"Pages")
        except PdfError:
            return
        if isinstance(root, Reference):
            self._kids = _kids_of(document, root)

    def __iter__(self):
        return self

    def __next__(self) -> Reference:
        while True:
            while self._kids is not None and self._pos < len(self._kids):
                if self._limit == 0:
                    raise StopIteration
                self._limit -= 1
                kid = self._kids[self._pos]
                self._pos += 1
                if not isinstance(kid, Reference):
                    continue
                try:
                    kind = self._document.get_dictionary(kid).get_type()
                except PdfError:
                    continue
                if kind == b"Page":
                    return kid
                if kind == b"Pages" and len(self._stack) < PAGE_TREE_DEPTH_LIMIT:
                    if self._pos < len(self._kids):
                        self._stack.append((self._kids, self._pos))
                    self._kids = _kids_of(self._document, kid)
                    self._pos = 0
            if not self._stack:
                raise StopIteration
            self._kids, self._pos = self._stack.pop()

    def _remaining(self):
        if self._kids is not None:
            yield from self._kids[self._pos:]
        for kids, pos in self._stack:
            yield from kids[pos:]

    def _pages_below(self, kid) -> int:
        if not isinstance(kid, Reference):
            return 1
        try:
            node = self._document.get_dictionary(kid)
        except PdfError:
            return 1
        if not node.has_type(b"Pages"):
            return 1
        try:
            count = node.get_deref(b"Count", self._document)
        except PdfError:
            return 0
        if not isinstance(count, int) or isinstance(count, bool):
            return 0
        return max(0, count)

    def __length_hint__(self) -> int:
        return sum(self._pages_below(kid) for kid in self._remaining())


class PageAccess:
    """Page-level operations for a document.

    The host class provides ``objects`` and the methods ``catalog``,
    ``get_object``, ``get_dictionary``, ``dereference`` and ``add_object``.
    """

    def page_iter(self) -> PageTreeIter:
        """Return an iterator over page object ids in page order."""
        return PageTreeIter(self)

    def get_pages(self) -> dict:
        """Map page numbers, starting from 1, to page object ids."""
        return {number: page_id for number, page_id in enumerate(self.page_iter(), start=1)}

    def get_object_page(self, id):
        """Return the id of the page whose /Annots refers to ``id``."""
        for page_id in self.get_pages().values():
            page = self.get_object(page_id)
            if not isinstance(page, Dictionary):
                raise ObjectTypeError("Dictionary", type(page).__name__)
            annots = page.get(b"Annots")
            if not isinstance(annots, list):
                raise ObjectTypeError("Array", type(annots).__name__)
            if any(isinstance(annot, Reference) and annot == tuple(id) for annot in annots):
                return page_id
        raise PageNumberNotFoundError(0)

    def get_page_contents(self, page_id) -> list:
        """Return the ids of the content streams of a page."""
        try:
            page = self.get_dictionary(page_id)
            contents = page.get(b"Contents")
        except PdfError:
            return []
        streams = []
        derefs = 0
        while True:
            if isinstance(contents, Reference):
                target = self.objects.get(contents)
                if target is None or isinstance(target, Stream):
                    streams.append(contents)
                else:
                    derefs += 1
                    if derefs < DEREF_LIMIT:
                        contents = target
                        continue
            elif isinstance(contents, list):
                streams.extend(item for item in contents if isinstance(item, Reference))
            break
        return streams

    def add_page_contents(self, page_id, content) -> None:
        """Append a new content stream to a page, keeping the existing ones."""
        page = self.get_dictionary(page_id)
        try:
            current = page.get(b"Contents")
        except PdfError:
            current = None
        if isinstance(current, Reference):
            content_list = [current]
        elif isinstance(current, list):
            content_list = list(current)
        else:
            content_list = []
        content_id = self.add_object(Stream(Dictionary(), bytes(content)))
        content_list.append(Reference(*content_id))
        self.get_dictionary(page_id).set("Contents", content_list)

    def get_page_content(self, page_id) -> bytes:
        """Return the concatenated, decoded content of a page's streams."""
        parts = []
        for stream_id in self.get_page_contents(page_id):
            try:
                stream = self.get_object(stream_id)
            except PdfError:
                continue
            if not isinstance(stream, Stream):
                continue
            try:
                parts.append(stream.decompressed_content())
            except PdfError:
                parts.append(stream.content)
        return b"".join(parts)