"""Named destinations collected from a name tree."""

from __future__ import annotations

from .objects import Dictionary, ObjectTypeError, PdfError, PdfString, Reference


class Destination:
    """A named destination: its title, target page and fit type."""

    def __init__(self, title, page, typ):
        self.dict = Dictionary()
        self.dict.set(b"Title", title)
        self.dict.set(b"Page", page)
        self.dict.set(b"Type", typ)

    def set(self, key, value) -> None:
        self.dict.set(key, value)

    def title(self):
        return self.dict.get(b"Title")

    def page(self):
        return self.dict.get(b"Page")

    def __repr__(self):
        return f"Destination({self.dict!r})"


def _require_array(obj) -> list:
    if not isinstance(obj, list):
        raise ObjectTypeError("Array", type(obj).__name__)
    return obj


def _make_destination(key, target: list) -> tuple[bytes, Destination]:
    if not isinstance(key, PdfString):
        raise ObjectTypeError("String", type(key).__name__)
    if len(target) < 2:
        raise PdfError("destination array needs a page and a fit type")
    return key.value, Destination(key, target[0], target[1])


def _collect(document, tree: Dictionary, found: dict) -> None:
    if tree.has(b"Kids"):
        for kid in _require_array(tree.get(b"Kids")):
            if not isinstance(kid, Reference):
                continue
            try:
                kid_tree = document.get_dictionary(kid)
            except PdfError:
                continue
            _collect(document, kid_tree, found)

    if not tree.has(b"Names"):
        return
    names = _require_array(tree.get(b"Names"))
    for key, value in zip(names[0::2], names[1::2]):
        if isinstance(value, Reference):
            try:
                target = document.get_dictionary(value)
            except PdfError:
                try:
                    target = document.get_object(value)
                except PdfError:
                    continue
                if not isinstance(target, list):
                    continue
                name, dest = _make_destination(key, target)
            else:
                name, dest = _make_destination(key, _require_array(target.get(b"D")))
        elif isinstance(value, Dictionary):
            name, dest = _make_destination(key, _require_array(value.get(b"D")))
        else:
            continue
        found[name] = dest


def get_named_destinations(document, tree) -> dict:
    """Collect the destinations of a name tree, keyed by name bytes, in tree order."""
    found: dict[bytes, Destination] = {}
    _collect(document, tree, found)
    return found