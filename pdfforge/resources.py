"""Resources, fonts and annotations of pages."""

from __future__ import annotations

from .objects import (
    Dictionary,
    ObjectTypeError,
    PdfError,
    Reference,
    ReferenceCycleError,
)


def _variant(obj) -> str:
    if isinstance(obj, list):
        return "Array"
    return type(obj).__name__


class ResourceAccess:
    """Resource lookups for a document.

    The host class provides ``objects`` and the methods ``get_object`` and
    ``get_dictionary``.
    """

    def get_page_resources(self, page_id):
        """Return the page's direct /Resources dictionary and the ids of inherited ones.

        The ids are those of /Resources references on the page and on each
        ancestor reached through /Parent, nearest first.
        """
        try:
            page = self.get_dictionary(page_id)
        except PdfError:
            return None, []

        resource_dict = None
        if page.has(b"Resources"):
            direct = page.get(b"Resources")
            if isinstance(direct, Dictionary):
                resource_dict = direct

        resource_ids = []
        seen = set()
        node = page
        while True:
            if node.has(b"Resources"):
                resources = node.get(b"Resources")
                if isinstance(resources, Reference):
                    resource_ids.append(resources)
            parent = node.get(b"Parent") if node.has(b"Parent") else None
            if not isinstance(parent, Reference):
                break
            if parent in seen:
                raise ReferenceCycleError(parent)
            seen.add(parent)
            node = self.get_dictionary(parent)
        return resource_dict, resource_ids

    def _collect_fonts(self, resources: Dictionary, fonts: dict) -> None:
        if not resources.has(b"Font"):
            return
        font_entry = resources.get(b"Font")
        if isinstance(font_entry, Reference):
            try:
                font_dict = self.get_object(font_entry)
            except PdfError:
                return
            if not isinstance(font_dict, Dictionary):
                return
        elif isinstance(font_entry, Dictionary):
            font_dict = font_entry
        else:
            return
        for name, value in font_dict.items():
            if name in fonts:
                continue
            if isinstance(value, Reference):
                try:
                    font = self.get_dictionary(value)
                except PdfError:
                    continue
            elif isinstance(value, Dictionary):
                font = value
            else:
                continue
            fonts[name] = font

    def get_page_fonts(self, page_id) -> dict:
        """Map font resource names to font dictionaries, nearest definition winning."""
        fonts: dict[bytes, Dictionary] = {}
        resource_dict, resource_ids = self.get_page_resources(page_id)
        if resource_dict is not None:
            self._collect_fonts(resource_dict, fonts)
        for resource_id in resource_ids:
            try:
                resources = self.get_dictionary(resource_id)
            except PdfError:
                continue
            self._collect_fonts(resources, fonts)
        return dict(sorted(fonts.items()))

    def get_page_annotations(self, page_id) -> list:
        """Return the annotation dictionaries listed in a page's /Annots."""
        try:
            page = self.get_dictionary(page_id)
        except PdfError:
            return []
        if not page.has(b"Annots"):
            return []
        annots = page.get(b"Annots")
        if isinstance(annots, Reference):
            annots = self.get_object(annots)
            if not isinstance(annots, list):
                raise ObjectTypeError("Array", _variant(annots))
        elif not isinstance(annots, list):
            return []

        annotations = []
        for item in annots:
            if not isinstance(item, Reference):
                continue
            try:
                annotations.append(self.get_dictionary(item))
            except PdfError:
                continue
        return annotations