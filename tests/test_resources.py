import pytest

from pdfforge.objects import (
    Dictionary,
    Name,
    ObjectNotFoundError,
    ObjectTypeError,
    Reference,
    ReferenceCycleError,
    ReferenceLimitError,
)
from pdfforge.resources import ResourceAccess


class _Doc(ResourceAccess):
    def __init__(self, objects):
        self.objects = objects

    def get_object(self, id):
        obj = self.objects.get(Reference(*id))
        if obj is None:
            raise ObjectNotFoundError(id)
        hops = 0
        while isinstance(obj, Reference):
            hops += 1
            if hops > 128:
                raise ReferenceLimitError()
            target = self.objects.get(obj)
            if target is None:
                raise ObjectNotFoundError(obj)
            obj = target
        return obj

    def get_dictionary(self, id):
        obj = self.get_object(id)
        if not isinstance(obj, Dictionary):
            raise ObjectTypeError("Dictionary", type(obj).__name__)
        return obj


def _font(base):
    return Dictionary({"Type": "Font", "Subtype": "Type1", "BaseFont": base})


def _tree_doc():
    root_font = _font("Courier")
    other_font = _font("Times-Roman")
    page_font = _font("Helvetica")
    objects = {
        Reference(1): Dictionary({"Type": "Pages", "Resources": Reference(2)}),
        Reference(2): Dictionary({"Font": {"F1": Reference(3), "F2": Reference(4)}}),
        Reference(3): root_font,
        Reference(4): other_font,
        Reference(5): Dictionary(
            {
                "Type": "Page",
                "Parent": Reference(1),
                "Resources": Dictionary({"Font": Dictionary({"F1": page_font})}),
            }
        ),
    }
    return _Doc(objects), root_font, other_font, page_font


def test_page_resources_direct_and_inherited():
    doc, *_ = _tree_doc()
    direct, ids = doc.get_page_resources(Reference(5))
    assert direct is doc.objects[Reference(5)].get(b"Resources")
    assert ids == [Reference(2)]


def test_page_resources_reference_on_page_comes_first():
    doc = _Doc(
        {
            Reference(1): Dictionary({"Resources": Reference(3)}),
            Reference(2): Dictionary({"Parent": Reference(1), "Resources": Reference(4)}),
            Reference(3): Dictionary(),
            Reference(4): Dictionary(),
        }
    )
    direct, ids = doc.get_page_resources(Reference(2))
    assert direct is None
    assert ids == [Reference(4), Reference(3)]


def test_page_resources_missing_page():
    doc = _Doc({})
    assert doc.get_page_resources(Reference(9)) == (None, [])


def test_page_resources_parent_cycle_raises():
    doc = _Doc(
        {
            Reference(1): Dictionary({"Parent": Reference(2)}),
            Reference(2): Dictionary({"Parent": Reference(1)}),
        }
    )
    with pytest.raises(ReferenceCycleError):
        doc.get_page_resources(Reference(1))


def test_page_resources_missing_parent_raises():
    doc = _Doc({Reference(1): Dictionary({"Parent": Reference(7)})})
    with pytest.raises(ObjectNotFoundError):
        doc.get_page_resources(Reference(1))


def test_page_fonts_nearest_wins_and_inherits():
    doc, _root_font, other_font, page_font = _tree_doc()
    fonts = doc.get_page_fonts(Reference(5))
    assert list(fonts) == [b"F1", b"F2"]
    assert fonts[b"F1"] is page_font
    assert fonts[b"F2"] is other_font


def test_page_fonts_skip_unresolvable_entries():
    doc = _Doc(
        {
            Reference(1): Dictionary(
                {"Resources": Dictionary({"Font": Dictionary({"F9": Reference(50), "F3": 7})})}
            )
        }
    )
    assert doc.get_page_fonts(Reference(1)) == {}


def test_page_annotations_from_array():
    link = Dictionary({"Subtype": "Link"})
    doc = _Doc(
        {
            Reference(1): Dictionary({"Annots": [Reference(2), Reference(3), Name("X")]}),
            Reference(2): link,
            Reference(3): [1, 2],
        }
    )
    assert doc.get_page_annotations(Reference(1)) == [link]


def test_page_annotations_through_reference():
    text = Dictionary({"Subtype": "Text"})
    doc = _Doc(
        {
            Reference(1): Dictionary({"Annots": Reference(4)}),
            Reference(4): [Reference(5)],
            Reference(5): text,
        }
    )
    assert doc.get_page_annotations(Reference(1)) == [text]


def test_page_annotations_reference_to_non_array_raises():
    doc = _Doc(
        {
            Reference(1): Dictionary({"Annots": Reference(4)}),
            Reference(4): Dictionary(),
        }
    )
    with pytest.raises(ObjectTypeError):
        doc.get_page_annotations(Reference(1))


def test_page_annotations_none_present():
    doc = _Doc({Reference(1): Dictionary({"Type": "Page"})})
    assert doc.get_page_annotations(Reference(1)) == []