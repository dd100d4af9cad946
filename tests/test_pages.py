import zlib

import pytest

from pdfforge.objects import (
    Content,
    Dictionary,
    DictKeyError,
    Name,
    ObjectNotFoundError,
    ObjectTypeError,
    Operation,
    PageNumberNotFoundError,
    Reference,
    Stream,
)
from pdfforge.pages import PageAccess, PageTreeIter


class FakeDocument(PageAccess):
    def __init__(self):
        self.objects = {}
        self.trailer = Dictionary()
        self.max_id = 0

    def add_object(self, obj):
        self.max_id += 1
        ref = Reference(self.max_id, 0)
        self.objects[ref] = obj
        return ref

    def dereference(self, obj):
        ref = None
        while isinstance(obj, Reference):
            ref = obj
            if obj not in self.objects:
                raise ObjectNotFoundError(obj)
            obj = self.objects[obj]
        return ref, obj

    def get_object(self, id):
        if id not in self.objects:
            raise ObjectNotFoundError(id)
        return self.dereference(self.objects[id])[1]

    def get_dictionary(self, id):
        obj = self.get_object(id)
        if not isinstance(obj, Dictionary):
            raise ObjectTypeError("Dictionary", type(obj).__name__)
        return obj

    def catalog(self):
        return self.get_dictionary(self.trailer.get(b"Root"))


def build_document(texts):
    doc = FakeDocument()
    pages_id = doc.add_object(Dictionary())
    kids = []
    for text in texts:
        content = Content([Operation("BT"), Operation("Tj", []), Operation("ET")])
        content_id = doc.add_object(Stream(Dictionary(), content.encode() + text.encode()))
        kids.append(
            doc.add_object(Dictionary({"Type": "Page", "Parent": pages_id, "Contents": content_id}))
        )
    doc.objects[pages_id] = Dictionary({"Type": "Pages", "Kids": kids, "Count": len(kids)})
    catalog_id = doc.add_object(Dictionary({"Type": "Catalog", "Pages": pages_id}))
    doc.trailer.set("Root", catalog_id)
    return doc, pages_id, kids


def test_get_pages_numbers_from_one_in_order():
    doc, _, kids = build_document(["a", "b", "c"])
    assert doc.get_pages() == {1: kids[0], 2: kids[1], 3: kids[2]}


def test_nested_page_tree_is_depth_first():
    doc = FakeDocument()
    root_id = doc.add_object(Dictionary())
    inner_id = doc.add_object(Dictionary())
    p1 = doc.add_object(Dictionary({"Type": "Page"}))
    p2 = doc.add_object(Dictionary({"Type": "Page"}))
    p3 = doc.add_object(Dictionary({"Type": "Page"}))
    doc.objects[inner_id] = Dictionary({"Type": "Pages", "Kids": [p2, p3], "Count": 2})
    doc.objects[root_id] = Dictionary({"Type": "Pages", "Kids": [p1, inner_id], "Count": 3})
    doc.trailer.set("Root", doc.add_object(Dictionary({"Type": "Catalog", "Pages": root_id})))
    assert list(doc.page_iter()) == [p1, p2, p3]


def test_length_hint_matches_page_count():
    doc = FakeDocument()
    root_id = doc.add_object(Dictionary())
    inner_id = doc.add_object(Dictionary())
    pages = [doc.add_object(Dictionary({"Type": "Page"})) for _ in range(4)]
    doc.objects[inner_id] = Dictionary({"Type": "Pages", "Kids": pages[1:], "Count": 3})
    doc.objects[root_id] = Dictionary({"Type": "Pages", "Kids": [pages[0], inner_id], "Count": 4})
    doc.trailer.set("Root", doc.add_object(Dictionary({"Type": "Catalog", "Pages": root_id})))
    iterator = PageTreeIter(doc)
    assert iterator.__length_hint__() == len(list(PageTreeIter(doc)))


def test_document_without_catalog_has_no_pages():
    doc = FakeDocument()
    assert PageAccess.get_pages(doc) == {}
    iterator = PageTreeIter(doc)
    assert iterator.__length_hint__() == 0
    assert list(iterator) == []


def test_kids_of_unknown_type_are_skipped():
    doc, pages_id, kids = build_document(["a"])
    other = doc.add_object(Dictionary({"Type": "Annot"}))
    doc.objects[pages_id].set("Kids", [other, kids[0], (99, 0)])
    assert list(doc.page_iter()) == [kids[0]]


def test_cyclic_page_tree_terminates():
    doc, pages_id, kids = build_document(["a"])
    doc.objects[pages_id].set("Kids", [kids[0], pages_id])
    result = list(doc.page_iter())
    assert len(result) <= len(doc.objects)
    assert set(result) == {kids[0]}


def test_iterator_stays_exhausted():
    doc, _, kids = build_document(["a"])
    iterator = doc.page_iter()
    assert next(iterator) == kids[0]
    with pytest.raises(StopIteration):
        next(iterator)
    with pytest.raises(StopIteration):
        next(iterator)


def test_get_page_contents_single_reference():
    doc, _, kids = build_document(["a"])
    contents = doc.objects[kids[0]].get(b"Contents")
    assert doc.get_page_contents(kids[0]) == [contents]


def test_get_page_contents_array_and_indirect_array():
    doc, _, kids = build_document(["a"])
    s1 = doc.add_object(Stream(Dictionary(), b"x"))
    s2 = doc.add_object(Stream(Dictionary(), b"y"))
    array_id = doc.add_object([s1, 5, s2])
    doc.objects[kids[0]].set("Contents", array_id)
    assert doc.get_page_contents(kids[0]) == [s1, s2]
    doc.objects[kids[0]].set("Contents", [s2, s1])
    assert doc.get_page_contents(kids[0]) == [s2, s1]


def test_get_page_contents_missing_page_or_entry():
    doc, _, kids = build_document(["a"])
    assert doc.get_page_contents((42, 0)) == []
    doc.objects[kids[0]].remove(b"Contents")
    assert doc.get_page_contents(kids[0]) == []


def test_add_page_contents_appends_stream():
    doc, _, kids = build_document(["a"])
    before = doc.get_page_content(kids[0])
    doc.add_page_contents(kids[0], b"extra")
    streams = doc.get_page_contents(kids[0])
    assert len(streams) == 2
    assert doc.get_page_content(kids[0]) == before + b"extra"


def test_add_page_contents_to_page_without_contents():
    doc, _, kids = build_document(["a"])
    doc.objects[kids[0]].remove(b"Contents")
    doc.add_page_contents(kids[0], b"q Q")
    assert doc.get_page_content(kids[0]) == b"q Q"


def test_get_page_content_decodes_flate_streams():
    doc, _, kids = build_document(["a"])
    compressed = doc.add_object(
        Stream(Dictionary({"Filter": "FlateDecode"}), zlib.compress(b"BT ET"))
    )
    doc.objects[kids[0]].set("Contents", [compressed])
    assert doc.get_page_content(kids[0]) == b"BT ET"


def test_get_object_page_finds_annotation():
    doc, _, kids = build_document(["a", "b"])
    annot = doc.add_object(Dictionary({"Type": "Annot", "Subtype": Name("Link")}))
    doc.objects[kids[0]].set("Annots", [])
    doc.objects[kids[1]].set("Annots", [annot])
    assert doc.get_object_page(annot) == kids[1]


def test_get_object_page_not_found():
    doc, _, kids = build_document(["a"])
    doc.objects[kids[0]].set("Annots", [])
    with pytest.raises(PageNumberNotFoundError):
        doc.get_object_page((50, 0))


def test_get_object_page_page_without_annots_raises():
    doc, _, kids = build_document(["a"])
    with pytest.raises(DictKeyError):
        doc.get_object_page((50, 0))