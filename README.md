# pdfforge

A pure-Python library, with no dependencies outside the standard library, for
working with the object graph of a PDF document held in memory: creating
objects, walking the page tree, collecting page resources, fonts and
annotations, building bookmark outlines, reading named destinations and
encoding content streams.

## Objects (`pdfforge.objects`)

PDF values are plain Python values (`None`, `bool`, `int`, `float`, `list`)
plus a few small types:

- `Name` for `/Name` objects,
- `PdfString` for literal or hexadecimal strings (see `StringFormat`),
- `Reference` for indirect references; it compares equal to a plain
  `(num, gen)` tuple,
- `Dictionary` for dictionaries with name keys, offering `get`, `set`, `has`,
  `remove`, `get_deref`, `get_type` and `has_type`,
- `Stream` for a dictionary with content bytes; `decompressed_content()`
  undoes the `FlateDecode`, `ASCIIHexDecode` and `ASCII85Decode` filters.

`write_object` serialises any of them to bytes, and `text_string` /
`decode_text_string` handle PDF text strings (PDFDocEncoding, UTF-8 or
UTF-16BE with a byte order mark).

```python
from pdfforge.objects import Dictionary, text_string, write_object

info = Dictionary()
info.set("Key", text_string("тест"))
write_object(info)  # b"<</Key<FEFF0442043504410442>>>"
```

`Operation` and `Content` describe content-stream operators;
`Content.encode()` writes them one per line. `CsRange`, `BfChar` and
`BfRange` hold the sections of a ToUnicode CMap, and `CMapParseError` reports
one that could not be read.

Errors are raised as subclasses of `PdfError`, such as `ObjectNotFoundError`,
`ObjectTypeError`, `ReferenceLimitError`, `ReferenceCycleError`,
`PageNumberNotFoundError`, `TextStringDecodeError` and `DictKeyError`.

## Building a document (`pdfforge.document`)

```python
from pdfforge.document import Document
from pdfforge.objects import Content, Dictionary, Name, Operation, PdfString, Stream

doc = Document.with_version("1.5")
pages_id = doc.new_object_id()

content = Content([
    Operation("BT", []),
    Operation("Tf", [Name("F1"), 48]),
    Operation("Td", [100, 600]),
    Operation("Tj", [PdfString(b"Hello World!")]),
    Operation("ET", []),
])
content_id = doc.add_object(Stream(Dictionary(), content.encode()))
```

`Document` also offers `get_object`, `has_object`, `get_dictionary`,
`get_dict_in_dict`, `dereference`, `catalog`, `get_encrypted`,
`is_encrypted`, `traverse_objects`, `set_object`, `remove_object`,
`get_or_create_resources`, `add_xobject` and `add_graphics_state`.
`Document.new_from_prev` starts an empty incremental update on top of an
existing document.

## Pages and resources

`get_pages()` maps page numbers (from 1) to object ids, and `page_iter()`
walks the page tree lazily with a `PageTreeIter`. `get_object_page`,
`get_page_contents`, `get_page_content`, `add_page_contents`,
`get_page_resources`, `get_page_fonts` and `get_page_annotations` give access
to what each page uses.

## Bookmarks (`pdfforge.bookmarks`)

Add `Bookmark` entries with `Document.add_bookmark`, nesting them under a
parent id, then call `adjust_zero_pages()` and `build_outline()` to turn them
into an outline dictionary whose id can be stored under the catalog's
`/Outlines` key.

## Named destinations (`pdfforge.destinations`)

`get_named_destinations(document, tree)` walks a name tree and returns a dict
from name bytes to `Destination` objects, whose `title()` and `page()` give
the entry's title and target page.

## Dates (`pdfforge.dates`)

`to_pdf_date` writes a `datetime` as a PDF date string. `as_datetime` strips
the `D`, `:` and `'` characters from a date string object, and
`parse_pdf_date` turns such text (or the string object itself) into an aware
`datetime`, including dates without seconds or without a time of day.

## Barcodes (`pdfforge.barcode`)

`generate_barcode(page, code)` lays out bars encoding a page number (1–255)
and a code (0–511), and `generate_operations` turns them into content-stream
operators that paint them.

## Page ranges (`pdfforge.pagerange`)

`compute_page_numbers("3,5,7-9")` returns `[3, 5, 7, 8, 9]`, and
`complement_page_numbers` gives the pages from 1 to a total that are not
listed.

## What it does not do

pdfforge works only on documents built in memory. It does not read or write
PDF files, parse PDF syntax, compress streams, encrypt or decrypt documents,
extract text, or decode stream predictors, and it has no command-line tool.