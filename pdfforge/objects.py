"""PDF object model, serialisation and text-string helpers."""

from __future__ import annotations

import base64
import binascii
import enum
import math
import zlib
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, NamedTuple


class PdfError(Exception):
    """Base class for every error raised by this package."""


class ObjectNotFoundError(PdfError):
    """An object id does not resolve to an object."""

    def __init__(self, object_id):
        self.object_id = tuple(object_id)
        super().__init__(f"object {self.object_id[0]} {self.object_id[1]} not found")


class ReferenceLimitError(PdfError):
    """A chain of references is too long to follow."""

    def __init__(self, message="reference chain exceeds the dereference limit"):
        super().__init__(message)


class ReferenceCycleError(PdfError):
    """A chain of references loops back on itself."""

    def __init__(self, object_id):
        self.object_id = tuple(object_id)
        super().__init__(f"reference cycle through object {self.object_id[0]} {self.object_id[1]}")


class ObjectTypeError(PdfError, TypeError):
    """An object has a different type than the one required."""

    def __init__(self, expected, found):
        self.expected = expected
        self.found = found
        super().__init__(f"expected {expected}, found {found}")


class PageNumberNotFoundError(PdfError):
    """A page number does not exist in the document."""

    def __init__(self, page):
        self.page = page
        super().__init__(f"page number {page} not found")


class TextStringDecodeError(PdfError, ValueError):
    """A text string could not be decoded."""

    def __init__(self, message="text string could not be decoded"):
        super().__init__(message)


class DictKeyError(PdfError, KeyError):
    """A dictionary has no entry for the requested key."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"missing dictionary key {key!r}")

    def __str__(self):
        return self.args[0]


class StringFormat(enum.Enum):
    """How a string is written: as a literal or as hexadecimal digits."""

    LITERAL = "literal"
    HEXADECIMAL = "hexadecimal"


@dataclass(frozen=True)
class Name:
    """A PDF name object."""

    value: bytes

    def __post_init__(self):
        raw = self.value.encode("utf-8") if isinstance(self.value, str) else bytes(self.value)
        object.__setattr__(self, "value", raw)

    def __bytes__(self):
        return self.value

    def __str__(self):
        return self.value.decode("utf-8", "replace")


@dataclass(frozen=True)
class PdfString:
    """A PDF string object together with its written form."""

    value: bytes
    format: StringFormat = StringFormat.LITERAL

    def __post_init__(self):
        raw = self.value.encode("utf-8") if isinstance(self.value, str) else bytes(self.value)
        object.__setattr__(self, "value", raw)

    def __bytes__(self):
        return self.value


class Reference(NamedTuple):
    """An indirect reference; equal to the plain ``(num, gen)`` object id."""

    num: int
    gen: int = 0

    def __str__(self):
        return f"{self.num} {self.gen} R"


def _key(key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, Name):
        return key.value
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise TypeError(f"dictionary keys must be names, got {type(key).__name__}")


def _to_object(value):
    if value is None or isinstance(
        value, (bool, int, float, Name, PdfString, Reference, Dictionary, Stream)
    ):
        return value
    if isinstance(value, str):
        return Name(value)
    if isinstance(value, (bytes, bytearray)):
        return Name(bytes(value))
    if (
        isinstance(value, tuple)
        and len(value) == 2
        and all(isinstance(part, int) and not isinstance(part, bool) for part in value)
    ):
        return Reference(*value)
    if isinstance(value, dict):
        return Dictionary(value)
    if isinstance(value, (list, tuple)):
        return [_to_object(item) for item in value]
    raise TypeError(f"cannot convert {type(value).__name__} to a PDF object")


def _variant(obj) -> str:
    if obj is None:
        return "Null"
    if isinstance(obj, bool):
        return "Boolean"
    if isinstance(obj, int):
        return "Integer"
    if isinstance(obj, float):
        return "Real"
    if isinstance(obj, Name):
        return "Name"
    if isinstance(obj, PdfString):
        return "String"
    if isinstance(obj, Reference):
        return "Reference"
    if isinstance(obj, list):
        return "Array"
    if isinstance(obj, Dictionary):
        return "Dictionary"
    if isinstance(obj, Stream):
        return "Stream"
    return type(obj).__name__


class Dictionary:
    """An ordered PDF dictionary with name keys stored as bytes."""

    __slots__ = ("_entries",)
    __hash__ = None

    def __init__(self, entries=None):
        self._entries: dict[bytes, Any] = {}
        if entries is not None:
            pairs = entries.items() if hasattr(entries, "items") else entries
            for key, value in pairs:
                self.set(key, value)

    def get(self, key):
        """Return the value for ``key``; raise DictKeyError when missing."""
        raw = _key(key)
        try:
            return self._entries[raw]
        except KeyError:
            raise DictKeyError(raw) from None

    def set(self, key, value):
        """Store ``value`` (converted to a PDF object) under ``key``."""
        self._entries[_key(key)] = _to_object(value)

    def has(self, key) -> bool:
        return _key(key) in self._entries

    def remove(self, key):
        """Remove ``key`` and return its value, or None when it was absent."""
        return self._entries.pop(_key(key), None)

    def get_deref(self, key, document):
        """Return the value for ``key``, following references through ``document``."""
        return document.dereference(self.get(key))[1]

    def get_type(self) -> bytes:
        value = self.get(b"Type")
        if not isinstance(value, Name):
            raise ObjectTypeError("Name", _variant(value))
        return value.value

    def has_type(self, type_name) -> bool:
        try:
            return self.get_type() == _key(type_name)
        except PdfError:
            return False

    def update(self, other):
        pairs = other.items() if hasattr(other, "items") else other
        for key, value in pairs:
            self.set(key, value)

    def copy(self) -> "Dictionary":
        duplicate = Dictionary()
        duplicate._entries = dict(self._entries)
        return duplicate

    def items(self):
        return self._entries.items()

    def keys(self):
        return self._entries.keys()

    def values(self):
        return self._entries.values()

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.set(key, value)

    def __delitem__(self, key):
        raw = _key(key)
        if raw not in self._entries:
            raise DictKeyError(raw)
        del self._entries[raw]

    def __contains__(self, key):
        try:
            return self.has(key)
        except TypeError:
            return False

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other):
        if not isinstance(other, Dictionary):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self):
        return f"Dictionary({self._entries!r})"


def _ascii_hex_decode(data: bytes) -> bytes:
    digits = bytes(b for b in data.split(b">", 1)[0] if b not in b" \t\r\n\f\x00")
    if len(digits) % 2:
        digits += b"0"
    try:
        return bytes.fromhex(digits.decode("ascii"))
    except ValueError as exc:
        raise PdfError(f"invalid ASCIIHexDecode data: {exc}") from exc


def _ascii85_decode(data: bytes) -> bytes:
    cleaned = bytes(b for b in data if b not in b" \t\r\n\f\x00")
    if not cleaned.endswith(b"~>"):
        cleaned += b"~>"
    try:
        return base64.a85decode(cleaned, adobe=True)
    except ValueError as exc:
        raise PdfError(f"invalid ASCII85Decode data: {exc}") from exc


def _flate_decode(data: bytes) -> bytes:
    decompressor = zlib.decompressobj()
    try:
        return decompressor.decompress(data) + decompressor.flush()
    except zlib.error as exc:
        raise PdfError(f"invalid FlateDecode data: {exc}") from exc


_DECODERS = {
    b"FlateDecode": _flate_decode,
    b"ASCIIHexDecode": _ascii_hex_decode,
    b"ASCII85Decode": _ascii85_decode,
}


@dataclass
class Stream:
    """A stream object: a dictionary followed by raw bytes."""

    dict: Dictionary = field(default_factory=Dictionary)
    content: bytes = b""
    allows_compression: bool = True

    def __post_init__(self):
        if not isinstance(self.dict, Dictionary):
            self.dict = Dictionary(self.dict)
        self.content = bytes(self.content)
        self.dict.set("Length", len(self.content))

    def filters(self) -> list[bytes]:
        """Return the names of the stream's filters, in application order."""
        value = self.dict.get(b"Filter")
        if isinstance(value, Name):
            return [value.value]
        if isinstance(value, list):
            names = []
            for item in value:
                if not isinstance(item, Name):
                    raise ObjectTypeError("Name", _variant(item))
                names.append(item.value)
            return names
        raise ObjectTypeError("Name or Array", _variant(value))

    def decompressed_content(self) -> bytes:
        """Return the content with all of its filters undone."""
        if self.dict.has(b"DecodeParms"):
            params = self.dict.get(b"DecodeParms")
            if isinstance(params, Dictionary) and params.has(b"Predictor"):
                predictor = params.get(b"Predictor")
                if isinstance(predictor, int) and predictor > 1:
                    raise PdfError(f"unsupported predictor {predictor}")
        filters = self.filters()
        if not filters:
            raise PdfError("stream has no filter")
        data = self.content
        for name in filters:
            decoder = _DECODERS.get(name)
            if decoder is None:
                raise PdfError(f"unsupported filter {name.decode('latin-1')}")
            data = decoder(data)
        return data


@dataclass
class Operation:
    """A content-stream operator with its operands."""

    operator: str
    operands: list = field(default_factory=list)

    def __post_init__(self):
        self.operands = [_to_object(operand) for operand in self.operands]


@dataclass
class Content:
    """A sequence of content-stream operations."""

    operations: list = field(default_factory=list)

    def encode(self) -> bytes:
        """Serialise the operations, one per line."""
        lines = []
        for operation in self.operations:
            parts = [write_object(operand) + b" " for operand in operation.operands]
            parts.append(operation.operator.encode("utf-8"))
            lines.append(b"".join(parts))
        return b"\n".join(lines)


@dataclass
class CsRange:
    """A codespace-range section: ``(low, high, code_length)`` triples."""

    ranges: list = field(default_factory=list)


@dataclass
class BfChar:
    """A bfchar section: ``((code, code_length), utf16_units)`` pairs."""

    mappings: list = field(default_factory=list)


@dataclass
class BfRange:
    """A bfrange section: ``((low, high, code_length), targets)`` pairs."""

    mappings: list = field(default_factory=list)


class CMapParseError(PdfError):
    """A ToUnicode CMap could not be parsed; ``incomplete`` marks truncated input."""

    def __init__(self, incomplete: bool = False):
        self.incomplete = incomplete
        super().__init__("incomplete CMap" if incomplete else "invalid CMap")


def type_name(obj):
    """Return the /Type name of a dictionary or stream, or None."""
    if isinstance(obj, Stream):
        obj = obj.dict
    if not isinstance(obj, Dictionary):
        return None
    try:
        return obj.get_type()
    except PdfError:
        return None


_DELIMITERS = set(b"()<>[]{}/%#")


def _write_name(out: bytearray, name: bytes) -> None:
    out += b"/"
    for byte in name:
        if 0x21 <= byte <= 0x7E and byte not in _DELIMITERS:
            out.append(byte)
        else:
            out += b"#%02X" % byte


def _write_literal(out: bytearray, text: bytes) -> None:
    escaped = set()
    open_parens = []
    for index, byte in enumerate(text):
        if byte == 0x28:
            open_parens.append(index)
        elif byte == 0x29:
            if open_parens:
                open_parens.pop()
            else:
                escaped.add(index)
        elif byte in (0x5C, 0x0D):
            escaped.add(index)
    escaped.update(open_parens)
    out += b"("
    for index, byte in enumerate(text):
        if index in escaped:
            out += b"\\"
            out.append(0x72 if byte == 0x0D else byte)
        else:
            out.append(byte)
    out += b")"


def _format_real(value: float) -> bytes:
    if not math.isfinite(value):
        raise PdfError(f"cannot write non-finite number {value}")
    if value == int(value):
        return str(int(value)).encode("ascii")
    text = repr(value)
    if "e" in text or "E" in text:
        text = f"{value:.10f}".rstrip("0").rstrip(".")
    return text.encode("ascii")


def _needs_separator(obj) -> bool:
    return obj is None or isinstance(obj, (bool, int, float, Reference))


def _write(out: bytearray, obj) -> None:
    if obj is None:
        out += b"null"
    elif isinstance(obj, bool):
        out += b"true" if obj else b"false"
    elif isinstance(obj, int):
        out += str(obj).encode("ascii")
    elif isinstance(obj, float):
        out += _format_real(obj)
    elif isinstance(obj, Name):
        _write_name(out, obj.value)
    elif isinstance(obj, PdfString):
        if obj.format is StringFormat.HEXADECIMAL:
            out += b"<" + binascii.hexlify(obj.value).upper() + b">"
        else:
            _write_literal(out, obj.value)
    elif isinstance(obj, Reference):
        out += f"{obj.num} {obj.gen} R".encode("ascii")
    elif isinstance(obj, list):
        out += b"["
        for index, item in enumerate(obj):
            if index and _needs_separator(item):
                out += b" "
            _write(out, item)
        out += b"]"
    elif isinstance(obj, Dictionary):
        out += b"<<"
        for key, value in obj.items():
            _write_name(out, key)
            if _needs_separator(value):
                out += b" "
            _write(out, value)
        out += b">>"
    elif isinstance(obj, Stream):
        _write(out, obj.dict)
        out += b"stream\n" + obj.content + b"\nendstream"
    else:
        raise TypeError(f"cannot write {type(obj).__name__} as a PDF object")


def write_object(obj) -> bytes:
    """Serialise a PDF object to its file representation."""
    out = bytearray()
    _write(out, obj)
    return bytes(out)


_PDF_DOC_SPECIAL = {
    0x18: "\u02d8", 0x19: "\u02c7", 0x1A: "\u02c6", 0x1B: "\u02d9",
    0x1C: "\u02dd", 0x1D: "\u02db", 0x1E: "\u02da", 0x1F: "\u02dc",
    0x80: "\u2022", 0x81: "\u2020", 0x82: "\u2021", 0x83: "\u2026",
    0x84: "\u2014", 0x85: "\u2013", 0x86: "\u0192", 0x87: "\u2044",
    0x88: "\u2039", 0x89: "\u203a", 0x8A: "\u2212", 0x8B: "\u2030",
    0x8C: "\u201e", 0x8D: "\u201c", 0x8E: "\u201d", 0x8F: "\u2018",
    0x90: "\u2019", 0x91: "\u201a", 0x92: "\u2122", 0x93: "\ufb01",
    0x94: "\ufb02", 0x95: "\u0141", 0x96: "\u0152", 0x97: "\u0160",
    0x98: "\u0178", 0x99: "\u017d", 0x9A: "\u0131", 0x9B: "\u0142",
    0x9C: "\u0153", 0x9D: "\u0161", 0x9E: "\u017e", 0xA0: "\u20ac",
}
_PDF_DOC_UNDEFINED = {0x7F, 0x9F, 0xAD}


def _pdf_doc_char(byte: int):
    if byte in _PDF_DOC_SPECIAL:
        return _PDF_DOC_SPECIAL[byte]
    if byte in _PDF_DOC_UNDEFINED:
        return None
    return chr(byte)


_PDF_DOC_DECODE = tuple(_pdf_doc_char(byte) for byte in range(256))


def _decode_pdf_doc(data: bytes) -> str:
    return "".join(ch for ch in (_PDF_DOC_DECODE[byte] for byte in data) if ch is not None)


def encode_utf16_be(text: str) -> bytes:
    """Encode ``text`` as UTF-16BE preceded by a byte order mark."""
    return b"\xfe\xff" + text.encode("utf-16-be")


def text_string(text: str) -> PdfString:
    """Make a text string: literal when ASCII, UTF-16BE hexadecimal otherwise."""
    if text.isascii():
        return PdfString(text.encode("ascii"), StringFormat.LITERAL)
    return PdfString(encode_utf16_be(text), StringFormat.HEXADECIMAL)


def decode_text_string(obj) -> str:
    """Decode a text string according to its byte order mark."""
    if not isinstance(obj, PdfString):
        raise ObjectTypeError("String", _variant(obj))
    data = obj.value
    if data.startswith(b"\xfe\xff"):
        body = data[2:]
        if len(body) % 2:
            body += b"\x00"
        try:
            return body.decode("utf-16-be")
        except UnicodeDecodeError as exc:
            raise TextStringDecodeError(str(exc)) from exc
    if data.startswith(b"\xef\xbb\xbf"):
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TextStringDecodeError(str(exc)) from exc
    return _decode_pdf_doc(data)


__all__: Iterable[str] = [
    "PdfError", "ObjectNotFoundError", "ReferenceLimitError", "ReferenceCycleError",
    "ObjectTypeError", "PageNumberNotFoundError", "TextStringDecodeError", "DictKeyError",
    "StringFormat", "Name", "PdfString", "Reference", "Dictionary", "Stream",
    "Operation", "Content", "CsRange", "BfChar", "BfRange", "CMapParseError",
    "type_name", "write_object", "encode_utf16_be", "text_string", "decode_text_string",
]