"""Page-number lists such as ``3,5,7-9`` and their complements."""

from __future__ import annotations

_U32_MAX = 2**32 - 1


def _parse_page(text: str) -> int:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid page number: {text!r}")
    number = int(digits)
    if number > _U32_MAX:
        raise ValueError(f"page number out of range: {text!r}")
    return number


def compute_page_numbers(pages: str) -> list[int]:
    """Expand a list like ``3,5,7-9`` into page numbers, in the order given.

    A range whose start exceeds its end contributes nothing; an item with
    more than one ``-`` is ignored. Malformed numbers raise ValueError.
    """
    page_numbers: list[int] = []
    for item in pages.split(","):
        numbers = [_parse_page(part) for part in item.split("-")]
        if len(numbers) == 1:
            page_numbers.append(numbers[0])
        elif len(numbers) == 2:
            start, end = numbers
            page_numbers.extend(range(start, end + 1))
    return page_numbers


def complement_page_numbers(pages, total: int) -> list[int]:
    """Return the pages from 1 to ``total`` that are not in ``pages``."""
    excluded = set(pages)
    return [page for page in range(1, total + 1) if page not in excluded]