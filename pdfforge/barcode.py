"""Barcode drawing: bar rectangles and the content operations that paint them."""

from __future__ import annotations

BAR_WIDTH = 9.0
BAR_HEIGHT = 10.0
GAP_WIDTH = 6.53


def number_to_bits(num: int, size: int) -> str:
    """Return ``num`` as ``size`` binary digits, least significant first."""
    if num < 0:
        raise ValueError("number must not be negative")
    digits = format(num, "b")
    if len(digits) > size:
        raise ValueError(f"{num} does not fit in {size} bits")
    return digits.zfill(size)[::-1]


def generate_barcode(page: int, code: int) -> list:
    """Return ``(x, y, width, height, bit)`` bars encoding a page number and a code."""
    if not 0 < page <= 255:
        raise ValueError("Page number should within range: 1-255")
    if not 0 <= code <= 511:
        raise ValueError("Bar code should within range: 0-511")
    page_bits = number_to_bits(page, 8)
    code_bits = number_to_bits(code, 9)

    layout = [(BAR_WIDTH, "0")]
    layout += [(BAR_WIDTH, bit) for bit in page_bits]
    layout.append((BAR_WIDTH, code_bits[0]))
    layout.append((GAP_WIDTH, "0"))
    layout += [(BAR_WIDTH, bit) for bit in code_bits[1:5]]
    layout += [(BAR_WIDTH, "1"), (BAR_WIDTH, "0")]
    layout += [(BAR_WIDTH, bit) for bit in code_bits[5:9]]

    rects = []
    x = 0.0
    for width, bit in layout:
        rects.append((x, 0.0, width, BAR_HEIGHT, bit))
        x += width
    return rects


def _number(value) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


_COLORS = {"0": "1 1 1 rg\n", "1": "0 0 0 rg\n"}


def generate_operations(rects) -> str:
    """Return content-stream operators that fill each bar, switching colour on change."""
    lines = []
    current = None
    for x, y, width, height, bit in rects:
        if bit != current:
            lines.append(_COLORS.get(bit, "\n"))
            current = bit
        lines.append(f"{_number(x)} {_number(y)} {_number(width)} {_number(height)} re\nf\n")
    return "".join(lines)