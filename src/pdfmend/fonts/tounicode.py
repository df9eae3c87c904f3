# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""ToUnicode CMap generation and parsing."""

import re

_BFCHAR_RE = re.compile(r"beginbfchar\s*(.*?)\s*endbfchar", re.DOTALL)
_BFCHAR_ENTRY_RE = re.compile(r"<([0-9A-Fa-f]+)>\s*<([0-9A-Fa-f]+)>")
_BFRANGE_RE = re.compile(r"beginbfrange\s*(.*?)\s*endbfrange", re.DOTALL)
_RANGE_INC_RE = re.compile(r"<([0-9A-Fa-f]+)>\s*<([0-9A-Fa-f]+)>\s*<([0-9A-Fa-f]+)>")
_RANGE_ARRAY_RE = re.compile(r"<([0-9A-Fa-f]+)>\s*<([0-9A-Fa-f]+)>\s*\[([^\]]*)\]")
_HEX_RE = re.compile(r"<([0-9A-Fa-f]+)>")


def _is_invalid_unicode(val: int) -> bool:
    """Checks for values that must not appear in a ToUnicode CMap."""
    return val == 0 or val == 0xFEFF or val == 0xFFFE or 0xD800 <= val <= 0xDFFF


def generate_cidfont_tounicode_cmap(code_to_unicode: dict[int, int]) -> bytes:
    """Generates ToUnicode CMap data for CIDFonts (16-bit encoding).

    Args:
        code_to_unicode: Mapping from character codes (CID/GID) to Unicode.

    Returns:
        CMap data as bytes.
    """
    lines = [
        "/CIDInit /ProcSet findresource begin",
        "12 dict begin",
        "begincmap",
        "/CIDSystemInfo <<",
        "  /Registry (Adobe)",
        "  /Ordering (UCS)",
        "  /Supplement 0",
        ">> def",
        "/CMapName /Adobe-Identity-UCS def",
        "/CMapType 2 def",
        "1 begincodespacerange",
        "<0000> <FFFF>",
        "endcodespacerange",
    ]

    sorted_codes = sorted(
        code for code, val in code_to_unicode.items() if not _is_invalid_unicode(val)
    )

    # At most 100 entries per block
    for i in range(0, len(sorted_codes), 100):
        chunk = sorted_codes[i : i + 100]
        lines.append(f"{len(chunk)} beginbfchar")
        for code in chunk:
            unicode_val = code_to_unicode[code]
            if unicode_val <= 0xFFFF:
                lines.append(f"<{code:04X}> <{unicode_val:04X}>")
            else:
                high = 0xD800 + ((unicode_val - 0x10000) >> 10)
                low = 0xDC00 + ((unicode_val - 0x10000) & 0x3FF)
                lines.append(f"<{code:04X}> <{high:04X}{low:04X}>")
        lines.append("endbfchar")

    lines.extend(
        [
            "endcmap",
            "CMapName currentdict /CMap defineresource pop",
            "end",
            "end",
        ]
    )
    return "\n".join(lines).encode("ascii")


def _decode_unicode_hex(hex_str: str) -> int:
    """Decodes a hex string from a CMap entry to a Unicode codepoint.

    Handles BMP values (4 hex digits), surrogate pairs (8 hex digits) and
    ligature sequences (first character only).
    """
    if len(hex_str) == 8:
        high = int(hex_str[:4], 16)
        low = int(hex_str[4:], 16)
        if 0xD800 <= high <= 0xDBFF and 0xDC00 <= low <= 0xDFFF:
            return 0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00)
    if len(hex_str) > 4:
        # Multi-character destination, keep the first character
        return int(hex_str[:4], 16)
    return int(hex_str, 16)


def parse_tounicode_cmap(data: bytes) -> dict[int, int]:
    """Parses a ToUnicode CMap stream into a code-to-Unicode mapping.

    Extracts entries from beginbfchar/endbfchar and beginbfrange/endbfrange
    blocks. Multi-character destinations keep their first codepoint.

    Args:
        data: Raw CMap stream bytes.

    Returns:
        Dictionary mapping character codes to Unicode codepoints.
    """
    code_to_unicode: dict[int, int] = {}
    text = data.decode("ascii", errors="replace")

    for block_match in _BFCHAR_RE.finditer(text):
        for entry in _BFCHAR_ENTRY_RE.finditer(block_match.group(1)):
            code_to_unicode[int(entry.group(1), 16)] = _decode_unicode_hex(
                entry.group(2)
            )

    for block_match in _BFRANGE_RE.finditer(text):
        block = block_match.group(1)
        for entry in _RANGE_INC_RE.finditer(block):
            start_code = int(entry.group(1), 16)
            end_code = int(entry.group(2), 16)
            unicode_start = _decode_unicode_hex(entry.group(3))
            for offset in range(end_code - start_code + 1):
                code_to_unicode[start_code + offset] = unicode_start + offset
        for entry in _RANGE_ARRAY_RE.finditer(block):
            start_code = int(entry.group(1), 16)
            end_code = int(entry.group(2), 16)
            elements = _HEX_RE.findall(entry.group(3))
            for offset, elem_hex in enumerate(elements[: end_code - start_code + 1]):
                code_to_unicode[start_code + offset] = _decode_unicode_hex(elem_hex)

    return code_to_unicode
