# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font name decoding and Shift-JIS mojibake repair.

Some report generators write Japanese font names into /BaseFont as raw
Shift-JIS bytes. PDF libraries that decode such names as Windows-1252 turn
the lead bytes 0x82-0x9F into typographic punctuation (U+201A, U+2013, ...),
so ``ＭＳ明朝`` becomes ``‚l‚r–¾’©``, and once the document is saved again
the damaged text is what ends up in the file.

:func:`repair_name` reverses that decoding byte by byte and reinterprets the
result as Shift-JIS. :func:`canonical_font_name` then maps the recovered
Japanese name to its English MS font name.
"""

import logging
import re

import pikepdf

from .constants import C1_CODEPOINT_TO_BYTE, CANONICAL_FONT_NAMES, SHIFT_JIS_CODEC

logger = logging.getLogger(__name__)

_NAME_ESCAPE_RE = re.compile(rb"#([0-9A-Fa-f]{2})")
_SUBSET_PREFIX_RE = re.compile(r"^([A-Z]{6}\+)(.*)$", re.DOTALL)


def _build_cp1252_table() -> tuple[str, ...]:
    """Single-byte Windows-1252 table, undefined bytes kept as C1 codepoints."""
    table = []
    for byte in range(256):
        try:
            table.append(bytes([byte]).decode("cp1252"))
        except UnicodeDecodeError:
            table.append(chr(byte))
    return tuple(table)


_CP1252_TABLE = _build_cp1252_table()


def decode_cp1252(data: bytes) -> str:
    """Decodes bytes as Windows-1252, keeping undefined bytes as C1 codepoints.

    This is the lossy decoding that produces the damaged font names in the
    first place; bytes 0x81, 0x8D, 0x8F, 0x90 and 0x9D are undefined in
    Windows-1252 and come out as U+0081 etc.

    Args:
        data: Raw bytes.

    Returns:
        Decoded string with exactly one character per input byte.
    """
    return "".join(_CP1252_TABLE[byte] for byte in data)


def _raw_name_bytes(value: pikepdf.Object) -> bytes:
    """Returns the raw bytes of a PDF name or string object."""
    if isinstance(value, pikepdf.Name):
        raw = value.unparse()
        if raw.startswith(b"/"):
            raw = raw[1:]
        return _NAME_ESCAPE_RE.sub(lambda m: bytes([int(m.group(1), 16)]), raw)
    return bytes(value)


def declared_font_name(font: pikepdf.Object) -> str:
    """Returns the declared /BaseFont name of a font as text.

    The name bytes are decoded as UTF-8. Names that are not valid UTF-8
    (typically raw Shift-JIS) are decoded as Windows-1252, which yields
    the same mojibake a round trip through a Windows-1252 decoder leaves
    behind, so both forms can be repaired by :func:`repair_name`.

    Both name objects and string objects are accepted as /BaseFont values.

    Args:
        font: pikepdf font dictionary.

    Returns:
        The decoded font name, or an empty string if /BaseFont is missing.
    """
    base_font = font.get("/BaseFont")
    if base_font is None:
        return ""
    data = _raw_name_bytes(base_font)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return decode_cp1252(data)


def reconstruct_name_bytes(name: str) -> bytes:
    """Turns a mis-decoded name back into the bytes it was decoded from.

    Every codepoint listed in ``C1_CODEPOINT_TO_BYTE`` becomes its Shift-JIS
    lead byte, every other codepoint its low byte.

    Args:
        name: Font name as decoded by the lossy decoder.

    Returns:
        One byte per character of ``name``.
    """
    buffer = bytearray()
    for char in name:
        codepoint = ord(char)
        byte = C1_CODEPOINT_TO_BYTE.get(codepoint)
        buffer.append(byte if byte is not None else codepoint & 0xFF)
    return bytes(buffer)


def repair_name(name: str) -> str | None:
    """Reconstructs a Shift-JIS font name from its Windows-1252 mojibake.

    The bytes from :func:`reconstruct_name_bytes` are decoded as Shift-JIS.
    Malformed sequences decode to U+FFFD, so the decode itself never fails.

    Args:
        name: Font name as decoded by the lossy decoder.

    Returns:
        The repaired name, or None if reinterpreting the bytes does not
        change the name (the name was not damaged).
    """
    repaired = reconstruct_name_bytes(name).decode(SHIFT_JIS_CODEC, errors="replace")
    if repaired == name:
        return None
    return repaired


def split_subset_prefix(name: str) -> tuple[str, str]:
    """Splits a font name into its subset tag and base name.

    Args:
        name: Font name, e.g. ``"ABCDEF+MS Mincho"``.

    Returns:
        Tuple of (prefix including the "+", base name). The prefix is
        empty for names without a subset tag.
    """
    match = _SUBSET_PREFIX_RE.match(name)
    if match is None:
        return "", name
    return match.group(1), match.group(2)


def canonical_font_name(name: str) -> str | None:
    """Maps a damaged Japanese font name to its English MS font name.

    Args:
        name: Declared font name, possibly carrying a subset tag.

    Returns:
        The canonical name (with the original subset tag, if any), or None
        if the name is not damaged or not one of the known fonts.
    """
    repaired = repair_name(name)
    if repaired is None:
        return None
    prefix, base_name = split_subset_prefix(repaired)
    canonical = CANONICAL_FONT_NAMES.get(base_name)
    if canonical is None:
        logger.debug("Repaired font name %r is not a known MS font", repaired)
        return None
    return prefix + canonical
