# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Text metrics and encoding read from PDF font dictionaries."""

import logging
from typing import Protocol

import pikepdf

from ..utils import resolve_indirect as _resolve_indirect
from .constants import (
    DEFAULT_CID_WIDTH,
    RKSJ_ASCII_FIRST_CID,
    RKSJ_HALFWIDTH_KATAKANA_FIRST_CID,
)
from .names import declared_font_name
from .standard14 import Standard14Metrics, standard14_metrics
from .tounicode import parse_tounicode_cmap
from .utils import (
    get_descendant_font,
    get_encoding_name,
    get_font_descriptor,
    is_type0_font,
)

logger = logging.getLogger(__name__)


class FontMetrics(Protocol):
    """Metrics needed to place and show a string with a font."""

    def string_width(self, text: str, font_size: float) -> float:
        """Width of ``text`` at ``font_size`` in text space units."""
        ...

    def cap_height(self, font_size: float) -> float:
        """Cap height at ``font_size`` in text space units."""
        ...

    def encode(self, text: str) -> bytes:
        """Character codes for ``text`` as used by the Tj operator."""
        ...


def parse_w_array(w_array: pikepdf.Object) -> dict[int, float]:
    """Parses a CIDFont /W array into a CID-to-width mapping.

    The /W array uses two formats:
    - [cid [w1 w2 ...]] for individual widths of consecutive CIDs
    - [cid_first cid_last width] for the same width over a range of CIDs

    Args:
        w_array: pikepdf Array representing the /W entry.

    Returns:
        Dictionary mapping CID to declared width.
    """
    w_array = _resolve_indirect(w_array)
    result: dict[int, float] = {}
    items = list(w_array)
    i = 0

    while i < len(items):
        start_cid = int(items[i])
        i += 1
        if i >= len(items):
            break

        next_item = _resolve_indirect(items[i])
        if isinstance(next_item, pikepdf.Array):
            for j, w in enumerate(next_item):
                result[start_cid + j] = float(w)
            i += 1
        else:
            end_cid = int(next_item)
            i += 1
            if i >= len(items):
                break
            width = float(items[i])
            i += 1
            for cid in range(start_cid, end_cid + 1):
                result[cid] = width

    return result


class PdfFontMetrics:
    """Font metrics taken from the widths declared in a PDF font dictionary.

    Simple fonts use /FirstChar, /Widths and /MissingWidth and are encoded
    as WinAnsi (or MacRoman when declared). Standard-14 fonts (and their
    common aliases) without /Widths use their AFM widths, and their AFM cap
    height when the descriptor declares none. Type0 fonts use the
    descendant's /W and /DW; the character codes depend on the /Encoding
    CMap:

    - Identity-H/V: two-byte codes looked up in the font's /ToUnicode map
    - 90ms-RKSJ / 90msp-RKSJ: Shift-JIS (cp932); one-byte codes map to
      their Adobe-Japan1 CIDs, two-byte codes use the default width
    - UniJIS-UCS2 / UTF16 CMaps: UTF-16BE with the default width

    Characters the encoding cannot represent are replaced, the text is not
    validated.
    """

    def __init__(self, font: pikepdf.Dictionary) -> None:
        """Initializes the metrics for a font.

        Args:
            font: pikepdf font dictionary.
        """
        self._font = font
        self._standard14: Standard14Metrics | None = None
        self._is_type0 = is_type0_font(font)
        self._descriptor = get_font_descriptor(font)
        if self._is_type0:
            self._init_type0()
        else:
            self._init_simple()

    def _init_simple(self) -> None:
        font = self._font
        encoding = font.get("/Encoding")
        encoding_name = ""
        if encoding is not None:
            encoding = _resolve_indirect(encoding)
            if isinstance(encoding, pikepdf.Dictionary):
                encoding = encoding.get("/BaseEncoding")
            if isinstance(encoding, pikepdf.Name):
                encoding_name = str(encoding)
        self._codec = "mac_roman" if encoding_name == "/MacRomanEncoding" else "cp1252"

        self._first_char = int(font.get("/FirstChar", 0))
        widths = font.get("/Widths")
        self._widths = (
            [float(w) for w in _resolve_indirect(widths)] if widths is not None else []
        )
        missing = None
        if self._descriptor is not None:
            missing = self._descriptor.get("/MissingWidth")
        self._default_width = float(missing) if missing is not None else 0.0

        self._standard14 = standard14_metrics(declared_font_name(font))
        if widths is None and self._standard14 is not None:
            afm = self._standard14
            logger.debug("Using AFM widths of %s", afm.name)
            if missing is None:
                self._default_width = float(afm.default_width)
            self._first_char = 0
            self._widths = [
                float(afm.widths.get(code, self._default_width)) for code in range(256)
            ]

    @property
    def has_widths(self) -> bool:
        """True if widths are known, from the font or from its AFM metrics."""
        if self._is_type0:
            return True
        return bool(self._widths) or self._default_width > 0

    def _init_type0(self) -> None:
        font = self._font
        encoding = font.get("/Encoding")
        self._encoding_name = (
            get_encoding_name(_resolve_indirect(encoding)) if encoding is not None else ""
        )

        descendant = get_descendant_font(font)
        self._cid_widths: dict[int, float] = {}
        self._default_width = float(DEFAULT_CID_WIDTH)
        if descendant is not None:
            w_array = descendant.get("/W")
            if w_array is not None:
                self._cid_widths = parse_w_array(w_array)
            self._default_width = float(descendant.get("/DW", DEFAULT_CID_WIDTH))

        self._unicode_to_code: dict[int, int] = {}
        if self._encoding_name.startswith("Identity"):
            to_unicode = font.get("/ToUnicode")
            if to_unicode is not None:
                to_unicode = _resolve_indirect(to_unicode)
                if isinstance(to_unicode, pikepdf.Stream):
                    mapping = parse_tounicode_cmap(to_unicode.read_bytes())
                    # Lowest code wins when several codes share a character
                    for code in sorted(mapping, reverse=True):
                        self._unicode_to_code[mapping[code]] = code
            else:
                logger.debug(
                    "Identity-encoded font without /ToUnicode, "
                    "using Unicode values as character codes"
                )

    def _simple_codes(self, text: str) -> tuple[bytes, list[float]]:
        data = text.encode(self._codec, errors="replace")
        widths = []
        for code in data:
            index = code - self._first_char
            if 0 <= index < len(self._widths):
                widths.append(self._widths[index])
            else:
                widths.append(self._default_width)
        return data, widths

    def _cid_width(self, cid: int | None) -> float:
        if cid is None:
            return self._default_width
        return self._cid_widths.get(cid, self._default_width)

    def _type0_codes(self, text: str) -> tuple[bytes, list[float]]:
        name = self._encoding_name

        if name.startswith("Identity"):
            codes = []
            for char in text:
                code = self._unicode_to_code.get(ord(char))
                if code is None:
                    code = 0 if self._unicode_to_code else ord(char) & 0xFFFF
                codes.append(code)
            data = b"".join(code.to_bytes(2, "big") for code in codes)
            return data, [self._cid_width(code) for code in codes]

        if "RKSJ" in name:
            data = text.encode("cp932", errors="replace")
            ascii_first = 1 if name.startswith("90msp") else RKSJ_ASCII_FIRST_CID
            widths = []
            i = 0
            while i < len(data):
                byte = data[i]
                if (0x81 <= byte <= 0x9F or 0xE0 <= byte <= 0xFC) and i + 1 < len(data):
                    widths.append(self._cid_width(None))
                    i += 2
                    continue
                if 0x20 <= byte <= 0x7E:
                    cid = ascii_first + byte - 0x20
                elif 0xA1 <= byte <= 0xDF:
                    cid = RKSJ_HALFWIDTH_KATAKANA_FIRST_CID + byte - 0xA1
                else:
                    cid = None
                widths.append(self._cid_width(cid))
                i += 1
            return data, widths

        if name and not ("UCS2" in name or "UTF16" in name):
            logger.debug("Unsupported CMap %s, encoding text as UTF-16BE", name)
        data = text.encode("utf-16-be", errors="replace")
        return data, [self._cid_width(None)] * (len(data) // 2)

    def _codes(self, text: str) -> tuple[bytes, list[float]]:
        if self._is_type0:
            return self._type0_codes(text)
        return self._simple_codes(text)

    def encode(self, text: str) -> bytes:
        """Encodes text into the font's character codes.

        Args:
            text: Text to show.

        Returns:
            Byte string for the Tj operator.
        """
        return self._codes(text)[0]

    def string_width(self, text: str, font_size: float) -> float:
        """Computes the advance width of a string.

        Args:
            text: Text to measure.
            font_size: Font size in text space units.

        Returns:
            Width in text space units.
        """
        _, widths = self._codes(text)
        return sum(widths) / 1000.0 * font_size

    def cap_height(self, font_size: float) -> float:
        """Computes the cap height at a font size.

        Args:
            font_size: Font size in text space units.

        Returns:
            Cap height in text space units. Standard-14 fonts fall back to
            the AFM value, other fonts to 0 when the font descriptor does
            not declare /CapHeight.
        """
        cap_height = None
        if self._descriptor is not None:
            cap_height = self._descriptor.get("/CapHeight")
        if cap_height is None:
            if self._standard14 is None:
                return 0.0
            cap_height = self._standard14.cap_height
        return float(cap_height) / 1000.0 * font_size
