# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Embedding of TrueType fonts as Type0/CIDFontType2 fonts."""

import logging
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING

import pikepdf
from pikepdf import Array, Dictionary, Name, Stream

from ..exceptions import FontLoadError
from .tounicode import generate_cidfont_tounicode_cmap

if TYPE_CHECKING:
    from fontTools.ttLib import TTFont

logger = logging.getLogger(__name__)


def _font_flags(tt_font: "TTFont") -> int:
    """Computes PDF font flags (FixedPitch, Serif, Italic; always Nonsymbolic)."""
    flags = 32  # Nonsymbolic

    if "post" in tt_font:
        post = tt_font["post"]
        if getattr(post, "isFixedPitch", 0):
            flags |= 1
        if getattr(post, "italicAngle", 0) != 0:
            flags |= 64

    os2 = tt_font.get("OS/2")
    if os2 is not None:
        family_class = getattr(os2, "sFamilyClass", 0) >> 8
        if 1 <= family_class <= 7:
            flags |= 2
        if getattr(os2, "fsSelection", 0) & 0x0001:
            flags |= 64

    return flags


def extract_metrics(tt_font: "TTFont") -> dict:
    """Extracts font descriptor metrics scaled to 1000 units per em.

    Args:
        tt_font: fonttools TTFont object.

    Returns:
        Dictionary with FontBBox, Ascent, Descent, CapHeight, StemV,
        ItalicAngle and Flags.

    Raises:
        FontLoadError: If the head or OS/2 table is missing.
    """
    if "head" not in tt_font or "OS/2" not in tt_font:
        raise FontLoadError("Font is missing the head or OS/2 table")
    head = tt_font["head"]
    os2 = tt_font["OS/2"]
    scale = 1000.0 / head.unitsPerEm

    ascent = int(os2.sTypoAscender * scale)
    # sCapHeight exists from OS/2 version 2 on
    cap_height = getattr(os2, "sCapHeight", 0)
    cap_height = int(cap_height * scale) if cap_height else ascent
    weight = getattr(os2, "usWeightClass", 400)

    return {
        "FontBBox": [
            int(head.xMin * scale),
            int(head.yMin * scale),
            int(head.xMax * scale),
            int(head.yMax * scale),
        ],
        "Ascent": ascent,
        "Descent": int(os2.sTypoDescender * scale),
        "CapHeight": cap_height,
        "StemV": int(10 + 220 * (weight / 1000) ** 2),
        "ItalicAngle": tt_font["post"].italicAngle if "post" in tt_font else 0,
        "Flags": _font_flags(tt_font),
    }


def build_w_array(tt_font: "TTFont") -> tuple[list, int]:
    """Creates the /W array and default width for an Identity-mapped CIDFont.

    Runs of four or more equal widths are written as
    ``cid_first cid_last width``, everything else as ``cid [w1 w2 ...]``.

    Args:
        tt_font: fonttools TTFont object.

    Returns:
        Tuple of (W array entries, default width).
    """
    hmtx = tt_font["hmtx"]
    scale = 1000.0 / tt_font["head"].unitsPerEm
    default_width = round(hmtx.metrics.get(".notdef", (500, 0))[0] * scale)

    widths = []
    for glyph_name in tt_font.getGlyphOrder():
        if glyph_name in hmtx.metrics:
            widths.append(round(hmtx.metrics[glyph_name][0] * scale))
        else:
            widths.append(default_width)

    w_array: list = []
    k = 0
    while k < len(widths):
        m = k + 1
        while m < len(widths) and widths[m] == widths[k]:
            m += 1
        if m - k >= 4:
            w_array.extend([k, m - 1, widths[k]])
            k = m
            continue

        # Individual widths up to the next run of four equal widths
        end = m
        while end < len(widths):
            lookahead = end + 1
            while lookahead < len(widths) and widths[lookahead] == widths[end]:
                lookahead += 1
            if lookahead - end >= 4:
                break
            end = lookahead
        w_array.extend([k, Array(widths[k:end])])
        k = end

    return w_array, default_width


def _gid_to_unicode(tt_font: "TTFont") -> dict[int, int]:
    """Maps glyph IDs to the first Unicode value that references them."""
    try:
        cmap = tt_font.getBestCmap() or {}
    except KeyError:
        cmap = {}
    glyph_ids = {name: gid for gid, name in enumerate(tt_font.getGlyphOrder())}

    gid_to_unicode: dict[int, int] = {}
    for unicode_val in sorted(cmap):
        gid = glyph_ids.get(cmap[unicode_val])
        if gid is not None and gid not in gid_to_unicode:
            gid_to_unicode[gid] = unicode_val
    return gid_to_unicode


def _postscript_name(tt_font: "TTFont", fallback: str) -> str:
    """Returns the font's PostScript name without spaces."""
    name = None
    if "name" in tt_font:
        name = tt_font["name"].getDebugName(6) or tt_font["name"].getDebugName(4)
    return (name or fallback).replace(" ", "")


def load_truetype_font(pdf: pikepdf.Pdf, source: Path | str | bytes) -> Dictionary:
    """Embeds a TrueType font as an indirect Type0 font.

    Builds the complete hierarchy: Type0 dictionary, CIDFontType2 descendant
    with /W widths and Identity /CIDToGIDMap, FontDescriptor with FontFile2
    and a ToUnicode CMap that maps glyph IDs back to Unicode. The whole font
    program is embedded. Only horizontal writing (Identity-H) is supported.

    Args:
        pdf: Opened pikepdf PDF object that will own the font.
        source: Path to a .ttf file or the raw font bytes.

    Returns:
        The indirect Type0 font dictionary.

    Raises:
        FontLoadError: If the font cannot be read or lacks required tables.
    """
    from fontTools.ttLib import TTFont, TTLibError

    if isinstance(source, bytes):
        font_data = source
        fallback_name = "EmbeddedFont"
    else:
        path = Path(source)
        try:
            font_data = path.read_bytes()
        except OSError as e:
            raise FontLoadError(f"Could not read font file '{path}': {e}") from e
        fallback_name = path.stem

    try:
        tt_font = TTFont(BytesIO(font_data))
    except (TTLibError, OSError, ValueError) as e:
        raise FontLoadError(f"Could not parse font '{fallback_name}': {e}") from e

    try:
        if "glyf" not in tt_font:
            raise FontLoadError(
                f"Font '{fallback_name}' has no TrueType outlines (glyf table)"
            )
        font_name = _postscript_name(tt_font, fallback_name)
        metrics = extract_metrics(tt_font)
        w_array, default_width = build_w_array(tt_font)
        to_unicode_data = generate_cidfont_tounicode_cmap(_gid_to_unicode(tt_font))
    finally:
        tt_font.close()

    font_stream = Stream(pdf, font_data)
    font_stream[Name.Length1] = len(font_data)

    font_descriptor = Dictionary(
        Type=Name.FontDescriptor,
        FontName=Name(f"/{font_name}"),
        Flags=metrics["Flags"],
        FontBBox=Array(metrics["FontBBox"]),
        ItalicAngle=metrics["ItalicAngle"],
        Ascent=metrics["Ascent"],
        Descent=metrics["Descent"],
        CapHeight=metrics["CapHeight"],
        StemV=metrics["StemV"],
        FontFile2=pdf.make_indirect(font_stream),
    )

    cid_font = Dictionary(
        Type=Name.Font,
        Subtype=Name.CIDFontType2,
        BaseFont=Name(f"/{font_name}"),
        CIDSystemInfo=Dictionary(
            Registry=pikepdf.String("Adobe"),
            Ordering=pikepdf.String("Identity"),
            Supplement=0,
        ),
        FontDescriptor=pdf.make_indirect(font_descriptor),
        DW=default_width,
        W=Array(w_array),
        CIDToGIDMap=Name.Identity,
    )

    type0_font = Dictionary(
        Type=Name.Font,
        Subtype=Name.Type0,
        BaseFont=Name(f"/{font_name}"),
        Encoding=Name("/Identity-H"),
        DescendantFonts=Array([pdf.make_indirect(cid_font)]),
        ToUnicode=pdf.make_indirect(Stream(pdf, to_unicode_data)),
    )

    logger.info("Embedded TrueType font %s as Type0 font", font_name)
    return pdf.make_indirect(type0_font)
