# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/metrics.py: widths, cap height and text encoding."""

import pytest
from conftest import make_simple_font, make_type0_font, new_pdf
from pikepdf import Array, Dictionary, Name

from pdfmend.fonts.metrics import PdfFontMetrics, parse_w_array
from pdfmend.fonts.utils import get_descendant_font

TO_UNICODE = b"""/CIDInit /ProcSet findresource begin
12 dict begin
begincmap
1 begincodespacerange
<0000> <FFFF>
endcodespacerange
2 beginbfchar
<0005> <0041>
<0007> <0041>
endbfchar
1 beginbfrange
<0010> <0012> <0061>
endbfrange
endcmap
end
end
"""


def _identity_font(pdf, *, to_unicode=True):
    font = make_type0_font(pdf, "TestCID")
    font.Encoding = Name("/Identity-H")
    descendant = get_descendant_font(font)
    descendant.W = Array([5, Array([600]), 16, 18, 400])
    descendant.DW = 900
    if to_unicode:
        font.ToUnicode = pdf.make_stream(TO_UNICODE)
    return font


class TestParseWArray:
    """Tests for parse_w_array()."""

    def test_both_formats(self):
        w = Array([1, Array([100, 200]), 10, 12, 300])
        assert parse_w_array(w) == {
            1: 100.0,
            2: 200.0,
            10: 300.0,
            11: 300.0,
            12: 300.0,
        }

    def test_empty(self):
        assert parse_w_array(Array([])) == {}

    def test_truncated_array(self):
        assert parse_w_array(Array([1, 5])) == {}


class TestSimpleFontMetrics:
    """Tests for simple fonts."""

    def test_widths(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(make_simple_font(pdf, "Arial"))
        assert metrics.string_width("AB", 10) == pytest.approx(10.0)
        assert metrics.string_width("", 10) == 0.0

    def test_encode_winansi(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(make_simple_font(pdf, "Arial"))
        assert metrics.encode("Ab €") == b"Ab \x80"

    def test_encode_mac_roman(self):
        pdf = new_pdf()
        font = make_simple_font(pdf, "Arial")
        font.Encoding = Dictionary(BaseEncoding=Name.MacRomanEncoding)
        assert PdfFontMetrics(font).encode("é") == b"\x8e"

    def test_code_outside_widths_uses_missing_width(self):
        pdf = new_pdf()
        font = make_simple_font(pdf, "Arial")
        font.FontDescriptor = Dictionary(
            Type=Name.FontDescriptor, FontName=Name.Arial, MissingWidth=250
        )
        # Tab (0x09) lies below /FirstChar
        assert PdfFontMetrics(font).string_width("\t", 10) == pytest.approx(2.5)

    def test_cap_height_without_descriptor(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(make_simple_font(pdf, "TestSans"))
        assert metrics.cap_height(12) == 0.0

    def test_cap_height_from_descriptor(self):
        pdf = new_pdf()
        font = make_simple_font(pdf, "Arial")
        font.FontDescriptor = Dictionary(
            Type=Name.FontDescriptor, FontName=Name.Arial, CapHeight=716
        )
        assert PdfFontMetrics(font).cap_height(10) == pytest.approx(7.16)


def _type1_font(pdf, base_font, **entries):
    return pdf.make_indirect(
        Dictionary(
            Type=Name.Font, Subtype=Name.Type1, BaseFont=Name("/" + base_font), **entries
        )
    )


class TestStandard14Metrics:
    """Tests for Standard-14 fonts without /Widths."""

    def test_afm_widths(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_type1_font(pdf, "Helvetica"))
        # C O N F I D E N T I A L in Helvetica: 7334 units
        assert metrics.string_width("CONFIDENTIAL", 12) == pytest.approx(88.008)

    def test_afm_cap_height(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_type1_font(pdf, "Helvetica"))
        assert metrics.cap_height(12) == pytest.approx(8.616)

    def test_declared_cap_height_wins(self):
        pdf = new_pdf()
        font = _type1_font(pdf, "Times-Roman")
        font.FontDescriptor = Dictionary(
            Type=Name.FontDescriptor, FontName=Name("/Times-Roman"), CapHeight=700
        )
        assert PdfFontMetrics(font).cap_height(10) == pytest.approx(7.0)

    def test_alias_with_subset_prefix(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_type1_font(pdf, "ABCDEF+CourierNewPSMT"))
        assert metrics.string_width("AB", 10) == pytest.approx(12.0)
        assert metrics.cap_height(10) == pytest.approx(5.62)

    def test_code_without_glyph_uses_default_width(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_type1_font(pdf, "Helvetica"))
        assert metrics.string_width("\x7f", 10) == pytest.approx(2.78)

    def test_declared_widths_win(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(make_simple_font(pdf, "Helvetica"))
        assert metrics.string_width("AB", 10) == pytest.approx(10.0)
        assert metrics.has_widths

    def test_unknown_font_without_widths(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_type1_font(pdf, "CustomSans"))
        assert not metrics.has_widths
        assert metrics.string_width("AB", 10) == 0.0
        assert metrics.cap_height(10) == 0.0

    def test_missing_width_only(self):
        pdf = new_pdf()
        font = _type1_font(pdf, "CustomSans")
        font.FontDescriptor = Dictionary(
            Type=Name.FontDescriptor, FontName=Name("/CustomSans"), MissingWidth=500
        )
        metrics = PdfFontMetrics(font)
        assert metrics.has_widths
        assert metrics.string_width("AB", 10) == pytest.approx(10.0)


class TestRksjMetrics:
    """Tests for Type0 fonts with a Shift-JIS CMap."""

    def test_ascii_widths_from_w_array(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(make_type0_font(pdf, "MS-Mincho"))
        assert metrics.string_width("AB", 10) == pytest.approx(10.0)
        assert metrics.encode("AB") == b"AB"

    def test_double_byte_uses_default_width(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(make_type0_font(pdf, "MS-Mincho"))
        assert metrics.encode("明") == b"\x96\xbe"
        assert metrics.string_width("明", 10) == pytest.approx(10.0)
        assert metrics.string_width("明A", 10) == pytest.approx(15.0)

    def test_halfwidth_katakana(self):
        pdf = new_pdf()
        font = make_type0_font(pdf, "MS-Mincho")
        get_descendant_font(font).W = Array([342, Array([500])])
        metrics = PdfFontMetrics(font)
        # U+FF71 is 0xB1 in Shift-JIS, CID 326 + 0x10
        assert metrics.encode("ｱ") == b"\xb1"
        assert metrics.string_width("ｱ", 10) == pytest.approx(5.0)

    def test_proportional_cmap(self):
        pdf = new_pdf()
        font = make_type0_font(pdf, "MS-PMincho")
        font.Encoding = Name("/90msp-RKSJ-H")
        get_descendant_font(font).W = Array([34, Array([612])])
        # "A" is CID 34 in 90msp-RKSJ
        assert PdfFontMetrics(font).string_width("A", 10) == pytest.approx(6.12)

    def test_cap_height(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(make_type0_font(pdf, "MS-Mincho"))
        assert metrics.cap_height(10) == pytest.approx(7.69)


class TestIdentityMetrics:
    """Tests for Identity-H Type0 fonts."""

    def test_encode_via_to_unicode(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_identity_font(pdf))
        # Lowest code wins for "A"
        assert metrics.encode("Aab") == b"\x00\x05\x00\x10\x00\x11"

    def test_unmapped_character_uses_code_zero(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_identity_font(pdf))
        assert metrics.encode("Z") == b"\x00\x00"

    def test_widths(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_identity_font(pdf))
        # A -> 5 (600), a -> 16 (400), Z -> 0 (DW 900)
        assert metrics.string_width("AaZ", 10) == pytest.approx(19.0)

    def test_without_to_unicode(self):
        pdf = new_pdf()
        metrics = PdfFontMetrics(_identity_font(pdf, to_unicode=False))
        assert metrics.encode("A") == b"\x00A"


class TestUnicodeCMapMetrics:
    """Tests for Type0 fonts with a UCS-2 CMap."""

    def test_utf16_encoding(self):
        pdf = new_pdf()
        font = make_type0_font(pdf, "MS-Mincho")
        font.Encoding = Name("/UniJIS-UCS2-H")
        metrics = PdfFontMetrics(font)
        assert metrics.encode("A明") == b"\x00A\x66\x0e"
        assert metrics.string_width("A明", 10) == pytest.approx(20.0)
