# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for fonts/names.py and fonts/constants.py."""

from io import BytesIO

import pytest
from conftest import make_type0_font, new_pdf, open_pdf
from font_helpers import mojibake
from pikepdf import Dictionary, Name, String

from pdfmend.fonts.constants import C1_CODEPOINT_TO_BYTE, CANONICAL_FONT_NAMES
from pdfmend.fonts.names import (
    canonical_font_name,
    declared_font_name,
    decode_cp1252,
    reconstruct_name_bytes,
    repair_name,
    split_subset_prefix,
)

# Shift-JIS bytes of ＭＳ明朝
MINCHO_SJIS = b"\x82l\x82r\x96\xbe\x92\xa9"


class TestConstants:
    """Tests for the fixed lookup tables."""

    def test_remap_has_24_entries(self):
        assert len(C1_CODEPOINT_TO_BYTE) == 24

    def test_remap_values_unique_and_in_range(self):
        values = list(C1_CODEPOINT_TO_BYTE.values())
        assert len(set(values)) == len(values)
        assert all(0x82 <= v <= 0x9F for v in values)

    def test_remap_excludes_undefined_windows_1252_bytes(self):
        for byte in (0x81, 0x8D, 0x8F, 0x90, 0x9D):
            assert byte not in C1_CODEPOINT_TO_BYTE.values()

    def test_remap_matches_windows_1252(self):
        for codepoint, byte in C1_CODEPOINT_TO_BYTE.items():
            assert bytes([byte]).decode("cp1252") == chr(codepoint)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            C1_CODEPOINT_TO_BYTE[0x20AC] = 0x80  # type: ignore[index]
        with pytest.raises(TypeError):
            CANONICAL_FONT_NAMES["Arial"] = "Arial"  # type: ignore[index]

    def test_canonical_table_has_16_keys(self):
        assert len(CANONICAL_FONT_NAMES) == 16

    def test_each_family_has_four_variants(self):
        values = list(CANONICAL_FONT_NAMES.values())
        assert set(values) == {"MS Mincho", "MS PMincho", "MS Gothic", "MS PGothic"}
        for canonical in set(values):
            assert values.count(canonical) == 4


class TestDecodeCp1252:
    """Tests for decode_cp1252()."""

    def test_ascii(self):
        assert decode_cp1252(b"Arial") == "Arial"

    def test_defined_high_bytes(self):
        assert decode_cp1252(b"\x82\x96") == "‚–"

    def test_undefined_bytes_kept_as_c1(self):
        assert decode_cp1252(b"\x81\x8d\x8f\x90\x9d") == "\x81\x8d\x8f\x90\x9d"

    def test_one_char_per_byte(self):
        data = bytes(range(256))
        assert len(decode_cp1252(data)) == 256


class TestReconstructNameBytes:
    """Tests for reconstruct_name_bytes()."""

    @pytest.mark.parametrize("codepoint,byte", sorted(C1_CODEPOINT_TO_BYTE.items()))
    def test_remapped_codepoint(self, codepoint, byte):
        assert reconstruct_name_bytes(chr(codepoint)) == bytes([byte])

    def test_other_codepoints_pass_as_low_byte(self):
        assert reconstruct_name_bytes("Arial") == b"Arial"
        assert reconstruct_name_bytes("\xbe\xa9") == b"\xbe\xa9"
        assert reconstruct_name_bytes("\x81") == b"\x81"

    def test_unmapped_wide_codepoint_truncated(self):
        # U+20AC is not remapped, its low byte is 0xAC
        assert reconstruct_name_bytes("€") == b"\xac"

    def test_mojibake_back_to_shift_jis(self):
        assert reconstruct_name_bytes(mojibake("ＭＳ明朝")) == MINCHO_SJIS


class TestRepairName:
    """Tests for repair_name()."""

    def test_repairs_mincho(self):
        damaged = mojibake("ＭＳ明朝")
        assert damaged == "‚l‚r–\xbe’\xa9"
        assert repair_name(damaged) == "ＭＳ明朝"

    @pytest.mark.parametrize("name", sorted(CANONICAL_FONT_NAMES))
    def test_repairs_every_known_name(self, name):
        assert repair_name(mojibake(name)) == name

    @pytest.mark.parametrize("name", ["Arial", "MS Mincho", "Helvetica-Bold", ""])
    def test_ascii_name_unchanged(self, name):
        assert repair_name(name) is None

    def test_malformed_sequence_replaced(self):
        # A lone lead byte cannot be decoded
        assert repair_name("\x81") == "\ufffd"

    def test_never_raises(self):
        assert repair_name("".join(chr(c) for c in range(0x80, 0x100))) is not None


class TestSubsetPrefix:
    """Tests for split_subset_prefix()."""

    def test_with_prefix(self):
        assert split_subset_prefix("ABCDEF+MS Mincho") == ("ABCDEF+", "MS Mincho")

    def test_without_prefix(self):
        assert split_subset_prefix("MS Mincho") == ("", "MS Mincho")

    def test_lowercase_tag_not_a_prefix(self):
        assert split_subset_prefix("abcdef+Font") == ("", "abcdef+Font")


class TestCanonicalFontName:
    """Tests for canonical_font_name()."""

    @pytest.mark.parametrize("name", sorted(CANONICAL_FONT_NAMES))
    def test_known_names(self, name):
        assert canonical_font_name(mojibake(name)) == CANONICAL_FONT_NAMES[name]

    def test_spaced_and_vertical_variants_share_canonical(self):
        assert canonical_font_name(mojibake("@ＭＳ Ｐゴシック")) == "MS PGothic"
        assert canonical_font_name(mojibake("ＭＳＰゴシック")) == "MS PGothic"

    def test_subset_prefix_kept(self):
        damaged = "ABCDEF+" + mojibake("ＭＳ明朝")
        assert canonical_font_name(damaged) == "ABCDEF+MS Mincho"

    def test_unknown_japanese_name(self):
        assert canonical_font_name(mojibake("游ゴシック")) is None

    def test_undamaged_japanese_name(self):
        # Already correct names are not reinterpreted
        assert canonical_font_name("ＭＳ明朝") is None

    def test_ascii_name(self):
        assert canonical_font_name("MS Gothic") is None


class TestDeclaredFontName:
    """Tests for declared_font_name()."""

    def test_ascii_name(self):
        font = Dictionary(BaseFont=Name("/Arial"))
        assert declared_font_name(font) == "Arial"

    def test_missing_base_font(self):
        assert declared_font_name(Dictionary(Type=Name.Font)) == ""

    def test_utf8_name(self):
        pdf = new_pdf()
        font = make_type0_font(pdf, "ＭＳ明朝")
        assert declared_font_name(font) == "ＭＳ明朝"

    def test_mojibake_name(self):
        pdf = new_pdf()
        font = make_type0_font(pdf, mojibake("ＭＳ明朝"))
        assert declared_font_name(font) == mojibake("ＭＳ明朝")

    def test_raw_shift_jis_string(self):
        font = Dictionary(BaseFont=String(MINCHO_SJIS))
        assert declared_font_name(font) == mojibake("ＭＳ明朝")

    def test_raw_shift_jis_name_from_file(self):
        """A name written as raw Shift-JIS bytes decodes to the mojibake."""
        placeholder = "A" * 20
        pdf = new_pdf()
        pdf.Root.TestFont = pdf.make_indirect(
            Dictionary(Type=Name.Font, BaseFont=Name("/" + placeholder))
        )
        buf = BytesIO()
        pdf.save(buf)
        data = buf.getvalue()
        assert data.count(placeholder.encode()) == 1

        escaped = b"#82l#82r#96#BE#92#A9"
        assert len(escaped) == len(placeholder)
        reopened = open_pdf(BytesIO(data.replace(placeholder.encode(), escaped)))

        font = reopened.Root.TestFont
        assert declared_font_name(font) == mojibake("ＭＳ明朝")
        assert canonical_font_name(declared_font_name(font)) == "MS Mincho"
