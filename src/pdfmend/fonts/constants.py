# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Fixed lookup tables for font name repair."""

import codecs
from types import MappingProxyType

# Codec used to reinterpret the reconstructed name bytes
SHIFT_JIS_CODEC = "shift_jis"

# A fixed codec: decoding the reconstructed bytes can never fail at run time
assert codecs.lookup(SHIFT_JIS_CODEC).name == "shift_jis"

# Windows-1252 codepoints that Shift-JIS lead bytes 0x82-0x9F turn into when
# a name is mis-decoded. 0x81, 0x8D, 0x8F, 0x90 and 0x9D are undefined in
# Windows-1252 and survive as their own C1 codepoint instead.
C1_CODEPOINT_TO_BYTE = MappingProxyType(
    {
        0x201A: 0x82,
        0x0192: 0x83,
        0x201E: 0x84,
        0x2026: 0x85,
        0x2020: 0x86,
        0x2021: 0x87,
        0x02C6: 0x88,
        0x2030: 0x89,
        0x0160: 0x8A,
        0x2039: 0x8B,
        0x0152: 0x8C,
        0x2018: 0x91,
        0x2019: 0x92,
        0x201C: 0x93,
        0x201D: 0x94,
        0x2022: 0x95,
        0x2013: 0x96,
        0x2014: 0x97,
        0x02DC: 0x98,
        0x2122: 0x99,
        0x0161: 0x9A,
        0x203A: 0x9B,
        0x0153: 0x9C,
        0x0178: 0x9F,
    }
)

# Japanese MS font names (plain, spaced, vertical "@" variants) mapped to
# their English names
CANONICAL_FONT_NAMES = MappingProxyType(
    {
        "ＭＳ明朝": "MS Mincho",
        "ＭＳ 明朝": "MS Mincho",
        "@ＭＳ明朝": "MS Mincho",
        "@ＭＳ 明朝": "MS Mincho",
        "ＭＳＰ明朝": "MS PMincho",
        "ＭＳ Ｐ明朝": "MS PMincho",
        "@ＭＳＰ明朝": "MS PMincho",
        "@ＭＳ Ｐ明朝": "MS PMincho",
        "ＭＳゴシック": "MS Gothic",
        "ＭＳ ゴシック": "MS Gothic",
        "@ＭＳゴシック": "MS Gothic",
        "@ＭＳ ゴシック": "MS Gothic",
        "ＭＳＰゴシック": "MS PGothic",
        "ＭＳ Ｐゴシック": "MS PGothic",
        "@ＭＳＰゴシック": "MS PGothic",
        "@ＭＳ Ｐゴシック": "MS PGothic",
    }
)

# Adobe-Japan1 CIDs of the one-byte ranges in the 90ms-RKSJ CMaps
RKSJ_ASCII_FIRST_CID = 231
RKSJ_HALFWIDTH_KATAKANA_FIRST_CID = 326

# Default width of a CIDFont when /DW is absent (ISO 32000-1, Table 117)
DEFAULT_CID_WIDTH = 1000
