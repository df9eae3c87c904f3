# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Metrics of the Standard-14 fonts.

A PDF may reference the Standard-14 fonts without /Widths or a font
descriptor; viewers take the metrics from the Adobe Font Metrics (AFM)
files. The tables below hold the AFM advance widths by WinAnsiEncoding
character code (Symbol and ZapfDingbats by their built-in encoding), in
1/1000 of the font size.
"""

from dataclasses import dataclass
from types import MappingProxyType

from .names import split_subset_prefix


def _width_table(rows: str) -> dict[int, int]:
    """Parses widths for codes 32-255, 16 per row; 0 marks a code without a glyph."""
    values = [int(v) for v in rows.split()]
    assert len(values) == 224
    return {code: width for code, width in enumerate(values, start=32) if width}


_HELVETICA = _width_table(
    """
     278  278  355  556  556  889  667  191  333  333  389  584  278  333  278  278
     556  556  556  556  556  556  556  556  556  556  278  278  584  584  584  556
    1015  667  667  722  722  667  611  778  722  278  500  667  556  833  722  778
     667  778  722  667  611  722  667  944  667  667  611  278  278  278  469  556
     333  556  556  500  556  556  278  556  556  222  222  500  222  833  556  556
     556  556  333  500  278  556  500  722  500  500  500  334  260  334  584    0
     556    0  222  556  333 1000  556  556  333 1000  667  333 1000    0  611    0
       0  222  222  333  333  350  556 1000  333 1000  500  333  944    0  500  667
     278  333  556  556  556  556  260  556  333  737  370  556  584  333  737  333
     400  584  333  333  333  556  537  278  333  333  365  556  834  834  834  611
     667  667  667  667  667  667 1000  722  667  667  667  667  278  278  278  278
     722  722  778  778  778  778  778  584  778  722  722  722  722  667  667  611
     556  556  556  556  556  556  889  500  556  556  556  556  278  278  278  278
     556  556  556  556  556  556  556  584  611  556  556  556  556  500  556  500
    """
)

_HELVETICA_BOLD = _width_table(
    """
     278  333  474  556  556  889  722  238  333  333  389  584  278  333  278  278
     556  556  556  556  556  556  556  556  556  556  333  333  584  584  584  611
     975  722  722  722  722  667  611  778  722  278  556  722  611  833  722  778
     667  778  722  667  611  722  667  944  667  667  611  333  278  333  584  556
     333  556  611  556  611  556  333  611  611  278  278  556  278  889  611  611
     611  611  389  556  333  611  556  778  556  556  500  389  280  389  584    0
     556    0  278  556  500 1000  556  556  333 1000  667  333 1000    0  611    0
       0  278  278  500  500  350  556 1000  333 1000  556  333  944    0  500  667
     278  333  556  556  556  556  280  556  333  737  370  556  584  333  737  333
     400  584  333  333  333  611  556  278  333  333  365  556  834  834  834  611
     722  722  722  722  722  722 1000  722  667  667  667  667  278  278  278  278
     722  722  778  778  778  778  778  584  778  722  722  722  722  667  667  611
     556  556  556  556  556  556  889  556  556  556  556  556  278  278  278  278
     611  611  611  611  611  611  611  584  611  611  611  611  611  556  611  556
    """
)

_TIMES_ROMAN = _width_table(
    """
     250  333  408  500  500  833  778  180  333  333  500  564  250  333  250  278
     500  500  500  500  500  500  500  500  500  500  278  278  564  564  564  444
     921  722  667  667  722  611  556  722  722  333  389  722  611  889  722  722
     556  722  667  556  611  722  722  944  722  722  611  333  278  333  469  500
     333  444  500  444  500  444  333  500  500  278  278  500  278  778  500  500
     500  500  333  389  278  500  500  722  500  500  444  480  200  480  541    0
     500    0  333  500  444 1000  500  500  333 1000  556  333  889    0  611    0
       0  333  333  444  444  350  500 1000  333  980  389  333  722    0  444  722
     250  333  500  500  500  500  200  500  333  760  276  500  564  333  760  333
     400  564  300  300  333  500  453  250  333  300  310  500  750  750  750  444
     722  722  722  722  722  722  889  667  611  611  611  611  333  333  333  333
     722  722  722  722  722  722  722  564  722  722  722  722  722  722  556  500
     444  444  444  444  444  444  667  444  444  444  444  444  278  278  278  278
     500  500  500  500  500  500  500  564  500  500  500  500  500  500  500  500
    """
)

_TIMES_BOLD = _width_table(
    """
     250  333  555  500  500 1000  833  278  333  333  500  570  250  333  250  278
     500  500  500  500  500  500  500  500  500  500  333  333  570  570  570  500
     930  722  667  722  722  667  611  778  778  389  500  778  667  944  722  778
     611  778  722  556  667  722  722 1000  722  722  667  333  278  333  581  500
     333  500  556  444  556  444  333  500  556  278  333  556  278  833  556  500
     556  556  444  389  333  556  500  722  500  500  444  394  220  394  520    0
     500    0  333  500  500 1000  500  500  333 1000  556  333 1000    0  667    0
       0  333  333  500  500  350  500 1000  333 1000  389  333  722    0  444  722
     250  333  500  500  500  500  220  500  333  747  300  500  570  333  747  333
     400  570  300  300  333  556  540  250  333  300  330  500  750  750  750  500
     722  722  722  722  722  722 1000  722  667  667  667  667  389  389  389  389
     722  722  778  778  778  778  778  570  778  722  722  722  722  722  611  556
     500  500  500  500  500  500  722  444  444  444  444  444  278  278  278  278
     500  556  500  500  500  500  500  570  500  556  556  556  556  500  556  500
    """
)

_TIMES_ITALIC = _width_table(
    """
     250  333  420  500  500  833  778  214  333  333  500  675  250  333  250  278
     500  500  500  500  500  500  500  500  500  500  333  333  675  675  675  500
     920  611  611  667  722  611  611  722  722  333  444  667  556  833  667  722
     611  722  611  500  556  722  611  833  611  556  556  389  278  389  422  500
     333  500  500  444  500  444  278  500  500  278  278  444  278  722  500  500
     500  500  389  389  278  500  444  667  444  444  389  400  275  400  541    0
     500    0  333  500  556  889  500  500  333 1000  500  333  944    0  556    0
       0  333  333  556  556  350  500  889  333  980  389  333  722    0  389  556
     250  389  500  500  500  500  275  500  333  760  276  500  675  333  760  333
     400  675  300  300  333  500  523  250  333  300  310  500  750  750  750  500
     611  611  611  611  611  611  889  667  611  611  611  611  333  333  333  333
     722  667  722  722  722  722  722  675  722  722  722  722  722  556  611  500
     500  500  500  500  500  500  667  444  444  444  444  444  278  278  278  278
     500  500  500  500  500  500  500  675  500  500  500  500  500  444  500  444
    """
)

_TIMES_BOLD_ITALIC = _width_table(
    """
     250  389  555  500  500  833  778  278  333  333  500  570  250  333  250  278
     500  500  500  500  500  500  500  500  500  500  333  333  570  570  570  500
     832  667  667  667  722  667  667  722  778  389  500  667  611  889  722  722
     611  722  667  556  611  722  667  889  667  611  611  333  278  333  570  500
     333  500  500  444  500  444  333  500  556  278  278  500  278  778  556  500
     556  500  389  389  278  556  444  667  500  444  389  348  220  348  570    0
     500    0  333  500  500 1000  500  500  333 1000  556  333  944    0  611    0
       0  333  333  500  500  350  500 1000  333 1000  389  333  722    0  389  611
     250  389  500  500  500  500  220  500  333  747  266  500  606  333  747  333
     400  570  300  300  333  576  500  250  333  300  300  500  750  750  750  500
     667  667  667  667  667  667  944  667  667  667  667  667  389  389  389  389
     722  722  722  722  722  722  722  570  722  722  722  722  722  611  611  500
     500  500  500  500  500  500  722  444  444  444  444  444  278  278  278  278
     500  556  500  500  500  500  500  570  500  556  556  556  556  444  500  444
    """
)

_SYMBOL = _width_table(
    """
     250  333  713  500  549  833  778  439  333  333  500  549  250  549  250  278
     500  500  500  500  500  500  500  500  500  500  278  278  549  549  549  444
       0  722  667  722  612  611  763  603  722  333  631  722  686  889  722  722
     768  741  556  592  611  690  439  768  645  795  611    0    0    0    0    0
       0  611  611  549  611  549  611  556  603  329  603  549  549  576  521  549
     549  521  549  603  439  576  713  686  493  686  494    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
    """
)

_ZAPFDINGBATS = _width_table(
    """
     278  974  961  974  980  719  789  790  791  690  960  939  549  855  911  933
     911  945  974  755  846  762  761  571  677  763  760  759  754  494  552  537
     577  692  786  788  788  790  793  794  816  823  789  841  823  833  816  831
     923  744  723  749  790  792  695  776  768  792  759  707  708  682  701  826
     815  789  789  707  687  696  689  786  787  713  791  785  791  873  761  762
     762  759  759  892  892  788  784  438  138  277  415    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
       0    0    0    0    0    0    0    0    0    0    0    0    0    0    0    0
    """
)

# Courier family: all glyphs are 600 units wide
_COURIER = {i: 600 for i in range(32, 256) if i not in (127, 129, 141, 143, 144, 157)}


@dataclass(frozen=True)
class Standard14Metrics:
    """AFM metrics of one Standard-14 font.

    Attributes:
        name: Standard-14 font name.
        widths: Advance width by character code.
        cap_height: Cap height in 1/1000 of the font size.
        default_width: Width of codes without a glyph.
    """

    name: str
    widths: MappingProxyType
    cap_height: int
    default_width: int


def _metrics(
    name: str, widths: dict[int, int], cap_height: int, default_width: int
) -> Standard14Metrics:
    return Standard14Metrics(name, MappingProxyType(widths), cap_height, default_width)


STANDARD_14 = MappingProxyType(
    {
        m.name: m
        for m in (
            _metrics("Helvetica", _HELVETICA, 718, 278),
            _metrics("Helvetica-Bold", _HELVETICA_BOLD, 718, 278),
            _metrics("Helvetica-Oblique", _HELVETICA, 718, 278),
            _metrics("Helvetica-BoldOblique", _HELVETICA_BOLD, 718, 278),
            _metrics("Times-Roman", _TIMES_ROMAN, 662, 250),
            _metrics("Times-Bold", _TIMES_BOLD, 676, 250),
            _metrics("Times-Italic", _TIMES_ITALIC, 653, 250),
            _metrics("Times-BoldItalic", _TIMES_BOLD_ITALIC, 669, 250),
            _metrics("Courier", _COURIER, 562, 600),
            _metrics("Courier-Bold", _COURIER, 562, 600),
            _metrics("Courier-Oblique", _COURIER, 562, 600),
            _metrics("Courier-BoldOblique", _COURIER, 562, 600),
            _metrics("Symbol", _SYMBOL, 700, 500),
            _metrics("ZapfDingbats", _ZAPFDINGBATS, 700, 278),
        )
    }
)

# Abbreviations from AcroForm default resources and common substitutes
FONT_ALIASES = MappingProxyType(
    {
        "Helv": "Helvetica",
        "HeBo": "Helvetica-Bold",
        "HeOb": "Helvetica-Oblique",
        "HeBO": "Helvetica-BoldOblique",
        "TiRo": "Times-Roman",
        "TiBo": "Times-Bold",
        "TiIt": "Times-Italic",
        "TiBI": "Times-BoldItalic",
        "Cour": "Courier",
        "CoBo": "Courier-Bold",
        "CoOb": "Courier-Oblique",
        "CoBO": "Courier-BoldOblique",
        "Symb": "Symbol",
        "ZaDb": "ZapfDingbats",
        "Arial": "Helvetica",
        "ArialMT": "Helvetica",
        "Arial,Bold": "Helvetica-Bold",
        "Arial,Italic": "Helvetica-Oblique",
        "Arial,BoldItalic": "Helvetica-BoldOblique",
        "Arial-BoldMT": "Helvetica-Bold",
        "Arial-ItalicMT": "Helvetica-Oblique",
        "Arial-BoldItalicMT": "Helvetica-BoldOblique",
        "TimesNewRoman": "Times-Roman",
        "TimesNewRomanPSMT": "Times-Roman",
        "TimesNewRomanPS-BoldMT": "Times-Bold",
        "TimesNewRomanPS-ItalicMT": "Times-Italic",
        "TimesNewRomanPS-BoldItalicMT": "Times-BoldItalic",
        "CourierNew": "Courier",
        "CourierNewPSMT": "Courier",
        "CourierNew-Bold": "Courier-Bold",
        "CourierNew-BoldItalic": "Courier-BoldOblique",
    }
)


def standard14_metrics(base_font: str) -> Standard14Metrics | None:
    """Looks up the Standard-14 metrics for a /BaseFont value.

    Aliases such as ``Arial`` or ``TimesNewRomanPSMT`` resolve to the
    matching Standard-14 font. A subset tag is ignored.

    Args:
        base_font: Font name, with or without a leading slash.

    Returns:
        The metrics, or None if the name is not a Standard-14 font.
    """
    _, name = split_subset_prefix(base_font.lstrip("/"))
    name = FONT_ALIASES.get(name, name)
    return STANDARD_14.get(name)
