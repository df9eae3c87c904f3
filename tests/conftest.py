# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the pdfmend test suite."""

import logging
from io import BytesIO
from pathlib import Path

import pikepdf
import pytest
from pikepdf import Array, Dictionary, Name, Pdf

from font_helpers import make_ttf_bytes, mojibake

# -- Global PDF tracker --

_tracked_pdfs: list[Pdf] = []


@pytest.fixture(autouse=True)
def _auto_close_pdfs():
    """Close all tracked PDF objects after each test."""
    yield
    for pdf in reversed(_tracked_pdfs):
        try:
            pdf.close()
        except Exception:
            pass
    _tracked_pdfs.clear()


def new_pdf(**kwargs) -> Pdf:
    """Create a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.new(**kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


def open_pdf(source, **kwargs) -> Pdf:
    """Open a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.open(source, **kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


@pytest.fixture(autouse=True)
def _reset_pdfmend_logger():
    """Undo setup_logging() so handlers do not outlive captured streams."""
    yield
    pdfmend_logger = logging.getLogger("pdfmend")
    pdfmend_logger.handlers.clear()
    pdfmend_logger.setLevel(logging.NOTSET)


# -- Shared test helpers (not fixtures) --


def make_pdf_with_page(width: float = 612, height: float = 792) -> Pdf:
    """Create a minimal PDF with one page (auto-tracked)."""
    pdf = new_pdf()
    page = pikepdf.Page(
        Dictionary(Type=Name.Page, MediaBox=Array([0, 0, width, height]))
    )
    pdf.pages.append(page)
    return pdf


def make_type0_font(
    pdf: Pdf,
    base_font: str | pikepdf.Object,
    *,
    with_name_key: bool = False,
) -> Dictionary:
    """Create an indirect Type0 font with descendant and descriptor.

    Args:
        pdf: Owning PDF.
        base_font: Font name (text) or a ready-made /BaseFont object.
        with_name_key: If True, the obsolete /Name entry is set as well.
    """
    if isinstance(base_font, str):
        base_font = Name("/" + base_font)

    descriptor = pdf.make_indirect(
        Dictionary(
            Type=Name.FontDescriptor,
            FontName=base_font,
            Flags=4,
            FontBBox=Array([0, -141, 1000, 859]),
            ItalicAngle=0,
            Ascent=859,
            Descent=-141,
            CapHeight=769,
            StemV=78,
        )
    )
    cid_font = pdf.make_indirect(
        Dictionary(
            Type=Name.Font,
            Subtype=Name.CIDFontType2,
            BaseFont=base_font,
            CIDSystemInfo=Dictionary(
                Registry=pikepdf.String("Adobe"),
                Ordering=pikepdf.String("Japan1"),
                Supplement=2,
            ),
            FontDescriptor=descriptor,
            DW=1000,
            W=Array([231, Array([500] * 95)]),
        )
    )
    font = Dictionary(
        Type=Name.Font,
        Subtype=Name.Type0,
        BaseFont=base_font,
        Encoding=Name("/90ms-RKSJ-H"),
        DescendantFonts=Array([cid_font]),
    )
    if with_name_key:
        font[Name.Name] = base_font
    return pdf.make_indirect(font)


def make_simple_font(pdf: Pdf, base_font: str) -> Dictionary:
    """Create an indirect TrueType (simple) font."""
    return pdf.make_indirect(
        Dictionary(
            Type=Name.Font,
            Subtype=Name.TrueType,
            BaseFont=Name("/" + base_font),
            FirstChar=32,
            LastChar=126,
            Widths=Array([500] * 95),
            Encoding=Name.WinAnsiEncoding,
        )
    )


def add_fonts_to_page(page: pikepdf.Page, fonts: dict[str, Dictionary]) -> None:
    """Set a page's /Resources/Font dictionary."""
    page.obj[Name.Resources] = Dictionary(Font=Dictionary(fonts))


def save_and_reopen(pdf: Pdf) -> Pdf:
    """Save a PDF to bytes and reopen it (auto-tracked)."""
    buf = BytesIO()
    pdf.save(buf)
    pdf.close()
    buf.seek(0)
    return open_pdf(buf)


def content_operators(page: pikepdf.Page) -> list[str]:
    """Return the operator names of a page's content, in order."""
    return [str(instr.operator) for instr in pikepdf.parse_content_stream(page)]


# -- Fixtures --


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Temporary directory for tests.

    Args:
        tmp_path: Pytest-provided temporary directory.

    Returns:
        Path to the temporary directory.
    """
    return tmp_path


@pytest.fixture
def sample_pdf(tmp_dir: Path) -> Path:
    """Minimal valid PDF on disk with one empty page."""
    pdf = make_pdf_with_page()
    pdf_path = tmp_dir / "sample.pdf"
    pdf.save(pdf_path)
    return pdf_path


@pytest.fixture
def mojibake_pdf(tmp_dir: Path) -> Path:
    """Two-page PDF sharing a Type0 font with a damaged ＭＳ明朝 name.

    The first page also has a damaged ＭＳ ゴシック font and a Helvetica
    font; both pages start with content that is not wrapped in q/Q.
    """
    pdf = new_pdf()
    mincho = make_type0_font(pdf, mojibake("ＭＳ明朝"))
    gothic = make_type0_font(pdf, mojibake("ＭＳ ゴシック"), with_name_key=True)
    helvetica = pdf.make_indirect(
        Dictionary(Type=Name.Font, Subtype=Name.Type1, BaseFont=Name.Helvetica)
    )

    for fonts in (
        {"/F1": mincho, "/F2": gothic, "/F3": helvetica},
        {"/F1": mincho},
    ):
        page = pikepdf.Page(
            Dictionary(Type=Name.Page, MediaBox=Array([0, 0, 595, 842]))
        )
        pdf.pages.append(page)
        page = pdf.pages[-1]
        add_fonts_to_page(page, fonts)
        page.obj[Name.Contents] = pdf.make_stream(
            b"0.18 0 0 0.18 0 0 cm BT /F1 50 Tf 100 100 Td <8250> Tj ET"
        )

    pdf_path = tmp_dir / "mojibake.pdf"
    pdf.save(pdf_path)
    return pdf_path


@pytest.fixture
def encrypted_pdf(tmp_dir: Path) -> Path:
    """Encrypted PDF for error tests."""
    pdf = make_pdf_with_page()
    encrypted_path = tmp_dir / "encrypted.pdf"
    pdf.save(encrypted_path, encryption=pikepdf.Encryption(owner="testpassword"))
    return encrypted_path


@pytest.fixture
def ttf_file(tmp_dir: Path) -> Path:
    """Synthetic TrueType font on disk."""
    font_path = tmp_dir / "TestSans.ttf"
    font_path.write_bytes(make_ttf_bytes())
    return font_path
