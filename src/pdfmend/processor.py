# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""File-level processing: font name normalization and text stamping."""

# Standard Library
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

# Third Party
import pikepdf
from tqdm import tqdm

# Local
from .exceptions import FontLoadError, ProcessingError, UnsupportedPDFError
from .fonts import (
    PdfFontMetrics,
    is_document_normalizable,
    load_truetype_font,
    normalize_document,
)
from .placement import Anchor, place_text
from .utils import parse_page_selection, resolve_indirect

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_mended"


@dataclass
class TextStamp:
    """Text to draw on the pages of a document.

    Attributes:
        text: Text to draw.
        font_file: TrueType font embedded for the text.
        font_resource: Name of a font already in each page's resources
            (e.g. ``"/F1"``), used when no font file is given.
        font_size: Font size.
        anchor: Anchor position on the page.
        offset_x: Horizontal offset from the anchored edge.
        offset_y: Vertical offset from the anchored edge.
        isolate_graphics_state: Wrap the existing page content in q/Q.
        pages: 1-based page selection such as ``"1,3-5"``; None for all.
    """

    text: str
    font_file: Path | None = None
    font_resource: str | None = None
    font_size: float = 10.0
    anchor: Anchor = field(default_factory=Anchor)
    offset_x: float = 0.0
    offset_y: float = 0.0
    isolate_graphics_state: bool = True
    pages: str | None = None


@dataclass
class ProcessResult:
    """Result of processing one PDF file.

    Attributes:
        success: True if the file was processed and saved.
        input_path: Path to the input PDF.
        output_path: Path to the output PDF.
        fonts_normalized: True if font names were rewritten.
        pages_stamped: Number of pages text was drawn on.
        warnings: List of warnings during processing.
        processing_time: Processing time in seconds.
        error: Error message if success=False.
    """

    success: bool
    input_path: Path
    output_path: Path
    fonts_normalized: bool = False
    pages_stamped: int = 0
    warnings: list[str] = field(default_factory=list)
    processing_time: float = 0.0
    error: str | None = None


def generate_output_path(
    input_path: Path,
    output_dir: Path | None = None,
) -> Path:
    """Generates the output path for a processed PDF.

    Args:
        input_path: Path to the input PDF.
        output_dir: Optional output directory.

    Returns:
        Path for the output PDF.
    """
    output_name = f"{input_path.stem}{OUTPUT_SUFFIX}.pdf"
    if output_dir is not None:
        return output_dir / output_name
    return input_path.parent / output_name


def normalize_file(input_path: Path | str, output_path: Path | str) -> bool:
    """Normalizes the font names of a PDF file and saves the result.

    Errors from reading or writing the files are propagated unchanged.

    Args:
        input_path: Path to the PDF to normalize.
        output_path: Path the normalized PDF is saved to.

    Returns:
        True if at least one font was renamed.
    """
    with pikepdf.open(input_path, allow_overwriting_input=True) as pdf:
        changed = normalize_document(pdf)
        pdf.save(output_path)
    return changed


def check_file(input_path: Path | str) -> bool:
    """Checks whether a PDF file has font names that can be normalized.

    Args:
        input_path: Path to the PDF.

    Returns:
        True if normalization would rename at least one font.
    """
    with pikepdf.open(input_path) as pdf:
        return is_document_normalizable(pdf)


def _page_font(page: pikepdf.Page, resource_name: str, page_num: int):
    """Looks up a font in a page's resources by name."""
    if not resource_name.startswith("/"):
        resource_name = "/" + resource_name
    resources = page.get("/Resources")
    font_dict = resolve_indirect(resources).get("/Font") if resources is not None else None
    font = resolve_indirect(font_dict).get(resource_name) if font_dict is not None else None
    if font is None:
        raise ProcessingError(
            f"Font resource {resource_name} not found on page {page_num}"
        )
    return font


def stamp_document(pdf: pikepdf.Pdf, stamp: TextStamp) -> int:
    """Draws a text stamp on the selected pages of a document.

    Args:
        pdf: Opened pikepdf PDF object (modified in place).
        stamp: Text and placement settings.

    Returns:
        Number of pages the text was drawn on.

    Raises:
        ProcessingError: If no font is given, the page selection is invalid,
            or the font resource does not exist on a page or cannot be
            measured.
        FontLoadError: If the font file cannot be embedded.
    """
    if stamp.font_file is None and stamp.font_resource is None:
        raise ProcessingError("Stamping text requires a font file or font resource")

    try:
        indices = parse_page_selection(stamp.pages, len(pdf.pages))
    except ValueError as e:
        raise ProcessingError(str(e)) from e

    font = None
    if stamp.font_file is not None:
        font = load_truetype_font(pdf, stamp.font_file)

    for index in indices:
        page = pdf.pages[index]
        page_font = font
        metrics = None
        if page_font is None:
            page_font = _page_font(page, stamp.font_resource, index + 1)
            metrics = PdfFontMetrics(page_font)
            if not metrics.has_widths:
                raise ProcessingError(
                    f"Font resource {stamp.font_resource} on page {index + 1} "
                    "declares no widths and is not a Standard-14 font"
                )
        place_text(
            page,
            stamp.text,
            page_font,
            stamp.font_size,
            stamp.anchor,
            stamp.offset_x,
            stamp.offset_y,
            isolate_graphics_state=stamp.isolate_graphics_state,
            metrics=metrics,
        )

    logger.info("Stamped text on %d page(s)", len(indices))
    return len(indices)


def process_file(
    input_path: Path,
    output_path: Path,
    *,
    normalize: bool = True,
    stamp: TextStamp | None = None,
) -> ProcessResult:
    """Normalizes font names and/or stamps text, then saves the PDF.

    Args:
        input_path: Path to the input PDF.
        output_path: Path for the output PDF. May equal the input path.
        normalize: If True, damaged Japanese font names are normalized.
        stamp: Optional text to draw on the pages.

    Returns:
        ProcessResult with status and details.

    Raises:
        ProcessingError: If the file cannot be processed.
        UnsupportedPDFError: If the PDF is encrypted.
        FontLoadError: If the stamp font cannot be embedded.
    """
    start_time = time.perf_counter()
    warnings: list[str] = []

    logger.info("Processing: %s -> %s", input_path, output_path)

    try:
        with pikepdf.open(input_path, allow_overwriting_input=True) as pdf:
            if pdf.is_encrypted:
                raise UnsupportedPDFError(
                    f"PDF is encrypted and cannot be processed: {input_path}"
                )

            fonts_normalized = False
            if normalize:
                fonts_normalized = normalize_document(pdf)
                if not fonts_normalized:
                    warnings.append("No damaged font names found")

            pages_stamped = 0
            if stamp is not None:
                pages_stamped = stamp_document(pdf, stamp)

            output_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Saving PDF: %s", output_path)
            pdf.save(output_path)

    except pikepdf.PdfError as e:
        error_msg = f"PDF processing error: {e}"
        logger.error(error_msg)
        raise ProcessingError(error_msg) from e

    except (ProcessingError, UnsupportedPDFError, FontLoadError):
        raise

    except OSError:
        # File system errors (missing input, permissions) are reported as-is
        raise

    except Exception as e:
        error_msg = f"Unexpected error during processing: {e}"
        logger.error(error_msg)
        raise ProcessingError(error_msg) from e

    processing_time = time.perf_counter() - start_time
    logger.info(
        "Processing successful: %s (%.2f seconds)", output_path, processing_time
    )

    return ProcessResult(
        success=True,
        input_path=input_path,
        output_path=output_path,
        fonts_normalized=fonts_normalized,
        pages_stamped=pages_stamped,
        warnings=warnings,
        processing_time=processing_time,
    )


def process_files(
    file_pairs: list[tuple[Path, Path]],
    *,
    normalize: bool = True,
    stamp: TextStamp | None = None,
    force_overwrite: bool = False,
    on_progress: Callable[[int, int, str], None] | None = None,
) -> list[ProcessResult]:
    """Processes a list of PDF files.

    Args:
        file_pairs: List of (input_path, output_path) tuples.
        normalize: If True, damaged Japanese font names are normalized.
        stamp: Optional text to draw on the pages.
        force_overwrite: If True, existing output files are overwritten.
            If False, existing outputs are skipped with an error result.
        on_progress: Optional callback(current_idx, total, filename) called
            before each file.

    Returns:
        List of ProcessResult for all processed files.
    """
    results: list[ProcessResult] = []
    total = len(file_pairs)

    for idx, (input_path, output_path) in enumerate(file_pairs):
        if on_progress is not None:
            on_progress(idx, total, input_path.name)

        if output_path.exists() and not force_overwrite:
            logger.warning(
                "Skipping %s: Output file already exists (%s)",
                input_path.name,
                output_path,
            )
            results.append(
                ProcessResult(
                    success=False,
                    input_path=input_path,
                    output_path=output_path,
                    error="Output file already exists",
                )
            )
            continue

        try:
            results.append(
                process_file(input_path, output_path, normalize=normalize, stamp=stamp)
            )
        except (ProcessingError, UnsupportedPDFError, FontLoadError, OSError) as e:
            logger.error("Error for %s: %s", input_path.name, e)
            results.append(
                ProcessResult(
                    success=False,
                    input_path=input_path,
                    output_path=output_path,
                    error=str(e),
                )
            )

    return results


def process_directory(
    input_dir: Path,
    output_dir: Path | None = None,
    *,
    recursive: bool = False,
    normalize: bool = True,
    stamp: TextStamp | None = None,
    show_progress: bool = True,
    force_overwrite: bool = False,
) -> list[ProcessResult]:
    """Processes all PDFs in a directory.

    Args:
        input_dir: Input directory with PDF files.
        output_dir: Optional output directory. If None, files are saved
            next to their input with the ``_mended`` suffix.
        recursive: If True, subdirectories are included.
        normalize: If True, damaged Japanese font names are normalized.
        stamp: Optional text to draw on the pages.
        show_progress: If True, a progress bar is shown.
        force_overwrite: If True, existing output files are overwritten.

    Returns:
        List of ProcessResult for all processed files.

    Raises:
        ProcessingError: If the input directory does not exist.
    """
    if not input_dir.is_dir():
        raise ProcessingError(f"Directory does not exist: {input_dir}")

    pattern = "**/*.pdf" if recursive else "*.pdf"
    pdf_files = sorted(input_dir.glob(pattern))

    # When output goes to the same directory, exclude previous outputs
    if output_dir is None:
        pdf_files = [p for p in pdf_files if not p.stem.endswith(OUTPUT_SUFFIX)]

    if not pdf_files:
        logger.warning("No PDF files found in: %s", input_dir)
        return []

    logger.info(
        "Found: %d PDF file(s) in %s%s",
        len(pdf_files),
        input_dir,
        " (recursive)" if recursive else "",
    )

    file_pairs: list[tuple[Path, Path]] = []
    for pdf_file in pdf_files:
        if output_dir is not None and recursive:
            out_subdir = output_dir / pdf_file.relative_to(input_dir).parent
            out_path = generate_output_path(pdf_file, out_subdir)
        else:
            out_path = generate_output_path(pdf_file, output_dir)
        file_pairs.append((pdf_file, out_path))

    progress_bar = None
    if show_progress:
        progress_bar = tqdm(
            total=len(file_pairs),
            desc="Processing",
            unit="file",
            ncols=80,
        )

    def _on_progress(current_idx: int, total: int, filename: str) -> None:
        if progress_bar is not None:
            progress_bar.update(1)
            progress_bar.set_postfix_str(filename)

    try:
        results = process_files(
            file_pairs,
            normalize=normalize,
            stamp=stamp,
            force_overwrite=force_overwrite,
            on_progress=_on_progress if show_progress else None,
        )
    finally:
        if progress_bar is not None:
            progress_bar.close()

    successful = sum(1 for r in results if r.success)
    logger.info(
        "Directory processing completed: %d successful, %d failed",
        successful,
        len(results) - successful,
    )

    return results
