# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""pdfmend - Repair mojibake Japanese font names and stamp text on PDF pages."""

from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    FontLoadError,
    PDFMendError,
    ProcessingError,
    UnsupportedPDFError,
)
from .fonts import (
    collect_fonts,
    is_normalizable,
    load_truetype_font,
    normalize,
    normalize_document,
    repair_name,
)
from .placement import (
    Anchor,
    HorizontalAnchor,
    VerticalAnchor,
    compute_origin,
    place_text,
    starts_with_saved_state,
)
from .processor import (
    ProcessResult,
    TextStamp,
    normalize_file,
    process_directory,
    process_file,
)

try:
    __version__ = version("pdfmend")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    # Font names
    "collect_fonts",
    "is_normalizable",
    "normalize",
    "normalize_document",
    "repair_name",
    "load_truetype_font",
    # Placement
    "Anchor",
    "HorizontalAnchor",
    "VerticalAnchor",
    "compute_origin",
    "place_text",
    "starts_with_saved_state",
    # Files
    "ProcessResult",
    "TextStamp",
    "normalize_file",
    "process_file",
    "process_directory",
    # Exceptions
    "PDFMendError",
    "ProcessingError",
    "FontLoadError",
    "UnsupportedPDFError",
]
