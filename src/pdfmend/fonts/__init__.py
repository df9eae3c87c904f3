# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font name repair, font metrics and font embedding."""

from ..exceptions import FontLoadError
from .constants import C1_CODEPOINT_TO_BYTE, CANONICAL_FONT_NAMES
from .loader import load_truetype_font
from .metrics import FontMetrics, PdfFontMetrics
from .names import (
    canonical_font_name,
    declared_font_name,
    reconstruct_name_bytes,
    repair_name,
)
from .standard14 import standard14_metrics
from .normalizer import (
    is_document_normalizable,
    is_normalizable,
    normalize,
    normalize_document,
)
from .traversal import collect_fonts, iter_page_fonts
from .utils import is_type0_font

__all__ = [
    # Exceptions
    "FontLoadError",
    # Constants
    "C1_CODEPOINT_TO_BYTE",
    "CANONICAL_FONT_NAMES",
    # Name repair
    "canonical_font_name",
    "declared_font_name",
    "reconstruct_name_bytes",
    "repair_name",
    "is_type0_font",
    # Normalization
    "collect_fonts",
    "iter_page_fonts",
    "is_normalizable",
    "normalize",
    "is_document_normalizable",
    "normalize_document",
    # Metrics and embedding
    "FontMetrics",
    "PdfFontMetrics",
    "standard14_metrics",
    "load_truetype_font",
]
