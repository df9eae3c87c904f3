# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Normalization of damaged Japanese Type0 font names.

Only composite (Type0) fonts are considered; the damaged names are only
produced for CID-keyed fonts, so simple fonts are never touched even when
their name matches a known font.
"""

import logging
from collections.abc import Iterable

import pikepdf
from pikepdf import Name

from ..utils import resolve_indirect as _resolve_indirect
from .names import canonical_font_name, declared_font_name
from .traversal import collect_fonts
from .utils import get_descendant_font, is_type0_font

logger = logging.getLogger(__name__)


def _canonical_name_for(font: pikepdf.Object) -> str | None:
    """Returns the canonical name a font should be renamed to, if any."""
    if not is_type0_font(font):
        return None
    return canonical_font_name(declared_font_name(font))


def is_normalizable(fonts: Iterable[pikepdf.Object]) -> bool:
    """Checks whether any font has a repairable Japanese name.

    Args:
        fonts: Distinct font dictionaries, e.g. from :func:`collect_fonts`.

    Returns:
        True if at least one Type0 font would be renamed by
        :func:`normalize`.
    """
    return any(_canonical_name_for(font) is not None for font in fonts)


def _rename_font(font: pikepdf.Dictionary, new_name: str) -> None:
    """Writes the canonical name into all four name fields of a Type0 font."""
    name_obj = Name("/" + new_name)
    font[Name.BaseFont] = name_obj
    if Name.Name in font:
        font[Name.Name] = name_obj

    descendant = get_descendant_font(font)
    if descendant is None:
        logger.warning("Type0 font %s has no descendant CIDFont", new_name)
        return
    descendant[Name.BaseFont] = name_obj

    descriptor = descendant.get("/FontDescriptor")
    if descriptor is None:
        logger.warning("CIDFont %s has no /FontDescriptor", new_name)
        return
    descriptor = _resolve_indirect(descriptor)
    descriptor[Name.FontName] = name_obj


def normalize(fonts: Iterable[pikepdf.Object]) -> bool:
    """Renames Type0 fonts with damaged Japanese names to their English names.

    For every Type0 font whose repaired name is a known MS font, /BaseFont,
    /Name (when present), the descendant's /BaseFont and the descendant's
    /FontDescriptor /FontName are set to the canonical name. Renamed fonts
    carry plain ASCII names afterwards, so a second run changes nothing.

    Args:
        fonts: Distinct font dictionaries (modified in place).

    Returns:
        True if at least one font was renamed.
    """
    changed = 0
    for font in fonts:
        new_name = _canonical_name_for(font)
        if new_name is None:
            continue
        old_name = declared_font_name(font)
        _rename_font(font, new_name)
        changed += 1
        logger.info("Normalized font name: %r -> %s", old_name, new_name)

    if changed:
        logger.info("Font name normalization: %d font(s) renamed", changed)
    return changed > 0


def is_document_normalizable(pdf: pikepdf.Pdf) -> bool:
    """Checks whether a document contains repairable font names.

    Args:
        pdf: Opened pikepdf PDF object.

    Returns:
        True if :func:`normalize_document` would change the document.
    """
    return is_normalizable(collect_fonts(pdf))


def normalize_document(pdf: pikepdf.Pdf) -> bool:
    """Normalizes the damaged font names of every distinct font in a document.

    Args:
        pdf: Opened pikepdf PDF object (modified in place).

    Returns:
        True if at least one font was renamed.
    """
    return normalize(collect_fonts(pdf))
