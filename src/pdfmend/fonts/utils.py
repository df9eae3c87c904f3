# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions for font dictionaries."""

import logging

import pikepdf

from ..utils import resolve_indirect as _resolve_indirect

logger = logging.getLogger(__name__)


def obj_key(obj: pikepdf.Object) -> tuple[int, int] | None:
    """Returns a stable identity key for a PDF object.

    Uses pikepdf's objgen (object number, generation) which is stable
    across repeated accesses, unlike Python id() which can be reused
    for transient wrapper objects.

    Args:
        obj: A pikepdf object.

    Returns:
        The (obj_num, gen) tuple for indirect objects, or None for
        direct objects.
    """
    try:
        og = obj.objgen
        if og != (0, 0):
            return og
    except Exception:
        pass
    return None


def check_visited(obj: pikepdf.Object, visited: set[tuple[int, int]]) -> bool:
    """Checks if an object has been visited and marks it if not.

    Args:
        obj: A pikepdf object to check.
        visited: Set of objgen tuples already visited.

    Returns:
        True if the object was already visited (should be skipped),
        False if it's new (and has now been added to visited).
    """
    key = obj_key(obj)
    if key is None:
        # Direct object, cannot be shared
        return False
    if key in visited:
        return True
    visited.add(key)
    return False


def get_subtype(font: pikepdf.Object) -> str:
    """Returns the font /Subtype as a string such as ``"/Type0"``."""
    subtype = font.get("/Subtype")
    return str(subtype) if subtype is not None else ""


def is_type0_font(font: pikepdf.Object) -> bool:
    """Checks whether a font is a composite (Type0) font.

    Args:
        font: pikepdf font dictionary.

    Returns:
        True for ``/Subtype /Type0`` fonts.
    """
    if not isinstance(font, pikepdf.Dictionary):
        return False
    return get_subtype(font) == "/Type0"


def get_descendant_font(font: pikepdf.Object) -> pikepdf.Dictionary | None:
    """Returns the descendant CIDFont of a Type0 font.

    Args:
        font: Type0 font dictionary.

    Returns:
        The first entry of /DescendantFonts, or None if missing.
    """
    descendants = font.get("/DescendantFonts")
    if descendants is None:
        return None
    descendants = _resolve_indirect(descendants)
    if not isinstance(descendants, pikepdf.Array) or len(descendants) == 0:
        return None
    descendant = _resolve_indirect(descendants[0])
    if not isinstance(descendant, pikepdf.Dictionary):
        return None
    return descendant


def get_font_descriptor(font: pikepdf.Object) -> pikepdf.Dictionary | None:
    """Returns the /FontDescriptor of a font.

    For Type0 fonts the descriptor lives on the descendant CIDFont.

    Args:
        font: pikepdf font dictionary.

    Returns:
        The font descriptor dictionary, or None if missing.
    """
    if is_type0_font(font):
        descendant = get_descendant_font(font)
        if descendant is None:
            return None
        font = descendant
    descriptor = font.get("/FontDescriptor")
    if descriptor is None:
        return None
    descriptor = _resolve_indirect(descriptor)
    if not isinstance(descriptor, pikepdf.Dictionary):
        return None
    return descriptor


def get_encoding_name(encoding: pikepdf.Object) -> str:
    """Extracts the encoding name from a Name or CMap Stream.

    For Name objects (e.g. /Identity-H), returns the name without
    the leading slash. For CMap streams, reads /CMapName from the
    stream dictionary.

    Args:
        encoding: pikepdf Name or Stream object.

    Returns:
        The encoding name string, or empty string if not extractable.
    """
    if isinstance(encoding, pikepdf.Name):
        return str(encoding).lstrip("/")
    try:
        cmap_name = encoding.get("/CMapName")
        if cmap_name is not None:
            return str(cmap_name).lstrip("/")
    except Exception:
        logger.debug("Could not read /CMapName of encoding stream", exc_info=True)
    return ""
