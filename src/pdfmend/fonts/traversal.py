# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Distinct font discovery across the pages of a document.

Fonts are collected from:
- Page-level Resources/Font
- Form XObjects (Resources/XObject/*/Resources/Font where Subtype=/Form),
  recursively

A font shared by several pages (or several resource dictionaries) is
reported once.
"""

import logging
from collections.abc import Iterator

import pikepdf

from ..utils import resolve_indirect as _resolve_indirect
from .utils import check_visited as _check_visited
from .utils import obj_key as _obj_key

logger = logging.getLogger(__name__)


def iter_page_fonts(
    page: pikepdf.Page,
    visited: set[tuple[int, int]] | None = None,
) -> Iterator[tuple[str, pikepdf.Dictionary]]:
    """Yields (font_key, font_obj) pairs from a page and its Form XObjects.

    Args:
        page: A pikepdf Page object.
        visited: Set of objgen tuples of resource containers already
            walked. Shared across pages so that a resource dictionary
            referenced by several pages is walked once.

    Yields:
        Tuples of (font_key, dereferenced_font_obj).
    """
    if visited is None:
        visited = set()

    resources = page.get("/Resources")
    if resources is None:
        return
    resources = _resolve_indirect(resources)
    if not isinstance(resources, pikepdf.Dictionary):
        return

    yield from _iter_fonts_from_resources(resources, visited)


def _iter_fonts_from_resources(
    resources: pikepdf.Dictionary,
    visited: set[tuple[int, int]],
) -> Iterator[tuple[str, pikepdf.Dictionary]]:
    """Yields fonts from a Resources dictionary, recursing into Form XObjects.

    Args:
        resources: A PDF Resources dictionary.
        visited: Set of objgen tuples already visited (for cycle detection).

    Yields:
        Tuples of (font_key, dereferenced_font_obj).
    """
    if _check_visited(resources, visited):
        return

    font_dict = resources.get("/Font")
    if font_dict is not None:
        font_dict = _resolve_indirect(font_dict)
        if isinstance(font_dict, pikepdf.Dictionary) and not _check_visited(
            font_dict, visited
        ):
            for font_key in list(font_dict.keys()):
                font_obj = _resolve_indirect(font_dict[font_key])
                if isinstance(font_obj, pikepdf.Dictionary):
                    yield (str(font_key), font_obj)

    xobject_dict = resources.get("/XObject")
    if xobject_dict is None:
        return
    xobject_dict = _resolve_indirect(xobject_dict)
    if not isinstance(xobject_dict, pikepdf.Dictionary):
        return

    for xobj_key in list(xobject_dict.keys()):
        xobj = _resolve_indirect(xobject_dict[xobj_key])
        if not isinstance(xobj, pikepdf.Stream):
            continue
        if _check_visited(xobj, visited):
            continue

        # Only Form XObjects carry their own resources
        subtype = xobj.get("/Subtype")
        if subtype is None or str(subtype) != "/Form":
            continue
        nested_resources = xobj.get("/Resources")
        if nested_resources is None:
            continue
        nested_resources = _resolve_indirect(nested_resources)
        if isinstance(nested_resources, pikepdf.Dictionary):
            yield from _iter_fonts_from_resources(nested_resources, visited)


def collect_fonts(pdf: pikepdf.Pdf) -> list[pikepdf.Dictionary]:
    """Collects the distinct fonts used by a document.

    Fonts are deduplicated by object identity, so a font referenced from
    N pages is returned once. Order follows the first occurrence.

    Args:
        pdf: Opened pikepdf PDF object.

    Returns:
        List of distinct font dictionaries.
    """
    fonts: list[pikepdf.Dictionary] = []
    seen_fonts: set[tuple[int, int]] = set()
    visited: set[tuple[int, int]] = set()

    for page_num, page in enumerate(pdf.pages, start=1):
        for font_key, font_obj in iter_page_fonts(page, visited):
            key = _obj_key(font_obj)
            if key is not None:
                if key in seen_fonts:
                    continue
                seen_fonts.add(key)
            logger.debug("Found font %s on page %d", font_key, page_num)
            fonts.append(font_obj)

    logger.debug("Collected %d distinct font(s)", len(fonts))
    return fonts
