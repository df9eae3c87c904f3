# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions for pdfmend."""

import logging
import sys
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configures logging for pdfmend.

    Args:
        verbose: If True, DEBUG level is used.
        quiet: If True, only ERROR and higher are output.
            Takes precedence over verbose.

    Returns:
        Configured logger for pdfmend.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    pdfmend_logger = logging.getLogger("pdfmend")
    pdfmend_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    pdfmend_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    pdfmend_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return pdfmend_logger


def resolve_indirect(obj: Any) -> Any:
    """Resolve indirect object reference if needed.

    pikepdf objects may be indirect references that need to be resolved.
    This safely handles the resolution without using hasattr which can
    throw exceptions on certain pikepdf object types.

    Args:
        obj: A pikepdf object that may be an indirect reference.

    Returns:
        The resolved object.
    """
    try:
        return obj.get_object()
    except Exception:
        return obj


def parse_page_selection(selection: str | None, page_count: int) -> list[int]:
    """Parses a 1-based page selection such as ``"1,3-5"``.

    Args:
        selection: Comma-separated page numbers and ranges. None or an empty
            string selects every page.
        page_count: Number of pages in the document.

    Returns:
        Sorted list of 0-based page indices.

    Raises:
        ValueError: If the selection is malformed or out of range.
    """
    if not selection:
        return list(range(page_count))

    indices: set[int] = set()
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            first_str, last_str = part.split("-", 1)
            first = int(first_str) if first_str.strip() else 1
            last = int(last_str) if last_str.strip() else page_count
        else:
            first = last = int(part)
        if first < 1 or last > page_count or first > last:
            raise ValueError(
                f"Invalid page range '{part}' for a document with "
                f"{page_count} page(s)"
            )
        indices.update(range(first - 1, last))
    return sorted(indices)
