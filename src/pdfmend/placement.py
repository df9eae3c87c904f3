# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Anchored text placement on PDF pages.

Text is positioned on a 3x3 grid of anchors (top/middle/bottom by
left/center/right) relative to the page's MediaBox, with the origin at the
bottom-left corner. The vertical extent of the text is the font's cap
height, which lines single-line labels up with the page edge.

Some generators emit pages whose content leaves a scaled coordinate system
active (e.g. drawn at 400 DPI with an outstanding ``cm``), or pops graphics
states it never pushed. With graphics-state isolation the original content
is wrapped in ``q ... Q`` so the appended text is drawn in the unscaled
page coordinate system.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import pikepdf
from pikepdf import ContentStreamInstruction, Name, Operator

from .fonts.metrics import FontMetrics, PdfFontMetrics
from .fonts.utils import obj_key
from .utils import resolve_indirect

logger = logging.getLogger(__name__)


class VerticalAnchor(Enum):
    """Vertical anchor of placed text."""

    MIDDLE = "middle"
    TOP = "top"
    BOTTOM = "bottom"


class HorizontalAnchor(Enum):
    """Horizontal anchor of placed text."""

    CENTER = "center"
    RIGHT = "right"
    LEFT = "left"


@dataclass(frozen=True)
class Anchor:
    """Anchor position of placed text, one value per axis.

    The defaults (TOP, RIGHT) are also what a flag set without a vertical
    or horizontal flag resolves to.

    Attributes:
        vertical: Vertical anchor.
        horizontal: Horizontal anchor.
    """

    vertical: VerticalAnchor = VerticalAnchor.TOP
    horizontal: HorizontalAnchor = HorizontalAnchor.RIGHT

    @classmethod
    def from_flags(
        cls, flags: Iterable["VerticalAnchor | HorizontalAnchor | str"]
    ) -> "Anchor":
        """Resolves a set of anchor flags into one anchor per axis.

        Several flags on the same axis are resolved by priority:
        MIDDLE over BOTTOM over TOP, and CENTER over LEFT over RIGHT.

        Args:
            flags: Anchor enum members or their names (case-insensitive).

        Returns:
            The resolved Anchor.

        Raises:
            ValueError: If a flag name is unknown.
        """
        vertical: set[VerticalAnchor] = set()
        horizontal: set[HorizontalAnchor] = set()
        for flag in flags:
            if isinstance(flag, str):
                flag = _parse_flag(flag)
            if isinstance(flag, VerticalAnchor):
                vertical.add(flag)
            else:
                horizontal.add(flag)

        if VerticalAnchor.MIDDLE in vertical:
            v = VerticalAnchor.MIDDLE
        elif VerticalAnchor.BOTTOM in vertical:
            v = VerticalAnchor.BOTTOM
        else:
            v = VerticalAnchor.TOP

        if HorizontalAnchor.CENTER in horizontal:
            h = HorizontalAnchor.CENTER
        elif HorizontalAnchor.LEFT in horizontal:
            h = HorizontalAnchor.LEFT
        else:
            h = HorizontalAnchor.RIGHT

        return cls(vertical=v, horizontal=h)

    @classmethod
    def parse(cls, text: str) -> "Anchor":
        """Parses an anchor such as ``"bottom,center"`` or ``"top-left"``.

        Args:
            text: Flag names separated by commas, hyphens or whitespace.

        Returns:
            The resolved Anchor.

        Raises:
            ValueError: If a flag name is unknown.
        """
        for sep in ("-", " "):
            text = text.replace(sep, ",")
        return cls.from_flags(part for part in text.split(",") if part.strip())


def _parse_flag(name: str) -> VerticalAnchor | HorizontalAnchor:
    """Looks up an anchor flag by name."""
    value = name.strip().lower()
    for enum_cls in (VerticalAnchor, HorizontalAnchor):
        try:
            return enum_cls(value)
        except ValueError:
            continue
    raise ValueError(f"Unknown anchor position: {name!r}")


def compute_origin(
    page_width: float,
    page_height: float,
    text_width: float,
    text_height: float,
    anchor: Anchor,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> tuple[float, float]:
    """Computes the text origin for an anchor, origin at the bottom-left.

    Offsets move the text away from the anchored edge: for RIGHT, offset_x
    is the distance from the right edge, for TOP, offset_y is the distance
    from the top edge. For CENTER and MIDDLE they shift right and up.

    Args:
        page_width: Page width.
        page_height: Page height.
        text_width: Advance width of the text.
        text_height: Vertical extent of the text (cap height).
        anchor: Anchor position.
        offset_x: Horizontal offset.
        offset_y: Vertical offset.

    Returns:
        Tuple of (x, y).
    """
    if anchor.horizontal is HorizontalAnchor.CENTER:
        x = (page_width - text_width) / 2 + offset_x
    elif anchor.horizontal is HorizontalAnchor.LEFT:
        x = offset_x
    else:
        x = page_width - text_width - offset_x

    if anchor.vertical is VerticalAnchor.MIDDLE:
        y = (page_height - text_height) / 2 + offset_y
    elif anchor.vertical is VerticalAnchor.BOTTOM:
        y = offset_y
    else:
        y = page_height - text_height - offset_y

    return x, y


def starts_with_saved_state(page: pikepdf.Page) -> bool:
    """Checks whether a page's content starts with a ``q`` operator.

    Only the first token counts: a leading instruction with operands
    (such as ``cm``) means the page does not start with ``q``.

    Args:
        page: A pikepdf Page object.

    Returns:
        True if the first token of the content is the ``q`` operator.
    """
    if page.get("/Contents") is None:
        return False

    instructions = pikepdf.parse_content_stream(page)
    if not instructions:
        return False

    first = instructions[0]
    if not isinstance(first, ContentStreamInstruction):
        # Inline image
        return False
    return len(first.operands) == 0 and str(first.operator) == "q"


def _font_resource_name(page: pikepdf.Page, font: pikepdf.Dictionary) -> Name:
    """Returns the page resource name of a font, registering it if needed."""
    key = obj_key(font)
    used: set[str] = set()
    resources = page.get("/Resources")
    if resources is not None:
        for res_type, res_dict in resolve_indirect(resources).items():
            res_dict = resolve_indirect(res_dict)
            if not isinstance(res_dict, pikepdf.Dictionary):
                continue
            for name, existing in res_dict.items():
                if res_type == "/Font" and key is not None and obj_key(existing) == key:
                    return Name(name)
                used.add(name)

    # add_resource drops same-named entries of every resource type
    index = 1
    while f"/F{index}" in used:
        index += 1
    return page.add_resource(font, Name.Font, Name(f"/F{index}"))


def _page_box(page: pikepdf.Page) -> tuple[float, float, float, float]:
    """Returns the MediaBox as (llx, lly, width, height)."""
    llx, lly, urx, ury = (float(v) for v in page.mediabox)
    return llx, lly, urx - llx, ury - lly


def place_text(
    page: pikepdf.Page,
    text: str,
    font: pikepdf.Dictionary,
    font_size: float,
    anchor: Anchor = Anchor(),
    offset_x: float = 0.0,
    offset_y: float = 0.0,
    *,
    isolate_graphics_state: bool = True,
    metrics: FontMetrics | None = None,
) -> None:
    """Draws a string at an anchored position on a page.

    The text is appended as ``q BT /Fn size Tf x y Td (...) Tj ET Q``.
    With ``isolate_graphics_state`` and a page that does not already start
    with ``q``, a ``q`` is prepended to the page content and a ``Q`` is
    appended before the text, so that the text is drawn in the initial
    page coordinate system whatever state the original content leaves
    behind.

    Args:
        page: A pikepdf Page object (modified in place).
        text: Text to draw. It is not validated against the font.
        font: Font dictionary of the same document, preferably indirect.
            It is added to the page's font resources if not already there.
        font_size: Font size.
        anchor: Anchor position on the page.
        offset_x: Horizontal offset from the anchored edge.
        offset_y: Vertical offset from the anchored edge.
        isolate_graphics_state: Wrap the existing content in ``q``/``Q``
            unless it already starts with ``q``.
        metrics: Metrics for width, cap height and encoding. Defaults to
            the widths declared in the font dictionary.
    """
    if metrics is None:
        metrics = PdfFontMetrics(font)

    # Checked before the content is modified
    has_saved_state = starts_with_saved_state(page)

    llx, lly, page_width, page_height = _page_box(page)
    text_width = metrics.string_width(text, font_size)
    text_height = metrics.cap_height(font_size)
    x, y = compute_origin(
        page_width, page_height, text_width, text_height, anchor, offset_x, offset_y
    )
    x += llx
    y += lly

    font_name = _font_resource_name(page, font)
    logger.debug(
        "Placing text %r at (%.2f, %.2f) with %s %.1f (%s/%s)",
        text,
        x,
        y,
        font_name,
        font_size,
        anchor.vertical.value,
        anchor.horizontal.value,
    )

    draw = [
        ContentStreamInstruction([], Operator("q")),
        ContentStreamInstruction([], Operator("BT")),
        ContentStreamInstruction([font_name, font_size], Operator("Tf")),
        ContentStreamInstruction([x, y], Operator("Td")),
        ContentStreamInstruction([pikepdf.String(metrics.encode(text))], Operator("Tj")),
        ContentStreamInstruction([], Operator("ET")),
        ContentStreamInstruction([], Operator("Q")),
    ]

    if isolate_graphics_state and not has_saved_state:
        page.contents_add(
            pikepdf.unparse_content_stream(
                [ContentStreamInstruction([], Operator("q"))]
            ),
            prepend=True,
        )
        draw.insert(0, ContentStreamInstruction([], Operator("Q")))

    page.contents_add(pikepdf.unparse_content_stream(draw), prepend=False)
