"""Page selection and resolution against a document's page count."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

_RANGE_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")


class PageSelectionKind(str, Enum):
    """Shape of a :class:`Pages` selection."""

    all = "all"
    single = "single"
    range = "range"


@dataclass(frozen=True)
class Pages:
    """Which pages to render (1-based page numbers).

    Build with :meth:`all`, :meth:`single`, :meth:`range`, or
    :meth:`parse`.
    """

    kind: PageSelectionKind
    first: Optional[int] = None
    last: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PageSelectionKind):
            try:
                object.__setattr__(self, "kind", PageSelectionKind(self.kind))
            except ValueError as exc:
                raise ValueError(
                    f"Invalid page selection kind: {self.kind!r}"
                ) from exc
        if self.kind is PageSelectionKind.all:
            if self.first is not None or self.last is not None:
                raise ValueError("Page selection 'all' takes no page numbers")
            return
        for name in ("first", "last"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(
                    f"Page selection {self.kind.value!r} needs an integer "
                    f"{name}, got {value!r}"
                )
        if self.kind is PageSelectionKind.single and self.first != self.last:
            raise ValueError(
                f"Single-page selection has first={self.first} != last={self.last}"
            )

    @classmethod
    def all(cls) -> "Pages":
        return cls(PageSelectionKind.all)

    @classmethod
    def single(cls, page: int) -> "Pages":
        return cls(PageSelectionKind.single, page, page)

    @classmethod
    def range(cls, first: int, last: int) -> "Pages":
        """Pages *first* through *last*, both inclusive."""
        return cls(PageSelectionKind.range, first, last)

    @classmethod
    def parse(cls, text: str) -> "Pages":
        """Parse ``"all"``, ``"7"`` or ``"2-5"``."""
        s = text.strip()
        if s.lower() == "all":
            return cls.all()
        if s.isdigit():
            return cls.single(int(s))
        m = _RANGE_RE.match(s)
        if m:
            return cls.range(int(m.group(1)), int(m.group(2)))
        raise ValueError(f"Invalid page selection: {text!r}")


def resolve_pages(selection: Pages, page_count: int) -> List[int]:
    """Turn *selection* into the ordered page numbers to render.

    - ``single`` yields its page unchecked; a page past the end fails
      when the renderer produces no image.
    - ``range`` drops pages outside ``1..page_count``.
    - ``all`` yields ``0..page_count`` inclusive.  Page 0 is kept for
      compatibility with existing callers (poppler treats it as page 1).
    """
    if selection.kind is PageSelectionKind.single:
        return [selection.first]
    if selection.kind is PageSelectionKind.range:
        lo = max(selection.first, 1)
        hi = min(selection.last, page_count)
        return list(range(lo, hi + 1))
    return list(range(0, page_count + 1))
