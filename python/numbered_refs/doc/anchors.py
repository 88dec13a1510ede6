"""
Identifier markers and the references that point back at them.

An identifier marker (`Anchor`) names the numbered unit it sits in: a heading, or a figure/table caption.
A reference placeholder (`Backref`) is what the `reference` macro leaves behind, asking for the number of
whatever the marker names. The placeholder always says which family it refers to, because sections and
figures are numbered independently and can reuse the same identifier.
"""

import dataclasses
from enum import Enum


class ReferenceKind(Enum):
    SECTION = "section"
    FIGURE = "figure"
    """Figures and tables share one reference kind, so `figure='T1'` may name a table."""


@dataclasses.dataclass(frozen=True)
class Anchor:
    """A point in the document which can always be referenced back to using a Backref.

    It doesn't say what it names: that is decided by the heading or caption it ends up numbered with."""

    id: str


@dataclasses.dataclass(frozen=True)
class Backref:
    """A reference to an Anchor in the document.

    Must include the ID of the Anchor and the family it is looked up in."""

    id: str
    kind: ReferenceKind

    def __str__(self) -> str:
        return f"{self.kind.value}={self.id}"
