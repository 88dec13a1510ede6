from typing import Callable, Iterable, List

__all__ = [
    "Node",
    "Role",
    "Anchor",
    "Backref",
    "ReferenceKind",
    "document",
    "section",
    "header",
    "paragraph",
    "format_span",
    "macro",
    "figure",
    "figure_caption",
    "id_marker",
    "reference_placeholder",
    "link",
    "table",
    "image",
    "verbatim",
    "word",
    "space",
    "symbol",
    "words",
    "text_content",
    "join_nodes",
]

from numbered_refs.doc.anchors import Anchor, Backref, ReferenceKind
from numbered_refs.tree import (
    Node,
    Role,
    document,
    figure,
    figure_caption,
    format_span,
    header,
    id_marker,
    image,
    link,
    macro,
    paragraph,
    reference_placeholder,
    section,
    space,
    symbol,
    table,
    text_content,
    verbatim,
    word,
    words,
)


def join_nodes(nodes: Iterable[Node], joiner: Callable[[], Node]) -> List[Node]:
    """Equivalent of string.join, but for Nodes.

    The joiner is a factory because a Node can only have one parent, so each gap needs a fresh one."""
    joined: List[Node] = []
    for n in nodes:
        if joined:
            joined.append(joiner())
        joined.append(n)
    return joined
