import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from numbered_refs.doc.anchors import Anchor, Backref, ReferenceKind


class Role(Enum):
    """The structural role of a Node. The set is closed: every pass dispatches over it exhaustively."""

    DOCUMENT = "document"
    SECTION = "section"
    HEADER = "header"
    PARAGRAPH = "paragraph"
    FORMAT = "format"
    PLACEHOLDER = "placeholder"
    FIGURE = "figure"
    FIGURE_CAPTION = "figure_caption"
    MACRO = "macro"
    ID = "id"
    WORD = "word"
    SPACE = "space"
    SYMBOL = "symbol"
    LINK = "link"
    TABLE = "table"
    IMAGE = "image"
    VERBATIM = "verbatim"
    OTHER = "other"


@dataclass
class Node:
    """A node in a parsed document.

    Which payload fields are meaningful depends on the role:
    - `text` for WORD, SPACE, SYMBOL and VERBATIM
    - `level` for HEADER
    - `macro_id` and `inline` for MACRO, `inline` for VERBATIM
    - `parameters` for FORMAT (e.g. `class`), MACRO and IMAGE
    - `anchor` for ID, `backref` for PLACEHOLDER
    - `reference` for LINK, the identifier the link points at

    `parent` is a lookup relation only. The children list is what owns a node, and the mutation methods
    below keep both sides in step. Equality is structural and ignores `parent`."""

    role: Role
    children: List["Node"] = field(default_factory=list)
    id: Optional[str] = None
    text: Optional[str] = None
    level: int = 0
    macro_id: Optional[str] = None
    inline: bool = False
    parameters: Dict[str, str] = field(default_factory=dict)
    anchor: Optional[Anchor] = None
    backref: Optional[Backref] = None
    reference: Optional[str] = None
    parent: Optional["Node"] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.children = list(self.children)
        for child in self.children:
            child.parent = self

    def get_parameter(self, name: str) -> Optional[str]:
        return self.parameters.get(name)

    def index_of(self, child: "Node") -> int:
        # Identity, not equality: two identical Words are still two different children.
        for i, c in enumerate(self.children):
            if c is child:
                return i
        raise ValueError(f"{child.role} node is not a child of this {self.role} node")

    def append(self, child: "Node") -> None:
        child.parent = self
        self.children.append(child)

    def insert_child(self, index: int, child: "Node") -> None:
        child.parent = self
        self.children.insert(index, child)

    def insert_before(self, new: "Node", existing: "Node") -> None:
        self.insert_child(self.index_of(existing), new)

    def replace_child(self, old: "Node", new: Sequence["Node"]) -> None:
        """Replace `old` with the nodes in `new`, at the same position."""
        i = self.index_of(old)
        for n in new:
            n.parent = self
        self.children[i : i + 1] = list(new)
        old.parent = None

    def replace_children(self, new: Sequence["Node"]) -> None:
        for c in self.children:
            c.parent = None
        self.children = []
        for n in new:
            self.append(n)

    @property
    def section(self) -> Optional["Node"]:
        """For a HEADER, the SECTION it introduces."""
        if self.parent is not None and self.parent.role is Role.SECTION:
            return self.parent
        return None

    @property
    def header(self) -> Optional["Node"]:
        """For a SECTION, its HEADER."""
        for c in self.children:
            if c.role is Role.HEADER:
                return c
        return None

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.children)


def document(children: Iterable[Node] = ()) -> Node:
    return Node(Role.DOCUMENT, list(children))


def section(children: Iterable[Node] = ()) -> Node:
    return Node(Role.SECTION, list(children))


def header(children: Iterable[Node], level: int = 1, id: Optional[str] = None) -> Node:
    if level < 1:
        raise ValueError(f"Header level must be at least 1, got {level}")
    return Node(Role.HEADER, list(children), id=id, level=level)


def paragraph(children: Iterable[Node] = ()) -> Node:
    return Node(Role.PARAGRAPH, list(children))


def format_span(
    children: Iterable[Node],
    css_class: Optional[str] = None,
    parameters: Optional[Dict[str, str]] = None,
) -> Node:
    params = dict(parameters or {})
    if css_class is not None:
        params["class"] = css_class
    return Node(Role.FORMAT, list(children), parameters=params)


def macro(
    macro_id: str,
    children: Iterable[Node] = (),
    inline: bool = False,
    parameters: Optional[Dict[str, str]] = None,
) -> Node:
    """The marker region left around the output of an executed macro."""
    return Node(
        Role.MACRO,
        list(children),
        macro_id=macro_id,
        inline=inline,
        parameters=dict(parameters or {}),
    )


def figure(children: Iterable[Node] = (), id: Optional[str] = None) -> Node:
    return Node(Role.FIGURE, list(children), id=id)


def figure_caption(children: Iterable[Node] = ()) -> Node:
    return Node(Role.FIGURE_CAPTION, list(children))


def id_marker(name: str) -> Node:
    return Node(Role.ID, anchor=Anchor(name))


def reference_placeholder(target: str, kind: ReferenceKind) -> Node:
    return Node(Role.PLACEHOLDER, backref=Backref(target, kind))


def link(children: Iterable[Node], reference: str) -> Node:
    return Node(Role.LINK, list(children), reference=reference)


def table(children: Iterable[Node] = ()) -> Node:
    return Node(Role.TABLE, list(children))


def image(source: str) -> Node:
    return Node(Role.IMAGE, parameters={"src": source})


def verbatim(text: str, inline: bool = True) -> Node:
    return Node(Role.VERBATIM, text=text, inline=inline)


def word(text: str) -> Node:
    return Node(Role.WORD, text=text)


def space() -> Node:
    return Node(Role.SPACE, text=" ")


def symbol(char: str) -> Node:
    if len(char) != 1:
        raise ValueError(f"A special symbol is a single character, got '{char}'")
    return Node(Role.SYMBOL, text=char)


# Runs of word characters, runs of whitespace, or any other single character
_TOKEN_REGEX = re.compile(r"(\w+)|(\s+)|(.)", re.UNICODE)


def words(text: str) -> List[Node]:
    """Split plain text into WORD, SPACE and SYMBOL nodes, the way a wiki parser would."""
    nodes = []
    for m in _TOKEN_REGEX.finditer(text):
        if m.group(1):
            nodes.append(word(m.group(1)))
        elif m.group(2):
            nodes.append(space())
        else:
            nodes.append(symbol(m.group(3)))
    return nodes


def text_content(node: Node) -> str:
    """The plain text of every WORD, SPACE, SYMBOL and VERBATIM under (and including) `node`."""
    if node.text is not None:
        return node.text
    return "".join(text_content(c) for c in node.children)
