"""
Hierarchical numbers, e.g. `1.2.1`, and their two serialized forms.

A number is written into the document as a tagged fragment: a format span carrying a marker class, holding
one WORD per component separated by '.' SYMBOLs. A later search over the tree recognizes the fragment by its
class and reads the integers back out of the WORDs.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from numbered_refs import Node, Role, format_span, join_nodes, symbol, word

HierarchicalNumber = Tuple[int, ...]
"""Most significant component first. Every component is >= 1 and the length is the nesting depth."""

SEPARATOR = "."


def check_number(number: Sequence[int]) -> HierarchicalNumber:
    if not number:
        raise ValueError("A hierarchical number needs at least one component")
    for i in number:
        if isinstance(i, bool) or not isinstance(i, int) or i < 1:
            raise ValueError(
                f"Hierarchical number components must be positive integers, got {list(number)}"
            )
    return tuple(number)


def increment(number: HierarchicalNumber) -> HierarchicalNumber:
    """The number of the next unit at the same level: `1.2` -> `1.3`."""
    return (*number[:-1], number[-1] + 1)


def descend(number: HierarchicalNumber) -> HierarchicalNumber:
    """The number of the first unit nested inside: `1.2` -> `1.2.1`."""
    return (*number, 1)


def format_number(number: Sequence[int], separator: str = SEPARATOR) -> str:
    return separator.join(str(i) for i in check_number(number))


def number_nodes(number: Sequence[int]) -> List[Node]:
    return join_nodes(
        (word(str(i)) for i in check_number(number)), lambda: symbol(SEPARATOR)
    )


def tagged_number(number: Sequence[int], css_class: str) -> Node:
    return format_span(number_nodes(number), css_class=css_class)


def has_class(node: Node, css_class: str) -> bool:
    """Is `node` a format span whose (whitespace separated) class list includes `css_class`?"""
    if node.role is not Role.FORMAT:
        return False
    classes = node.get_parameter("class")
    return classes is not None and css_class in classes.split()


def parse_number(nodes: Iterable[Node]) -> Optional[HierarchicalNumber]:
    """Read a number back out of the nodes produced by `number_nodes`.

    Separators are skipped. Returns None rather than raising if anything doesn't look like a number,
    so a hand-edited or foreign fragment is simply treated as "not numbered"."""
    result = []
    for n in nodes:
        if n.role is Role.WORD:
            text = n.text or ""
            if not (text.isascii() and text.isdigit()) or int(text) < 1:
                return None
            result.append(int(text))
        elif n.role in (Role.SYMBOL, Role.SPACE):
            continue
        else:
            return None
    if not result:
        return None
    return tuple(result)


def read_tagged_number(node: Node, css_class: str) -> Optional[HierarchicalNumber]:
    if not has_class(node, css_class):
        return None
    return parse_number(node.children)
