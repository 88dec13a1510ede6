from typing import Callable, Iterator, List, Optional, Tuple

from numbered_refs import Node, Role

VisitorFilter = Tuple[Role, ...] | Role | None
VisitorFunc = Callable[[Node], None]


def _matches(node: Node, v_filter: VisitorFilter) -> bool:
    if v_filter is None:
        return True
    if isinstance(v_filter, Role):
        return node.role is v_filter
    return node.role in v_filter


class DocumentDfsPass:
    """Runs a set of visitors over every node of a tree in a single pre-order pass."""

    visitors: List[Tuple[VisitorFilter, VisitorFunc]]

    def __init__(self, visitors: List[Tuple[VisitorFilter, VisitorFunc]]) -> None:
        self.visitors = visitors

    def dfs_over_document(self, root: Node) -> None:
        dfs_queue: List[Node] = [root]
        while dfs_queue:
            node = dfs_queue.pop()

            for v_filter, v_f in self.visitors:
                if _matches(node, v_filter):
                    v_f(node)

            # reversed is important because we pop the last thing in the queue off first.
            dfs_queue.extend(reversed(node.children))


def collect(root: Node, roles: VisitorFilter = None) -> List[Node]:
    """All nodes under (and including) root which match `roles`, in document order.

    The result is a snapshot, so callers can mutate the tree while iterating over it."""
    found: List[Node] = []
    DocumentDfsPass([(roles, found.append)]).dfs_over_document(root)
    return found


def descendants(node: Node, roles: VisitorFilter = None) -> List[Node]:
    return [n for n in collect(node, roles) if n is not node]


def ancestors(node: Node) -> Iterator[Node]:
    """Nearest first."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def preceding_siblings(node: Node) -> Iterator[Node]:
    """Nearest first."""
    if node.parent is None:
        return
    siblings = node.parent.children
    i = node.parent.index_of(node)
    for sibling in reversed(siblings[:i]):
        yield sibling


def preceding(
    node: Node, roles: VisitorFilter = None, include_ancestors: bool = False
) -> Iterator[Node]:
    """Every node before `node` in document order, nearest first.

    Ancestors start before `node` in pre-order too, but are only included if asked for."""
    current: Optional[Node] = node
    while current is not None:
        for sibling in preceding_siblings(current):
            yield from reversed(collect(sibling, roles))
        current = current.parent
        if include_ancestors and current is not None and _matches(current, roles):
            yield current
