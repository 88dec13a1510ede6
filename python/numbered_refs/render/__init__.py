import abc
from typing import Protocol

from numbered_refs import Node
from numbered_refs.render.dyn_dispatch import RoleDispatch


class Writable(Protocol):
    def write(self, s: str, /) -> int: ...


class Renderer(abc.ABC):
    """Writes a tree out through per-role handlers.

    Turning a tree into the final output format is the host's business. Renderers here are for looking at the tree,
    e.g. to check what a transformation did."""

    handlers: RoleDispatch[["Renderer"], None]
    write_to: Writable

    def __init__(self, handlers: RoleDispatch[["Renderer"], None], write_to: Writable) -> None:
        handlers.check_exhaustive()
        self.handlers = handlers
        self.write_to = write_to

    def emit_raw(self, x: str) -> None:
        """
        The function on which all emitters are based.
        """
        self.write_to.write(x)

    def emit_newline(self) -> None:
        self.write_to.write("\n")

    def emit(self, *nodes: Node) -> None:
        for n in nodes:
            f = self.handlers.get_handler(n)
            if f is None:
                raise NotImplementedError(f"Didn't have renderer for {n.role}")
            f(n, self)

    def emit_children(self, node: Node) -> None:
        self.emit(*node.children)
