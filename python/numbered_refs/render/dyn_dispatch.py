from typing import (
    Callable,
    Concatenate,
    Dict,
    Generic,
    ParamSpec,
    Set,
    TypeVar,
)

from numbered_refs import Node, Role

P = ParamSpec("P")
TReturn = TypeVar("TReturn")


class RoleDispatch(Generic[P, TReturn]):
    """This class allows you to register "handlers" for node roles and retrieve them for a node.

    The set of roles is closed, so a user of the dispatch can check up front that every role is covered
    instead of finding out halfway through a document.

    You can specify a paramspec for extra arguments to the handler, and the return type must be consistent for all functions.
    For example, `RoleDispatch[[X, Y], R]` will map roles to functions `Callable[[Node, X, Y], R]`"""

    _table: Dict[Role, Callable[Concatenate[Node, P], TReturn]]

    def __init__(self) -> None:
        super().__init__()
        self._table = {}

    def register_handler(
        self,
        role: Role,
        f: Callable[Concatenate[Node, P], TReturn],
    ) -> None:
        if role in self._table:
            raise RuntimeError(f"Conflict: registered two handlers for {role}")
        self._table[role] = f

    def get_handler(self, node: Node) -> Callable[Concatenate[Node, P], TReturn] | None:
        return self._table.get(node.role)

    def missing_roles(self) -> Set[Role]:
        return set(Role).difference(self._table.keys())

    def check_exhaustive(self) -> None:
        missing = self.missing_roles()
        if missing:
            raise RuntimeError(
                f"No handler registered for {', '.join(sorted(r.name for r in missing))}"
            )
