import abc
import logging
from typing import Collection, Dict, Iterable, Iterator, List, Mapping, Optional

from numbered_refs import Node, Role, space
from numbered_refs.doc.dfs import ancestors, collect, descendants
from numbered_refs.doc.protection import (
    DEFAULT_PROTECTED_MACROS,
    is_in_protected_block,
    is_protected_block,
)
from numbered_refs.render.manual_numbering import (
    HierarchicalNumber,
    check_number,
    descend,
    format_number,
    increment,
)

logger = logging.getLogger(__name__)


class NumberRegistry(Mapping[str, HierarchicalNumber]):
    """Identifier -> number, for one family, built fresh by every numbering run.

    This is the only thing a ReferenceResolver gets from the NumberingEngine that ran before it."""

    family: str
    _numbers: Dict[str, HierarchicalNumber]

    def __init__(self, family: str) -> None:
        self.family = family
        self._numbers = {}

    def register(self, id: str, number: HierarchicalNumber) -> None:
        number = check_number(number)
        previous = self._numbers.get(id)
        if previous is not None and previous != number:
            logger.warning(
                f"{self.family} id '{id}' is used more than once: {format_number(previous)} is replaced by {format_number(number)}"
            )
        self._numbers[id] = number

    def merge(self, other: "NumberRegistry", family: Optional[str] = None) -> "NumberRegistry":
        """A new registry holding both sets of ids. Ids in `other` win."""
        merged = NumberRegistry(family or self.family)
        for id, number in self.items():
            merged.register(id, number)
        for id, number in other.items():
            merged.register(id, number)
        return merged

    def __getitem__(self, id: str) -> HierarchicalNumber:
        return self._numbers[id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._numbers)

    def __len__(self) -> int:
        return len(self._numbers)

    def __repr__(self) -> str:
        entries = ", ".join(f"{id}={format_number(n)}" for id, n in self._numbers.items())
        return f"NumberRegistry({self.family}: {entries})"


class NumberingFamily(abc.ABC):
    """One independent numbering domain, e.g. headings, figures or tables.

    A family picks out the candidate nodes, says which node receives the number (the "target", e.g. the header
    itself or a figure's caption) and which node stands for the numbered unit during the backward search
    (the "unit", e.g. the section a header introduces). It also owns the tagged fragment its numbers are written
    as, so it is the only thing which can recognize one of its own numbers."""

    name: str

    candidate_role: Role

    def candidates(self, root: Node) -> List[Node]:
        return collect(root, self.candidate_role)

    def accepts(self, candidate: Node) -> bool:
        """Sub-kind filter, e.g. only the figures that are tables."""
        return True

    @abc.abstractmethod
    def target(self, candidate: Node) -> Optional[Node]:
        """The node whose content is prefixed with the number. None if there isn't one."""
        ...

    @abc.abstractmethod
    def unit(self, candidate: Node) -> Node: ...

    def id_scope(self, candidate: Node) -> Node:
        """Identifier markers anywhere under this node name the unit."""
        return self.unit(candidate)

    @abc.abstractmethod
    def existing_number(self, unit: Node) -> Optional[HierarchicalNumber]:
        """The number already written into `unit` by this family, if any."""
        ...

    @abc.abstractmethod
    def previous_units(self, unit: Node) -> Iterable[Node]:
        """Units at the same level before `unit`, nearest first. Found => increment."""
        ...

    @abc.abstractmethod
    def parent_units(self, unit: Node) -> Iterable[Node]:
        """Units enclosing `unit`, nearest first. Found => descend."""
        ...

    @abc.abstractmethod
    def make_fragment(self, number: HierarchicalNumber) -> Node:
        """The tagged fragment written at the front of the target."""
        ...


class NumberingEngine:
    family: NumberingFamily
    protected: Collection[str]

    def __init__(
        self,
        family: NumberingFamily,
        protected: Collection[str] = DEFAULT_PROTECTED_MACROS,
    ) -> None:
        self.family = family
        self.protected = protected

    def number(self, root: Node) -> NumberRegistry:
        """Number every candidate under `root` in document order, mutating the tree, and return the ids found."""
        registry = NumberRegistry(self.family.name)
        # Snapshot first: inserting fragments must not disturb the enumeration.
        for candidate in self.family.candidates(root):
            target = self.family.target(candidate)
            if target is None or not target.children:
                continue
            # The target can sit deeper than the candidate, e.g. a caption inside a code macro
            if is_in_protected_block(target, self.protected):
                continue
            if not self.family.accepts(candidate):
                continue

            unit = self.family.unit(candidate)
            number = self.family.existing_number(unit)
            if number is None:
                number = self.compute_number(unit)
                target.insert_child(0, space())
                target.insert_child(0, self.family.make_fragment(number))
                logger.debug(f"Numbered {self.family.name} {format_number(number)}")
            else:
                logger.debug(
                    f"Keeping existing {self.family.name} number {format_number(number)}"
                )

            self._register(registry, candidate, unit, number)
        return registry

    def compute_number(self, unit: Node) -> HierarchicalNumber:
        for previous in self.family.previous_units(unit):
            found = self.family.existing_number(previous)
            if found is not None:
                return increment(found)
        for parent in self.family.parent_units(unit):
            found = self.family.existing_number(parent)
            if found is not None:
                return descend(found)
        return (1,)

    def _register(
        self,
        registry: NumberRegistry,
        candidate: Node,
        unit: Node,
        number: HierarchicalNumber,
    ) -> None:
        if unit.id is not None:
            registry.register(unit.id, number)
        if candidate is not unit and candidate.id is not None:
            registry.register(candidate.id, number)

        scope = self.family.id_scope(candidate)
        for marker in descendants(scope, Role.ID):
            if marker.anchor is None or self._excluded_marker(marker, scope):
                continue
            registry.register(marker.anchor.id, number)

    def _excluded_marker(self, marker: Node, scope: Node) -> bool:
        """Id markers generated for a reference placeholder, or shown raw by a protected macro, are not anchors for the unit."""
        for a in ancestors(marker):
            if a is scope:
                return False
            if a.role is Role.PLACEHOLDER or is_protected_block(a, self.protected):
                return True
        return False
