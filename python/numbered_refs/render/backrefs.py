import logging
from typing import Collection, List, Mapping

from numbered_refs import Node, ReferenceKind, Role, link
from numbered_refs.doc.dfs import collect
from numbered_refs.doc.protection import DEFAULT_PROTECTED_MACROS, is_in_protected_block
from numbered_refs.errors import ErrorBlockGenerator
from numbered_refs.render.manual_numbering import HierarchicalNumber, number_nodes
from numbered_refs.transformation import TransformationError

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """Replaces the reference placeholders of one kind with a link labelled with the target's number.

    References to an id the registry doesn't know become an error fragment instead.
    The label is the number as it is now: nothing is re-resolved if the numbering changes later."""

    kind: ReferenceKind
    error_generator: ErrorBlockGenerator
    protected: Collection[str]

    def __init__(
        self,
        kind: ReferenceKind,
        error_generator: ErrorBlockGenerator,
        protected: Collection[str] = DEFAULT_PROTECTED_MACROS,
    ) -> None:
        self.kind = kind
        self.error_generator = error_generator
        self.protected = protected

    def placeholders(self, root: Node) -> List[Node]:
        return [
            p
            for p in collect(root, Role.PLACEHOLDER)
            if p.backref is not None
            and p.backref.kind is self.kind
            and not is_in_protected_block(p, self.protected)
        ]

    def resolve(self, root: Node, registry: Mapping[str, HierarchicalNumber]) -> int:
        """Returns how many placeholders were replaced."""
        placeholders = self.placeholders(root)
        for placeholder in placeholders:
            self._replace(placeholder, registry)
        return len(placeholders)

    def _replace(
        self, placeholder: Node, registry: Mapping[str, HierarchicalNumber]
    ) -> None:
        assert placeholder.backref is not None
        wrapper = placeholder.parent
        if wrapper is None:
            raise TransformationError(
                f"Reference placeholder for '{placeholder.backref}' has no parent to be replaced in"
            )

        target = placeholder.backref.id
        number = registry.get(target)
        if number is None:
            kind = self.kind.value
            logger.warning(f"No {kind} id named [{target}] was found")
            # A placeholder outside of a macro marker can only have come from inline content
            inline = wrapper.inline if wrapper.role is Role.MACRO else True
            replacement = self.error_generator.generate_error_blocks(
                f"No {kind} id named [{target}] was found",
                f"Verify the {kind} id used.",
                inline,
            )
        else:
            replacement = [link(number_nodes(number), reference=target)]

        # The macro marker around the placeholder stays, so the reference can still be traced back to its macro
        wrapper.replace_child(placeholder, replacement)
