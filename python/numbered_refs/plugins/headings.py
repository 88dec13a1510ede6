import logging
from typing import Iterable, Optional

from typing_extensions import override

from numbered_refs import Node, ReferenceKind, Role
from numbered_refs.config import DEFAULT_CONFIG, NumberingConfig
from numbered_refs.doc.dfs import ancestors, preceding_siblings
from numbered_refs.errors import DefaultErrorBlockGenerator, ErrorBlockGenerator
from numbered_refs.render.backrefs import ReferenceResolver
from numbered_refs.render.counters import NumberingEngine, NumberingFamily
from numbered_refs.render.manual_numbering import (
    HierarchicalNumber,
    read_tagged_number,
    tagged_number,
)
from numbered_refs.transformation import (
    Transformation,
    TransformationContext,
    TransformationError,
)

logger = logging.getLogger(__name__)


class HeadingFamily(NumberingFamily):
    """Headings, numbered `1`, `1.1`, `1.2`, `1.2.1`... following how their sections nest.

    A header's unit is its section, so the search looks at the sections before it and then at the sections around it.
    A header that isn't inside a section stands for itself."""

    name = "section"
    candidate_role = Role.HEADER

    css_class: str

    def __init__(self, css_class: str = DEFAULT_CONFIG.heading_class) -> None:
        self.css_class = css_class

    @override
    def target(self, candidate: Node) -> Optional[Node]:
        return candidate

    @override
    def unit(self, candidate: Node) -> Node:
        return candidate.section or candidate

    @override
    def id_scope(self, candidate: Node) -> Node:
        # Only the markers in the heading text, not the ones in the rest of the section
        return candidate

    @override
    def existing_number(self, unit: Node) -> Optional[HierarchicalNumber]:
        h = unit.header if unit.role is Role.SECTION else unit
        if h is None or h.role is not Role.HEADER or not h.children:
            return None
        return read_tagged_number(h.children[0], self.css_class)

    @override
    def previous_units(self, unit: Node) -> Iterable[Node]:
        # A section's own header is also a sibling of its subsections, so only compare like with like
        return (s for s in preceding_siblings(unit) if s.role is unit.role)

    @override
    def parent_units(self, unit: Node) -> Iterable[Node]:
        return (a for a in ancestors(unit) if a.role is Role.SECTION)

    @override
    def make_fragment(self, number: HierarchicalNumber) -> Node:
        return tagged_number(number, self.css_class)


class NumberedHeadingsTransformation(Transformation):
    """Find all headings, number them (nested with the dot notation, e.g. `1.1.1.1`) and display the number in
    front of the heading label. Then replace every section reference with a link labelled with the number."""

    # Run last, so that headings contributed by macros and other transformations get numbered too
    priority = 2000

    config: NumberingConfig
    engine: NumberingEngine
    resolver: ReferenceResolver

    def __init__(
        self,
        config: NumberingConfig = DEFAULT_CONFIG,
        error_generator: Optional[ErrorBlockGenerator] = None,
    ) -> None:
        self.config = config
        self.engine = NumberingEngine(
            HeadingFamily(config.heading_class), config.protected_macros
        )
        self.resolver = ReferenceResolver(
            ReferenceKind.SECTION,
            error_generator or DefaultErrorBlockGenerator(),
            config.protected_macros,
        )

    @override
    def transform(self, document: Node, context: TransformationContext) -> None:
        try:
            registry = self.engine.number(document)
            resolved = self.resolver.resolve(document, registry)
        except (ValueError, KeyError) as e:
            raise TransformationError(
                f"Failed to number the headings of {context.document_id or 'document'}"
            ) from e
        logger.debug(
            f"Numbered {len(registry)} section ids, resolved {resolved} section references"
        )
