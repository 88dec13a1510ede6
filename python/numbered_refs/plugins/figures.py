import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from typing_extensions import override

from numbered_refs import Node, ReferenceKind, Role, format_span
from numbered_refs.config import DEFAULT_CONFIG, NumberingConfig
from numbered_refs.doc.dfs import preceding
from numbered_refs.errors import DefaultErrorBlockGenerator, ErrorBlockGenerator
from numbered_refs.localization import Localization, TemplateLocalization
from numbered_refs.render.backrefs import ReferenceResolver
from numbered_refs.render.counters import NumberingEngine, NumberingFamily
from numbered_refs.render.manual_numbering import HierarchicalNumber, has_class
from numbered_refs.transformation import (
    Transformation,
    TransformationContext,
    TransformationError,
)

logger = logging.getLogger(__name__)


class FigureType(Enum):
    FIGURE = "figure"
    TABLE = "table"


def _content_blocks(node: Node) -> Iterator[Node]:
    for child in node.children:
        if child.role in (Role.FIGURE_CAPTION, Role.SPACE):
            continue
        if child.role is Role.MACRO:
            # Macro markers are transparent, e.g. the one around the caption
            yield from _content_blocks(child)
        else:
            yield child


def recognize_figure_type(figure: Node) -> FigureType:
    """A figure holding nothing but a table (and its caption) is a table. Anything else is a figure."""
    blocks = list(_content_blocks(figure))
    if len(blocks) == 1 and blocks[0].role is Role.TABLE:
        return FigureType.TABLE
    return FigureType.FIGURE


def find_caption(figure: Node) -> Optional[Node]:
    """The first caption of `figure`, not counting the captions of figures nested inside it."""
    stack = list(reversed(figure.children))
    while stack:
        n = stack.pop()
        if n.role is Role.FIGURE_CAPTION:
            return n
        if n.role is Role.FIGURE:
            continue
        stack.extend(reversed(n.children))
    return None


class FigureFamily(NumberingFamily):
    """Figures or tables, counted `1`, `2`, `3`... in document order regardless of the sections they are in.

    The count goes through a translation (e.g. "Figure 3:") and the result is put at the front of the caption.
    Figures without a caption aren't numbered."""

    candidate_role = Role.FIGURE

    figure_type: FigureType
    localization: Localization
    css_class: str
    prefix_key: str

    def __init__(
        self,
        figure_type: FigureType,
        localization: Localization,
        css_class: str,
        prefix_key: str,
    ) -> None:
        self.figure_type = figure_type
        self.name = figure_type.value
        self.localization = localization
        self.css_class = css_class
        self.prefix_key = prefix_key

    @override
    def accepts(self, candidate: Node) -> bool:
        return recognize_figure_type(candidate) is self.figure_type

    @override
    def target(self, candidate: Node) -> Optional[Node]:
        return find_caption(candidate)

    @override
    def unit(self, candidate: Node) -> Node:
        return candidate

    @override
    def existing_number(self, unit: Node) -> Optional[HierarchicalNumber]:
        caption = find_caption(unit)
        if caption is None or not caption.children:
            return None
        prefix = caption.children[0]
        if not has_class(prefix, self.css_class):
            return None
        # The translation decides where the count goes, so take the first word that is one
        stack = list(reversed(prefix.children))
        while stack:
            n = stack.pop()
            if n.role is Role.WORD and n.text and n.text.isascii() and n.text.isdigit():
                count = int(n.text)
                return (count,) if count >= 1 else None
            stack.extend(reversed(n.children))
        return None

    @override
    def previous_units(self, unit: Node) -> Iterable[Node]:
        return (
            f
            for f in preceding(unit, Role.FIGURE, include_ancestors=True)
            if recognize_figure_type(f) is self.figure_type
        )

    @override
    def parent_units(self, unit: Node) -> Iterable[Node]:
        return ()

    @override
    def make_fragment(self, number: HierarchicalNumber) -> Node:
        return format_span(
            self.localization.render(self.prefix_key, number[-1]),
            css_class=self.css_class,
        )


class NumberedFiguresTransformation(Transformation):
    """Number figures and tables (each with their own count) by prefixing their caption, e.g. "Figure 1:".
    Then replace every figure reference, which may name a figure or a table, with a link labelled with the count.
    """

    priority = 2000

    config: NumberingConfig
    engines: List[NumberingEngine]
    resolver: ReferenceResolver

    def __init__(
        self,
        config: NumberingConfig = DEFAULT_CONFIG,
        localization: Optional[Localization] = None,
        error_generator: Optional[ErrorBlockGenerator] = None,
    ) -> None:
        self.config = config
        localization = localization or TemplateLocalization()
        self.engines = [
            NumberingEngine(
                FigureFamily(
                    FigureType.FIGURE,
                    localization,
                    config.figure_class,
                    config.figure_prefix_key,
                ),
                config.protected_macros,
            ),
            NumberingEngine(
                FigureFamily(
                    FigureType.TABLE,
                    localization,
                    config.table_class,
                    config.table_prefix_key,
                ),
                config.protected_macros,
            ),
        ]
        self.resolver = ReferenceResolver(
            ReferenceKind.FIGURE,
            error_generator or DefaultErrorBlockGenerator(),
            config.protected_macros,
        )

    @override
    def transform(self, document: Node, context: TransformationContext) -> None:
        try:
            figures, tables = (engine.number(document) for engine in self.engines)
            registry = figures.merge(tables, family="figure")
            resolved = self.resolver.resolve(document, registry)
        except (ValueError, KeyError) as e:
            # KeyError: a localization without the prefix translation
            raise TransformationError(
                f"Failed to number the figures of {context.document_id or 'document'}"
            ) from e
        logger.debug(
            f"Numbered {len(figures)} figure ids and {len(tables)} table ids, resolved {resolved} figure references"
        )
