import logging
from typing import List

import pytest

from numbered_refs import *
from numbered_refs.config import DEFAULT_CONFIG, NumberingConfig
from numbered_refs.localization import TemplateLocalization
from numbered_refs.plugins.figures import NumberedFiguresTransformation
from numbered_refs.plugins.headings import NumberedHeadingsTransformation
from numbered_refs.plugins.reference import ReferenceMacro, ReferenceMacroParameters
from numbered_refs.render.counters import NumberRegistry
from numbered_refs.render.dyn_dispatch import RoleDispatch
from numbered_refs.render.events import EventRenderer
from numbered_refs.transformation import (
    Transformation,
    TransformationContext,
    TransformationError,
    apply_transformations,
)


class Recording(Transformation):
    def __init__(self, name: str, priority: int, log: List[str]) -> None:
        self.name = name
        self.priority = priority
        self.log = log

    def transform(self, document: Node, context: TransformationContext) -> None:
        self.log.append(self.name)


def test_transformations_run_by_priority():
    log: List[str] = []
    apply_transformations(
        document(),
        [
            Recording("late", 3000, log),
            Recording("first-of-equals", 2000, log),
            Recording("early", 10, log),
            Recording("second-of-equals", 2000, log),
        ],
    )
    assert log == ["early", "first-of-equals", "second-of-equals", "late"]


def test_headings_and_figures_together():
    fig_ref = ReferenceMacro().execute(ReferenceMacroParameters(figure="F"))
    sec_ref = ReferenceMacro().execute(ReferenceMacroParameters(section="S"))
    caption = figure_caption([id_marker("F"), *words("picture")])
    h = header([id_marker("S"), *words("Heading")])
    doc = document(
        [
            paragraph([fig_ref, space(), sec_ref]),
            section([h, figure([paragraph([image("a.png")]), caption])]),
        ]
    )
    apply_transformations(
        doc,
        [NumberedHeadingsTransformation(), NumberedFiguresTransformation()],
        TransformationContext(document_id="Main.WebHome"),
    )
    assert text_content(h) == "1 Heading"
    assert text_content(caption) == "Figure 1: picture"
    assert text_content(fig_ref) == "1"
    assert text_content(sec_ref) == "1"


def test_numbering_failure_is_a_transformation_error():
    class BrokenLocalization(TemplateLocalization):
        def render(self, key, count):
            raise ValueError("no")

    doc = document([figure([table([]), figure_caption(words("t"))])])
    with pytest.raises(TransformationError):
        NumberedFiguresTransformation(localization=BrokenLocalization()).transform(
            doc, TransformationContext()
        )


def test_registry_merge_and_warning(caplog):
    figures = NumberRegistry("figure")
    figures.register("A", (1,))
    tables = NumberRegistry("table")
    tables.register("B", (1,))
    tables.register("A", (2,))
    with caplog.at_level(logging.WARNING):
        merged = figures.merge(tables)
    assert merged.family == "figure"
    assert dict(merged) == {"A": (2,), "B": (1,)}
    assert "used more than once" in caplog.text
    assert repr(merged) == "NumberRegistry(figure: A=2, B=1)"
    assert dict(figures) == {"A": (1,)}


def test_registering_the_same_number_twice_is_quiet(caplog):
    r = NumberRegistry("section")
    with caplog.at_level(logging.WARNING):
        r.register("A", (1, 2))
        r.register("A", (1, 2))
    assert caplog.text == ""
    assert len(r) == 1


def test_registry_rejects_bad_numbers():
    with pytest.raises(ValueError):
        NumberRegistry("section").register("A", (0,))


def test_dispatch_conflicts_and_gaps():
    dispatch: RoleDispatch[[], str] = RoleDispatch()
    dispatch.register_handler(Role.WORD, lambda n: "word")
    with pytest.raises(RuntimeError, match="Conflict"):
        dispatch.register_handler(Role.WORD, lambda n: "again")
    assert dispatch.get_handler(word("x")) is not None
    assert dispatch.get_handler(space()) is None
    assert Role.SPACE in dispatch.missing_roles()
    with pytest.raises(RuntimeError, match="No handler registered"):
        dispatch.check_exhaustive()


def test_event_renderer_covers_every_role():
    assert EventRenderer.default_emitter_dispatch().missing_roles() == set()


def test_config_validation():
    with pytest.raises(ValueError):
        NumberingConfig(heading_class=" ")
    with pytest.raises(ValueError):
        NumberingConfig(table_class=DEFAULT_CONFIG.figure_class)
    assert NumberingConfig(protected_macros=()).protected_macros == ()


def test_localization():
    localization = TemplateLocalization()
    assert text_content(
        format_span(localization.render(DEFAULT_CONFIG.figure_prefix_key, 4))
    ) == "Figure 4:"
    with pytest.raises(KeyError):
        localization.render("unknown.key", 1)


def test_missing_translation_is_a_transformation_error():
    localization = TemplateLocalization()
    del localization.translations[DEFAULT_CONFIG.figure_prefix_key]
    doc = document([figure([paragraph([image("a.png")]), figure_caption(words("f"))])])
    with pytest.raises(TransformationError) as e:
        NumberedFiguresTransformation(localization=localization).transform(
            doc, TransformationContext()
        )
    assert isinstance(e.value.__cause__, KeyError)
