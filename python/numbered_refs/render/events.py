"""
Render a tree as a list of events, one per line: `beginHeader [1, null]`, `onWord [heading]`, `endHeader [1, null]`...

This is the easiest way to see exactly what a transformation did to a tree, and what the tests compare against.
"""

import io
from typing import Callable, Dict, Optional

from numbered_refs import Node, Role
from numbered_refs.render import Renderer, Writable
from numbered_refs.render.dyn_dispatch import RoleDispatch


def format_parameters(parameters: Dict[str, str]) -> str:
    return "[" + "".join(f"[{k}]=[{v}]" for k, v in parameters.items()) + "]"


def _container(
    name: str, args: Optional[Callable[[Node], str]] = None
) -> Callable[[Node, Renderer], None]:
    def emit_container(node: Node, r: Renderer) -> None:
        suffix = f" {args(node)}" if args else ""
        r.emit_raw(f"begin{name}{suffix}")
        r.emit_newline()
        r.emit_children(node)
        r.emit_raw(f"end{name}{suffix}")
        r.emit_newline()

    return emit_container


def _leaf(render: Callable[[Node], str]) -> Callable[[Node, Renderer], None]:
    def emit_leaf(node: Node, r: Renderer) -> None:
        r.emit_raw(render(node))
        r.emit_newline()

    return emit_leaf


def _emit_macro(node: Node, r: Renderer) -> None:
    kind = "Inline" if node.inline else "Standalone"
    args = f"[{node.macro_id}] {format_parameters(node.parameters)}"
    _container(f"MacroMarker{kind}", lambda _: args)(node, r)


def _emit_other(node: Node, r: Renderer) -> None:
    if node.children:
        _container("Other")(node, r)
    else:
        r.emit_raw("onOther")
        r.emit_newline()


class EventRenderer(Renderer):
    def __init__(self, write_to: Writable) -> None:
        super().__init__(EventRenderer.default_emitter_dispatch(), write_to)

    @staticmethod
    def default_emitter_dispatch() -> RoleDispatch[[Renderer], None]:
        handlers: RoleDispatch[[Renderer], None] = RoleDispatch()
        handlers.register_handler(Role.DOCUMENT, _container("Document"))
        handlers.register_handler(Role.SECTION, _container("Section"))
        handlers.register_handler(
            Role.HEADER,
            _container("Header", lambda n: f"[{n.level}, {n.id or 'null'}]"),
        )
        handlers.register_handler(Role.PARAGRAPH, _container("Paragraph"))
        handlers.register_handler(
            Role.FORMAT, _container("Format", lambda n: format_parameters(n.parameters))
        )
        handlers.register_handler(Role.MACRO, _emit_macro)
        handlers.register_handler(Role.FIGURE, _container("Figure"))
        handlers.register_handler(Role.FIGURE_CAPTION, _container("FigureCaption"))
        handlers.register_handler(Role.TABLE, _container("Table"))
        handlers.register_handler(
            Role.LINK, _container("Link", lambda n: f"[anchor=[{n.reference}]]")
        )
        handlers.register_handler(Role.OTHER, _emit_other)
        handlers.register_handler(Role.WORD, _leaf(lambda n: f"onWord [{n.text}]"))
        handlers.register_handler(Role.SPACE, _leaf(lambda n: "onSpace"))
        handlers.register_handler(
            Role.SYMBOL, _leaf(lambda n: f"onSpecialSymbol [{n.text}]")
        )
        handlers.register_handler(
            Role.ID, _leaf(lambda n: f"onId [{n.anchor.id if n.anchor else ''}]")
        )
        handlers.register_handler(
            Role.PLACEHOLDER, _leaf(lambda n: f"onReference [{n.backref}]")
        )
        handlers.register_handler(
            Role.IMAGE, _leaf(lambda n: f"onImage [{n.get_parameter('src')}]")
        )
        handlers.register_handler(
            Role.VERBATIM,
            _leaf(lambda n: f"onVerbatim [{n.text}] [{str(n.inline).lower()}]"),
        )
        return handlers


def render_events(node: Node) -> str:
    out = io.StringIO()
    EventRenderer(out).emit(node)
    return out.getvalue().rstrip("\n")
