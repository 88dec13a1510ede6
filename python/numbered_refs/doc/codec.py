"""
Plain dict (and so JSON) form of a tree, for handing documents to the command line tool.

Only non-default fields are written: `{"role": "word", "text": "A"}`.
"""

from typing import Any, Dict

from numbered_refs import Anchor, Backref, Node, ReferenceKind, Role


def to_dict(node: Node) -> Dict[str, Any]:
    d: Dict[str, Any] = {"role": node.role.value}
    if node.id is not None:
        d["id"] = node.id
    if node.text is not None and node.role is not Role.SPACE:
        d["text"] = node.text
    if node.role is Role.HEADER:
        d["level"] = node.level
    if node.macro_id is not None:
        d["macro_id"] = node.macro_id
    if node.inline:
        d["inline"] = True
    if node.parameters:
        d["parameters"] = dict(node.parameters)
    if node.anchor is not None:
        d["anchor"] = node.anchor.id
    if node.backref is not None:
        d["backref"] = {"id": node.backref.id, "kind": node.backref.kind.value}
    if node.reference is not None:
        d["reference"] = node.reference
    if node.children:
        d["children"] = [to_dict(c) for c in node.children]
    return d


def from_dict(d: Dict[str, Any]) -> Node:
    if not isinstance(d, dict):
        raise ValueError(f"A node must be a JSON object, got {type(d).__name__}: {d!r}")
    children = d.get("children", [])
    if not isinstance(children, list):
        raise ValueError(f"Node children must be a list, got {children!r}")
    try:
        role = Role(d["role"])
    except KeyError:
        raise ValueError(f"Node is missing its role: {d}")
    except ValueError:
        raise ValueError(f"Unknown node role '{d['role']}'")

    text = d.get("text")
    if role is Role.SPACE:
        text = " "
    elif role in (Role.WORD, Role.SYMBOL, Role.VERBATIM) and text is None:
        raise ValueError(f"A {role.value} node needs some text")

    anchor = None
    if role is Role.ID:
        if "anchor" not in d:
            raise ValueError("An id node needs an anchor")
        anchor = Anchor(d["anchor"])

    backref = None
    if role is Role.PLACEHOLDER:
        try:
            backref = Backref(d["backref"]["id"], ReferenceKind(d["backref"]["kind"]))
        except (KeyError, TypeError):
            raise ValueError(f"A placeholder needs a backref with an id and a kind: {d}")

    return Node(
        role,
        [from_dict(c) for c in children],
        id=d.get("id"),
        text=text,
        level=int(d.get("level", 1 if role is Role.HEADER else 0)),
        macro_id=d.get("macro_id"),
        inline=bool(d.get("inline", False)),
        parameters=dict(d.get("parameters", {})),
        anchor=anchor,
        backref=backref,
        reference=d.get("reference"),
    )
