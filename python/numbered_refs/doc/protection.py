from typing import Collection, Optional

from numbered_refs import Node, Role
from numbered_refs.config import DEFAULT_CONFIG

DEFAULT_PROTECTED_MACROS = DEFAULT_CONFIG.protected_macros


def is_protected_block(
    node: Node, protected: Collection[str] = DEFAULT_PROTECTED_MACROS
) -> bool:
    return node.role is Role.MACRO and node.macro_id in protected


def is_in_protected_block(
    node: Node, protected: Collection[str] = DEFAULT_PROTECTED_MACROS
) -> bool:
    """Is `node`, or anything it sits inside, the output of a protected macro such as `code`?

    Everything under such a macro is raw content: headings there are not numbered and references there are not resolved.
    """
    current: Optional[Node] = node
    while current is not None:
        if is_protected_block(current, protected):
            return True
        current = current.parent
    return False
