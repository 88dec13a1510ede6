from dataclasses import dataclass
from typing import Dict, Optional

from numbered_refs import Node, ReferenceKind, id_marker, macro, reference_placeholder


@dataclass(frozen=True)
class ReferenceMacroParameters:
    """Exactly one of `section` or `figure` names the id being referred to."""

    section: Optional[str] = None
    figure: Optional[str] = None

    def __post_init__(self) -> None:
        given = [v for v in (self.section, self.figure) if v is not None]
        if len(given) != 1:
            raise ValueError(
                f"A reference needs exactly one of 'section' or 'figure', got section={self.section!r} figure={self.figure!r}"
            )
        if not given[0]:
            raise ValueError("A reference can't point to an empty id")

    @property
    def kind(self) -> ReferenceKind:
        return ReferenceKind.SECTION if self.section is not None else ReferenceKind.FIGURE

    @property
    def target(self) -> str:
        target = self.section if self.section is not None else self.figure
        assert target is not None
        return target

    def as_parameters(self) -> Dict[str, str]:
        return {self.kind.value: self.target}


class ReferenceMacro:
    """Create a link to a section or figure id, displaying its number as the link label.

    The macro can't know the number yet, since the numbering runs after every macro has been expanded.
    It leaves a placeholder for the numbering transformations to replace."""

    macro_id = "reference"
    description = "Create a link to a section or figure id, displaying its number as the link label."
    supports_inline_mode = True

    def execute(self, parameters: ReferenceMacroParameters, inline: bool = True) -> Node:
        return macro(
            self.macro_id,
            [reference_placeholder(parameters.target, parameters.kind)],
            inline=inline,
            parameters=parameters.as_parameters(),
        )


class IdMacro:
    """Mark the place it's used in with an id, so the enclosing heading or caption can be referenced."""

    macro_id = "id"
    supports_inline_mode = True

    def execute(self, name: str, inline: bool = True) -> Node:
        if not name:
            raise ValueError("An id marker needs a name")
        return macro(self.macro_id, [id_marker(name)], inline=inline, parameters={"name": name})
