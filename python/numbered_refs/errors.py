from typing import List, Protocol, runtime_checkable

from numbered_refs import Node, format_span, paragraph, verbatim, word

ERROR_CLASS = "xwikirenderingerror"
ERROR_DESCRIPTION_CLASS = "xwikirenderingerrordescription hidden"


@runtime_checkable
class ErrorBlockGenerator(Protocol):
    """Turns a problem found while transforming into nodes the reader will see in place of the broken content."""

    def generate_error_blocks(
        self, message: str, description: str, inline: bool
    ) -> List[Node]: ...


class DefaultErrorBlockGenerator:
    """A short message followed by a hidden, verbatim description.

    Standalone errors get wrapped in their own paragraph."""

    def generate_error_blocks(
        self, message: str, description: str, inline: bool
    ) -> List[Node]:
        blocks = [
            format_span([word(message)], css_class=ERROR_CLASS),
            format_span(
                [verbatim(description, inline=True)],
                css_class=ERROR_DESCRIPTION_CLASS,
            ),
        ]
        if inline:
            return blocks
        return [paragraph(blocks)]
