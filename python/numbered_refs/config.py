from dataclasses import dataclass
from typing import Tuple

FIGURE_PREFIX_KEY = "transformation.numberedReferences.figurePrefix"
TABLE_PREFIX_KEY = "transformation.numberedReferences.tablePrefix"


@dataclass(frozen=True)
class NumberingConfig:
    """Settings shared by the numbering transformations."""

    protected_macros: Tuple[str, ...] = ("code",)
    """Macro ids whose output is shown verbatim. Nothing inside them is numbered or resolved."""

    heading_class: str = "numbered-reference"
    """The class put on the format span holding a heading number. This is also how an existing number is recognized."""

    figure_class: str = "wikigeneratedfigurenumber"
    table_class: str = "wikigeneratedtablenumber"

    figure_prefix_key: str = FIGURE_PREFIX_KEY
    """Translation key rendering the caption prefix of figures, given the figure count."""

    table_prefix_key: str = TABLE_PREFIX_KEY

    def __post_init__(self) -> None:
        if not self.heading_class.strip():
            raise ValueError("heading_class can't be empty")
        if self.figure_class == self.table_class:
            # The class is how a caption's family is recognized on later passes
            raise ValueError(
                f"Figures and tables must use different classes, both are '{self.figure_class}'"
            )


DEFAULT_CONFIG = NumberingConfig()
