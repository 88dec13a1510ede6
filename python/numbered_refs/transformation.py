import abc
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from numbered_refs import Node

logger = logging.getLogger(__name__)


class TransformationError(Exception):
    """The tree couldn't be transformed, e.g. because it breaks an assumption about its structure.

    The run is aborted: the caller must not render the partially transformed tree."""

    pass


@dataclass
class TransformationContext:
    document_id: Optional[str] = None
    """Only used to make log messages easier to trace back."""


class Transformation(abc.ABC):
    """A pass rewriting a whole document tree in place, run by the host after parsing."""

    priority: int = 1000
    """Lower runs first. Macro expansion must have run before anything here sees the tree."""

    @abc.abstractmethod
    def transform(self, document: Node, context: TransformationContext) -> None: ...


def apply_transformations(
    document: Node,
    transformations: Iterable[Transformation],
    context: Optional[TransformationContext] = None,
) -> Node:
    if context is None:
        context = TransformationContext()
    # sorted() is stable, so equal priorities run in the order they were given
    for t in sorted(transformations, key=lambda t: t.priority):
        logger.debug(
            f"Running {type(t).__name__} (priority {t.priority}) on {context.document_id or 'document'}"
        )
        t.transform(document, context)
    return document
