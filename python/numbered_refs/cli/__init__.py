import json
import logging
from pathlib import Path
from typing import List

from numbered_refs import Node, Role
from numbered_refs.config import NumberingConfig
from numbered_refs.doc.codec import from_dict, to_dict
from numbered_refs.plugins.figures import NumberedFiguresTransformation
from numbered_refs.plugins.headings import NumberedHeadingsTransformation
from numbered_refs.render.events import render_events
from numbered_refs.transformation import (
    Transformation,
    TransformationContext,
    apply_transformations,
)

logger = logging.getLogger(__name__)


def load_document(path: Path) -> Node:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    doc = from_dict(data)
    if doc.role is not Role.DOCUMENT:
        raise ValueError(f"{path} holds a {doc.role.value} node, not a document")
    return doc


def build_transformations(
    config: NumberingConfig, headings: bool, figures: bool
) -> List[Transformation]:
    transformations: List[Transformation] = []
    if headings:
        transformations.append(NumberedHeadingsTransformation(config))
    if figures:
        transformations.append(NumberedFiguresTransformation(config))
    return transformations


def run(
    path: Path,
    config: NumberingConfig,
    headings: bool = True,
    figures: bool = True,
    as_json: bool = False,
) -> str:
    doc = load_document(path)
    transformations = build_transformations(config, headings, figures)
    logger.info(f"Running {len(transformations)} transformations over {path}")
    apply_transformations(doc, transformations, TransformationContext(document_id=str(path)))
    if as_json:
        return json.dumps(to_dict(doc), indent=2)
    return render_events(doc)
