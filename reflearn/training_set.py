"""Accumulates feature rows into a training set for the study-reference classifier.

A `TrainingSet` holds the fixed attribute schema (ten open string attributes
`l5` .. `r5` plus the nominal `class` attribute with the values `True` and
`False`) and a collection of `FeatureRow`s with set semantics: adding a row
that is structurally equal to one already present has no effect.

`build_training_set` is the usual entry point. It folds the context
normalizer over all examples from one example source, assigns them the
given class value, and drops the contexts that are too short.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

import pandas as pd
from tqdm import tqdm

from .context import normalize
from .types import CLASS_ATTRIBUTE, CLASS_VALUES, FEATURE_NAMES, ContextExample, FeatureRow, check_label

logger = logging.getLogger(__name__)

DEFAULT_RELATION = "IsStudyReference"

# (name, type) pairs; a tuple type lists the permitted nominal values.
ATTRIBUTES: Tuple[Tuple[str, object], ...] = tuple(
    (name, "string") for name in FEATURE_NAMES
) + ((CLASS_ATTRIBUTE, CLASS_VALUES),)


class TrainingSet:
    """
    A set of `FeatureRow`s plus the attribute schema they conform to.

    Rows keep the order in which they were first added so exports are
    deterministic.

    Attributes:
        relation: The relation name written to the export header.
        attributes: The attribute schema, see `ATTRIBUTES`.
        documents: Names of the source documents the examples came from.
    """

    def __init__(self, relation: str = DEFAULT_RELATION):
        self.relation = relation
        self.attributes = ATTRIBUTES
        self.documents: Set[str] = set()
        self._rows: Dict[FeatureRow, None] = {}

    def add(self, row: FeatureRow) -> bool:
        """Adds `row`; returns False if an equal row was already present."""
        if row in self._rows:
            return False
        self._rows[row] = None
        return True

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[FeatureRow]:
        return iter(self._rows)

    def __contains__(self, row: object) -> bool:
        return row in self._rows

    @property
    def rows(self) -> List[FeatureRow]:
        return list(self._rows)

    def to_frame(self) -> pd.DataFrame:
        """Returns the rows as a DataFrame with one column per attribute."""
        columns = [name for name, _ in self.attributes]
        frame = pd.DataFrame([row.values() for row in self._rows], columns=columns, dtype="object")
        frame[CLASS_ATTRIBUTE] = pd.Categorical(frame[CLASS_ATTRIBUTE], categories=list(CLASS_VALUES))
        return frame

    def summary(self) -> str:
        """
        Describes the set in a few human-readable lines.

        Lists the relation name, the number of instances, and for every
        attribute its type and the number of distinct values; the class
        attribute also shows the count per class value.
        """
        frame = self.to_frame()
        lines = [
            f"Relation Name:  {self.relation}",
            f"Num Instances:  {len(frame)}",
            f"Num Attributes: {len(self.attributes)}",
            "",
            f"{'':>4} {'Name':<8} {'Type':<8} {'Distinct':>8}",
        ]
        for i, (name, kind) in enumerate(self.attributes, start=1):
            type_name = "Nom" if isinstance(kind, tuple) else "Str"
            distinct = int(frame[name].nunique()) if len(frame) else 0
            lines.append(f"{i:>4} {name:<8} {type_name:<8} {distinct:>8}")
        counts = frame[CLASS_ATTRIBUTE].value_counts()
        lines.append("")
        lines.append("Class counts: " + ", ".join(f"{v}={int(counts.get(v, 0))}" for v in CLASS_VALUES))
        return "\n".join(lines)


def build_training_set(
    examples: Iterable[ContextExample],
    label: str,
    log: Optional[logging.Logger] = None,
    relation: str = DEFAULT_RELATION,
    progress: bool = False,
) -> TrainingSet:
    """
    Builds a training set from raw examples, all assigned the class `label`.

    Args:
        examples: Raw context pairs from one example source. Their own labels
                  are replaced by `label`.
        label: The class value, `"True"` for positive and `"False"` for
               negative examples.
        log: Logger that receives the warnings for rejected contexts.
        relation: Relation name of the resulting set.
        progress: Show a tqdm progress bar while normalizing.

    Returns:
        The populated `TrainingSet`. It contains at most one row per example
        and fewer when contexts are rejected or rows coincide.

    Raises:
        InvalidLabel: If `label` is not `True` or `False`.
    """
    log = log or logger
    check_label(label)
    training_set = TrainingSet(relation)
    rejected = 0
    for example in tqdm(examples, desc="Building Training Set", disable=not progress):
        if example.document:
            training_set.documents.add(example.document)
        row = normalize(
            ContextExample(example.left, example.right, label, example.document), log
        )
        if row is None:
            rejected += 1
            continue
        training_set.add(row)
    log.info("Built training set with %d rows (%d contexts rejected).", len(training_set), rejected)
    return training_set
