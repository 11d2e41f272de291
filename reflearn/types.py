from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Dict, List, Literal, Optional, Tuple

from .errors import InvalidLabel

__all__ = [
    "Label",
    "CLASS_VALUES",
    "FEATURE_NAMES",
    "CLASS_ATTRIBUTE",
    "TaggedToken",
    "Chunk",
    "PhraseIndex",
    "ContextExample",
    "FeatureRow",
    "end_tag_for",
    "check_label",
]

Label = Literal["True", "False"]

CLASS_VALUES: Tuple[str, str] = ("True", "False")
FEATURE_NAMES: Tuple[str, ...] = ("l5", "l4", "l3", "l2", "l1", "r1", "r2", "r3", "r4", "r5")
CLASS_ATTRIBUTE = "class"


def check_label(label: str) -> str:
    """Raises `InvalidLabel` unless `label` is one of the two class values."""
    if label not in CLASS_VALUES:
        raise InvalidLabel(label)
    return label


def end_tag_for(start_tag: str) -> str:
    """Derives the closing phrase tag, e.g. `<NC>` -> `</NC>`."""
    return start_tag.replace("<", "</")


@dataclass(frozen=True, eq=False)
class TaggedToken:
    """
    A word together with its part-of-speech tag.

    Two tokens are the same feature regardless of the case of the surface
    form, provided the tags match, so equality and hashing are defined on
    `(w.lower(), tag)`.

    Attributes:
        w: The surface form of the word.
        tag: The part-of-speech tag assigned by the tagger.
    """
    w: str
    tag: str

    def _key(self) -> Tuple[str, str]:
        return (self.w.lower(), self.tag)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaggedToken):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.w} {self.tag}"

    def lower(self) -> "TaggedToken":
        """Returns a copy with a lowercased surface form and the same tag."""
        return TaggedToken(self.w.lower(), self.tag)


@dataclass(frozen=True)
class Chunk:
    """
    A phrase span found by the chunker.

    Attributes:
        start_tag: The phrase tag that opened the span, e.g. `<NC>`.
        end_tag: The matching close tag, e.g. `</NC>`.
        tokens: The tagged tokens between the two tags, in document order.
    """
    start_tag: str
    end_tag: str
    tokens: Tuple[TaggedToken, ...] = ()

    @property
    def text(self) -> str:
        """The surface forms of the contained tokens joined by single spaces."""
        return " ".join(t.w for t in self.tokens)

    def __str__(self) -> str:
        inner = " ".join(str(t) for t in self.tokens)
        return f"{self.start_tag} {inner} {self.end_tag}"


PhraseIndex = Dict[str, List[Chunk]]


@dataclass(frozen=True)
class ContextExample:
    """
    One raw record from an example source.

    Attributes:
        left: Raw left context, nearest token first.
        right: Raw right context, nearest token first.
        label: The class value for this example.
        document: Name of the document the span was found in, if known.
    """
    left: str
    right: str
    label: str
    document: Optional[str] = None


@dataclass(frozen=True)
class FeatureRow:
    """
    One training instance: five left and five right context tokens plus the class.

    `l1` and `r1` are the tokens nearest the candidate span, `l5` and `r5`
    the farthest. The class field is exported under the name `class`.
    """
    l5: str
    l4: str
    l3: str
    l2: str
    l1: str
    r1: str
    r2: str
    r3: str
    r4: str
    r5: str
    cls: str

    def __post_init__(self) -> None:
        check_label(self.cls)

    @classmethod
    def from_values(cls, values: Tuple[str, ...] | List[str]) -> "FeatureRow":
        """Builds a row from 11 values in export order (`l5` .. `r5`, class)."""
        if len(values) != len(FEATURE_NAMES) + 1:
            raise ValueError(f"Expected {len(FEATURE_NAMES) + 1} values, got {len(values)}.")
        return cls(*values)

    def values(self) -> Tuple[str, ...]:
        """The 11 field values in export order."""
        return tuple(getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> Dict[str, str]:
        """Maps the exported attribute names to the row values."""
        return dict(zip(FEATURE_NAMES + (CLASS_ATTRIBUTE,), self.values()))
