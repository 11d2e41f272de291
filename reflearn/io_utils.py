"""Provides utility functions for loading examples and saving phrase chunks.

Example sources are the JSON output of the reference extraction step: the
root object holds a "contexts" list, each item carrying the raw "left" and
"right" context of one detected span and optionally the "document" it was
found in. `load_examples` tolerates extra keys on the items so newer
extraction output keeps loading. `save_phrases` writes a `PhraseIndex` in a
human-readable JSON layout.
"""
import json
from pathlib import Path
from typing import List, Set, Union

from .types import ContextExample, PhraseIndex


def load_examples(path: Union[str, Path], label: str = "True") -> List[ContextExample]:
    """
    Loads the context pairs of an example source file.

    Args:
        path: The path to the input JSON file.
        label: Class value assigned to every loaded example.

    Returns:
        One `ContextExample` per item of the "contexts" list, in file order.

    Raises:
        FileNotFoundError: If the file at the specified path does not exist.
        ValueError: If the file is not valid JSON.
        TypeError: If the "contexts" key is missing or not a list, or an item
                   is not a dictionary with string "left" and "right" values.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Example file not found at: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from {path}: {e}")

    items = data.get("contexts") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise TypeError(f"Expected a 'contexts' key with a list of objects in {path}")

    out = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise TypeError(f"Context item at index {i} in {path} is not a dictionary.")
        left, right = item.get("left"), item.get("right")
        if not isinstance(left, str) or not isinstance(right, str):
            raise TypeError(f"Context item at index {i} in {path} needs string 'left' and 'right' values.")
        document = item.get("document")
        out.append(ContextExample(left, right, label, str(document) if document is not None else None))
    return out


def example_documents(examples: List[ContextExample]) -> Set[str]:
    """Returns the names of all documents the examples were found in."""
    return {e.document for e in examples if e.document}


def save_phrases(path: Union[str, Path], phrases: PhraseIndex) -> None:
    """
    Saves a phrase index to a JSON file.

    The root of the JSON is a dictionary keyed by phrase tag; each value is a
    list of chunks, each chunk a dictionary with "start", "end" and "tokens"
    (a list of `[word, tag]` pairs).

    Args:
        path: The destination path for the output JSON file.
        phrases: The phrase index to save.
    """
    data = {
        tag: [
            {"start": c.start_tag, "end": c.end_tag, "tokens": [[t.w, t.tag] for t in c.tokens]}
            for c in chunks
        ]
        for tag, chunks in phrases.items()
    }
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
