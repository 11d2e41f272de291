"""Exception types raised by the reflearn pipeline.

Each failure mode gets its own class so callers can tell a malformed tagger
stream apart from a bad label or an unwritable export target. All classes
also derive from the matching built-in exception, so code that only catches
`ValueError` or `OSError` keeps working.
"""
from __future__ import annotations
from pathlib import Path
from typing import Optional, Union


class ReflearnError(Exception):
    """Base class for all reflearn errors."""


class MalformedTagInput(ReflearnError, ValueError):
    """A tagger output line could not be split into `word<TAB>tag<TAB>lemma`."""

    def __init__(self, line_no: int, line: str):
        self.line_no = line_no
        self.line = line
        super().__init__(f"Malformed tagger output at line {line_no}: {line!r}")


class ShortContextRejected(ReflearnError, ValueError):
    """A raw context holds fewer tokens than the feature window needs."""

    def __init__(self, context: str, found: int, required: int):
        self.context = context
        self.found = found
        self.required = required
        super().__init__(
            f"Context has {found} tokens, {required} required: {context!r}"
        )


class InvalidLabel(ReflearnError, ValueError):
    """A class label outside `{True, False}` was supplied."""

    def __init__(self, label: object):
        self.label = label
        super().__init__(f"Invalid class label {label!r}; expected 'True' or 'False'.")


class ExportFailure(ReflearnError, OSError):
    """The training set could not be written to its destination."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Could not write training set to {self.path}{detail}")


class PreExistingDestination(ReflearnError, FileExistsError):
    """The index directory exists and overwriting was not requested."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(
            f"Cannot save index to '{self.path}' directory, please delete it first or set --force"
        )


class TaggerProcessError(ReflearnError, RuntimeError):
    """The external tagger exited with an error or left no result file."""
