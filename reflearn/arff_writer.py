"""Writes training sets in Weka's ARFF format and reads them back.

An exported file has a header and a data section:

    @relation IsStudyReference

    @attribute l5 string
    ...
    @attribute r5 string
    @attribute class {True,False}

    @data
    'the','data',...,'team',True

The ten lexical attributes are single-quoted with backslash escapes; the
nominal class value is written bare. `parse_arff` and `read_arff` read such
a file back into rows or a pandas DataFrame, so an export can be checked
without Weka.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pandas as pd

from .errors import ExportFailure
from .training_set import TrainingSet
from .types import CLASS_ATTRIBUTE, FEATURE_NAMES, FeatureRow

logger = logging.getLogger(__name__)

_ESCAPES = {"\\": "\\\\", "'": "\\'", "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", "'": "'", '"': '"', "n": "\n", "r": "\r", "t": "\t", "%": "%"}


def quote(value: str) -> str:
    """
    Quotes a string value for the ARFF data section.

    Args:
        value: The raw attribute value.

    Returns:
        The value in single quotes with backslashes, quotes and control
        characters backslash-escaped.
    """
    return "'" + "".join(_ESCAPES.get(ch, ch) for ch in value) + "'"


def _format_attribute(name: str, kind: object) -> str:
    if isinstance(kind, tuple):
        return f"@attribute {name} {{{','.join(kind)}}}"
    return f"@attribute {name} {kind}"


def training_set_to_arff(training_set: TrainingSet) -> str:
    """
    Serializes a training set in Weka's ARFF format.

    The header declares the relation, the ten string attributes `l5` .. `r5`
    and the nominal `class` attribute with the values `True` and `False`.
    Each row of the set becomes one line of the `@data` section.

    Args:
        training_set: The set to serialize.

    Returns:
        The complete ARFF document as a string.
    """
    lines = [f"@relation {training_set.relation}", ""]
    lines += [_format_attribute(name, kind) for name, kind in training_set.attributes]
    lines += ["", "@data"]
    for row in training_set:
        values = row.values()
        cells = [quote(v) for v in values[:-1]] + [values[-1]]
        lines.append(",".join(cells))
    return "\n".join(lines) + "\n"


def write_arff(training_set: TrainingSet, path: Union[str, Path], log: Optional[logging.Logger] = None) -> Path:
    """
    Writes a training set to an ARFF file and logs a summary of its contents.

    Args:
        training_set: The set to export.
        path: Destination file; missing parent directories are created.
        log: Logger for the summary and the confirmation line.

    Returns:
        The path that was written.

    Raises:
        ExportFailure: If the destination cannot be written.
    """
    log = log or logger
    out_path = Path(path)
    content = training_set_to_arff(training_set)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ExportFailure(out_path, e) from e
    log.info("%s", training_set.summary())
    log.info("Wrote %s", out_path)
    return out_path


def split_data_line(line: str) -> List[str]:
    """
    Splits one `@data` line into its values.

    Handles single- and double-quoted values with backslash escapes as well
    as bare values.

    Raises:
        ValueError: On an unterminated quoted value.
    """
    values: List[str] = []
    i, n = 0, len(line)
    while i < n:
        while i < n and line[i] in " \t":
            i += 1
        if i < n and line[i] in "'\"":
            q = line[i]
            i += 1
            buf = []
            while True:
                if i >= n:
                    raise ValueError(f"Unterminated quoted value in line: {line!r}")
                ch = line[i]
                if ch == "\\" and i + 1 < n:
                    buf.append(_UNESCAPES.get(line[i + 1], line[i + 1]))
                    i += 2
                    continue
                if ch == q:
                    i += 1
                    break
                buf.append(ch)
                i += 1
            values.append("".join(buf))
            while i < n and line[i] in " \t":
                i += 1
        else:
            start = i
            while i < n and line[i] != ",":
                i += 1
            values.append(line[start:i].strip())
        if i < n and line[i] == ",":
            i += 1
    return values


def parse_arff(text: str) -> Tuple[str, List[FeatureRow]]:
    """
    Reads back an ARFF document produced by `training_set_to_arff`.

    Returns:
        A `(relation, rows)` tuple with the rows in file order.

    Raises:
        ValueError: If the document has no `@data` section or a row does not
                    have eleven values.
        InvalidLabel: If a row carries a class value other than True/False.
    """
    relation = ""
    rows: List[FeatureRow] = []
    in_data = False
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("%"):
            continue
        lowered = stripped.lower()
        if not in_data:
            if lowered.startswith("@relation"):
                relation = stripped.split(None, 1)[1].strip("'\"") if " " in stripped else ""
            elif lowered == "@data":
                in_data = True
            continue
        rows.append(FeatureRow.from_values(split_data_line(stripped)))
    if not in_data:
        raise ValueError("No @data section found in ARFF document.")
    return relation, rows


def read_arff(path: Union[str, Path]) -> pd.DataFrame:
    """
    Loads an exported ARFF file into a DataFrame with columns `l5` .. `r5`, `class`.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a well-formed export.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"ARFF file not found at: {path}")
    _, rows = parse_arff(text)
    columns = list(FEATURE_NAMES) + [CLASS_ATTRIBUTE]
    return pd.DataFrame([r.values() for r in rows], columns=columns, dtype="object")
