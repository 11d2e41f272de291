"""Collects corpus text files into a document store for pattern search.

Each corpus directory is written to its own index directory as a JSON-lines
file, one document per line with its path, modification time and the
tokens produced by a case-sensitive analyzer. Case matters because
study names ("ALLBUS", "Eurobarometer") are what the patterns look for.

Files that cannot be read are skipped with a log line; an index directory
that already exists is left alone unless overwriting is requested.
"""
from __future__ import annotations
import json
import logging
import os
import re
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from .errors import PreExistingDestination

logger = logging.getLogger(__name__)

DOCUMENTS_FILE = "documents.jsonl"

_WORD_RE = re.compile(r"\w+(?:[-'.]\w+)*", flags=re.UNICODE)


def case_sensitive_analyzer(text: str) -> List[str]:
    """Splits text into word tokens without lowercasing or stop-word removal."""
    return _WORD_RE.findall(text)


class DocumentWriter:
    """Appends documents to the `documents.jsonl` file of one index directory."""

    def __init__(self, index_dir: Path):
        self.index_dir = index_dir
        self.count = 0
        self._fh: Optional[TextIO] = None

    def __enter__(self) -> "DocumentWriter":
        self.index_dir.mkdir(parents=True)
        self._fh = open(self.index_dir / DOCUMENTS_FILE, "w", encoding="utf-8")
        return self

    def __exit__(self, *exc) -> None:
        if self._fh:
            self._fh.close()
            self._fh = None

    def add_document(self, path: Path) -> None:
        """
        Reads `path` and stores it as one document.

        Raises:
            FileNotFoundError, PermissionError: If the file cannot be opened.
        """
        if self._fh is None:
            raise RuntimeError("DocumentWriter used outside a with block")
        contents = path.read_text(encoding="utf-8", errors="replace")
        doc = {
            "path": str(path),
            "modified": datetime.fromtimestamp(path.stat().st_mtime).isoformat(),
            "tokens": case_sensitive_analyzer(contents),
        }
        self._fh.write(json.dumps(doc, ensure_ascii=False) + "\n")
        self.count += 1


def open_index_writer(index_dir: Path, force_overwrite: bool = False, log: Optional[logging.Logger] = None) -> DocumentWriter:
    """
    Prepares `index_dir` for a fresh index.

    Raises:
        PreExistingDestination: If the directory exists and `force_overwrite`
                                is False.
    """
    log = log or logger
    if index_dir.exists():
        if not force_overwrite:
            raise PreExistingDestination(index_dir)
        log.info("Removing dir %s", index_dir)
        shutil.rmtree(index_dir)
    return DocumentWriter(index_dir)


def index_docs(writer: DocumentWriter, path: Path, log: Optional[logging.Logger] = None) -> None:
    """
    Adds `path` to the index, recursing into directories.

    Unreadable entries are skipped. Files that disappear or deny access
    between the listing and the read are skipped as well.
    """
    log = log or logger
    if not os.access(path, os.R_OK):
        log.warning("Skipping unreadable %s", path)
        return
    if path.is_dir():
        try:
            entries = sorted(path.iterdir())
        except OSError as e:
            log.warning("Could not list %s: %s", path, e)
            return
        for entry in entries:
            index_docs(writer, entry, log)
    elif path.is_file():
        log.info("adding %s", path)
        try:
            writer.add_document(path)
        except (FileNotFoundError, PermissionError) as e:
            log.warning("Skipping %s: %s", path, e)


def index_all_files(
    file_map: Dict[Path, Path],
    force_overwrite: bool = False,
    log: Optional[logging.Logger] = None,
) -> Dict[Path, int]:
    """
    Indexes each document directory into its index directory.

    Args:
        file_map: Maps index output directories to the document directories
                  to index.
        force_overwrite: Delete existing index directories instead of
                         skipping them.
        log: Logger for progress and skipped targets.

    Returns:
        The number of documents written per index directory. Skipped targets
        are absent from the result.
    """
    log = log or logger
    written: Dict[Path, int] = {}
    for index_dir, doc_dir in file_map.items():
        log.info("start indexing")
        try:
            writer = open_index_writer(index_dir, force_overwrite, log)
        except PreExistingDestination as e:
            log.warning("%s", e)
            continue

        start = time.perf_counter()
        log.info("Indexing to directory '%s'...", index_dir)
        with writer:
            index_docs(writer, doc_dir, log)
        log.info("%d total milliseconds", int((time.perf_counter() - start) * 1000))
        log.info("finished indexing")
        written[index_dir] = writer.count
    return written


def collect_targets(corpus_root: Path, index_root: Path, recursive: bool = False) -> Dict[Path, Path]:
    """
    Chooses which directories to index and where.

    In recursive mode every direct subdirectory `d` of `corpus_root` gets its
    own index at `<index_root>_<d.name>`; otherwise `corpus_root` is indexed
    into `index_root`.
    """
    index_root = Path(os.path.normpath(index_root)).absolute()
    if not recursive:
        return {index_root: corpus_root}
    return {
        Path(f"{index_root}_{d.name}"): d
        for d in sorted(corpus_root.iterdir())
        if d.is_dir()
    }
