import json
import logging
import os
from pathlib import Path

import pytest

from reflearn.errors import PreExistingDestination
from reflearn.indexer import (
    DOCUMENTS_FILE,
    DocumentWriter,
    case_sensitive_analyzer,
    collect_targets,
    index_all_files,
    index_docs,
    open_index_writer,
)


def _make_corpus(root: Path) -> Path:
    (root / "a" / "deep").mkdir(parents=True)
    (root / "b").mkdir()
    (root / "a" / "one.txt").write_text("Data from the ALLBUS 2010.", encoding="utf-8")
    (root / "a" / "deep" / "two.txt").write_text("Eurobarometer wave", encoding="utf-8")
    (root / "b" / "three.txt").write_text("SOEP panel", encoding="utf-8")
    return root


def _read_docs(index_dir: Path) -> list[dict]:
    lines = (index_dir / DOCUMENTS_FILE).read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines]


def test_case_sensitive_analyzer_keeps_case():
    assert case_sensitive_analyzer("The ALLBUS, wave 2010's data-set.") == [
        "The", "ALLBUS", "wave", "2010's", "data-set",
    ]


def test_index_docs_recurses_into_subdirectories(tmp_path: Path):
    corpus = _make_corpus(tmp_path / "corpus")
    index_dir = tmp_path / "index"

    with DocumentWriter(index_dir) as writer:
        index_docs(writer, corpus)

    docs = _read_docs(index_dir)
    assert writer.count == 3
    assert {Path(d["path"]).name for d in docs} == {"one.txt", "two.txt", "three.txt"}
    one = next(d for d in docs if d["path"].endswith("one.txt"))
    assert one["tokens"] == ["Data", "from", "the", "ALLBUS", "2010"]


@pytest.mark.skipif(os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                    reason="file permissions are not enforced")
def test_index_docs_skips_unreadable_files(tmp_path: Path, caplog):
    corpus = _make_corpus(tmp_path / "corpus")
    locked = corpus / "b" / "three.txt"
    locked.chmod(0)
    try:
        with caplog.at_level(logging.WARNING):
            with DocumentWriter(tmp_path / "index") as writer:
                index_docs(writer, corpus)
    finally:
        locked.chmod(0o644)

    assert writer.count == 2
    assert "three.txt" in caplog.text


def test_index_docs_skips_files_that_vanish(tmp_path: Path, monkeypatch, caplog):
    corpus = _make_corpus(tmp_path / "corpus")

    def vanish(self, path):
        raise FileNotFoundError(f"access denied: {path}")

    monkeypatch.setattr(DocumentWriter, "add_document", vanish)
    with caplog.at_level(logging.WARNING):
        with DocumentWriter(tmp_path / "index") as writer:
            index_docs(writer, corpus)

    assert writer.count == 0
    assert "access denied" in caplog.text


def test_open_index_writer_refuses_existing_directory(tmp_path: Path):
    index_dir = tmp_path / "index"
    index_dir.mkdir()

    with pytest.raises(PreExistingDestination):
        open_index_writer(index_dir)


def test_index_all_files_skips_existing_target_without_force(tmp_path: Path, caplog):
    corpus = _make_corpus(tmp_path / "corpus")
    index_dir = tmp_path / "index"
    index_dir.mkdir()
    (index_dir / "keep.txt").write_text("old", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        written = index_all_files({index_dir: corpus})

    assert written == {}
    assert (index_dir / "keep.txt").exists()
    assert "--force" in caplog.text


def test_index_all_files_overwrites_with_force(tmp_path: Path):
    corpus = _make_corpus(tmp_path / "corpus")
    index_dir = tmp_path / "index"
    index_dir.mkdir()
    (index_dir / "stale.txt").write_text("old", encoding="utf-8")

    written = index_all_files({index_dir: corpus}, force_overwrite=True)

    assert written == {index_dir: 3}
    assert not (index_dir / "stale.txt").exists()
    assert len(_read_docs(index_dir)) == 3


def test_collect_targets_recursive_and_flat(tmp_path: Path):
    corpus = _make_corpus(tmp_path / "corpus")
    (corpus / "loose.txt").write_text("x", encoding="utf-8")
    index_root = tmp_path / "idx"

    flat = collect_targets(corpus, index_root)
    assert flat == {index_root.absolute(): corpus}

    per_dir = collect_targets(corpus, index_root, recursive=True)
    assert per_dir == {
        Path(f"{index_root.absolute()}_a"): corpus / "a",
        Path(f"{index_root.absolute()}_b"): corpus / "b",
    }
