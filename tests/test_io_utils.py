import json
from pathlib import Path

import pytest

from reflearn.io_utils import example_documents, load_examples, save_phrases
from reflearn.types import Chunk, TaggedToken


def test_load_examples_ignores_unknown_fields(tmp_path: Path) -> None:
    path = tmp_path / "examples.json"
    path.write_text(
        json.dumps(
            {
                "contexts": [
                    {
                        "left": "the data were collected from",
                        "right": "in 2010 by the team",
                        "document": "paper_1.txt",
                        "term": "ALLBUS",
                    },
                    {"left": "a b c d e", "right": "f g h i j"},
                ]
            }
        ),
        encoding="utf-8",
    )

    examples = load_examples(str(path), "False")

    assert len(examples) == 2
    assert examples[0].left == "the data were collected from"
    assert examples[0].label == "False"
    assert examples[1].document is None
    assert example_documents(examples) == {"paper_1.txt"}


def test_load_examples_reports_structure_errors(tmp_path: Path) -> None:
    bad_path = tmp_path / "bad.json"
    bad_path.write_text(json.dumps({"not_contexts": []}), encoding="utf-8")

    with pytest.raises(TypeError):
        load_examples(str(bad_path))


def test_load_examples_requires_string_contexts(tmp_path: Path) -> None:
    bad_path = tmp_path / "bad.json"
    bad_path.write_text(json.dumps({"contexts": [{"left": "a b c d e"}]}), encoding="utf-8")

    with pytest.raises(TypeError):
        load_examples(str(bad_path))


def test_load_examples_invalid_json(tmp_path: Path) -> None:
    bad_path = tmp_path / "bad.json"
    bad_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        load_examples(str(bad_path))


def test_load_examples_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_examples(str(tmp_path / "missing.json"))


def test_save_phrases_writes_expected_structure(tmp_path: Path) -> None:
    out_path = tmp_path / "phrases.json"
    phrases = {"<NC>": [Chunk("<NC>", "</NC>", (TaggedToken("the", "DT"), TaggedToken("panel", "NN")))]}

    save_phrases(str(out_path), phrases)

    data = json.loads(out_path.read_text(encoding="utf-8"))
    assert data["<NC>"][0]["end"] == "</NC>"
    assert data["<NC>"][0]["tokens"] == [["the", "DT"], ["panel", "NN"]]
