"""Tests for the TreeTagger client, driven by a small fake tagger program."""
from __future__ import annotations

import logging
import shlex
import sys
from pathlib import Path

import pytest

from reflearn.errors import MalformedTagInput, TaggerProcessError
from reflearn.tagger import TreeTaggerClient, prepare_tagger_input
from reflearn.types import Chunk, TaggedToken

FAKE_TAGGER = '''
import sys

mode, out_encoding, in_path, out_path = sys.argv[1:5]
words = [w for w in open(in_path, "rb").read().decode("utf-8").split("\\n") if w]
for i in range(3):
    sys.stderr.write("progress %d\\n" % i)
if mode == "fail":
    sys.exit(3)
if mode == "silent":
    sys.exit(0)
lines = []
if mode == "chunk":
    lines.append("<NC>")
for w in words:
    lines.append("\\t".join([w, "NN", w.lower()]))
if mode == "chunk":
    lines.append("</NC>")
if mode == "broken":
    lines.append("no-tabs")
with open(out_path, "wb") as f:
    f.write("\\n".join(lines).encode(out_encoding))
'''


def _client(tmp_path: Path, mode: str, encoding: str = "utf-8", chunk_mode: str = "chunk") -> TreeTaggerClient:
    script = tmp_path / "fake_tagger.py"
    script.write_text(FAKE_TAGGER, encoding="utf-8")
    base = f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"
    return TreeTaggerClient(
        tag_command=f"{base} {mode} {encoding}",
        chunk_command=f"{base} {chunk_mode} {encoding}",
        encoding=encoding,
        temp_file_in=str(tmp_path / "tmp" / "in.txt"),
        temp_file_out=str(tmp_path / "tmp" / "out.txt"),
    )


def test_prepare_tagger_input_one_token_per_line():
    assert prepare_tagger_input("Hello, world.") == "Hello,\nworld.\n"
    assert prepare_tagger_input("ALLBUS  2010") == "ALLBUS\n2010"


def test_prepare_tagger_input_keeps_non_breaking_space():
    assert prepare_tagger_input("ALLBUS\xa02010") == "ALLBUS\xa02010"
    assert prepare_tagger_input("ALLBUS\u20032010\t1") == "ALLBUS\u20032010\n1"


def test_tag_returns_tokens(tmp_path: Path):
    client = _client(tmp_path, "tag")

    tokens = client.tag("Studies show data")

    assert tokens == [TaggedToken("Studies", "NN"), TaggedToken("show", "NN"), TaggedToken("data", "NN")]


def test_chunk_returns_phrases(tmp_path: Path):
    client = _client(tmp_path, "tag")

    phrases = client.chunk("the survey")

    assert phrases == {"<NC>": [Chunk("<NC>", "</NC>", (TaggedToken("the", "NN"), TaggedToken("survey", "NN")))]}


def test_stderr_is_relayed_to_log(tmp_path: Path, caplog):
    client = _client(tmp_path, "tag")

    with caplog.at_level(logging.INFO):
        client.tag("one")

    messages = [r.getMessage() for r in caplog.records]
    assert "progress 0" in messages
    assert "progress 2" in messages


def test_chunk_input_is_utf8_regardless_of_encoding(tmp_path: Path):
    client = _client(tmp_path, "tag", encoding="latin-1")

    phrases = client.chunk("Müller")

    assert (tmp_path / "tmp" / "in.txt").read_bytes() == "Müller".encode("utf-8")
    assert phrases["<NC>"][0].tokens == (TaggedToken("Müller", "NN"),)


def test_nonzero_exit_raises(tmp_path: Path):
    client = _client(tmp_path, "fail")

    with pytest.raises(TaggerProcessError):
        client.tag("anything")


def test_missing_output_raises(tmp_path: Path):
    client = _client(tmp_path, "silent")

    with pytest.raises(TaggerProcessError):
        client.tag("anything")


def test_malformed_output_raises(tmp_path: Path):
    client = _client(tmp_path, "broken")

    with pytest.raises(MalformedTagInput):
        client.tag("anything")


def test_missing_command_raises(tmp_path: Path):
    client = TreeTaggerClient(
        tag_command=str(tmp_path / "does-not-exist"),
        chunk_command=str(tmp_path / "does-not-exist"),
        temp_file_in=str(tmp_path / "in.txt"),
        temp_file_out=str(tmp_path / "out.txt"),
    )

    with pytest.raises(TaggerProcessError):
        client.tag("anything")
