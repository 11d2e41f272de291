"""Runs the TreeTagger command line tools and parses their output.

The tagger is an external program. This module writes the text to a
temporary input file (one token per line), runs the configured command with
the input and output file names as arguments, relays the program's error
stream to the log line by line until it closes, and only then reads the
result file. Reading the result before the error stream is drained could
deadlock on a full pipe.

The call blocks until the program exits; there is no timeout and no way to
cancel it.
"""
from __future__ import annotations
import logging
import re
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol

from .errors import TaggerProcessError
from .tagger_output import parse_phrases, parse_tokens
from .types import PhraseIndex, TaggedToken

logger = logging.getLogger(__name__)

_PUNCT_RE = re.compile(r"""([!"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])""")
_WS_RE = re.compile(r"[ \t\n\x0b\f\r]+")


class TaggerClient(Protocol):
    """Anything that can POS-tag and phrase-chunk a piece of text."""

    def tag(self, text: str) -> List[TaggedToken]:
        ...

    def chunk(self, text: str) -> PhraseIndex:
        ...


def prepare_tagger_input(text: str) -> str:
    """
    Formats text the way the tagger expects it: one token per line.

    A space is inserted after every punctuation character so punctuation
    becomes a separate token, then every run of ASCII whitespace becomes a
    newline. Non-breaking and other Unicode spaces are left inside tokens.
    """
    spaced = _PUNCT_RE.sub(r"\1 ", text)
    return _WS_RE.sub("\n", spaced)


class TreeTaggerClient:
    """
    `TaggerClient` backed by the TreeTagger command line scripts.

    Attributes:
        tag_command: Command that tags a file, e.g. `tree-tagger-english`.
        chunk_command: Command that chunks a file, e.g. `tagger-chunker-english`.
        encoding: Encoding of the tagging input and of all result files.
        temp_file_in: Path of the temporary input file.
        temp_file_out: Path of the temporary result file.
        chunk_encoding: Encoding of the chunking input. Defaults to UTF-8
                        independently of `encoding`.
    """

    def __init__(
        self,
        tag_command: str,
        chunk_command: str,
        encoding: str = "utf-8",
        temp_file_in: str = "data/tempTagFileIn",
        temp_file_out: str = "data/tempTagFileOut",
        chunk_encoding: str = "utf-8",
        log: Optional[logging.Logger] = None,
    ):
        self.tag_command = tag_command
        self.chunk_command = chunk_command
        self.encoding = encoding
        self.chunk_encoding = chunk_encoding
        self.temp_file_in = Path(temp_file_in)
        self.temp_file_out = Path(temp_file_out)
        self.log = log or logger

    def _run(self, command: str, text: str, input_encoding: str) -> str:
        self.temp_file_in.parent.mkdir(parents=True, exist_ok=True)
        self.temp_file_in.write_text(prepare_tagger_input(text), encoding=input_encoding)
        if self.temp_file_out.exists():
            self.temp_file_out.unlink()

        argv = shlex.split(command) + [str(self.temp_file_in), str(self.temp_file_out)]
        self.log.debug("Running tagger: %s", " ".join(argv))
        try:
            process = subprocess.Popen(
                argv, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE,
                text=True, encoding=self.encoding, errors="replace", bufsize=1
            )
        except OSError as e:
            raise TaggerProcessError(f"Could not start tagger command {argv[0]!r}: {e}") from e

        if process.stderr:
            for line in iter(process.stderr.readline, ""):
                self.log.info("%s", line.rstrip("\n"))
            process.stderr.close()
        process.wait()

        if process.returncode != 0:
            raise TaggerProcessError(f"Tagger command {argv[0]!r} exited with code {process.returncode}.")
        if not self.temp_file_out.exists():
            raise TaggerProcessError(f"Tagger command {argv[0]!r} produced no output at {self.temp_file_out}.")
        return self.temp_file_out.read_text(encoding=self.encoding)

    def tag(self, text: str) -> List[TaggedToken]:
        """
        POS-tags `text`.

        Returns:
            The tagged tokens in order.

        Raises:
            TaggerProcessError: If the tagger fails or writes no result.
            MalformedTagInput: If the result file contains a malformed line.
        """
        self.log.info('tagging sentence "%s"', text)
        return parse_tokens(self._run(self.tag_command, text, self.encoding))

    def chunk(self, text: str) -> PhraseIndex:
        """
        Splits `text` into phrase chunks.

        Returns:
            A mapping from phrase tag to the chunks found under it.

        Raises:
            TaggerProcessError: If the chunker fails or writes no result.
            MalformedTagInput: If the result file contains a malformed line.
        """
        self.log.info('tagging "%s"', text)
        return parse_phrases(self._run(self.chunk_command, text, self.chunk_encoding), self.log)
