"""Parses the line-oriented output of the TreeTagger tagger and chunker.

Every line of the output is one of:

-   a phrase-open tag such as `<NC>`,
-   a phrase-close tag such as `</NC>`,
-   a tab-separated `word<TAB>tag<TAB>lemma` triple.

`parse_tokens` reads plain tagger output into a flat list of tokens.
`parse_phrases` reads chunker output into a `PhraseIndex` using a small
two-state machine: the parser is either `Outside` any phrase or
`InsideChunk` with the tag that opened it and the tokens collected so far.

The output is trusted, pre-validated tool output, so a token line that does
not split into exactly three fields aborts the parse with
`MalformedTagInput` rather than being skipped.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .errors import MalformedTagInput
from .types import Chunk, PhraseIndex, TaggedToken, end_tag_for

logger = logging.getLogger(__name__)


def is_open_tag(line: str) -> bool:
    return line.startswith("<") and not line.startswith("</") and line.endswith(">")


def is_close_tag(line: str) -> bool:
    return line.startswith("</") and line.endswith(">")


def parse_token_line(line: str, line_no: int) -> TaggedToken:
    """
    Builds a `TaggedToken` from one `word<TAB>tag<TAB>lemma` line.

    Args:
        line: The raw output line.
        line_no: 1-based position of the line, used in the error message.

    Returns:
        The token made of the word and tag fields; the lemma is discarded.

    Raises:
        MalformedTagInput: If the line does not have exactly three fields.
    """
    parts = line.split("\t")
    if len(parts) != 3:
        raise MalformedTagInput(line_no, line)
    return TaggedToken(parts[0], parts[1])


def parse_tokens(text: str) -> List[TaggedToken]:
    """
    Reads plain tagger output into a list of tokens in document order.

    Phrase tag lines and empty lines are skipped; every other line must be a
    token triple.

    Raises:
        MalformedTagInput: On the first line that is not a token triple.
    """
    tokens: List[TaggedToken] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line or is_open_tag(line) or is_close_tag(line):
            continue
        tokens.append(parse_token_line(line, line_no))
    return tokens


@dataclass(frozen=True)
class Outside:
    """No phrase is open."""


@dataclass
class InsideChunk:
    """A phrase opened by `tag` is collecting tokens."""
    tag: str
    tokens: List[TaggedToken] = field(default_factory=list)


ChunkState = Union[Outside, InsideChunk]


class PhraseParser:
    """
    Incremental chunker-output parser.

    Feed lines one at a time with `feed` and read the accumulated phrases
    from `phrases`. The transitions are:

    -   open tag, any state -> `InsideChunk(tag)` with no tokens.
    -   close tag in `InsideChunk` -> emit the chunk under its tag, `Outside`.
    -   close tag in `Outside` -> emit an empty chunk under the empty tag,
        stay `Outside`.
    -   token line in `InsideChunk` -> append the token.
    -   token line in `Outside` -> dropped.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.state: ChunkState = Outside()
        self.phrases: PhraseIndex = {}
        self.log = log or logger
        self._line_no = 0

    def _emit(self, chunk: Chunk) -> None:
        self.phrases.setdefault(chunk.start_tag, []).append(chunk)

    def feed(self, line: str) -> None:
        self._line_no += 1
        if not line:
            return

        if is_close_tag(line):
            if isinstance(self.state, InsideChunk):
                tag = self.state.tag
                self._emit(Chunk(tag, end_tag_for(tag), tuple(self.state.tokens)))
            else:
                self.log.debug("Unmatched close tag %s at line %d", line, self._line_no)
                self._emit(Chunk("", "", ()))
            self.state = Outside()
        elif is_open_tag(line):
            self.state = InsideChunk(line)
        else:
            token = parse_token_line(line, self._line_no)
            if isinstance(self.state, InsideChunk):
                self.state.tokens.append(token)
            else:
                # Tokens outside any phrase are dropped.
                self.log.debug("Dropping token outside phrase at line %d: %s", self._line_no, token)


def parse_phrases(text: str, log: Optional[logging.Logger] = None) -> PhraseIndex:
    """
    Reads chunker output into a mapping from phrase tag to chunks.

    Args:
        text: The complete chunker output.
        log: Optional logger for diagnostics about dropped lines.

    Returns:
        A `PhraseIndex`. Chunks under each tag appear in document order.

    Raises:
        MalformedTagInput: On the first token line that is not a triple.
    """
    parser = PhraseParser(log)
    for line in text.splitlines():
        parser.feed(line)
    return parser.phrases
