"""Command-line script that runs the TreeTagger on a piece of text.

Prints the phrase chunks found by the chunker followed by the POS-tagged
tokens, which is useful for checking a tagger installation and for
inspecting how a candidate sentence is analyzed.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path to allow for package imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from reflearn.config import load_config
from reflearn.errors import ReflearnError
from reflearn.io_utils import save_phrases
from reflearn.tagger import TaggerClient


def run(tagger: TaggerClient, text: str, phrases_json: str = None) -> None:
    """Chunks and tags `text` with `tagger` and prints both results."""
    phrases = tagger.chunk(text)
    for tag, chunks in phrases.items():
        print(f"{tag}: " + " | ".join(str(c) for c in chunks))
    if phrases_json:
        save_phrases(phrases_json, phrases)
        print(f"Saved phrases to {phrases_json}")

    tokens = tagger.tag(text)
    print(" ".join(str(t) for t in tokens))


def main():
    """
    Main entry point for the tagging script.

    Loads the tagger commands, encoding and temporary file locations from the
    configuration file (command line flags override them), then chunks and
    tags the input text.
    """
    parser = argparse.ArgumentParser(
        description="Print chunks and POS tags of input text.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("text", help="The text to tag.")
    parser.add_argument("--config", default=None, help="Path to the configuration YAML file.")
    parser.add_argument("--tag-command", default=None, help="Tagger command, e.g. 'c:/TreeTagger/bin/tag-english'.")
    parser.add_argument("--chunk-command", default=None, help="Chunker command, e.g. 'c:/TreeTagger/bin/chunk-english'.")
    parser.add_argument("--encoding", default=None, help="Character encoding of tagger files, e.g. 'utf-8'.")
    parser.add_argument("--phrases-json", default=None, help="Optional path to save the phrase chunks as JSON.")
    args = parser.parse_args()

    try:
        cfg = load_config(args.config)
        if args.tag_command:
            cfg.tag_command = args.tag_command
        if args.chunk_command:
            cfg.chunk_command = args.chunk_command
        if args.encoding:
            cfg.encoding = args.encoding
        logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

        run(cfg.make_tagger(), args.text, args.phrases_json)
    except (ReflearnError, OSError, ValueError, TypeError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
