"""Command-line script that indexes a corpus of text files.

Either the corpus root is indexed as a whole, or (with `-r`) every
subdirectory of the corpus root is indexed into its own directory next to
the output path.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path to allow for package imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from reflearn.indexer import collect_targets, index_all_files


def main(argv=None):
    """
    Main entry point for the corpus indexing script.

    Returns:
        The total number of documents written across all index directories.
    """
    parser = argparse.ArgumentParser(
        description="Index all text files below a corpus directory.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("-c", dest="corpus", metavar="CORPUS_PATH", required=True, help="Path of the corpus root directory.")
    parser.add_argument("-o", dest="output", metavar="OUTPUT_PATH", required=True, help="Path to save the index.")
    parser.add_argument("-r", dest="recursive", action="store_true", help="Index each subdirectory separately.")
    parser.add_argument("-f", dest="force", action="store_true", help="Force overwriting existing directories.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    corpus = Path(args.corpus)
    if not corpus.is_dir():
        print(f"\nError: Corpus directory not found at: {corpus}", file=sys.stderr)
        sys.exit(1)

    targets = collect_targets(corpus, Path(args.output), args.recursive)
    written = index_all_files(targets, force_overwrite=args.force)
    total = sum(written.values())
    print(f"Indexed {total} documents into {len(written)} of {len(targets)} index directories.")
    return total

if __name__ == "__main__":
    main()
