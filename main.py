import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for robust execution
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from reflearn.arff_writer import write_arff
from reflearn.config import load_config
from reflearn.errors import ReflearnError
from reflearn.io_utils import load_examples
from reflearn.training_set import build_training_set
from reflearn.types import CLASS_VALUES


def main():
    """
    Main command-line interface for building classifier training sets.

    This script turns the output of the reference extraction step into an
    ARFF file that a supervised learner can consume. It performs the
    following steps:
    1.  Loads the configuration file (`config.yaml`) if one is given.
    2.  Loads the context pairs from the example JSON file.
    3.  Normalizes each context pair into a ten-token feature row labeled
        with the requested class value, dropping contexts that are too short.
    4.  Writes the resulting training set to the ARFF output file and logs a
        summary of its contents.
    """
    parser = argparse.ArgumentParser(
        description="Build an ARFF training set for the study-reference classifier.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--examples",
        required=True,
        help="Path to the JSON file with extracted left/right contexts."
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Path to write the ARFF training set."
    )
    parser.add_argument(
        "--label",
        default="True",
        choices=CLASS_VALUES,
        help="Class value assigned to every example in the file."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional path to the configuration YAML file."
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while building the training set."
    )
    args = parser.parse_args()

    try:
        cfg = load_config(args.config)
        logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

        print(f"Loading examples from {args.examples}...")
        examples = load_examples(args.examples, args.label)

        print(f"Building training set from {len(examples)} examples...")
        training_set = build_training_set(examples, args.label, progress=args.progress)

        write_arff(training_set, args.output)
        print(f"\nSuccessfully wrote {len(training_set)} instances to {args.output}")

    except (ReflearnError, OSError, ValueError, TypeError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
