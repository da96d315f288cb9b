"""Command-line interface for gzip-knn."""

import argparse
import logging
import os
import sys
from typing import BinaryIO, Optional, Sequence, TextIO

from gzip_knn.classifier import classify
from gzip_knn.corpus import Corpus, load_corpus
from gzip_knn.errors import GzipKNNError
from gzip_knn.sample import strip_line_terminator

logger = logging.getLogger(__name__)

# Neighbour count used by the reference run on the AG News training set.
DEFAULT_K = 200


def configure_logging(level: int = logging.INFO) -> None:
  """Configure logging to write to stderr."""
  logging.basicConfig(
    level=level,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
  )


def create_parser() -> argparse.ArgumentParser:
  """Create and configure the argument parser."""
  parser = argparse.ArgumentParser(
    prog="gzip-knn",
    description="Classify text with gzip compression distance and k-nearest neighbors.",
  )

  parser.add_argument(
    "train_file",
    help="Training corpus: a header line, then '<class>,<text>' per line",
  )
  parser.add_argument(
    "-k",
    type=int,
    default=DEFAULT_K,
    help=f"Number of nearest neighbors (default: {DEFAULT_K})",
  )
  parser.add_argument(
    "--workers",
    type=int,
    default=None,
    help="Worker threads (default: GZIP_KNN_WORKERS or CPU count)",
  )
  parser.add_argument(
    "--class-count",
    type=int,
    default=None,
    help="Number of classes (default: inferred from the corpus)",
  )
  parser.add_argument(
    "--text",
    default=None,
    help="Classify this text and exit instead of reading queries from stdin",
  )
  parser.add_argument(
    "--log-level",
    choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    default="INFO",
    help="Logging level (default: INFO)",
  )

  return parser


def classify_text(
    text: bytes,
    corpus: Corpus,
    k: int,
    workers: Optional[int],
    class_count: Optional[int],
    out: TextIO,
) -> bool:
  """Classify one query and print its class ordinal. Returns False on failure."""
  try:
    result = classify(text, corpus, k, workers=workers, class_count=class_count)
  except GzipKNNError as e:
    logger.error(f"Classification failed: {e}")
    return False
  print(result.ordinal, file=out)
  return True


def interactive_loop(
    corpus: Corpus,
    k: int,
    workers: Optional[int],
    class_count: Optional[int],
    stdin: BinaryIO,
    out: TextIO,
) -> int:
  """Classify one query per input line until EOF. Returns the failure count."""
  failures = 0
  for line in stdin:
    text = strip_line_terminator(line)
    if not text.strip():
      continue
    if not classify_text(text, corpus, k, workers, class_count, out):
      failures += 1
  return failures


def main(argv: Optional[Sequence[str]] = None) -> int:
  """Entry point for CLI."""
  parser = create_parser()
  args = parser.parse_args(argv)

  configure_logging(getattr(logging, args.log_level))

  if args.k < 1:
    parser.error(f"-k must be >= 1, got {args.k}")
  if args.workers is not None and args.workers < 1:
    parser.error(f"--workers must be >= 1, got {args.workers}")

  try:
    corpus = load_corpus(args.train_file, workers=args.workers)
  except (OSError, GzipKNNError) as e:
    logger.error(f"Could not load corpus: {e}")
    return 1

  k = args.k
  if k > len(corpus):
    logger.warning(f"k ({k}) is larger than the corpus ({len(corpus)}), using {len(corpus)}")
    k = len(corpus)

  if args.text is not None:
    # argv holds undecodable bytes as surrogates; fsencode restores them.
    query = os.fsencode(args.text)
    ok = classify_text(query, corpus, k, args.workers, args.class_count, sys.stdout)
    return 0 if ok else 1

  failures = interactive_loop(corpus, k, args.workers, args.class_count,
                              sys.stdin.buffer, sys.stdout)
  return 0 if failures == 0 else 1


if __name__ == "__main__":
  sys.exit(main())
