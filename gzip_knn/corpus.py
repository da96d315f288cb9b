"""
In-memory training corpus and its line-oriented loader.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from .engine import Partition, run_partitioned
from .errors import CorpusFormatError, GzipKNNError, InvalidParameter
from .sample import Sample
from .utils import resolve_workers, timed

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Corpus:
  """
  Ordered collection of labelled samples.

  Samples may be appended until the corpus is frozen; after that it is
  read-only and safe to share between worker threads.

  Parameters
  ----------
  samples : Iterable[Sample], optional
      Initial samples. Each must carry a label.
  """

  def __init__(self, samples: Iterable[Sample] = ()):
    self._samples: list[Sample] = []
    self._frozen = False
    for sample in samples:
      self.add(sample)

  def add(self, sample: Sample) -> None:
    if self._frozen:
      raise InvalidParameter("Cannot add samples to a frozen corpus")
    if sample.label is None:
      raise InvalidParameter("Corpus samples must be labelled")
    self._samples.append(sample)

  def freeze(self) -> "Corpus":
    self._frozen = True
    return self

  @property
  def frozen(self) -> bool:
    return self._frozen

  @property
  def labels(self) -> list[int]:
    return [s.label for s in self._samples]

  @property
  def class_count(self) -> int:
    """Number of classes implied by the largest label."""
    if not self._samples:
      return 0
    return max(self.labels) + 1

  @property
  def is_compressed(self) -> bool:
    return all(s.is_compressed for s in self._samples)

  def compress(self, workers: Optional[int] = None) -> None:
    """
    Compute every sample's compressed size in parallel.

    Each sample belongs to exactly one partition, so no two workers touch
    the same sample. Samples that are already compressed are skipped.
    """
    if self.is_compressed:
      return
    workers = resolve_workers(workers)

    def compress_part(part: Partition) -> None:
      for i in part.indices():
        self._samples[i].compress()

    with timed(f"Compressing {len(self)} samples"):
      run_partitioned(compress_part, len(self), workers)

  def __len__(self) -> int:
    return len(self._samples)

  def __getitem__(self, index: int) -> Sample:
    return self._samples[index]

  def __iter__(self) -> Iterator[Sample]:
    return iter(self._samples)

  def __repr__(self) -> str:
    return (f"Corpus(samples={len(self)}, classes={self.class_count}, "
            f"frozen={self._frozen})")


@dataclass
class LoadStats:
  """Statistics from a load_corpus run."""

  lines_read: int = 0
  empty_lines: int = 0
  malformed_lines: int = 0
  samples_loaded: int = 0


def count_lines(path: PathLike) -> int:
  """Count the lines following the header line."""
  with open(path, "rb") as f:
    if not f.readline():
      return 0
    return sum(1 for _ in f)


def load_corpus(
    path: PathLike,
    compress: bool = True,
    workers: Optional[int] = None,
) -> Corpus:
  """
  Load a labelled corpus from a line-oriented text file.

  The first line is a header and is skipped. Every other line starts with a
  one-based class ordinal and a single separator byte, followed by the text.

  Parameters
  ----------
  path : str or PathLike
      Corpus file.
  compress : bool, default=True
      Whether to run the parallel compression pass after loading.
  workers : int, optional
      Worker threads for the compression pass.

  Returns
  -------
  Corpus
      Frozen corpus in file order.
  """
  stats = LoadStats()
  corpus = Corpus()

  with timed(f"Loading {os.fspath(path)}"):
    with open(path, "rb") as f:
      header = f.readline()
      if not header:
        raise CorpusFormatError(f"Corpus file {os.fspath(path)} is empty")

      for lineno, line in enumerate(f, start=2):
        stats.lines_read += 1
        if not line.strip():
          stats.empty_lines += 1
          continue
        try:
          sample = Sample.from_line(line)
        except GzipKNNError as e:
          stats.malformed_lines += 1
          logger.debug(f"Skipping line {lineno}: {e}")
          continue
        corpus.add(sample)
        stats.samples_loaded += 1

  if stats.malformed_lines > 0:
    logger.warning(
      f"{stats.malformed_lines} malformed lines skipped "
      f"(read={stats.lines_read}, loaded={stats.samples_loaded})"
    )
  logger.info(f"{stats.samples_loaded} samples in '{os.fspath(path)}' "
              f"({corpus.class_count} classes)")

  if len(corpus) == 0:
    raise CorpusFormatError(f"No samples could be read from {os.fspath(path)}")

  corpus.freeze()
  if compress:
    corpus.compress(workers)
  return corpus
