"""
Exception types raised by gzip-knn.
"""

from typing import Sequence


class GzipKNNError(Exception):
  """Base class for all gzip-knn errors."""


class CompressionFailure(GzipKNNError):
  """The codec rejected a buffer or could not process it."""


class InvalidParameter(GzipKNNError, ValueError):
  """A parameter or input was rejected before any work was started."""


class CorpusFormatError(GzipKNNError, ValueError):
  """The corpus source could not be read as a labelled line file."""


class PartialWorkerFailure(GzipKNNError):
  """
  One or more worker threads failed.

  Parameters
  ----------
  failures : Sequence[tuple[int, BaseException]]
      ``(worker_index, exception)`` pairs in worker order.
  """

  def __init__(self, failures: Sequence[tuple[int, BaseException]]):
    self.failures = list(failures)
    index, first = self.failures[0]
    super().__init__(
      f"{len(self.failures)} worker(s) failed; first failure in worker "
      f"{index}: {type(first).__name__}: {first}"
    )

  @property
  def first(self) -> BaseException:
    return self.failures[0][1]
