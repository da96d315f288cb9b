"""
Parallel distance computation over a partitioned corpus.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from .distance import DistanceRecord, ncd
from .errors import InvalidParameter, PartialWorkerFailure
from .sample import Sample
from .utils import resolve_workers

if TYPE_CHECKING:
  from .corpus import Corpus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Partition:
  """Contiguous index range ``[offset, offset + size)`` owned by one worker."""

  index: int
  offset: int
  size: int

  @property
  def stop(self) -> int:
    return self.offset + self.size

  def indices(self) -> range:
    return range(self.offset, self.stop)


def partition(n: int, workers: int) -> list[Partition]:
  """
  Split ``n`` items into ``workers`` contiguous partitions.

  Every worker but the last receives ``n // workers`` items; the last one
  also takes the remainder. The partitions cover ``[0, n)`` exactly once.

  Parameters
  ----------
  n : int
      Number of items.
  workers : int
      Number of partitions to produce.

  Returns
  -------
  list[Partition]
      Exactly ``workers`` partitions, some possibly empty.
  """
  if n < 0:
    raise InvalidParameter(f"n must be >= 0, got {n}")
  if workers < 1:
    raise InvalidParameter(f"workers must be >= 1, got {workers}")

  chunk = n // workers
  remainder = n - workers * chunk

  partitions = []
  for i in range(workers):
    extra = remainder if i == workers - 1 else 0
    partitions.append(Partition(index=i, offset=i * chunk, size=chunk + extra))
  return partitions


def run_partitioned(
    task: Callable[[Partition], None],
    n: int,
    workers: int,
) -> list[Partition]:
  """
  Run ``task`` once per non-empty partition on a fresh thread pool.

  All tasks are joined before this returns or raises.

  Raises
  ------
  PartialWorkerFailure
      If any task raised. The first failure is chained as the cause.
  """
  partitions = partition(n, workers)
  active = [p for p in partitions if p.size > 0]

  failures = []
  with ThreadPoolExecutor(max_workers=len(active) or 1,
                          thread_name_prefix="gzip-knn") as executor:
    futures = [(p, executor.submit(task, p)) for p in active]
    # Leaving the block joins every thread, failed or not.

  for p, future in futures:
    exc = future.exception()
    if exc is not None:
      logger.error(f"Worker {p.index} failed on [{p.offset}, {p.stop}): {exc}")
      failures.append((p.index, exc))

  if failures:
    raise PartialWorkerFailure(failures) from failures[0][1]

  return partitions


def compute_distances(
    query: Sample,
    corpus: "Corpus",
    workers: Optional[int] = None,
) -> list[DistanceRecord]:
  """
  Calculate the NCD from ``query`` to every sample in ``corpus``.

  Parameters
  ----------
  query : Sample
      Sample to classify.
  corpus : Corpus
      Training samples. Read-only for the duration of the call.
  workers : int, optional
      Number of worker threads. Detected from the host if None.

  Returns
  -------
  list[DistanceRecord]
      One record per corpus entry, in corpus order.
  """
  n = len(corpus)
  if n == 0:
    raise InvalidParameter("Corpus cannot be empty")
  workers = resolve_workers(workers)

  # Memoized sizes are written here, before any worker reads them.
  query.compress()
  corpus.compress(workers)

  records: list[Optional[DistanceRecord]] = [None] * n

  def fill(part: Partition) -> None:
    for i in part.indices():
      sample = corpus[i]
      records[i] = DistanceRecord(distance=ncd(query, sample), label=sample.label)

  parts = run_partitioned(fill, n, workers)
  logger.debug(f"Computed {n} distances with {len(parts)} workers "
               f"(chunk={parts[0].size}, last={parts[-1].size})")

  return records
