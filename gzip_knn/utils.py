"""
Utility functions for gzip-knn.
"""

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from .errors import InvalidParameter

logger = logging.getLogger(__name__)

# Environment variable to override the detected worker count.
WORKERS_ENV = "GZIP_KNN_WORKERS"


def detect_worker_count() -> int:
  """
  Number of worker threads to use when none is configured.

  Priority:
  1. GZIP_KNN_WORKERS env var (positive integer)
  2. CPUs available to this process

  Returns
  -------
  int
      Worker count, always >= 1.
  """
  override = os.environ.get(WORKERS_ENV, "").strip()
  if override:
    try:
      workers = int(override)
    except ValueError:
      raise InvalidParameter(
        f"{WORKERS_ENV} must be a positive integer, got {override!r}") from None
    if workers < 1:
      raise InvalidParameter(f"{WORKERS_ENV} must be >= 1, got {workers}")
    return workers

  if hasattr(os, "sched_getaffinity"):
    return max(1, len(os.sched_getaffinity(0)))
  return os.cpu_count() or 1


def resolve_workers(workers: Optional[int]) -> int:
  """Validate an explicit worker count, or detect one if ``workers`` is None."""
  if workers is None:
    workers = detect_worker_count()
    logger.debug(f"{workers} workers detected")
    return workers

  if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
    raise InvalidParameter(f"workers must be a positive integer, got {workers!r}")
  return workers


@contextmanager
def timed(phase: str) -> Iterator[None]:
  """Log the wall-clock duration of a processing phase."""
  start = time.perf_counter()
  try:
    yield
  finally:
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{phase} done in {elapsed_ms:.2f} ms")
