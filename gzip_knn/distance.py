"""
Normalized Compression Distance between samples.
"""

import logging
from dataclasses import dataclass

from . import compression
from .sample import Sample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistanceRecord:
  """Distance from a query to one training sample, with that sample's label."""

  distance: float
  label: int


def ncd(x: Sample, y: Sample) -> float:
  """
  Calculate Normalized Compression Distance (NCD) between two samples.

  NCD(x,y) = (C(xy) - min(C(x), C(y))) / max(C(x), C(y))

  ``C(x)`` and ``C(y)`` come from the samples' memoized sizes; ``C(xy)`` is
  compressed fresh on every call.

  Parameters
  ----------
  x, y : Sample
      Samples to compare. Order matters: the joint buffer is ``x`` then ``y``.

  Returns
  -------
  float
      Normalized compression distance (0 = identical, higher = more different)
  """
  cx = x.compressed_size
  cy = y.compressed_size

  cxy = compression.compressed_size(x.text + y.text)

  distance = (cxy - min(cx, cy)) / max(cx, cy)
  return distance
