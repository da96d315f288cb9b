"""
gzip-knn - k-nearest neighbors text classification with compression distance.

This library implements the compression-based classification method from
"Less is More: Parameter-Free Text Classification with Gzip", computing the
Normalized Compression Distance against a training corpus in parallel
worker threads.
"""

from .classifier import Classification, GzipKNNClassifier, classify, vote
from .compression import compressed_size
from .corpus import Corpus, count_lines, load_corpus
from .distance import DistanceRecord, ncd
from .engine import Partition, compute_distances, partition
from .errors import (
  CompressionFailure,
  CorpusFormatError,
  GzipKNNError,
  InvalidParameter,
  PartialWorkerFailure,
)
from .sample import Sample

__version__ = "0.1.0"

__all__ = [
  "Classification",
  "CompressionFailure",
  "Corpus",
  "CorpusFormatError",
  "DistanceRecord",
  "GzipKNNClassifier",
  "GzipKNNError",
  "InvalidParameter",
  "PartialWorkerFailure",
  "Partition",
  "Sample",
  "classify",
  "compressed_size",
  "compute_distances",
  "count_lines",
  "load_corpus",
  "ncd",
  "partition",
  "vote",
]
