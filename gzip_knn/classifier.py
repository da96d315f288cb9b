"""
Main classifier module for gzip-knn.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

import numpy as np

from .corpus import Corpus
from .distance import DistanceRecord
from .engine import compute_distances
from .errors import InvalidParameter
from .sample import Sample
from .utils import resolve_workers, timed

logger = logging.getLogger(__name__)

Text = Union[bytes, str]


@dataclass(frozen=True)
class Classification:
  """Predicted label and the per-class vote counts behind it."""

  label: int
  votes: tuple[int, ...]

  @property
  def histogram(self) -> tuple[tuple[int, int], ...]:
    """``(label, count)`` pairs for every class, in class order."""
    return tuple(enumerate(self.votes))

  @property
  def ordinal(self) -> int:
    """One-based class number, as written in corpus files."""
    return self.label + 1


def _check_k(k: int, n: int) -> None:
  if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
    raise InvalidParameter(f"k must be an integer, got {k!r}")
  if not 1 <= k <= n:
    raise InvalidParameter(f"k ({k}) must be between 1 and the number of samples ({n})")


def vote(
    distances: Sequence[DistanceRecord],
    k: int,
    class_count: int,
) -> Classification:
  """
  Majority vote among the ``k`` nearest records.

  Records are sorted by distance with a stable sort, so equal distances keep
  their input order. When several classes share the highest count the
  lowest class id wins.

  Parameters
  ----------
  distances : Sequence[DistanceRecord]
      One record per training sample.
  k : int
      Number of nearest neighbors to consider.
  class_count : int
      Length of the vote histogram.

  Returns
  -------
  Classification
      Predicted label and vote histogram.
  """
  _check_k(k, len(distances))
  if class_count < 1:
    raise InvalidParameter(f"class_count must be >= 1, got {class_count}")

  dist = np.fromiter((r.distance for r in distances), dtype=np.float64,
                     count=len(distances))
  labels = np.fromiter((r.label for r in distances), dtype=np.intp,
                       count=len(distances))

  nearest = np.argsort(dist, kind="stable")[:k]
  nearest_labels = labels[nearest]
  if nearest_labels.max() >= class_count:
    raise InvalidParameter(
      f"Label {int(nearest_labels.max())} is outside class_count ({class_count})")

  votes = np.bincount(nearest_labels, minlength=class_count)
  # argmax returns the first index holding the maximum.
  predicted = int(np.argmax(votes))

  logger.debug(f"K nearest neighbors: labels={nearest_labels.tolist()}, "
               f"distances={dist[nearest].tolist()}")

  return Classification(label=predicted, votes=tuple(int(v) for v in votes))


def classify(
    text: Union[Text, Sample],
    corpus: Corpus,
    k: int,
    workers: Optional[int] = None,
    class_count: Optional[int] = None,
) -> Classification:
  """
  Classify a text against a corpus with NCD and a k-nearest-neighbor vote.

  All parameters are validated before any worker thread is started. A
  failure leaves the corpus and its memoized compressed sizes untouched.

  Parameters
  ----------
  text : bytes, str or Sample
      Text to classify. Must be non-empty.
  corpus : Corpus
      Labelled training samples.
  k : int
      Number of nearest neighbors, ``1 <= k <= len(corpus)``.
  workers : int, optional
      Worker threads. Detected from the host if None.
  class_count : int, optional
      Number of classes. Inferred from the corpus labels if None.

  Returns
  -------
  Classification
      Predicted zero-based label and the vote histogram.
  """
  query = text if isinstance(text, Sample) else Sample(text)
  if len(corpus) == 0:
    raise InvalidParameter("Corpus cannot be empty")
  _check_k(k, len(corpus))
  workers = resolve_workers(workers)
  if class_count is None:
    class_count = corpus.class_count
  elif class_count < corpus.class_count:
    raise InvalidParameter(
      f"Corpus labels need {corpus.class_count} classes, but class_count is {class_count}")

  with timed(f"Classifying against {len(corpus)} samples"):
    distances = compute_distances(query, corpus, workers)
    result = vote(distances, k, class_count)

  logger.info(f"Classified sample as class {result.ordinal}")
  for label, count in result.histogram:
    logger.info(f"    class {label + 1}: {count}")

  return result


class GzipKNNClassifier:
  """
  K-Nearest Neighbors text classifier using gzip compression distance.

  This classifier implements the Normalized Compression Distance (NCD) method
  from "Less is More: Parameter-Free Text Classification with Gzip".

  Parameters
  ----------
  k : int, default=3
      Number of nearest neighbors to consider for classification.
  workers : int, optional
      Worker threads per classification. Uses GZIP_KNN_WORKERS or the number
      of available CPUs if None.
  class_count : int, optional
      Number of classes. Inferred from the training labels if None.

  Attributes
  ----------
  corpus_ : Corpus
      Training corpus after fitting.
  is_fitted_ : bool
      Whether the classifier has been fitted.
  """

  def __init__(
      self,
      k: int = 3,
      workers: Optional[int] = None,
      class_count: Optional[int] = None,
  ):
    self.k = k
    self.workers = workers
    self.class_count = class_count

    self.corpus_: Optional[Corpus] = None
    self.is_fitted_ = False

  def fit(self, X: Sequence[Text], y: Sequence[int]) -> 'GzipKNNClassifier':
    """
    Fit the classifier with training texts.

    Parameters
    ----------
    X : Sequence[bytes or str]
        Training texts
    y : Sequence[int]
        Zero-based training labels

    Returns
    -------
    self : GzipKNNClassifier
        Returns self for method chaining
    """
    if len(X) != len(y):
      raise InvalidParameter("X and y must have the same length")

    samples = []
    for i, (text, label) in enumerate(zip(X, y)):
      try:
        samples.append(Sample(text, label=int(label)))
      except InvalidParameter as e:
        raise InvalidParameter(f"Invalid training sample at index {i}: {e}") from e

    return self.fit_corpus(Corpus(samples).freeze())

  def fit_corpus(self, corpus: Corpus) -> 'GzipKNNClassifier':
    """Fit the classifier with an already loaded corpus."""
    if len(corpus) == 0:
      raise InvalidParameter("Training data cannot be empty")

    if self.k > len(corpus):
      raise InvalidParameter(
        f"k ({self.k}) cannot be larger than training set size ({len(corpus)})")

    if self.class_count is not None and corpus.class_count > self.class_count:
      raise InvalidParameter(
        f"Training labels need {corpus.class_count} classes, "
        f"but class_count is {self.class_count}")

    corpus.freeze()
    corpus.compress(resolve_workers(self.workers))

    self.corpus_ = corpus
    self.is_fitted_ = True

    logger.debug(f"Fitted classifier with {len(corpus)} training samples, "
                 f"{len(set(corpus.labels))} unique classes")

    return self

  def _require_fitted(self) -> Corpus:
    if not self.is_fitted_ or self.corpus_ is None:
      raise ValueError("Classifier must be fitted before prediction")
    return self.corpus_

  def classify(self, x: Text, k: Optional[int] = None) -> Classification:
    """
    Classify a single text and return the vote details.

    Parameters
    ----------
    x : bytes or str
        Text to classify
    k : int, optional
        Overrides the configured ``k`` for this call.

    Returns
    -------
    Classification
        Predicted label and vote histogram
    """
    corpus = self._require_fitted()
    return classify(
      x,
      corpus,
      self.k if k is None else k,
      workers=self.workers,
      class_count=self.class_count,
    )

  def predict_single(self, x: Text) -> int:
    """Predict the zero-based class of a single text."""
    return self.classify(x).label

  def predict(self, X: Sequence[Text]) -> list[int]:
    """
    Predict classes for multiple texts.

    Parameters
    ----------
    X : Sequence[bytes or str]
        Texts to classify

    Returns
    -------
    list[int]
        Predicted class labels
    """
    self._require_fitted()

    predictions = []
    for i, text in enumerate(X):
      try:
        pred = self.predict_single(text)
      except Exception as e:
        logger.error(f"Failed to predict for sample {i}: {e}")
        raise
      predictions.append(pred)
      logger.debug(f"Predicted '{pred}' for test sample {i}")

    return predictions

  def get_params(self) -> dict[str, Any]:
    """Get classifier parameters."""
    return {
      'k': self.k,
      'workers': self.workers,
      'class_count': self.class_count,
    }

  def set_params(self, **params) -> 'GzipKNNClassifier':
    """Set classifier parameters."""
    for key in params:
      if key not in self.get_params():
        raise ValueError(f"Invalid parameter: {key}")
    for key, value in params.items():
      setattr(self, key, value)
    return self
