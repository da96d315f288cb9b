"""
Labelled text samples with a memoized compressed size.
"""

import logging
import threading
from typing import Optional, Union

from . import compression
from .errors import InvalidParameter

logger = logging.getLogger(__name__)


def strip_line_terminator(line: bytes) -> bytes:
  """Remove one trailing ``\\n`` or ``\\r\\n``, leaving any other bytes alone."""
  if line.endswith(b"\n"):
    line = line[:-1]
    if line.endswith(b"\r"):
      line = line[:-1]
  return line


class Sample:
  """
  A text record with an optional class label.

  The compressed size is computed at most once per sample and cached for
  the sample's lifetime.

  Parameters
  ----------
  text : bytes or str
      Raw text. Strings are encoded as UTF-8. Must be non-empty.
  label : int, optional
      Zero-based class id. ``None`` for unlabelled queries.
  """

  __slots__ = ("_text", "_label", "_compressed_size", "_lock")

  def __init__(self, text: Union[bytes, str], label: Optional[int] = None):
    if isinstance(text, str):
      text = text.encode("utf-8")
    if not isinstance(text, (bytes, bytearray)):
      raise InvalidParameter(
        f"Sample text must be bytes or str, got {type(text).__name__}")
    if len(text) == 0:
      raise InvalidParameter("Sample text cannot be empty")
    if label is not None and label < 0:
      raise InvalidParameter(f"Sample label must be >= 0, got {label}")

    self._text = bytes(text)
    self._label = label
    self._compressed_size: Optional[int] = None
    self._lock = threading.Lock()

  @classmethod
  def from_line(cls, line: bytes) -> "Sample":
    """
    Parse one corpus line of the form ``<ordinal><sep><text>``.

    The ordinal is one-based and converted to a zero-based label. Exactly
    one separator byte is dropped; the rest of the line is kept as-is.

    Parameters
    ----------
    line : bytes
        A single line, with or without its line terminator.

    Returns
    -------
    Sample
        The parsed, not yet compressed, sample.
    """
    line = strip_line_terminator(line)

    digits = 0
    while digits < len(line) and 0x30 <= line[digits] <= 0x39:
      digits += 1
    if digits == 0:
      raise InvalidParameter(f"Line does not start with a class ordinal: {line[:20]!r}")

    ordinal = int(line[:digits])
    if ordinal < 1:
      raise InvalidParameter(f"Class ordinal must be >= 1, got {ordinal}")

    return cls(line[digits + 1:], label=ordinal - 1)

  @property
  def text(self) -> bytes:
    return self._text

  @property
  def label(self) -> Optional[int]:
    return self._label

  @property
  def is_compressed(self) -> bool:
    return self._compressed_size is not None

  @property
  def compressed_size(self) -> int:
    """Compressed size of ``text``, computed on first access."""
    if self._compressed_size is None:
      with self._lock:
        if self._compressed_size is None:
          self._compressed_size = compression.compressed_size(self._text)
    return self._compressed_size

  def compress(self) -> int:
    """Force the memoized compressed size and return it."""
    return self.compressed_size

  def __len__(self) -> int:
    return len(self._text)

  def __repr__(self) -> str:
    preview = self._text[:24]
    return (f"Sample(label={self._label}, len={len(self._text)}, "
            f"text={preview!r}{'...' if len(self._text) > 24 else ''})")
