"""
Compressed-size oracle backed by zlib at its maximum effort level.
"""

import logging
import zlib

from .errors import CompressionFailure

logger = logging.getLogger(__name__)

# Every size in a run must come from the same level, or distances stop being
# comparable.
MAX_COMPRESSION_LEVEL = 9


def compressed_size(data: bytes) -> int:
  """
  Return the size of ``data`` after DEFLATE compression.

  Parameters
  ----------
  data : bytes
      Buffer to compress.

  Returns
  -------
  int
      Compressed size in bytes, including the zlib header and checksum.

  Raises
  ------
  CompressionFailure
      If ``data`` is not a byte buffer or the codec reports an error.
  """
  if not isinstance(data, (bytes, bytearray, memoryview)):
    raise CompressionFailure(
      f"Expected a byte buffer, got {type(data).__name__}")

  try:
    return len(zlib.compress(data, MAX_COMPRESSION_LEVEL))
  except (zlib.error, OverflowError, MemoryError) as e:
    logger.error(f"Compression of {len(data)} bytes failed: {e}")
    raise CompressionFailure(
      f"Could not compress buffer of {len(data)} bytes: {e}") from e
