"""
Tests for the corpus store and loader.
"""

import logging

import pytest

from gzip_knn import Corpus, Sample, count_lines, load_corpus
from gzip_knn.errors import CorpusFormatError, InvalidParameter

RAW_CORPUS = (
  b"Class Index,Title,Description\n"
  b"3,Oil and Economy,Reuters - Soaring crude prices\n"
  b"1,a,b,c\r\n"
  b"\n"
  b"0,bad ordinal\n"
  b"no ordinal\n"
  b"4,last line without newline"
)


@pytest.fixture
def raw_corpus_file(tmp_path):
  path = tmp_path / "train.csv"
  path.write_bytes(RAW_CORPUS)
  return path


class TestCorpus:

  def test_add_and_freeze(self):
    corpus = Corpus([Sample("one", label=0)])
    corpus.add(Sample("two", label=2))
    assert len(corpus) == 2
    assert corpus.labels == [0, 2]
    assert corpus.class_count == 3

    corpus.freeze()
    with pytest.raises(InvalidParameter, match="frozen"):
      corpus.add(Sample("three", label=1))

  def test_rejects_unlabelled_samples(self):
    with pytest.raises(InvalidParameter, match="labelled"):
      Corpus([Sample("query")])

  def test_empty_corpus(self):
    corpus = Corpus()
    assert len(corpus) == 0
    assert corpus.class_count == 0

  def test_parallel_compress_matches_serial(self):
    texts = [f"sample number {i} " * (i % 5 + 1) for i in range(37)]
    parallel = Corpus(Sample(t, label=i % 3) for i, t in enumerate(texts))
    parallel.compress(workers=6)
    assert parallel.is_compressed

    serial = [Sample(t).compressed_size for t in texts]
    assert [s.compressed_size for s in parallel] == serial


class TestLoadCorpus:

  def test_count_lines_skips_header(self, raw_corpus_file):
    assert count_lines(raw_corpus_file) == 6

  def test_count_lines_of_empty_file(self, tmp_path):
    path = tmp_path / "empty.csv"
    path.write_bytes(b"")
    assert count_lines(path) == 0

  def test_loads_samples_byte_exact(self, raw_corpus_file):
    corpus = load_corpus(raw_corpus_file, workers=2)

    assert corpus.frozen
    assert corpus.is_compressed
    assert corpus.labels == [2, 0, 3]
    assert [s.text for s in corpus] == [
      b"Oil and Economy,Reuters - Soaring crude prices",
      b"a,b,c",
      b"last line without newline",
    ]

  def test_malformed_lines_are_reported(self, raw_corpus_file, caplog):
    with caplog.at_level(logging.WARNING, logger="gzip_knn.corpus"):
      load_corpus(raw_corpus_file, compress=False)
    assert "2 malformed lines skipped" in caplog.text

  def test_compress_can_be_deferred(self, raw_corpus_file):
    corpus = load_corpus(raw_corpus_file, compress=False)
    assert not corpus.is_compressed

  def test_empty_file(self, tmp_path):
    path = tmp_path / "empty.csv"
    path.write_bytes(b"")
    with pytest.raises(CorpusFormatError, match="empty"):
      load_corpus(path)

  def test_header_only(self, tmp_path):
    path = tmp_path / "header.csv"
    path.write_bytes(b"Class Index,Text\n\n")
    with pytest.raises(CorpusFormatError, match="No samples"):
      load_corpus(path)

  def test_missing_file(self, tmp_path):
    with pytest.raises(FileNotFoundError):
      load_corpus(tmp_path / "missing.csv")
