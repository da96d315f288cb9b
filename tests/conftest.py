"""Shared fixtures for gzip-knn tests."""

import pytest

from gzip_knn import Corpus, Sample

CLASS_CHARS = "abcd"


def class_texts():
  """Two near-duplicate single-character texts per class."""
  texts, labels = [], []
  for label, char in enumerate(CLASS_CHARS):
    for length in (40, 44):
      texts.append(char * length)
      labels.append(label)
  return texts, labels


@pytest.fixture
def repeated_char_data():
  return class_texts()


@pytest.fixture
def repeated_char_corpus():
  texts, labels = class_texts()
  return Corpus(Sample(t, label=l) for t, l in zip(texts, labels)).freeze()


@pytest.fixture
def corpus_file(tmp_path):
  """Corpus file in the one-based '<class>,<text>' line format."""
  texts, labels = class_texts()
  lines = ["Class Index,Text"]
  lines += [f"{label + 1},{text}" for text, label in zip(texts, labels)]
  path = tmp_path / "train.csv"
  path.write_text("\n".join(lines) + "\n", encoding="utf-8")
  return path
