"""Tests for worker-count configuration and timing helpers."""

import logging

import pytest

from gzip_knn import utils
from gzip_knn.errors import InvalidParameter


def test_worker_env_override(monkeypatch) -> None:
  monkeypatch.setenv(utils.WORKERS_ENV, "3")
  assert utils.detect_worker_count() == 3
  assert utils.resolve_workers(None) == 3


def test_worker_env_rejects_garbage(monkeypatch) -> None:
  monkeypatch.setenv(utils.WORKERS_ENV, "many")
  with pytest.raises(InvalidParameter, match=utils.WORKERS_ENV):
    utils.detect_worker_count()

  monkeypatch.setenv(utils.WORKERS_ENV, "0")
  with pytest.raises(InvalidParameter, match=">= 1"):
    utils.detect_worker_count()


def test_worker_auto_detection(monkeypatch) -> None:
  monkeypatch.delenv(utils.WORKERS_ENV, raising=False)
  assert utils.detect_worker_count() >= 1


@pytest.mark.parametrize("workers", [0, -2, 1.5, True, "4"])
def test_resolve_workers_rejects_invalid(workers) -> None:
  with pytest.raises(InvalidParameter):
    utils.resolve_workers(workers)


def test_resolve_workers_keeps_explicit_value() -> None:
  assert utils.resolve_workers(5) == 5


def test_timed_logs_phase(caplog) -> None:
  with caplog.at_level(logging.INFO, logger="gzip_knn.utils"):
    with utils.timed("Loading"):
      pass
  assert "Loading done in" in caplog.text
