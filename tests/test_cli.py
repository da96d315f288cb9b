"""Tests for the command-line interface."""

import io

from gzip_knn import cli


def fake_stdin(data: bytes) -> io.TextIOWrapper:
  return io.TextIOWrapper(io.BytesIO(data), encoding="utf-8")


def test_classifies_single_text(corpus_file, capsys) -> None:
  code = cli.main([str(corpus_file), "-k", "3", "--workers", "2", "--text", "b" * 42])
  assert code == 0
  assert capsys.readouterr().out.strip() == "2"


def test_text_with_undecodable_bytes(corpus_file, capsys) -> None:
  # A non-UTF-8 byte in argv arrives as a lone surrogate.
  code = cli.main([str(corpus_file), "-k", "3", "--workers", "2",
                   "--text", "b" * 40 + "\udcff"])
  assert code == 0
  assert capsys.readouterr().out.strip() == "2"


def test_interactive_loop_reads_stdin(corpus_file, capsys, monkeypatch) -> None:
  monkeypatch.setattr("sys.stdin", fake_stdin(b"b" * 42 + b"\n\n" + b"d" * 40 + b"\n"))
  code = cli.main([str(corpus_file), "-k", "3", "--workers", "2"])
  assert code == 0
  assert capsys.readouterr().out.split() == ["2", "4"]


def test_interactive_loop_accepts_non_utf8_lines(corpus_file, capsys, monkeypatch) -> None:
  data = b"b" * 42 + b"\xff\xfe\n" + b"d" * 40 + b"\n"
  monkeypatch.setattr("sys.stdin", fake_stdin(data))
  code = cli.main([str(corpus_file), "-k", "3", "--workers", "2"])
  assert code == 0
  assert capsys.readouterr().out.split() == ["2", "4"]


def test_k_is_clamped_to_corpus_size(corpus_file, capsys) -> None:
  code = cli.main([str(corpus_file), "--workers", "2", "--text", "a" * 40])
  assert code == 0
  # All 8 neighbours vote, two per class, so the lowest class wins.
  assert capsys.readouterr().out.strip() == "1"


def test_missing_corpus_reports_error(tmp_path, capsys) -> None:
  code = cli.main([str(tmp_path / "missing.csv"), "--text", "x"])
  assert code == 1
  assert capsys.readouterr().out == ""


def test_bad_query_in_loop_does_not_stop_it(corpus_file) -> None:
  stdin = io.BytesIO(b"c" * 40 + b"\n" + b"a" * 40 + b"\n")
  corpus = cli.load_corpus(corpus_file, workers=1)

  failures = cli.interactive_loop(corpus, 9, 1, None, stdin, io.StringIO())
  assert failures == 2

  out = io.StringIO()
  failures = cli.interactive_loop(corpus, 3, 1, None, io.BytesIO(b"c" * 40 + b"\r\n"), out)
  assert failures == 0
  assert out.getvalue().strip() == "3"
