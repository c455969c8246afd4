import pytest

from wilsonsearch.results import (
    GOOD_RESULTS_CHECKSUM,
    GoodResult,
    ResultFile,
    format_result,
    read_good_results,
)

MASK = (1 << 64) - 1


def _write_good_file(path, pairs):
    """Write pairs plus a closing line that makes the file checksum valid."""
    total = sum(p + v for p, v in pairs) & MASK
    filler = (GOOD_RESULTS_CHECKSUM - total) & MASK
    lines = [f"{p} {v}" for p, v in pairs] + [f"{filler} 0"]
    path.write_text("\n".join(lines) + "\n", encoding="ascii")


def test_format_wilson_prime():
    assert format_result(563, 0) == "563 is a Wilson prime"


def test_format_near_wilson_signs():
    assert format_result(1239053554603, -4) == "1239053554603 is a Near-Wilson prime -4"
    assert format_result(1108967825921, 12) == "1108967825921 is a Near-Wilson prime +12"


def test_result_file_append_and_count(tmp_path):
    results = ResultFile(tmp_path / "results.txt")
    results.clear()
    assert results.line_count() == 0
    results.append(13, 0)
    results.append(7, -2)
    assert results.line_count() == 2
    text = (tmp_path / "results.txt").read_text()
    assert text.splitlines() == [format_result(13, 0), format_result(7, -2)]


def test_clear_empties_file(tmp_path):
    results = ResultFile(tmp_path / "results.txt")
    results.clear()
    results.append(13, 0)
    results.clear()
    assert results.line_count() == 0


def test_finalize_without_results(tmp_path):
    results = ResultFile(tmp_path / "results.txt")
    results.clear()
    results.finalize(0, 0x80A3)
    assert (tmp_path / "results.txt").read_text() == "no results\n00000000000080A3\n"


def test_finalize_with_results_appends_checksum(tmp_path):
    results = ResultFile(tmp_path / "results.txt")
    results.clear()
    results.append(563, 0)
    results.finalize(1, 0x00000240FAB1A752)
    lines = (tmp_path / "results.txt").read_text().splitlines()
    assert lines == [format_result(563, 0), "00000240FAB1A752"]


def test_finalize_detects_missing_results(tmp_path):
    results = ResultFile(tmp_path / "results.txt")
    results.clear()
    results.append(563, 0)
    with pytest.raises(RuntimeError):
        results.finalize(2, 1)


def test_read_good_results_filters_range(tmp_path):
    path = tmp_path / "good.txt"
    _write_good_file(path, [(563, 0), (5609877309359, -6), (16556218163369, 2)])
    found = read_good_results(path, 500, 5609877309360)
    assert found == [GoodResult(563, 0), GoodResult(5609877309359, -6)]


def test_read_good_results_bad_checksum(tmp_path):
    path = tmp_path / "good.txt"
    path.write_text("563 0\n13 0\n", encoding="ascii")
    with pytest.raises(ValueError, match="Checksum"):
        read_good_results(path, 0, 1000)


def test_read_good_results_bad_line(tmp_path):
    path = tmp_path / "good.txt"
    path.write_text("563 0\nnot a number\n", encoding="ascii")
    with pytest.raises(ValueError, match="Error reading"):
        read_good_results(path, 0, 1000)


def test_read_good_results_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_good_results(tmp_path / "absent.txt", 0, 1000)