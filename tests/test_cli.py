import pytest

from wilsonsearch.cli import main


def test_search_small_range_writes_results(tmp_path, capsys):
    status = main(["-p", "200", "-P", "564", "-d", str(tmp_path)])
    assert status == 0
    out = capsys.readouterr().out
    assert "563 is a Wilson prime" in out
    assert "checksum 00000000000080A3" in out
    lines = (tmp_path / "results.txt").read_text().splitlines()
    assert len(lines) == 58
    assert lines[-1] == "00000000000080A3"
    assert lines[-2] == "563 is a Wilson prime"


def test_scientific_notation_matches_plain(tmp_path, capsys):
    status = main(["-p", "2e2", "-P", "564", "-d", str(tmp_path)])
    assert status == 0
    assert "checksum 00000000000080A3" in capsys.readouterr().out


def test_rerun_of_finished_search_reports_complete(tmp_path, capsys):
    assert main(["-p", "200", "-P", "564", "-d", str(tmp_path)]) == 0
    capsys.readouterr()
    assert main(["-p", "200", "-P", "564", "-d", str(tmp_path)]) == 0
    assert "Workunit complete." in capsys.readouterr().out


def test_missing_range_is_an_error(tmp_path, capsys):
    assert main(["-d", str(tmp_path)]) == 1
    assert "-p and -P arguments are required" in capsys.readouterr().err


def test_reversed_range_is_an_error(tmp_path, capsys):
    assert main(["-p", "600", "-P", "500", "-d", str(tmp_path)]) == 1
    assert "pmin <= pmax is required" in capsys.readouterr().err


def test_too_wide_range_is_an_error(tmp_path, capsys):
    assert main(["-p", "100", "-P", "20000000", "-d", str(tmp_path)]) == 1
    assert "range <= 10000000 is required" in capsys.readouterr().err


def test_range_without_primes_is_an_error(tmp_path, capsys):
    assert main(["-p", "24", "-P", "28", "-d", str(tmp_path)]) == 1
    assert "no primes" in capsys.readouterr().err


def test_bad_number_is_rejected():
    with pytest.raises(SystemExit) as info:
        main(["-p", "abc", "-P", "10"])
    assert info.value.code == 2


def test_unknown_self_test_case_is_rejected():
    with pytest.raises(SystemExit) as info:
        main(["--test", "--case", "9"])
    assert info.value.code == 2


def test_self_test_small_case_passes(capsys):
    assert main(["--test", "--case", "5"]) == 0
    out = capsys.readouterr().out
    assert "test case 5 passed." in out
    assert "All test cases completed successfully!" in out