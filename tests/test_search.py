import pytest

from wilsonsearch.checkpoint import CheckpointStore, WorkStatus
from wilsonsearch.primes import primes_between
from wilsonsearch.results import GoodResult
from wilsonsearch.search import WilsonSearch, format_eta, validate_range
from wilsonsearch.wilson import evaluate_prime


@pytest.mark.parametrize(
    "pmin, pmax, result_test, fragment",
    [
        (0, 100, False, "required"),
        (100, 0, False, "required"),
        (200, 100, False, "pmin <= pmax"),
        (1, 10_000_002, False, "range"),
        (20_000_000_000_000, 20_000_000_000_001, True, "2e13"),
    ],
)
def test_validate_range_rejects(pmin, pmax, result_test, fragment):
    with pytest.raises(ValueError, match=fragment):
        validate_range(pmin, pmax, result_test)


def test_format_eta_zero():
    assert format_eta(0) == "0d 0h 0m 0s"


def test_format_eta_components():
    assert format_eta(90061) == "1d 1h 1m 1s"


def test_search_small_iterations(tmp_path):
    report = WilsonSearch(200, 564, tmp_path).run()
    assert report.result_count == 57
    assert report.checksum == 0x80A3
    assert report.last_result.p == 563
    assert report.last_result.value == 0


def test_search_writes_result_file(tmp_path):
    report = WilsonSearch(200, 564, tmp_path).run()
    lines = (tmp_path / "results.txt").read_text().splitlines()
    assert len(lines) == report.result_count + 1
    assert lines[-1] == "00000000000080A3"
    assert lines[-2] == "563 is a Wilson prime"


def test_search_agrees_with_direct_evaluation(tmp_path):
    report = WilsonSearch(5, 200, tmp_path).run()
    direct = [evaluate_prime(p) for p in primes_between(5, 200)]
    assert report.results == [o for o in direct if o.is_notable]
    assert [o.p for o in report.results if o.is_wilson] == [5, 13]


def test_search_type_counts_cover_all_primes(tmp_path):
    report = WilsonSearch(200, 564, tmp_path).run()
    assert sum(report.type_counts) == report.prime_count
    assert report.prime_count == len(primes_between(200, 564))


def test_finished_search_is_not_repeated(tmp_path):
    WilsonSearch(200, 564, tmp_path).run()
    again = WilsonSearch(200, 564, tmp_path).run()
    assert again.already_complete is True
    assert again.result_count == 0


def test_frequent_checkpoints_keep_results(tmp_path):
    search = WilsonSearch(200, 564, tmp_path)
    search.checkpoint_interval = 0
    search.chunk_size = 7
    report = search.run()
    assert report.checksum == 0x80A3
    status, _ = CheckpointStore(tmp_path).read(200, 564, report.prime_count)
    assert status.done is True


def test_resume_from_checkpoint(tmp_path):
    count = len(primes_between(200, 564))
    status = WorkStatus(pmin=200, pmax=564, currp=2, tpcount=count)
    CheckpointStore(tmp_path).write(status, [(1, 0)] * count)
    report = WilsonSearch(200, 564, tmp_path).run()
    assert report.resumed is True
    assert report.checksum == 0x80A3


def test_result_test_matches_good_results(tmp_path):
    search = WilsonSearch(200, 564, tmp_path, True, [GoodResult(563, 0)])
    report = search.run()
    assert report.good_matches == 1


def test_result_test_wrong_value(tmp_path):
    search = WilsonSearch(200, 564, tmp_path, True, [GoodResult(563, 2)])
    with pytest.raises(RuntimeError, match="563"):
        search.run()


def test_result_test_missing_entry(tmp_path):
    search = WilsonSearch(200, 564, tmp_path, True, [])
    with pytest.raises(RuntimeError, match="not in result file"):
        search.run()


def test_result_test_unfound_good_result(tmp_path):
    good = [GoodResult(563, 0), GoodResult(211, 0)]
    search = WilsonSearch(200, 564, tmp_path, True, good)
    with pytest.raises(RuntimeError, match="211"):
        search.run()


def test_empty_range_raises(tmp_path):
    with pytest.raises(ValueError, match="no primes"):
        WilsonSearch(24, 29, tmp_path).run()


def test_primes_below_five_raise(tmp_path):
    with pytest.raises(ValueError):
        WilsonSearch(1, 10, tmp_path).run()