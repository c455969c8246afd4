# wilsonsearch

Searches a range of primes for Wilson primes and near-Wilson primes.

A prime p is a Wilson prime when (p-1)! ≡ -1 (mod p²). The Wilson quotient
w_p = ((p-1)! + 1) / p is reduced modulo p; when it lies within 1000 of 0
(taken as a value k with |k| < 1000) the prime is reported as a near-Wilson
prime with value k.

To keep the factorial short, primes p ≥ 5 are split into three types
(`wilsonsearch.wilson.PrimeType`):

- type 0, p ≡ 1 (mod 3): uses ((p-1)/6)! with the representations
  u² + 3v² = 4p and c² + 27d² = 4p.
- type 1, p ≡ 5 (mod 12): uses ((p-1)/4)! with a² + b² = p.
- type 2, p ≡ 11 (mod 12): uses ((p-1)/2)!.

## Installation

```
pip install .
```

## Command line

```
wilsonsearch -p 200 -P 564
```

This tests every prime p with pmin <= p < pmax. Options:

- `-p`, `--pmin`: start of the range (inclusive). Forms such as `2e13` are accepted.
- `-P`, `--pmax`: end of the range (exclusive). Both are required, pmin <= pmax,
  and the range may span at most 10,000,000.
- `-d`, `--directory`: where the result and checkpoint files go (default: the
  current directory).
- `-v`, `--verify`: compare every prime with |w_p/p| < 1/50000 against the known
  good result file `goodresults.txt` in that directory. Requires pmax <= 2e13.
- `-s`, `--test`: run the built-in self test; `--case N` (repeatable) picks
  cases 1 to 7, by default all of them run.

Found primes are written to `results.txt`, one line each
(`563 is a Wilson prime`, `87467099 is a Near-Wilson prime -2`). When the
search finishes a 16-digit hexadecimal checksum line is appended, preceded by
`no results` if nothing was found. Progress messages go to standard error.
The exit status is 0 on success and 1 on an error.

Checkpoints are written to `stateA.ckp` and `stateB.ckp` in turn, about once a
minute and at the end. Running the same range again resumes from the most
recent valid checkpoint, or reports `Workunit complete.` if it had finished.

## Library use

```python
from wilsonsearch.primes import primes_between
from wilsonsearch.wilson import evaluate_prime, prime_type

for p in primes_between(200, 564):
    outcome = evaluate_prime(p)
    if outcome.is_notable:
        print(p, outcome.value)

prime_type(563)          # PrimeType.ELEVEN_MOD_12
```

Modules:

- `wilsonsearch.primes`: `primes_between(start, stop)` and `PrimeIterator`, a
  cursor with `next_prime()`, `prev_prime()` and `jump_to()`.
- `wilsonsearch.wheel`: `find_wheel_offset` (mod 30 wheel position) and
  `get_power` (exponent of a prime in n!).
- `wilsonsearch.representations`: `find_a`, `find_c` and `find_u`.
- `wilsonsearch.wilson`: `PrimeType`, `WilsonOutcome`, `prime_type`,
  `factorial_target`, `factorial_mod`, `reconstruct_wilson`, `evaluate_prime`
  and `classify_quotient`.
- `wilsonsearch.checkpoint`: `WorkStatus`, `CheckpointStore` and `state_checksum`.
- `wilsonsearch.results`: `ResultFile`, `GoodResult`, `format_result` and
  `read_good_results`.
- `wilsonsearch.search`: `WilsonSearch`, `SearchReport`, `validate_range` and
  `format_eta`.
- `wilsonsearch.cli`: `main(argv=None)`, the command above.

## Limits

All arithmetic runs in plain Python on a single CPU core, multiplying out each
prime's partial factorial term by term; there is no offload to other hardware
and no faster factorial algorithm. The work grows with the size of the primes
and with how many primes the range holds, so ranges of large primes are not
practical. In the self test only case 5 (the range 200 to 564) finishes in
reasonable time; the other cases involve primes near 10⁸ or 10¹² and would run
far too long. The package does not report progress to any external job
scheduler.

## Running the tests

```
pip install .[test]
pytest
```