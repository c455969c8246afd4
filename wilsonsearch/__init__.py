"""Search ranges of primes for Wilson and near-Wilson primes, with checkpointed, resumable runs."""

__version__ = "0.3.0"
__all__ = ["__version__"]