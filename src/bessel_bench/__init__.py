"""bessel-bench package initialisation."""

__all__ = [
    "benchmarks",
    "core",
    "reporting",
    "shared",
]
