"""Failure classification and retry policy for Flink control-plane calls."""

__version__ = "0.1.0"
