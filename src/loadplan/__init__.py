"""Loading timeline planner: application layer over the pure :mod:`core` engine."""

__version__ = "0.1.0"
