"""Stateless relay that executes remote workflows and normalizes their output."""

__version__ = "1.0.0"
