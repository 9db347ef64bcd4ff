"""Arkelium operations core: scheduling, payroll and cash handling for cleaning companies."""

__version__ = "0.1.0"
