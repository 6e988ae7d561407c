"""Resolve a single pipe reference and run it with a script engine."""

from __future__ import annotations

__version__ = "0.1.0"
