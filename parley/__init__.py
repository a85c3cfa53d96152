"""Parley: a multi-turn dialog stack engine with scoped conversation memory."""

__version__ = "0.1.0"
