"""Blockfall: a falling-block puzzle rule engine with a Gymnasium front end."""

__version__ = "0.1.0"
