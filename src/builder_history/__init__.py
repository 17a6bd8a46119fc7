"""Undo/redo history engine for the builder's canvas and schema editors."""

__all__ = [
    "adapters",
    "documents",
    "history",
    "runtime",
]

__version__ = "0.1.0"
