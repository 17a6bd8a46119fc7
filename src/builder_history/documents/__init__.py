"""History adapters for the canvas editor and the schema designer."""

from .base import DocumentHistory
from .canvas import BlockType, CanvasBlock, CanvasHistoryAdapter, Position
from .schema import COLUMN_TYPES, SchemaColumn, SchemaHistoryAdapter, SchemaTable

__all__ = [
    "DocumentHistory",
    "BlockType",
    "CanvasBlock",
    "CanvasHistoryAdapter",
    "Position",
    "COLUMN_TYPES",
    "SchemaColumn",
    "SchemaHistoryAdapter",
    "SchemaTable",
]
