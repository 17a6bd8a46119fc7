"""Canvas block records and the history adapter the canvas editor drives."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Iterable, Literal, Mapping, Optional, Tuple

from builder_history.history import CANVAS_OPTIONS, HistoryOptions
from builder_history.history.entry import new_entry_id

from .base import DocumentHistory

BlockType = Literal["hero", "form", "table", "auth-form", "text", "image", "button"]
Position = Tuple[float, float]  # (x, y)

DUPLICATE_OFFSET = 20


@dataclass(frozen=True, slots=True)
class CanvasBlock:
    """A placed component on the builder canvas."""

    id: str
    type: BlockType
    x: float = 0
    y: float = 0
    width: float = 300
    height: float = 200
    properties: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("block id cannot be empty")
        if not self.type:
            raise ValueError("block type cannot be empty")
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __reduce__(self):
        return (
            type(self),
            (
                self.id,
                self.type,
                self.x,
                self.y,
                self.width,
                self.height,
                dict(self.properties),
            ),
        )

    @property
    def position(self) -> Position:
        return (self.x, self.y)


BlockList = Tuple[CanvasBlock, ...]
BLOCK_FIELDS = frozenset(f.name for f in fields(CanvasBlock))


class CanvasHistoryAdapter(DocumentHistory[CanvasBlock]):
    """Block mutators that commit each resulting canvas as a history step.

    Structural edits (add, remove, move, duplicate) commit immediately;
    property edits go through the store's debounce window so a burst of
    keystrokes becomes one step.
    """

    default_options = CANVAS_OPTIONS

    def __init__(
        self,
        initial: Iterable[CanvasBlock] = (),
        *,
        options: Optional[HistoryOptions] = None,
        **store_kwargs: object,
    ) -> None:
        store_kwargs.setdefault("name", "canvas")
        super().__init__(initial, options=options, **store_kwargs)

    @property
    def blocks(self) -> BlockList:
        return self.history.current_state

    def find_block(self, block_id: str) -> Optional[CanvasBlock]:
        return next((block for block in self.working if block.id == block_id), None)

    def update_blocks(self, blocks: Iterable[CanvasBlock], action: str) -> BlockList:
        return self._commit(blocks, action)

    def add_block(self, block: CanvasBlock) -> BlockList:
        return self._commit(
            (*self.working, block), f"Added {block.type} block", immediate=True
        )

    def remove_block(self, block_id: str) -> BlockList:
        target = self.find_block(block_id)
        remaining = [block for block in self.working if block.id != block_id]
        label = f"Removed {target.type if target else 'block'}"
        return self._commit(remaining, label, immediate=True)

    def update_block(self, block_id: str, **changes: object) -> BlockList:
        """Apply ``changes`` to one block as a debounced step.

        Keys naming a ``CanvasBlock`` field replace that field; any other key
        is merged into the block's ``properties``, so
        ``update_block("b1", title="a")`` keeps the remaining properties.
        """

        target = self.find_block(block_id)
        updated = [
            _apply_changes(block, changes) if block.id == block_id else block
            for block in self.working
        ]
        return self._commit(updated, f"Updated {target.type if target else 'block'}")

    def move_block(self, block_id: str, position: Position) -> BlockList:
        x, y = position
        moved = [
            replace(block, x=x, y=y) if block.id == block_id else block
            for block in self.working
        ]
        return self._commit(moved, "Moved block", immediate=True)

    def duplicate_block(self, block_id: str) -> BlockList:
        source = self.find_block(block_id)
        if source is None:
            return self.working
        duplicate = replace(
            source,
            id=f"{source.id}_copy_{new_entry_id()}",
            x=source.x + DUPLICATE_OFFSET,
            y=source.y + DUPLICATE_OFFSET,
        )
        label = f"Duplicated {source.type} block"
        return self._commit((*self.working, duplicate), label, immediate=True)


def _apply_changes(block: CanvasBlock, changes: Mapping[str, object]) -> CanvasBlock:
    field_changes = {k: v for k, v in changes.items() if k in BLOCK_FIELDS}
    extra = {k: v for k, v in changes.items() if k not in BLOCK_FIELDS}
    if extra:
        base = field_changes.get("properties", block.properties)
        field_changes["properties"] = {**base, **extra}  # type: ignore[dict-item]
    return replace(block, **field_changes)  # type: ignore[arg-type]


__all__ = ["BlockType", "CanvasBlock", "CanvasHistoryAdapter", "Position"]
