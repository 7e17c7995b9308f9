"""Grid buckets of diagram items for fast point and marquee selection."""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Set, Tuple, Union

from ade.geom import AdBox
from ade.items import SvgCircleItem, SvgPathItem
from ade.settings import AdSettings

logger = logging.getLogger(__name__)

Bucket = Tuple[int, int]
Item = Union[SvgPathItem, SvgCircleItem]


class ItemLocationCache:
    """
    Buckets items by their bounds on a regular grid laid over the canvas.

    The canvas is divided into grid_x * grid_y buckets. Every item is registered in
    all buckets its bounds overlap; coordinates outside the canvas are clamped to
    the border buckets. Queries return candidate ids only, callers do the exact
    hit-test on the candidates.
    """

    def __init__(self, grid_x: int, grid_y: int, canvas_width: float, canvas_height: float):
        """
        Args:
            grid_x: Number of buckets in x-direction, > 0
            grid_y: Number of buckets in y-direction, > 0
            canvas_width: Width of the canvas, > 0
            canvas_height: Height of the canvas, > 0
        """
        if grid_x < 1 or grid_y < 1:
            raise ValueError(f"Grid dimensions must be positive, got {grid_x}x{grid_y}")
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError(f"Canvas size must be positive, got {canvas_width}x{canvas_height}")
        self._grid_x = grid_x
        self._grid_y = grid_y
        self._canvas_width = float(canvas_width)
        self._canvas_height = float(canvas_height)
        self._buckets: Dict[Bucket, Set[str]] = {}
        self._item_buckets: Dict[str, List[Bucket]] = {}

    @classmethod
    def from_settings(cls, settings: AdSettings) -> ItemLocationCache:
        """Create a cache with the grid and canvas size of the given AdSettings."""
        return cls(settings.grid_x, settings.grid_y, settings.canvas_width, settings.canvas_height)

    def __len__(self) -> int:
        return len(self._item_buckets)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._item_buckets

    def build_bulk(self, items: Iterable[Item]) -> None:
        """Replace the whole content of the cache by _items_."""
        self._buckets.clear()
        self._item_buckets.clear()
        for item in items:
            self._insert(item)
        logger.debug("bucket cache rebuilt with %d items", len(self._item_buckets))

    def add_or_update(self, item: Item) -> None:
        """(Re-)register _item_ according to its current bounds."""
        self.remove(item.id)
        buckets = self._insert(item)
        logger.debug("item %s now in buckets %s", item.id, buckets)

    def remove(self, item_id: str) -> None:
        """Remove the item with _item_id_; unknown ids are ignored."""
        for bucket in self._item_buckets.pop(item_id, []):
            ids = self._buckets.get(bucket)
            if ids is None:
                continue
            ids.discard(item_id)
            if not ids:
                del self._buckets[bucket]

    def get_items_at(self, x: float, y: float) -> Set[str]:
        """Ids of all items registered in the bucket containing (x,y)."""
        return set(self._buckets.get(self.bucket_for_point(x, y), ()))

    def get_items_in_rect(self, x: float, y: float, width: float, height: float) -> Set[str]:
        """Ids of all items registered in a bucket overlapping the rectangle (x, y, width, height)."""
        result: Set[str] = set()
        for bucket in self.buckets_for_rect(x, y, width, height):
            result.update(self._buckets.get(bucket, ()))
        return result

    def get_all_buckets_with_items(self) -> Dict[Bucket, List[str]]:
        """All non-empty buckets with the (sorted) ids they hold."""
        return {bucket: sorted(ids) for bucket, ids in self._buckets.items()}

    def get_buckets_debug_string(self) -> str:
        """One line "Bucket (bx,by): [id, ...]" per non-empty bucket."""
        return "\n".join(
            f"Bucket ({bx},{by}): [{', '.join(ids)}]"
            for (bx, by), ids in sorted(self.get_all_buckets_with_items().items())
        )

    def bucket_for_point(self, x: float, y: float) -> Bucket:
        """Bucket index of (x,y), clamped to the grid."""
        return (
            self._index(x, self._canvas_width, self._grid_x),
            self._index(y, self._canvas_height, self._grid_y),
        )

    def buckets_for_rect(self, x: float, y: float, width: float, height: float) -> List[Bucket]:
        """All buckets overlapped by the rectangle (x, y, width, height)."""
        (bx0, by0) = self.bucket_for_point(x, y)
        (bx1, by1) = self.bucket_for_point(x + width, y + height)
        return [(bx, by) for bx in range(bx0, bx1 + 1) for by in range(by0, by1 + 1)]

    def buckets_for_box(self, box: AdBox) -> List[Bucket]:
        """All buckets overlapped by _box_."""
        return self.buckets_for_rect(*box.rect)

    @staticmethod
    def _index(value: float, extent: float, count: int) -> int:
        scaled = value / extent * count
        # infinite coordinates (e.g. "1e999") clamp like finite ones, NaN goes last
        if not math.isfinite(scaled):
            return 0 if scaled < 0 else count - 1
        return max(0, min(count - 1, int(scaled)))

    def _insert(self, item: Item) -> List[Bucket]:
        buckets = self.buckets_for_box(item.bounds)
        self._item_buckets[item.id] = buckets
        for bucket in buckets:
            self._buckets.setdefault(bucket, set()).add(item.id)
        return buckets
