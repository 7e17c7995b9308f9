"""Editor settings which steer hit-testing, smoothing and the bucket cache."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from ade.common import (
    ARC_SEGMENTS,
    BASE_STEP,
    CURVE_SAMPLES,
    HIT_THRESHOLD,
    MAX_STEP,
    MIN_POINT_DISTANCE,
    RDP_EPSILON,
    SmoothingType,
)


@dataclass
class AdSettings:
    """
    Settings of the geometry engine.

    Attributes:
        smoothing_strategy: Strategy used when re-fitting freehand strokes
        extreme_auto_smoothing: Collapse almost straight strokes to a single line
        base_step: Smallest step of the adaptive quadratic smoothing
        max_step: Largest step of the adaptive quadratic smoothing
        rdp_epsilon: Tolerance of the Ramer-Douglas-Peucker simplification
        min_distance: Minimum point distance of the linear-reduced strategy
        hit_threshold: Distance below which a point counts as hitting a path
        curve_samples: Pieces per Bezier curve when flattening
        arc_segments: Pieces per elliptical arc when flattening
        grid_x, grid_y: Number of buckets of the item location cache
        canvas_width, canvas_height: Canvas size covered by the buckets
    """

    smoothing_strategy: SmoothingType = SmoothingType.QUADRATIC_BEZIER
    extreme_auto_smoothing: bool = False
    base_step: int = BASE_STEP
    max_step: int = MAX_STEP
    rdp_epsilon: float = RDP_EPSILON
    min_distance: float = MIN_POINT_DISTANCE
    hit_threshold: float = HIT_THRESHOLD
    curve_samples: int = CURVE_SAMPLES
    arc_segments: int = ARC_SEGMENTS
    grid_x: int = 10
    grid_y: int = 10
    canvas_width: float = 1920.0
    canvas_height: float = 1080.0

    def __post_init__(self):
        if isinstance(self.smoothing_strategy, str):
            self.smoothing_strategy = AdSettings.parse_strategy(self.smoothing_strategy)
        self.validate()

    @staticmethod
    def parse_strategy(name: str) -> SmoothingType:
        """
        Resolve a strategy name like "CatmullRom", "catmull_rom" or "CATMULL_ROM".

        Raises:
            ValueError: If _name_ names no strategy.
        """
        key = name.replace("-", "").replace("_", "").upper()
        for strategy in SmoothingType:
            if strategy.name.replace("_", "") == key:
                return strategy
        raise ValueError(f"Unknown smoothing strategy: {name!r}")

    def validate(self) -> None:
        """Check all values for consistency; raises ValueError on the first violation."""
        if self.base_step < 1:
            raise ValueError(f"base_step must be >= 1, got {self.base_step}")
        if self.max_step < self.base_step:
            raise ValueError(f"max_step ({self.max_step}) must be >= base_step ({self.base_step})")
        if self.rdp_epsilon < 0 or self.min_distance < 0 or self.hit_threshold < 0:
            raise ValueError("rdp_epsilon, min_distance and hit_threshold must not be negative")
        if self.curve_samples < 1 or self.arc_segments < 1:
            raise ValueError(
                f"curve_samples and arc_segments must be >= 1, got {self.curve_samples}, {self.arc_segments}"
            )
        if self.grid_x < 1 or self.grid_y < 1:
            raise ValueError(f"Grid dimensions must be positive, got {self.grid_x}x{self.grid_y}")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.canvas_width}x{self.canvas_height}")

    def to_dict(self) -> dict:
        """Convert the settings to a JSON compatible dictionary."""
        data = asdict(self)
        data["smoothing_strategy"] = self.smoothing_strategy.name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> AdSettings:
        """
        Create AdSettings from a dictionary; missing keys keep their defaults.

        Raises:
            ValueError: If a key is unknown or a value is invalid.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return cls(**data)

    def save(self, path: str) -> None:
        """Write the settings as JSON to _path_."""
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> AdSettings:
        """
        Load settings from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file is invalid.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} does not contain an object")
        return cls.from_dict(data)
