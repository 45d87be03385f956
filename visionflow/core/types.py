"""
Data model shared by the detector, matcher, clusterer and tracker.
"""

from dataclasses import dataclass, field


@dataclass
class FeaturePoint:
    """A tracked corner-like feature at integer pixel coordinates."""
    id: int
    x: int
    y: int
    vx: int = 0
    vy: int = 0
    score: int = 0
    age: int = 0

    @property
    def speed(self) -> float:
        """L1 displacement over the last frame."""
        return abs(self.vx) + abs(self.vy)

    def to_dict(self) -> dict[str, int]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "vx": self.vx,
            "vy": self.vy,
            "score": self.score,
            "age": self.age,
        }


@dataclass
class RawBlob:
    """Bounding region of one group of co-moving features."""
    x: int
    y: int
    w: int
    h: int
    area: int
    point_count: int

    @property
    def center(self) -> tuple[float, float]:
        """Centre of the padded bounding box."""
        return (self.x + self.w / 2, self.y + self.h / 2)

    def to_point(self, scale_x: float = 1.0, scale_y: float = 1.0) -> "BlobPoint":
        """Convert to a tracker input, scaled to display coordinates."""
        cx, cy = self.center
        return BlobPoint(
            x=cx * scale_x,
            y=cy * scale_y,
            width=self.w * scale_x,
            height=self.h * scale_y,
        )


@dataclass
class BlobPoint:
    """Blob centre handed to the trajectory tracker."""
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0


@dataclass
class TrajectoryPoint:
    x: float
    y: float
    timestamp: float


@dataclass
class Trajectory:
    """
    A persistent identity linking blob positions across frames.

    Attributes:
        id: Monotonic trajectory id, never reused
        points: Position history, oldest first
        active: False once the trajectory misses a frame
        color: Display colour from the fixed palette
        inactive_frames: Number of updates since the trajectory went inactive
    """
    id: int
    points: list[TrajectoryPoint] = field(default_factory=list)
    active: bool = True
    color: str = ""
    inactive_frames: int = 0

    @property
    def last_point(self) -> TrajectoryPoint:
        return self.points[-1]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "points": [
                {"x": p.x, "y": p.y, "timestamp": p.timestamp}
                for p in self.points
            ],
            "active": self.active,
            "color": self.color,
        }


@dataclass
class EngineStats:
    """Counters from one call to the feature engine."""
    frame: int
    tracked: int = 0
    lost: int = 0
    added: int = 0
    total: int = 0
    blobs: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "frame": self.frame,
            "tracked": self.tracked,
            "lost": self.lost,
            "added": self.added,
            "total": self.total,
            "blobs": self.blobs,
        }


@dataclass
class FrameResult:
    """
    Output of one engine call.

    Behaves like the ``{blobs, features}`` mapping callers expect, so both
    ``result.blobs`` and ``result["blobs"]`` work, and ``blobs, features =
    result`` unpacks.
    """
    blobs: list[RawBlob]
    features: list[FeaturePoint]
    stats: EngineStats

    def __getitem__(self, key: str):
        if key not in ("blobs", "features", "stats"):
            raise KeyError(key)
        return getattr(self, key)

    def __iter__(self):
        yield self.blobs
        yield self.features
