"""
Viewport state and fractal parameter definitions.

A :class:`ViewportState` is an immutable snapshot of everything a render
needs: the visible region of the complex plane, the recurrence variant and
the coloring parameters. Interactive code replaces the snapshot between
renders instead of mutating it.
"""

import math
import numbers
from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)

DEFAULT_CENTER: Tuple[float, float] = (-0.5, 0.0)
DEFAULT_SIZE = 3.0
MIN_ITERATIONS = 100
MAX_ITERATIONS = 10000


class FractalType(Enum):
    """Variant of the quadratic recurrence."""

    STANDARD = 0
    FOLDED = 1

    def next(self) -> 'FractalType':
        members = list(FractalType)
        return members[(members.index(self) + 1) % len(members)]


class ColoringMode(Enum):
    """How an escaped orbit is turned into a palette position."""

    SMOOTH = "smooth"
    STRIPE_AVERAGE = "stripe_average"


@dataclass(frozen=True)
class ViewportState:
    """Immutable render snapshot."""

    center_x: float = DEFAULT_CENTER[0]
    center_y: float = DEFAULT_CENTER[1]
    size: float = DEFAULT_SIZE
    max_iterations: int = 128
    fractal_type: FractalType = FractalType.STANDARD
    is_julia: bool = False
    julia_x: float = -0.8
    julia_y: float = 0.156
    coloring_mode: ColoringMode = ColoringMode.STRIPE_AVERAGE
    stripe_frequency: float = 5.0
    stripe_intensity: float = 10.0
    color_density: float = 0.2
    inner_calculation: bool = False
    color_scheme: int = 0

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate parameter values."""
        for name in ('center_x', 'center_y', 'julia_x', 'julia_y', 'size'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}")
        if self.size <= 0:
            raise ValueError(f"size must be positive, got {self.size}")
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, numbers.Integral):
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        if not MIN_ITERATIONS <= self.max_iterations <= MAX_ITERATIONS:
            raise ValueError(
                f"max_iterations must be in [{MIN_ITERATIONS}, {MAX_ITERATIONS}], "
                f"got {self.max_iterations}")
        if not isinstance(self.fractal_type, FractalType):
            raise ValueError(f"fractal_type must be a FractalType, got {self.fractal_type!r}")
        if not isinstance(self.coloring_mode, ColoringMode):
            raise ValueError(f"coloring_mode must be a ColoringMode, got {self.coloring_mode!r}")

    @property
    def zoom(self) -> float:
        """Magnification relative to the default view."""
        return DEFAULT_SIZE / self.size

    @property
    def stripes(self) -> bool:
        return self.coloring_mode == ColoringMode.STRIPE_AVERAGE

    @property
    def mode_name(self) -> str:
        return "julia" if self.is_julia else "mandelbrot"

    def replace(self, **changes) -> 'ViewportState':
        """Return a new validated snapshot with the given fields changed."""
        return replace(self, **changes)

    def pixel_to_complex(self, px: float, py: float, width: int) -> Tuple[float, float]:
        """Map a pixel position to the complex plane (same scale on both axes)."""
        pixel_size = self.size / width
        half = self.size / 2
        return (self.center_x - half + px * pixel_size,
                self.center_y - half + py * pixel_size)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data['fractal_type'] = self.fractal_type.name.lower()
        data['coloring_mode'] = self.coloring_mode.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ViewportState':
        """Create a snapshot from a dictionary, accepting enum names."""
        data = dict(data)
        if 'fractal_type' in data and not isinstance(data['fractal_type'], FractalType):
            data['fractal_type'] = parse_fractal_type(data['fractal_type'])
        if 'coloring_mode' in data and not isinstance(data['coloring_mode'], ColoringMode):
            data['coloring_mode'] = parse_coloring_mode(data['coloring_mode'])
        return cls(**data)


def parse_fractal_type(value) -> FractalType:
    """Resolve a fractal type from its name or numeric value."""
    if isinstance(value, int):
        return FractalType(value)
    try:
        return FractalType[str(value).upper()]
    except KeyError:
        available = ', '.join(t.name.lower() for t in FractalType)
        raise ValueError(f"Unknown fractal type '{value}'. Available: {available}")


def parse_coloring_mode(value) -> ColoringMode:
    """Resolve a coloring mode from its value."""
    try:
        return ColoringMode(str(value).lower())
    except ValueError:
        available = ', '.join(m.value for m in ColoringMode)
        raise ValueError(f"Unknown coloring mode '{value}'. Available: {available}")


# Predefined interesting Julia set seeds
JULIA_PRESETS: Dict[str, Tuple[float, float]] = {
    'dragon': (-0.75, 0.1),
    'spiral': (-0.4, 0.6),
    'dendrite': (-0.235125, 0.827215),
    'lightning': (-0.8, 0.156),
    'rabbit': (-0.123, 0.745),
    'airplane': (-1.25, 0.0),
    'san_marco': (-0.75, 0.0),
    'siegel_disk': (-0.391, -0.587),
}
