"""
Color palettes and the palette registry.

Palettes are ordered color ramps stored as 8-bit RGB. The registry is built
once at startup and then only read; renders resolve the active palette with
``color_scheme mod len(registry)``.
"""

import numpy as np
from typing import Iterable, Iterator, List, Sequence, Tuple, Union
from dataclasses import dataclass
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorRGB:
    """8-bit RGB color."""
    r: int
    g: int
    b: int

    def __post_init__(self):
        """Validate RGB values."""
        for component in (self.r, self.g, self.b):
            if not 0 <= component <= 255:
                raise ValueError("RGB components must be between 0 and 255")

    def to_tuple(self) -> Tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)


ColorLike = Union[ColorRGB, Tuple[int, int, int]]


class Palette:
    """Fixed-length ordered color ramp."""

    def __init__(self, colors: Sequence[ColorLike], name: str = "Custom"):
        """
        Initialize color palette.

        Args:
            colors: Colors of the ramp, in order
            name: Human-readable name for the palette
        """
        self.name = name
        parsed: List[ColorRGB] = []

        for color in colors:
            if isinstance(color, ColorRGB):
                parsed.append(color)
            elif isinstance(color, (tuple, list)) and len(color) == 3:
                parsed.append(ColorRGB(*(int(c) for c in color)))
            else:
                raise ValueError(f"Invalid color format: {color}")

        if len(parsed) < 2:
            raise ValueError("Palette must contain at least 2 colors")

        self.colors: Tuple[ColorRGB, ...] = tuple(parsed)
        self._array = np.array([c.to_tuple() for c in self.colors], dtype=np.uint8)
        self._array.setflags(write=False)

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> ColorRGB:
        return self.colors[index]

    def __repr__(self):
        return f"Palette({self.name!r}, {len(self)} colors)"

    def as_array(self) -> np.ndarray:
        """Read-only uint8 array of shape (n, 3) for the render kernels."""
        return self._array

    @classmethod
    def from_matplotlib(cls, cmap_name: str, n_samples: int = 16) -> 'Palette':
        """Create palette by sampling a matplotlib colormap."""
        from matplotlib import colormaps

        cmap = colormaps[cmap_name]
        colors = []
        for t in np.linspace(0, 1, n_samples):
            rgba = cmap(t)
            colors.append(tuple(int(round(c * 255)) for c in rgba[:3]))

        return cls(colors, name=cmap_name.capitalize())

    def save_to_file(self, filepath: Path) -> None:
        """Save palette to file in GPL format."""
        with open(filepath, 'w') as f:
            f.write("GIMP Palette\n")
            f.write(f"Name: {self.name}\n")
            f.write("#\n")

            for i, color in enumerate(self.colors):
                r, g, b = color.to_tuple()
                f.write(f"{r:3d} {g:3d} {b:3d} Color_{i}\n")

    @classmethod
    def load_from_file(cls, filepath: Path) -> 'Palette':
        """Load palette from GPL file."""
        colors = []
        name = Path(filepath).stem

        with open(filepath, 'r') as f:
            for line in f:
                line = line.strip()
                if line.startswith("Name:"):
                    name = line.split(":", 1)[1].strip()
                elif line and not line.startswith("#") and not line.startswith("GIMP"):
                    parts = line.split()
                    if len(parts) >= 3:
                        try:
                            colors.append((int(parts[0]), int(parts[1]), int(parts[2])))
                        except ValueError:
                            logger.debug(f"Skipping palette line {line!r}")

        if not colors:
            raise ValueError(f"No valid colors found in {filepath}")

        return cls(colors, name)


class PaletteRegistry:
    """Ordered, read-only set of palettes indexed cyclically."""

    def __init__(self, palettes: Iterable[Palette]):
        self._palettes: Tuple[Palette, ...] = tuple(palettes)
        if not self._palettes:
            raise ValueError("Palette registry needs at least one palette")

    def __len__(self) -> int:
        return len(self._palettes)

    def __iter__(self) -> Iterator[Palette]:
        return iter(self._palettes)

    def get(self, index: int) -> Palette:
        """Palette for a color scheme index, wrapping around."""
        return self._palettes[index % len(self._palettes)]

    def names(self) -> List[str]:
        return [p.name for p in self._palettes]

    def extended(self, palettes: Iterable[Palette]) -> 'PaletteRegistry':
        """New registry with extra palettes appended."""
        extra = tuple(palettes)
        for palette in extra:
            logger.info(f"Added color palette: {palette.name}")
        return PaletteRegistry(self._palettes + extra)

    @classmethod
    def default(cls) -> 'PaletteRegistry':
        return cls(BUILTIN_PALETTES)


BUILTIN_PALETTES: Tuple[Palette, ...] = (
    Palette([
        (66, 30, 15), (25, 7, 26), (9, 1, 47),
        (4, 4, 73), (0, 7, 100), (12, 44, 138),
        (24, 82, 177), (57, 125, 209), (134, 181, 229),
        (211, 236, 248), (241, 233, 191), (248, 201, 95),
        (255, 170, 0), (204, 128, 0), (153, 87, 0),
    ], name="Classic"),
    Palette([
        (0, 0, 0), (20, 0, 0), (40, 0, 0),
        (80, 0, 0), (120, 20, 0), (160, 40, 0),
        (200, 80, 0), (240, 120, 0), (255, 160, 0),
        (255, 200, 0), (255, 240, 40), (255, 255, 100),
        (255, 255, 170), (255, 255, 220), (255, 255, 255),
    ], name="Fire"),
    Palette([
        (0, 0, 0), (32, 32, 32), (64, 64, 64),
        (96, 96, 96), (128, 128, 128), (160, 160, 160),
        (192, 192, 192), (224, 224, 224), (255, 255, 255),
    ], name="Grayscale"),
    Palette([
        (3, 13, 30), (6, 26, 48), (9, 38, 67),
        (17, 55, 92), (25, 71, 116), (33, 88, 140),
        (41, 105, 165), (50, 138, 193), (64, 174, 224),
        (110, 197, 233), (158, 218, 241), (198, 236, 248),
        (214, 249, 255), (225, 252, 255), (240, 255, 255),
    ], name="Ocean"),
    Palette([
        (15, 20, 40), (20, 30, 65), (30, 40, 90),
        (40, 60, 120), (65, 90, 150), (95, 130, 180),
        (135, 175, 205), (175, 205, 225), (200, 225, 240),
        (220, 235, 245), (230, 243, 250), (240, 250, 253),
        (245, 253, 255), (250, 255, 255), (255, 255, 255),
    ], name="Arctic"),
)
