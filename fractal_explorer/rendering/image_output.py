"""
Image export for rendered fractal buffers.

Rendered RGBA buffers are written with Pillow. PNG output embeds the render
parameters as a JSON text chunk so a saved view can be restored later;
JPEG output writes them to a companion ``.json`` file instead.
"""

import numpy as np
from typing import Dict, Any, Optional, Tuple
from pathlib import Path
from dataclasses import dataclass, asdict
import json
import logging
from datetime import datetime

from PIL import Image, PngImagePlugin

from ..core.pixel_buffer import PixelBuffer
from ..core.viewport import ViewportState

logger = logging.getLogger(__name__)

SOFTWARE_VERSION = "1.0.0"


@dataclass
class RenderMetadata:
    """Metadata stored alongside exported renders."""

    viewport: Dict[str, Any]
    resolution: Tuple[int, int]  # width, height
    palette_name: str
    render_time_seconds: float
    scale: int = 1
    timestamp: str = ""
    software_version: str = SOFTWARE_VERSION

    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        data = dict(data)
        data['resolution'] = tuple(data['resolution'])
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def to_viewport(self) -> ViewportState:
        """Restore the rendered view."""
        return ViewportState.from_dict(self.viewport)


def screenshot_filename(viewport: ViewportState, timestamp: Optional[int] = None,
                        resolution: Optional[Tuple[int, int]] = None) -> str:
    """
    File name derived from mode, position, zoom and time.

    Args:
        viewport: Rendered view
        timestamp: Seconds since the epoch (now when omitted)
        resolution: Width and height, added for high-resolution exports

    Returns:
        Name such as ``fractal_mandelbrot_-0.500000_0.000000_zoom_1.00_1700000000.png``
    """
    if timestamp is None:
        timestamp = int(datetime.now().timestamp())

    name = (f"fractal_{viewport.mode_name}_"
            f"{viewport.center_x:.6f}_{viewport.center_y:.6f}"
            f"_zoom_{viewport.zoom:.2f}")
    if resolution is not None:
        name += f"_hires_{resolution[0]}x{resolution[1]}"
    return f"{name}_{timestamp}.png"


class ImageExporter:
    """Writes pixel buffers to image files with metadata."""

    def __init__(self):
        """Initialize image exporter."""
        self.supported_formats = {
            '.png': self._save_png,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
        }

    def to_image(self, buffer: PixelBuffer) -> Image.Image:
        """Pillow image of the color channels (alpha is always opaque)."""
        return Image.fromarray(np.ascontiguousarray(buffer.rgb()))

    def save_image(self, buffer: PixelBuffer, filepath: Path,
                   metadata: Optional[RenderMetadata] = None,
                   quality: int = 95) -> Path:
        """
        Save a rendered buffer to file.

        Args:
            buffer: Rendered pixels
            filepath: Output file path
            metadata: Render metadata to embed
            quality: JPEG quality (1-100)

        Returns:
            The written path
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in self.supported_formats:
            supported = ', '.join(self.supported_formats.keys())
            raise ValueError(f"Unsupported format '{suffix}'. Supported: {supported}")

        filepath.parent.mkdir(parents=True, exist_ok=True)
        pil_image = self.to_image(buffer)
        self.supported_formats[suffix](pil_image, filepath, metadata, quality)

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")
        return filepath

    def _save_png(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as PNG with metadata."""
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            mode = 'Julia' if metadata.viewport.get('is_julia') else 'Mandelbrot'
            pnginfo.add_text("Title", f"Fractal: {mode}")
            pnginfo.add_text("Software", f"FractalExplorer v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text("FractalMetadata", metadata.to_json())

        pil_image.save(filepath, "PNG", pnginfo=pnginfo)

    def _save_jpeg(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as JPEG with a companion JSON metadata file."""
        pil_image.save(filepath, "JPEG", quality=quality, optimize=True)

        if metadata:
            json_path = filepath.with_suffix('.json')
            with open(json_path, 'w') as f:
                f.write(metadata.to_json())
            logger.info(f"Saved metadata: {json_path}")

    def extract_metadata_from_image(self, filepath: Path) -> Optional[RenderMetadata]:
        """
        Extract render metadata from a saved image.

        Args:
            filepath: Path to image file

        Returns:
            Extracted metadata or None
        """
        filepath = Path(filepath)

        if filepath.suffix.lower() in ('.jpg', '.jpeg'):
            json_path = filepath.with_suffix('.json')
            if json_path.exists():
                return RenderMetadata.from_json(json_path.read_text())
            return None

        with Image.open(filepath) as img:
            text = getattr(img, 'text', {})
            if 'FractalMetadata' in text:
                return RenderMetadata.from_json(text['FractalMetadata'])

        return None
