"""
Configuration loading for the fractal explorer.

Settings come from three layers, later ones winning: built-in defaults, a
JSON configuration file and ``FRACTAL_EXPLORER_*`` environment variables.
"""

from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
import json
import logging
import os

from ..core.viewport import JULIA_PRESETS, ViewportState
from ..rendering.palettes import Palette, PaletteRegistry

logger = logging.getLogger(__name__)

ENV_PREFIX = "FRACTAL_EXPLORER_"


class ConfigError(ValueError):
    """Raised for malformed configuration files or values."""


@dataclass
class RenderConfig:
    """Configuration for rendering and interaction."""

    # Image parameters
    width: int = 800
    height: int = 800

    # Interactive rendering
    preview_block_size: int = 12
    render_delay: float = 0.1
    auto_iterations: bool = True

    # Export
    screenshot_scale: int = 3
    output_dir: str = "."
    jpeg_quality: int = 95
    save_metadata: bool = True

    # Performance
    num_threads: Optional[int] = None

    def validate(self):
        """Validate configuration parameters."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigError("Width and height must be positive")

        if self.preview_block_size < 1:
            raise ConfigError("preview_block_size must be >= 1")

        if self.render_delay < 0:
            raise ConfigError("render_delay must be >= 0")

        if self.screenshot_scale < 1:
            raise ConfigError("screenshot_scale must be >= 1")

        if self.num_threads is not None and self.num_threads < 1:
            raise ConfigError("num_threads must be >= 1")

        if not 1 <= self.jpeg_quality <= 100:
            raise ConfigError("jpeg_quality must be between 1 and 100")


@dataclass
class ExplorerConfig:
    """Complete configuration: render settings, initial view and palettes."""

    render: RenderConfig = field(default_factory=RenderConfig)
    viewport: ViewportState = field(default_factory=ViewportState)
    palette_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'render': asdict(self.render),
            'viewport': self.viewport.to_dict(),
            'palette_files': list(self.palette_files),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ExplorerConfig':
        unknown = set(data) - {'render', 'viewport', 'palette_files', 'julia_preset'}
        if unknown:
            raise ConfigError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        try:
            render = RenderConfig(**data.get('render', {}))
            viewport_data = dict(data.get('viewport', {}))
            preset = data.get('julia_preset')
            if preset is not None:
                if preset not in JULIA_PRESETS:
                    available = ', '.join(JULIA_PRESETS)
                    raise ConfigError(f"Unknown Julia preset '{preset}'. Available: {available}")
                viewport_data['julia_x'], viewport_data['julia_y'] = JULIA_PRESETS[preset]
            viewport = ViewportState.from_dict(viewport_data)
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
        except ConfigError:
            raise
        except ValueError as e:
            raise ConfigError(str(e)) from e

        render.validate()
        return cls(render=render, viewport=viewport,
                   palette_files=list(data.get('palette_files', [])))

    def build_palettes(self) -> PaletteRegistry:
        """Built-in palettes followed by any configured GPL palette files."""
        registry = PaletteRegistry.default()
        if not self.palette_files:
            return registry
        return registry.extended(Palette.load_from_file(Path(p)) for p in self.palette_files)


class EnvironmentConfig:
    """Reads ``FRACTAL_EXPLORER_*`` overrides for render settings."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def overrides(self) -> Dict[str, Any]:
        result = {}
        for f in fields(RenderConfig):
            raw = self.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            result[f.name] = self._convert(f.name, raw)
        return result

    def _convert(self, name: str, raw: str) -> Any:
        default = getattr(RenderConfig(), name)
        try:
            if isinstance(default, bool):
                if raw.lower() in ('1', 'true', 'yes', 'on'):
                    return True
                if raw.lower() in ('0', 'false', 'no', 'off'):
                    return False
                raise ValueError(raw)
            if isinstance(default, int) or name == 'num_threads':
                return int(raw)
            if isinstance(default, float):
                return float(raw)
        except ValueError:
            raise ConfigError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}")
        return raw

    def apply(self, config: ExplorerConfig) -> ExplorerConfig:
        for key, value in self.overrides().items():
            logger.debug(f"Environment override: {key}={value!r}")
            setattr(config.render, key, value)
        config.render.validate()
        return config


class ConfigManager:
    """Loads and saves JSON configuration files."""

    @staticmethod
    def load(path: Union[str, Path]) -> ExplorerConfig:
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object")
        logger.info(f"Loaded configuration from {path}")
        return ExplorerConfig.from_dict(data)

    @staticmethod
    def save(config: ExplorerConfig, path: Union[str, Path]) -> None:
        path = Path(path)
        path.write_text(json.dumps(config.to_dict(), indent=2))
        logger.info(f"Saved configuration to {path}")


def load_config(path: Optional[Union[str, Path]] = None,
                environ: Optional[Mapping[str, str]] = None) -> ExplorerConfig:
    """Defaults, then the optional file, then environment overrides."""
    config = ConfigManager.load(path) if path else ExplorerConfig()
    return EnvironmentConfig(environ).apply(config)
