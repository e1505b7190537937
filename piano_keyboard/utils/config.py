"""
Configuration Management

Handles loading and merging configuration files.

Usage:
    from piano_keyboard.utils.config import load_config

    config = load_config('configs/default.yaml')
    layout = config.to_builder().build()
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass, field, fields, asdict

from ..keyboard.builder import KeyboardBuilder
from ..keyboard.errors import ConfigurationError
from .logging_utils import resolve_level


@dataclass
class KeyboardConfig:
    """Key range and target size."""
    left_white_key: int = 21
    right_white_key: int = 108
    standard_size: Optional[int] = None  # overrides left/right when set
    width: int = 640
    need_black_gap: bool = True


@dataclass
class DimensionsConfig:
    """Physical key measures in 10 micrometer units."""
    white_key_wide_width_10um: int = 2215
    white_key_small_width_fb_10um: int = 1283
    white_key_small_width_ga_10um: int = 1308
    black_key_width_10um: int = 1100
    black_key_height_10um: int = 8000
    white_key_height_10um: int = 12627
    white_key_wide_height_10um: int = 4500


@dataclass
class RenderConfig:
    """Raster output settings, colors are RGB."""
    background: Tuple[int, int, int] = (150, 150, 150)
    white_key: Tuple[int, int, int] = (255, 255, 255)
    black_key: Tuple[int, int, int] = (0, 0, 0)
    with_blind: bool = True
    output: str = "keyboard.png"


@dataclass
class Config:
    """Main configuration container."""
    project_name: str = "piano-keyboard-layout"
    log_level: str = "INFO"

    keyboard: KeyboardConfig = field(default_factory=KeyboardConfig)
    dimensions: DimensionsConfig = field(default_factory=DimensionsConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary."""
        config = cls()
        config_dict = config_dict or {}

        project = _section(config_dict, 'project')
        config.project_name = project.get('name', config.project_name)

        logging_section = _section(config_dict, 'logging')
        config.log_level = str(logging_section.get('level', config.log_level)).upper()
        try:
            resolve_level(config.log_level)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        keyboard = _section(config_dict, 'keyboard')
        config.keyboard = KeyboardConfig(
            left_white_key=keyboard.get('left_white_key', 21),
            right_white_key=keyboard.get('right_white_key', 108),
            standard_size=keyboard.get('standard_size'),
            width=keyboard.get('width', 640),
            need_black_gap=keyboard.get('need_black_gap', True)
        )

        dimensions = _section(config_dict, 'dimensions')
        defaults = DimensionsConfig()
        config.dimensions = DimensionsConfig(**{
            f.name: dimensions.get(f.name, getattr(defaults, f.name))
            for f in fields(DimensionsConfig)
        })

        render = _section(config_dict, 'render')
        config.render = RenderConfig(
            background=_color(render.get('background', (150, 150, 150))),
            white_key=_color(render.get('white_key', (255, 255, 255))),
            black_key=_color(render.get('black_key', (0, 0, 0))),
            with_blind=render.get('with_blind', True),
            output=render.get('output', 'keyboard.png')
        )

        return config

    def to_dict(self) -> Dict[str, Any]:
        render = asdict(self.render)
        for name in ('background', 'white_key', 'black_key'):
            render[name] = list(render[name])
        return {
            'project': {'name': self.project_name},
            'logging': {'level': self.log_level},
            'keyboard': asdict(self.keyboard),
            'dimensions': asdict(self.dimensions),
            'render': render,
        }

    def to_builder(self) -> KeyboardBuilder:
        """
        Builder configured from this config.

        Raises:
            ConfigurationError: If a setting is invalid
        """
        kb = self.keyboard
        builder = (KeyboardBuilder()
                   .set_width(kb.width)
                   .white_black_gap_present(kb.need_black_gap)
                   .set_dimensions(**asdict(self.dimensions)))
        if kb.standard_size is not None:
            builder.standard_piano(kb.standard_size)
        else:
            builder.set_most_left_right_white_keys(kb.left_white_key, kb.right_white_key)
        return builder


def _section(config_dict: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_dict.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"config section {name!r} must be a mapping")
    return section


def _color(value) -> Tuple[int, int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigurationError(f"color must be an [r, g, b] triple, got {value!r}")
    if not all(isinstance(c, int) and 0 <= c <= 255 for c in value):
        raise ConfigurationError(f"color components must be 0-255, got {value!r}")
    return tuple(value)


def read_config(config_path: str) -> Dict[str, Any]:
    """
    Read a YAML config file into a dictionary.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary, empty for an empty file

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file does not hold a mapping
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is not None and not isinstance(config_dict, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    return config_dict or {}


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Config object
    """
    return Config.from_dict(read_config(config_path))


def merge_configs(base: Dict, override: Dict) -> Dict:
    """
    Merge two config dictionaries, section by section.

    Nested mappings are merged recursively, any other override value
    (including None) replaces the base value. Neither input is modified.

    Args:
        base: Base configuration
        override: Override values

    Returns:
        Merged configuration
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def save_config(config: Config, path: str):
    """Save configuration to YAML file."""
    with open(path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False)
