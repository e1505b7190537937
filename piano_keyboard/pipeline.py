"""
Keyboard Rendering Pipeline

Main entry point: configuration -> layout -> PNG image.

Usage:
    python -m piano_keyboard.pipeline --config configs/default.yaml
    python -m piano_keyboard.pipeline --a88 --width 800 --output keyboard.png
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .keyboard.errors import KeyboardError
from .keyboard.layout import KeyboardLayout
from .render.raster import KeyboardRenderer
from .utils.config import read_config, merge_configs, Config
from .utils.logging_utils import setup_logging, get_logger

logger = get_logger(__name__)


class KeyboardPipeline:
    """
    Builds a keyboard layout from a configuration and renders it.

    Stages:
    1. Configuration - Validate key range, width and measures
    2. Layout - Solve widths and assemble rectangles
    3. Rendering - Rasterize and write the image
    """

    def __init__(self, config: Config):
        """
        Args:
            config: Configuration object
        """
        self.config = config
        self.renderer = KeyboardRenderer.from_config(config.render)

    def build_layout(self) -> KeyboardLayout:
        layout = self.config.to_builder().build()
        logger.info(f"Dimension: {layout.height}*{layout.width}")
        if layout.is_perfect():
            logger.info("This is a perfect keyboard")
        else:
            logger.info("This is not a perfect keyboard")
        return layout

    def run(self, output: Optional[str] = None) -> Path:
        """
        Build and render the configured keyboard.

        Args:
            output: Image path, defaults to the configured render output

        Returns:
            Path of the written image
        """
        layout = self.build_layout()
        return self.renderer.save(layout, output or self.config.render.output)


def argument_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Configuration sections set on the command line, for merge_configs."""
    keyboard: Dict[str, Any] = {}
    if args.width is not None:
        keyboard['width'] = args.width
    if args.left is not None:
        keyboard['left_white_key'] = args.left
        keyboard['standard_size'] = None
    if args.right is not None:
        keyboard['right_white_key'] = args.right
        keyboard['standard_size'] = None
    if args.keys is not None:
        keyboard['standard_size'] = args.keys
    if args.rd64:
        keyboard['standard_size'] = 64
    if args.a88:
        keyboard['standard_size'] = 88
    if args.no_gaps:
        keyboard['need_black_gap'] = False

    overrides: Dict[str, Any] = {}
    if keyboard:
        overrides['keyboard'] = keyboard
    if args.output is not None:
        overrides['render'] = {'output': args.output}
    if args.verbose:
        overrides['logging'] = {'level': 'DEBUG'}
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Render a pixel exact piano keyboard"
    )
    parser.add_argument("--config", type=str, help="Configuration file")
    parser.add_argument("-w", "--width", type=int, help="Set width of keyboard")
    parser.add_argument("-l", "--left-white-key", dest="left", type=int,
                        help="Select left white key")
    parser.add_argument("-r", "--right-white-key", dest="right", type=int,
                        help="Select right white key")
    parser.add_argument("--keys", type=int, help="Select a standard piano by number of keys")
    parser.add_argument("--a88", action="store_true",
                        help="Select 88 key Piano like Roland A88")
    parser.add_argument("--rd64", action="store_true",
                        help="Select 64 key Piano like Roland RD-64")
    parser.add_argument("-n", "--no-gaps", action="store_true",
                        help="No gaps between black and white keys")
    parser.add_argument("-o", "--output", type=str, help="Output image file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO,
                  format_string='%(levelname)s: %(message)s')

    try:
        config_dict = read_config(args.config) if args.config else {}
        config = Config.from_dict(merge_configs(config_dict, argument_overrides(args)))
        setup_logging(config.log_level, format_string='%(levelname)s: %(message)s')
        KeyboardPipeline(config).run()
    except (KeyboardError, FileNotFoundError, yaml.YAMLError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
