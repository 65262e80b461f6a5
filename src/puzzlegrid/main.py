"""Entry point for the PuzzleGrid tile-clearing game.

Sets up the engine context, event bus, systems, and Arcade window.
"""
from __future__ import annotations

import argparse
import logging
import sys

import arcade

from puzzlegrid.components.palette import Palette
from puzzlegrid.config import ConfigError, GridConfig, load_config
from puzzlegrid.engine import EngineContext
from puzzlegrid.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_GAME_OVER
from puzzlegrid.rendering.arcade_presentation import ArcadePresentation
from puzzlegrid.rendering.hud_renderer import HudRenderer
from puzzlegrid.systems.input import InputSystem

logger = logging.getLogger(__name__)


class PuzzleGridWindow(arcade.Window):
    def __init__(self, config: GridConfig):
        super().__init__(800, 600, "PuzzleGrid", resizable=True)
        self.set_update_rate(1/60)
        self.background_color = arcade.color.BLACK
        self.event_bus = EventBus()
        palette = Palette.for_size(config.palette_size)
        self.presentation = ArcadePresentation(self, palette, config.width, config.height)
        self.engine = EngineContext(
            config,
            event_bus=self.event_bus,
            presentation=self.presentation,
            palette=palette,
        )
        self.input_system = InputSystem(self.event_bus, self, self.engine.world)
        self.hud_renderer = HudRenderer(self.engine.world, self)
        self.event_bus.subscribe(EVENT_GAME_OVER, self.on_game_over)
        self.engine.initialize()

    def on_resize(self, width: int, height: int):
        self.presentation.notify_resize(width, height)
        return super().on_resize(width, height)

    def on_draw(self):
        self.clear()
        self.presentation.draw()
        self.hud_renderer.render(arcade)

    def on_update(self, delta_time: float):
        self.engine.tick(delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_game_over(self, sender, **kwargs):
        logger.info("Game Over - final score %s", kwargs.get('score'))

    def on_close(self):
        self.engine.shutdown()
        super().on_close()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PuzzleGrid tile-clearing game")
    parser.add_argument("--config", help="JSON file with GridConfig values")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible board")
    parser.add_argument("--width", type=int, help="Grid width in tiles")
    parser.add_argument("--height", type=int, help="Grid height in tiles")
    parser.add_argument("--palette-size", type=int, help="Number of tile types")
    parser.add_argument("--moves", type=int, help="Move budget")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> GridConfig:
    base = load_config(args.config).to_dict() if args.config else GridConfig().to_dict()
    overrides = {
        "seed": args.seed,
        "width": args.width,
        "height": args.height,
        "palette_size": args.palette_size,
        "move_budget": args.moves,
    }
    base.update({key: value for key, value in overrides.items() if value is not None})
    return GridConfig.from_dict(base)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s:%(name)s:%(message)s",
    )
    try:
        config = config_from_args(args)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    PuzzleGridWindow(config)
    arcade.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
