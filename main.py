"""
pygame frontend for the vipchip CHIP-8 emulator
"""

import argparse
import sys

import jax
import numpy as np
import pygame

from vipchip import (
    EmulatorConfig, EmulatorError, RunState, Scheduler, chip8_display_to_rgb, create_color_scheme,
    create_state, load_rom, parse_color,
)
from vipchip.logging import get_logger, set_log_level
from vipchip.rendering import COLOR_SCHEMES

# COSMAC VIP hex keypad on the left of a QWERTY keyboard
# 123C   1234
# 456D   qwer
# 789E   asdf
# A0BF   zxcv
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class PygameFrontend:
    """Window, keyboard and blitting for one session."""

    def __init__(self, config: EmulatorConfig):
        self.config = config
        pygame.init()
        self.screen = pygame.display.set_mode((64 * config.scale, 32 * config.scale))
        pygame.display.set_caption("vipchip")

    def poll_input(self, scheduler: Scheduler):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                scheduler.set_run_state(RunState.QUIT)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    scheduler.toggle_pause()
                elif event.key in KEY_MAP:
                    scheduler.set_key(KEY_MAP[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    scheduler.set_key(KEY_MAP[event.key], False)

    def present(self, cells: np.ndarray):
        frame = chip8_display_to_rgb(cells, self.config.scale, self.config.fg_color, self.config.bg_color)
        # surfarray is indexed (x, y)
        pygame.surfarray.blit_array(self.screen, frame.transpose(1, 0, 2))
        pygame.display.flip()

    def close(self):
        pygame.quit()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CHIP-8 emulator (COSMAC VIP dialect)")
    parser.add_argument("rom", help="Path to CHIP-8 ROM")
    parser.add_argument("--scale", type=int, default=20,
                        help="Window pixels per CHIP-8 pixel (default: 20)")
    parser.add_argument("--clock-rate", type=int, default=700,
                        help="Instructions per second (default: 700)")
    parser.add_argument("--scheme", default="classic", choices=list(COLOR_SCHEMES),
                        help="Named color scheme (default: classic, white on black)")
    parser.add_argument("--bg", type=parse_color, default=None,
                        help="Background color as 0xRRGGBB[AA], overrides the scheme")
    parser.add_argument("--fg", type=parse_color, default=None,
                        help="Foreground color as 0xRRGGBB[AA], overrides the scheme")
    parser.add_argument("--legacy-key-wait", action="store_true",
                        help="FX0A stores 1 instead of the key index, like the original interpreter")
    parser.add_argument("--seed", type=int, default=0, help="Seed for CXNN")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser.parse_args(argv)


def resolve_colors(args: argparse.Namespace):
    """Foreground and background from the scheme, with --fg/--bg taking precedence."""
    fg_color, bg_color = create_color_scheme(args.scheme)
    if args.fg is not None:
        fg_color = args.fg
    if args.bg is not None:
        bg_color = args.bg
    return fg_color, bg_color


def run_emulator(rom_filename: str, config: EmulatorConfig) -> int:
    """Run one session; returns the process exit status."""
    logger = get_logger()
    try:
        config = config.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    logger.log_session_start({"rom": rom_filename, **config.as_dict()})

    state = create_state(jax.random.PRNGKey(config.seed), config.key_wait_stores_index)
    try:
        state = load_rom(state, rom_filename)
    except EmulatorError as e:
        logger.error(f"Could not start emulator: {e}")
        return 1

    frontend = PygameFrontend(config)
    scheduler = Scheduler(
        state,
        config.clock_rate,
        poll_input=frontend.poll_input,
        present=frontend.present,
    )
    try:
        scheduler.run()
    except EmulatorError:
        return 1
    finally:
        logger.log_session_end(scheduler.ticks, scheduler.instructions)
        frontend.close()
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    set_log_level(args.log_level)
    fg_color, bg_color = resolve_colors(args)
    config = EmulatorConfig(
        clock_rate=args.clock_rate,
        scale=args.scale,
        fg_color=fg_color,
        bg_color=bg_color,
        key_wait_stores_index=not args.legacy_key_wait,
        seed=args.seed,
    )
    return run_emulator(args.rom, config)


if __name__ == "__main__":
    sys.exit(main())
