"""CHIP-8 (COSMAC VIP) emulator package."""

from vipchip.state import EmulatorState, create_state
from vipchip.emulator import execute, fetch, step, run_instructions, tick_timers, framebuffer, load_rom, load_program
from vipchip.decode import DecodedInstruction, decode
from vipchip.constants import *
from vipchip.config import EmulatorConfig
from vipchip.exceptions import EmulatorError, RomLoadError, FatalFault
from vipchip.scheduler import RunState, Scheduler
from vipchip.rendering import chip8_display_to_rgb, create_color_scheme, parse_color

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "run_instructions",
    "tick_timers",
    "framebuffer",
    "load_rom",
    "load_program",
    "DecodedInstruction",
    "decode",
    "Fault",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "EmulatorConfig",
    "EmulatorError",
    "RomLoadError",
    "FatalFault",
    "RunState",
    "Scheduler",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "parse_color",
]
