"""CHIP-8 machine constants (COSMAC VIP layout)."""

import enum

import jax.numpy as jnp

MEMORY_SIZE = 0x1000
ADDRESS_MASK = 0x0FFF
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

FONT_START = 0x000
FONT_GLYPH_SIZE = 5

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

NUM_REGISTERS = 16
NUM_KEYS = 16
FLAG_REGISTER = 0xF

# 12 levels of nesting, COSMAC VIP manual p.36
STACK_SIZE = 12

TIMER_FREQUENCY = 60
DEFAULT_CLOCK_RATE = 700

FONT_DATA = jnp.array([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
], dtype=jnp.uint8)


class Fault(enum.IntEnum):
    """Fatal conditions recorded in ``EmulatorState.fault``."""
    NONE = 0
    STACK_OVERFLOW = 1
    STACK_UNDERFLOW = 2
    PC_OUT_OF_BOUNDS = 3

    @property
    def description(self) -> str:
        return self.name.lower().replace("_", " ")
