"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from vipchip import create_state, load_program, run_instructions
from vipchip.logging import EmulatorLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def legacy_key_state():
    """Provide a state whose FX0A stores the pressed flag, not the key index."""
    return create_state(key_wait_stores_index=False)


@pytest.fixture
def quiet_logger():
    """Logger that prints without colors or timestamps."""
    return EmulatorLogger(use_colors=False, show_timestamps=False)


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V0=1, VF=2)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def run_program(state, program, steps):
    """Helper to load program bytes at 0x200 and run a number of steps."""
    state = load_program(state, bytes(program))
    return run_instructions(state, steps)
