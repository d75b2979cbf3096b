"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np

from vipchip.constants import ADDRESS_MASK, MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START, Fault
from vipchip.decode import DecodedInstruction, decode
from vipchip.exceptions import RomLoadError
from vipchip.instructions.alu import execute_alu_operation
from vipchip.instructions.control_flow import (
    execute_call, execute_jump, execute_jump_with_offset, execute_skip_if_equal_immediate,
    execute_skip_if_equal_register, execute_skip_if_key, execute_skip_if_not_equal_immediate,
    execute_skip_if_not_equal_register, execute_skip_if_not_key,
)
from vipchip.instructions.display import execute_display
from vipchip.instructions.memory import execute_add, execute_random, execute_set, execute_set_index
from vipchip.instructions.misc import execute_misc_instruction, resolve_key_wait
from vipchip.instructions.system import execute_system_instruction, unknown_instruction
from vipchip.state import EmulatorState, signal_fault


def _require_n_zero(handler):
    """5XY0 only exists with a zero last nibble."""
    def guarded(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return jax.lax.cond(instruction.n == 0, handler, unknown_instruction, state, instruction)
    return guarded


def execute_key_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch EX9E/EXA1 on NN."""
    index = jnp.where(instruction.nn == 0x9E, 0, jnp.where(instruction.nn == 0xA1, 1, 2))
    return jax.lax.switch(
        index,
        [execute_skip_if_key, execute_skip_if_not_key, unknown_instruction],
        state, instruction
    )


_FAMILY_HANDLERS = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    _require_n_zero(execute_skip_if_equal_register),
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_key_instruction,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    PC is expected to already point past the instruction (see ``fetch``).
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.family, _FAMILY_HANDLERS, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC."""
    pc = jnp.astype(state.pc, jnp.int32)
    instruction = _pack_u16(state.memory[pc & ADDRESS_MASK], state.memory[(pc + 1) & ADDRESS_MASK])
    return state.replace(pc=state.pc + 2), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Advance the machine by one instruction slot.

    A faulted machine stays frozen. While FX0A is pending the slot polls the
    keypad instead of fetching. A PC outside memory faults before any fetch.
    """
    def halted(state):
        return state

    def out_of_bounds(state):
        return signal_fault(state, Fault.PC_OUT_OF_BOUNDS, state.pc)

    def running(state):
        state, instruction = fetch(state)
        return execute(state, instruction)

    index = jnp.where(
        state.fault != int(Fault.NONE), 0,
        jnp.where(state.awaiting_key, 1, jnp.where(state.pc >= MEMORY_SIZE, 2, 3))
    )
    return jax.lax.switch(index, [halted, resolve_key_wait, out_of_bounds, running], state)


def _scan_step(state, _):
    return step(state), None


@partial(jax.jit, static_argnums=1)
def run_instructions(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` instruction slots in one compiled scan."""
    state, _ = jax.lax.scan(_scan_step, state, length=n)
    return state


@jax.jit
def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers once, flooring at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def framebuffer(state: EmulatorState) -> np.ndarray:
    """Return the display as 2048 row-major booleans, detached from the state."""
    return np.array(state.display, dtype=np.bool_).reshape(-1)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy program bytes into CHIP-8 memory starting at 0x200."""
    program = bytes(program)
    if not program:
        raise RomLoadError("program is empty")
    if len(program) > MAX_PROGRAM_SIZE:
        raise RomLoadError(
            f"program is {len(program)} bytes, at most {MAX_PROGRAM_SIZE} fit above 0x{PROGRAM_START:03X}"
        )
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise RomLoadError(f"could not read ROM '{filename}': {e}") from e
    return load_program(state, rom_data)
