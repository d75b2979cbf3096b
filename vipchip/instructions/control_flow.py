"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp

from vipchip.constants import Fault
from vipchip.decode import DecodedInstruction
from vipchip.stack import is_full, push
from vipchip.state import EmulatorState, signal_fault


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    def overflow(state):
        return signal_fault(state, Fault.STACK_OVERFLOW, state.pc - 2)

    def do_call(state):
        state = state.replace(stack=push(state.stack, state.pc))
        return execute_jump(state, instruction)

    return jax.lax.cond(is_full(state.stack), overflow, do_call, state)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0.

    The sum is not masked: NNN + V0 can land past 0xFFF, which the next
    step reports as ``PC_OUT_OF_BOUNDS``.
    """
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jump_address)


def _key_pressed(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    return state.keypad[state.V[instruction.x] & 0xF]


execute_skip_if_key = make_skip_instruction(
    lambda state, inst: _key_pressed(state, inst)
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~_key_pressed(state, inst)
)
