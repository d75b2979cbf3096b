"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp

from vipchip.constants import Fault
from vipchip.decode import DecodedInstruction
from vipchip.logging import report_unknown_opcode
from vipchip.stack import is_empty, pop
from vipchip.state import EmulatorState, signal_fault


def unknown_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unrecognized opcode within a known family: log and continue."""
    jax.debug.callback(report_unknown_opcode, instruction.opcode, state.pc - 2)
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def underflow(state):
        return signal_fault(state, Fault.STACK_UNDERFLOW, state.pc - 2)

    def do_return(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(is_empty(state.stack), underflow, do_return, state)


def execute_machine_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine, treated as a jump to NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions on NNN."""
    index = jnp.where(instruction.nnn == 0x0E0, 0, jnp.where(instruction.nnn == 0x0EE, 1, 2))
    return jax.lax.switch(
        index,
        [execute_clear_screen, execute_return, execute_machine_call],
        state, instruction
    )
