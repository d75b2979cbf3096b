"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp

from vipchip.constants import ADDRESS_MASK, FONT_GLYPH_SIZE, FONT_START, NUM_REGISTERS
from vipchip.decode import DecodedInstruction
from vipchip.instructions.system import unknown_instruction
from vipchip.state import EmulatorState


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def resolve_key_wait(state: EmulatorState) -> EmulatorState:
    """Complete a pending FX0A if any key is down.

    Keys are scanned from 0x0 upwards and the lowest pressed one wins. On
    success the wait ends and PC moves past the FX0A instruction; otherwise
    the state is returned unchanged.
    """
    def key_pressed_action(state):
        if state.key_wait_stores_index:
            value = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        else:
            value = jnp.ones((), dtype=jnp.uint8)
        return state.replace(
            V=state.V.at[state.key_register].set(value),
            awaiting_key=jnp.zeros((), dtype=jnp.bool_),
            pc=state.pc + 2,
        )

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, lambda state: state, state)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Enters the awaiting-key sub-state with PC held on this instruction.
    The step loop polls the keypad instead of fetching until a key is seen.
    """
    state = state.replace(
        pc=state.pc - 2,
        awaiting_key=jnp.ones((), dtype=jnp.bool_),
        key_register=jnp.astype(instruction.x, jnp.uint8),
    )
    return resolve_key_wait(state)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I. Wraps at 16 bits, VF is untouched."""
    return state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(3)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def _register_window(state: EmulatorState, instruction: DecodedInstruction):
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    addresses = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    return register_mask, addresses


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is unchanged."""
    register_mask, addresses = _register_window(state, instruction)
    new_values = jnp.where(register_mask, state.V, state.memory[addresses])
    return state.replace(memory=state.memory.at[addresses].set(new_values))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is unchanged."""
    register_mask, addresses = _register_window(state, instruction)
    new_V = jnp.where(register_mask, state.memory[addresses], state.V)
    return state.replace(V=new_V)


_MISC_OPERATIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}

# NN -> position in the handler list; everything else maps to the unknown handler
_MISC_INDEX = jnp.full(256, len(_MISC_OPERATIONS), dtype=jnp.int32).at[
    jnp.array(list(_MISC_OPERATIONS.keys()))
].set(jnp.arange(len(_MISC_OPERATIONS), dtype=jnp.int32))


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on NN."""
    return jax.lax.switch(
        _MISC_INDEX[instruction.nn],
        [*_MISC_OPERATIONS.values(), unknown_instruction],
        state, instruction
    )
