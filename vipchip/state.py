"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from vipchip.constants import (
    FONT_DATA, FONT_START, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS, PROGRAM_START,
    SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE, Fault,
)


class StackState(PyTreeNode):
    """Return-address stack for subroutine calls."""
    data: jnp.ndarray
    pointer: jnp.ndarray


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Every instruction consumes a state and returns an updated copy, so a
    session is just the sequence of values the scheduler threads through.

    Attributes:
        rng: PRNG key consumed by CXNN
        memory: 4KB of main memory, font at 0x000, program at 0x200
        pc: Program counter
        display: Row-major framebuffer, indexed ``display[y, x]``
        stack: Return-address stack (12 slots)
        delay_timer: 60Hz delay timer
        sound_timer: 60Hz sound timer
        keypad: Key-down state of keys 0x0-0xF
        V: General registers V0-VF
        I: Index register
        awaiting_key: True while FX0A is waiting for a key press
        key_register: Destination register of the pending FX0A
        fault: ``Fault`` code, non-zero once a fatal condition was hit
        fault_pc: Address of the instruction that raised ``fault``
        key_wait_stores_index: FX0A stores the key index (True) or the
            legacy pressed flag (False)
    """
    rng: jax.Array
    memory: jnp.ndarray
    pc: jnp.ndarray
    display: jnp.ndarray
    stack: StackState
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    keypad: jnp.ndarray
    V: jnp.ndarray
    I: jnp.ndarray
    awaiting_key: jnp.ndarray
    key_register: jnp.ndarray
    fault: jnp.ndarray
    fault_pc: jnp.ndarray
    key_wait_stores_index: bool = field(pytree_node=False, default=True)

    @property
    def halted(self) -> bool:
        """Whether a fatal fault has been recorded."""
        return int(self.fault) != Fault.NONE

    @property
    def sound_active(self) -> bool:
        """Whether the buzzer should currently sound."""
        return int(self.sound_timer) > 0


def create_stack() -> StackState:
    """Create an empty return-address stack."""
    return StackState(
        data=jnp.zeros(STACK_SIZE, dtype=jnp.uint16),
        pointer=jnp.zeros((), dtype=jnp.int32),
    )


def create_state(
    rng: jax.Array = None,
    key_wait_stores_index: bool = True,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA)
    return EmulatorState(
        rng=rng,
        memory=memory,
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        display=jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_),
        stack=create_stack(),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        keypad=jnp.zeros(NUM_KEYS, dtype=jnp.bool_),
        V=jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8),
        I=jnp.zeros((), dtype=jnp.uint16),
        awaiting_key=jnp.zeros((), dtype=jnp.bool_),
        key_register=jnp.zeros((), dtype=jnp.uint8),
        fault=jnp.asarray(int(Fault.NONE), dtype=jnp.uint8),
        fault_pc=jnp.zeros((), dtype=jnp.uint16),
        key_wait_stores_index=key_wait_stores_index,
    )


def signal_fault(state: EmulatorState, fault: Fault, address) -> EmulatorState:
    """Record a fatal condition; the scheduler decides what to do with it."""
    return state.replace(
        fault=jnp.asarray(int(fault), dtype=jnp.uint8),
        fault_pc=jnp.astype(address, jnp.uint16),
    )
