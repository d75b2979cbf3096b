"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy, vf)`` to ``(result, vf)``. The result is
written to VX first and the flag to VF second, so when X is F the flag wins,
as on the COSMAC VIP.
"""

import jax
import jax.lax
import jax.numpy as jnp

from vipchip.constants import FLAG_REGISTER
from vipchip.decode import DecodedInstruction
from vipchip.instructions.system import unknown_instruction
from vipchip.state import EmulatorState


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    return jnp.astype(result & 0xFF, jnp.uint8), _flag(result > 0xFF)


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = 1 if VX > VY before the subtraction."""
    return vx - vy, _flag(vx > vy)


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out. VY is ignored."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 if VY > VX before the subtraction."""
    return vy - vx, _flag(vy > vx)


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out. VY is ignored."""
    return vx << 1, (vx & 0x80) >> 7


# N -> position in the handler list, -1 for undefined operations
_ALU_INDEX = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, -1, -1, -1, -1, -1, -1, 8, -1], dtype=jnp.int32)

_ALU_OPERATIONS = [
    alu_set, alu_or, alu_and, alu_xor, alu_add,
    alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left,
]


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    index = _ALU_INDEX[instruction.n]

    def defined(state):
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        vf = state.V[FLAG_REGISTER]
        result, flag = jax.lax.switch(index, _ALU_OPERATIONS, vx, vy, vf)
        new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
        new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))
        return state.replace(V=new_V)

    return jax.lax.cond(
        index >= 0,
        defined,
        lambda state: unknown_instruction(state, instruction),
        state
    )
