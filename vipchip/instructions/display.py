"""CHIP-8 display operations."""

import jax.numpy as jnp

from vipchip.constants import ADDRESS_MASK, FLAG_REGISTER, SCREEN_HEIGHT, SCREEN_WIDTH
from vipchip.decode import DecodedInstruction
from vipchip.state import EmulatorState

# Pre-computed coordinate grids for display operations, row-major like the display
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Only set sprite bits toggle screen cells. VF is 1 when any of them
    turned a lit cell off. Sprites clip at the right and bottom edges.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    in_sprite = (xx >= sprite_x) & (xx < sprite_x + 8) & (yy >= sprite_y) & (yy < sprite_y + instruction.n)

    row_offset = jnp.clip(yy - sprite_y, 0, 15)
    col_offset = jnp.clip(xx - sprite_x, 0, 7)
    sprite_bytes = state.memory[(jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK]
    sprite = (((sprite_bytes >> (7 - col_offset)) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
