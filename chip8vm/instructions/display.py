"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, ADDRESS_MASK, FLAG_REGISTER

# Sprites are at most 15 rows of 8 pixels
sprite_rows = jnp.arange(16)
sprite_cols = jnp.arange(8)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Each pixel wraps around the screen edges independently. VF is set when
    any lit pixel is turned off.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    addresses = (jnp.astype(state.I, jnp.int32) + sprite_rows) & ADDRESS_MASK
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    bits = (sprite_bytes[:, None] >> (7 - sprite_cols)[None, :]) & 1
    bits = (bits == 1) & (sprite_rows < instruction.n)[:, None]

    ys = (sprite_y + sprite_rows) % SCREEN_HEIGHT
    xs = (sprite_x + sprite_cols) % SCREEN_WIDTH
    sprite = jnp.zeros_like(state.display).at[ys[:, None], xs[None, :]].set(bits)

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
