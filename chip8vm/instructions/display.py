"""CHIP-8 display operations."""

import jax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, MAX_SPRITE_HEIGHT, MEMORY_SIZE, FAULT_OUT_OF_BOUNDS,
)
from chip8vm.instructions.system import raise_fault

# Pre-computed sprite offsets for display operations
rows = jnp.arange(MAX_SPRITE_HEIGHT)
cols = jnp.arange(SPRITE_WIDTH)


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean (SCREEN_WIDTH, SCREEN_HEIGHT) mask of the pixels the sprite toggles.

    Coordinates wrap around both screen edges.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    sprite_bytes = state.memory.at[jnp.astype(state.I, jnp.int32) + rows].get(mode="fill", fill_value=0)
    bits = (jnp.astype(sprite_bytes, jnp.int32)[:, None] >> (SPRITE_WIDTH - 1 - cols)[None, :]) & 1
    bits = jnp.astype(bits, jnp.bool_) & (rows < instruction.n)[:, None]

    xs = (sprite_x + cols) % SCREEN_WIDTH
    ys = (sprite_y + rows) % SCREEN_HEIGHT
    return jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_).at[xs[None, :], ys[:, None]].set(bits)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = 1 on collision."""
    def _draw(state):
        sprite = sprite_mask(state, instruction)
        collision = jnp.any(state.display & sprite)
        return state.replace(
            display=jnp.astype(state.display ^ sprite, jnp.bool_),
            V=state.V.at[15].set(jnp.astype(collision, jnp.uint8)),
            drawn=jnp.ones((), dtype=jnp.bool_),
        )

    out_of_bounds = jnp.astype(state.I, jnp.int32) + instruction.n > MEMORY_SIZE
    return jax.lax.cond(
        out_of_bounds,
        lambda state: raise_fault(state, instruction, FAULT_OUT_OF_BOUNDS),
        _draw,
        state
    )
