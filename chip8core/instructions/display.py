"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8core.state import EmulatorState, flag_fault
from chip8core.decode import DecodedInstruction
from chip8core.constants import (
    SCREEN_WIDTH, DISPLAY_SIZE, SPRITE_WIDTH, MAX_ADDRESS, FLAG_REGISTER,
    FAULT_MEMORY, FAULT_DISPLAY,
)

# Pre-computed sprite grid: up to 16 rows of 8 pixels
rows = jnp.arange(16)[:, None]
cols = jnp.arange(SPRITE_WIDTH)[None, :]


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Cells are addressed as ``x + y * 64`` with no wrapping: a column past the
    right edge lands on the next row, and a set pixel past the last cell
    faults instead of being drawn.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)
    height = instruction.n

    sprite_bytes = jnp.astype(state.memory[state.I + rows], jnp.int32)
    sprite = ((sprite_bytes >> (7 - cols)) & 1).astype(jnp.bool_) & (rows < height)

    targets = (sprite_x + cols) + (sprite_y + rows) * SCREEN_WIDTH
    off_screen = jnp.any(sprite & (targets >= DISPLAY_SIZE))
    sprite_past_memory = (height > 0) & (state.I + height - 1 > MAX_ADDRESS)

    current = state.display[jnp.minimum(targets, DISPLAY_SIZE - 1)]
    collision = jnp.any(sprite & current)
    new_display = state.display.at[jnp.where(sprite, targets, DISPLAY_SIZE)].set(
        ~current, mode="drop"
    )

    state = state.replace(
        display=new_display,
        display_dirty=jnp.array(True),
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
    )
    state = flag_fault(state, sprite_past_memory, FAULT_MEMORY)
    return flag_fault(state, off_screen, FAULT_DISPLAY)
