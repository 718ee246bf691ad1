"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8core import create_state, Machine
from chip8core.logging import StatsCallback


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def fetched_state():
    """Provide a fresh state as left by fetching the instruction at 0x200."""
    state = create_state()
    return state.replace(pc=state.pc + 2)


@pytest.fixture
def stats():
    """Provide an event-counting callback."""
    return StatsCallback()


@pytest.fixture
def machine(stats):
    """Provide a machine reporting only to the stats callback."""
    return Machine(callbacks=[stats])


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=0x10, VF=1)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def program(*instructions):
    """Assemble 16-bit instruction words into a big-endian program image."""
    return b"".join(instruction.to_bytes(2, "big") for instruction in instructions)
