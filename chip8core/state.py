"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode

from chip8core.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, DISPLAY_SIZE, STACK_SIZE,
    NUM_REGISTERS, NUM_KEYS, MODE_RUNNING, FAULT_NONE,
)


class StackState(PyTreeNode):
    """Return-address stack for subroutine calls."""
    data: jnp.ndarray
    pointer: jnp.ndarray


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Every field is a JAX array so the whole aggregate can flow through
    ``jax.jit`` and ``jax.lax`` control flow. Instruction handlers never mutate
    it; they return a new state via ``replace``.

    Attributes:
        rng: PRNG key consumed by CXNN
        memory: 4 KiB of byte-addressable memory
        pc: Program counter
        display: Row-major 64x32 framebuffer, one bool per cell
        display_dirty: Set by any display mutation, cleared by the host read
        stack: Return-address stack
        delay_timer: Delay countdown, ticks once per executed step
        sound_timer: Sound countdown, ticks once per executed step
        keypad: Pressed state of keys 0x0-0xF
        V: General purpose registers, VF doubles as the flag register
        I: Index register
        mode: MODE_RUNNING or MODE_AWAITING_KEY
        wait_register: Destination register of a pending FX0A
        fault: Latched fault code, FAULT_NONE while healthy
        opcode: Last fetched instruction word
        unknown_opcode: The last step decoded an unknown instruction
        tone: The last step ticked the sound timer through 1
    """
    rng: jax.Array
    memory: jnp.ndarray
    pc: jnp.ndarray
    display: jnp.ndarray
    display_dirty: jnp.ndarray
    stack: StackState
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    keypad: jnp.ndarray
    V: jnp.ndarray
    I: jnp.ndarray
    mode: jnp.ndarray
    wait_register: jnp.ndarray
    fault: jnp.ndarray
    opcode: jnp.ndarray
    unknown_opcode: jnp.ndarray
    tone: jnp.ndarray


def create_state(rng: jax.Array = None) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(
        jnp.array(FONT_DATA, dtype=jnp.uint8)
    )
    return EmulatorState(
        rng=rng,
        memory=memory,
        pc=jnp.array(PROGRAM_START, dtype=jnp.uint16),
        display=jnp.zeros(DISPLAY_SIZE, dtype=jnp.bool_),
        display_dirty=jnp.array(True),
        stack=StackState(
            data=jnp.zeros(STACK_SIZE, dtype=jnp.uint16),
            pointer=jnp.zeros((), dtype=jnp.uint8),
        ),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        keypad=jnp.zeros(NUM_KEYS, dtype=jnp.bool_),
        V=jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8),
        I=jnp.zeros((), dtype=jnp.uint16),
        mode=jnp.array(MODE_RUNNING, dtype=jnp.uint8),
        wait_register=jnp.zeros((), dtype=jnp.uint8),
        fault=jnp.array(FAULT_NONE, dtype=jnp.uint8),
        opcode=jnp.zeros((), dtype=jnp.uint16),
        unknown_opcode=jnp.array(False),
        tone=jnp.array(False),
    )


def flag_fault(state: EmulatorState, condition, fault: int) -> EmulatorState:
    """Latch ``fault`` if ``condition`` holds and no earlier fault is pending."""
    latch = condition & (state.fault == FAULT_NONE)
    return state.replace(fault=jnp.where(latch, jnp.uint8(fault), state.fault))
