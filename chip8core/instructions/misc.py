"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState, flag_fault
from chip8core.decode import DecodedInstruction
from chip8core.constants import (
    FONT_START, GLYPH_SIZE, MAX_ADDRESS, ADDRESS_MASK, FLAG_REGISTER, NUM_REGISTERS,
    MODE_AWAITING_KEY, FAULT_MEMORY,
)


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, VF flags a result past 0xFFF."""
    new_i = jnp.astype(state.I, jnp.int32) + jnp.astype(state.V[instruction.x], jnp.int32)
    overflow_flag = jnp.astype(new_i > MAX_ADDRESS, jnp.uint8)
    return state.replace(
        I=jnp.astype(new_i & ADDRESS_MASK, jnp.uint16),
        V=state.V.at[FLAG_REGISTER].set(overflow_flag)
    )


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With a key already down the lowest id is stored right away. Otherwise the
    machine switches to MODE_AWAITING_KEY and the step loop resolves it.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(
            mode=jnp.array(MODE_AWAITING_KEY, dtype=jnp.uint8),
            wait_register=jnp.astype(instruction.x, jnp.uint8),
        )

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.int32) * GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + state.I
    new_memory = state.memory.at[indices].set(digits, mode="drop")
    state = state.replace(memory=new_memory)
    return flag_fault(state, state.I + 2 > MAX_ADDRESS, FAULT_MEMORY)


def _register_window(state: EmulatorState, instruction: DecodedInstruction):
    """Addresses I..I+15, which of them V0..VX cover, and whether VX's lands past memory."""
    addresses = state.I + jnp.arange(NUM_REGISTERS)
    in_window = jnp.arange(NUM_REGISTERS) <= instruction.x
    past_memory = state.I + instruction.x > MAX_ADDRESS
    return addresses, in_window, past_memory


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is left unchanged."""
    addresses, in_window, past_memory = _register_window(state, instruction)
    values = jnp.where(in_window, state.V, state.memory[addresses])
    state = state.replace(memory=state.memory.at[addresses].set(values, mode="drop"))
    return flag_fault(state, past_memory, FAULT_MEMORY)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is left unchanged."""
    addresses, in_window, past_memory = _register_window(state, instruction)
    state = state.replace(V=jnp.where(in_window, state.memory[addresses], state.V))
    return flag_fault(state, past_memory, FAULT_MEMORY)
