"""Main CHIP-8 emulator execution engine."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState, flag_fault
from chip8core.decode import decode
from chip8core.errors import LoadOverflow
from chip8core.constants import (
    PROGRAM_START, MAX_PROGRAM_SIZE, MAX_ADDRESS, MODE_RUNNING, FAULT_NONE, FAULT_MEMORY,
)
from chip8core.instructions.system import execute_clear_screen, execute_return, execute_unknown
from chip8core.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8core.instructions.alu import (
    execute_add_immediate, execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor,
    execute_alu_add, execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx,
    execute_alu_shift_left
)
from chip8core.instructions.memory import execute_set, execute_set_index, execute_random
from chip8core.instructions.display import execute_display
from chip8core.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

# Indexed by decode.Op
HANDLERS = [
    execute_clear_screen,
    execute_return,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add_immediate,
    execute_alu_set,
    execute_alu_or,
    execute_alu_and,
    execute_alu_xor,
    execute_alu_add,
    execute_alu_sub_xy,
    execute_alu_shift_right,
    execute_alu_sub_yx,
    execute_alu_shift_left,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_skip_if_not_key,
    execute_get_delay_timer,
    execute_wait_for_key,
    execute_set_delay_timer,
    execute_set_sound_timer,
    execute_add_to_index,
    execute_font_character,
    execute_bcd_conversion,
    execute_store_registers,
    execute_load_registers,
    execute_unknown,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Assumes ``state.pc`` already points past the instruction, as left by fetch.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.op, HANDLERS, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance the program counter."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])
    state = flag_fault(state, state.pc + 1 > MAX_ADDRESS, FAULT_MEMORY)
    return state.replace(pc=state.pc + 2, opcode=instruction), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, raising the tone flag as sound passes 1."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
        tone=state.sound_timer == 1,
    )


def _commit(before: EmulatorState, after: EmulatorState) -> EmulatorState:
    """Keep a step's effects unless it faulted, in which case only latch the fault."""
    return jax.lax.cond(
        after.fault == FAULT_NONE,
        lambda b, a: a,
        lambda b, a: b.replace(fault=a.fault, opcode=a.opcode),
        before, after
    )


def _run_cycle(state: EmulatorState) -> EmulatorState:
    fetched, instruction = fetch(state)
    executed = execute(fetched, instruction)
    executed = jax.lax.cond(executed.mode == MODE_RUNNING, tick_timers, lambda s: s, executed)
    return _commit(state, executed)


def _poll_keypad(state: EmulatorState) -> EmulatorState:
    def resolve(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        state = state.replace(
            V=state.V.at[state.wait_register].set(pressed_key),
            mode=jnp.array(MODE_RUNNING, dtype=jnp.uint8),
        )
        return tick_timers(state)

    return jax.lax.cond(jnp.any(state.keypad), resolve, lambda s: s, state)


@jax.jit
def step(state: EmulatorState) -> EmulatorState:
    """Run one instruction cycle.

    A halted (faulted) machine is returned as is. While awaiting a key the
    step only polls the keypad; timers do not tick until the wait resolves.
    """
    state = state.replace(unknown_opcode=jnp.array(False), tone=jnp.array(False))

    def advance(state):
        return jax.lax.cond(state.mode == MODE_RUNNING, _run_cycle, _poll_keypad, state)

    return jax.lax.cond(state.fault == FAULT_NONE, advance, lambda s: s, state)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy a program image into CHIP-8 memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise LoadOverflow(len(program), MAX_PROGRAM_SIZE)
    program_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(program_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
