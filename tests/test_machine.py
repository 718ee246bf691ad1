"""Tests for the host-facing Machine."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest
from chip8core import (
    Machine, LoadOverflow, OutOfRangeAccess, UnknownOpcode, PROGRAM_START, DISPLAY_SIZE,
    MODE_AWAITING_KEY, FAULT_NONE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW, FAULT_MEMORY,
)
from chip8core.constants import MAX_PROGRAM_SIZE
from conftest import program


class TestScenarios:
    """End-to-end scenarios through load and step."""

    def test_set_register(self, machine):
        machine.load(bytes([0x6A, 0x05]))
        machine.step()

        assert machine.state.V[0xA] == 0x05
        assert machine.state.pc == 0x202

    def test_add_with_carry(self, machine):
        machine.load(program(0x6A05, 0x7AFF))
        machine.step()
        machine.step()

        assert machine.state.V[0xA] == 0x04
        assert machine.state.V[0xF] == 1

    def test_clear_screen(self, machine):
        machine.load(bytes([0x00, 0xE0]))
        machine.state = machine.state.replace(display=jnp.ones(DISPLAY_SIZE, dtype=jnp.bool_))
        machine.read_display()

        machine.step()

        assert machine.display_dirty()
        assert not machine.read_display().any()

    def test_font_address(self, machine):
        machine.load(program(0x6102, 0xF129))
        machine.step()
        machine.step()

        assert machine.state.I == 10

    def test_bcd(self, machine):
        machine.load(program(0x63EA, 0xA300, 0xF333))
        for _ in range(3):
            machine.step()

        assert machine.state.memory[0x300:0x303].tolist() == [2, 3, 4]

    def test_skip_over_instruction(self, machine):
        machine.load(program(0x6005, 0x3005, 0x6007, 0x6109))
        for _ in range(3):
            machine.step()

        assert machine.state.V[0] == 5
        assert machine.state.V[1] == 9
        assert machine.state.pc == 0x208


class TestDisplayPolling:
    """Test dirty flag and display reads."""

    def test_reset_marks_dirty(self, machine):
        assert machine.display_dirty()

    def test_read_display_is_idempotent(self, machine):
        machine.load(program(0xA000, 0xD005))
        machine.step()
        machine.step()

        first = machine.read_display()
        assert not machine.display_dirty()
        second = machine.read_display()

        assert first.shape == (DISPLAY_SIZE,)
        assert first.dtype == np.uint8
        np.testing.assert_array_equal(first, second)
        assert not machine.display_dirty()

    def test_non_display_step_keeps_clean(self, machine):
        machine.load(program(0x6001))
        machine.read_display()
        machine.step()
        assert not machine.display_dirty()


class TestCallStack:
    """Test nested calls through the step loop."""

    def test_sixteen_nested_calls_return(self, machine):
        # Level k at 0x300 + 4k calls level k + 1, then returns
        image = bytearray(program(0x2300))
        image += bytes(0x300 - PROGRAM_START - len(image))
        for level in range(15):
            image += program(0x2300 + 4 * (level + 1), 0x00EE)
        image += program(0x00EE)
        machine.load(bytes(image))

        for _ in range(16):
            machine.step()
        assert machine.state.stack.pointer == 16
        assert machine.state.pc == 0x33C

        for _ in range(16):
            machine.step()
        assert machine.state.stack.pointer == 0
        assert machine.state.pc == 0x202

    def test_seventeenth_call_raises(self, machine, stats):
        machine.load(program(0x2200))  # Recursive call to itself
        for _ in range(16):
            machine.step()

        with pytest.raises(OutOfRangeAccess) as excinfo:
            machine.step()

        assert excinfo.value.fault == FAULT_STACK_OVERFLOW
        assert excinfo.value.address == 0x200
        assert excinfo.value.opcode == 0x2200
        assert machine.state.stack.pointer == 16  # Faulting step discarded
        assert stats.counts["faults"] == 1

    def test_return_without_call_raises(self, machine):
        machine.load(program(0x00EE))
        with pytest.raises(OutOfRangeAccess) as excinfo:
            machine.step()
        assert excinfo.value.fault == FAULT_STACK_UNDERFLOW


class TestFaults:
    """Test halting after a fault."""

    def test_fault_halts_until_reset(self, machine):
        machine.load(program(0x1FFF))  # Jump to the last byte
        machine.step()

        with pytest.raises(OutOfRangeAccess) as excinfo:
            machine.step()
        assert excinfo.value.fault == FAULT_MEMORY
        assert machine.state.pc == 0xFFF

        with pytest.raises(OutOfRangeAccess):
            machine.step()
        assert machine.state.pc == 0xFFF

        machine.reset()
        assert machine.state.fault == FAULT_NONE
        assert machine.state.pc == PROGRAM_START

    def test_faulting_step_has_no_effect(self, machine):
        machine.load(program(0x6F07, 0xAFFE, 0xD003))
        machine.step()
        machine.step()
        before = machine.state

        with pytest.raises(OutOfRangeAccess):
            machine.step()

        assert machine.state.V[0xF] == 7
        assert machine.state.pc == before.pc
        assert jnp.array_equal(machine.state.display, before.display)


class TestUnknownOpcode:
    """Test reporting of unknown instructions."""

    def test_unknown_opcode_advances(self, machine, stats):
        machine.load(program(0xFA99, 0x6105))
        machine.step()
        assert machine.state.pc == 0x202
        machine.step()

        assert machine.state.V[1] == 5
        assert stats.counts["unknown_opcodes"] == 1
        assert stats.unknown_opcodes == [0xFA99]

    def test_strict_mode_raises(self, stats):
        machine = Machine(callbacks=[stats], strict=True)
        machine.load(program(0x0123))

        with pytest.raises(UnknownOpcode) as excinfo:
            machine.step()

        assert excinfo.value.opcode == 0x0123
        assert excinfo.value.address == 0x200
        assert machine.state.pc == 0x202


class TestTimers:
    """Test timers driven by the step count."""

    def test_timers_tick_once_per_step(self, machine):
        machine.load(program(0x6005, 0xF015, 0xF018, 0x1206))
        machine.step()
        machine.step()  # delay = 5, ticks to 4
        assert machine.state.delay_timer == 4

        machine.step()  # sound = 5, ticks to 4
        assert machine.state.delay_timer == 3
        assert machine.state.sound_timer == 4
        assert machine.sound_active()

    def test_tone_reported_once(self, machine, stats):
        machine.load(program(0x6002, 0xF018, 0x1204))
        for _ in range(6):
            machine.step()

        assert stats.counts["tones"] == 1
        assert not machine.sound_active()


class TestKeypad:
    """Test keypad events and the blocking key wait."""

    def test_key_skip(self, machine):
        machine.load(program(0x6007, 0xE09E, 0x6101, 0x6202))
        machine.key_down(7)
        for _ in range(3):
            machine.step()

        assert machine.state.V[1] == 0
        assert machine.state.V[2] == 2

    def test_key_up(self, machine):
        machine.key_down(3)
        machine.key_up(3)
        assert not machine.state.keypad.any()

    @pytest.mark.parametrize("key_id", [-1, 16])
    def test_invalid_key_id(self, machine, key_id):
        with pytest.raises(ValueError):
            machine.key_down(key_id)

    def test_wait_blocks_without_ticking(self, machine):
        machine.load(program(0x6009, 0xF015, 0xF50A, 0x6601))
        machine.step()
        machine.step()
        assert machine.state.delay_timer == 8

        for _ in range(5):
            machine.step()
        assert machine.state.mode == MODE_AWAITING_KEY
        assert machine.state.delay_timer == 8
        assert machine.state.pc == 0x206

        machine.key_down(0xC)
        machine.key_down(0xB)
        machine.step()  # Resolves the wait
        assert machine.state.V[5] == 0xB
        assert machine.state.delay_timer == 7

        machine.step()
        assert machine.state.V[6] == 1
        assert machine.state.delay_timer == 6


class TestLifecycle:
    """Test load and reset."""

    def test_load_overflow(self, machine):
        with pytest.raises(LoadOverflow):
            machine.load(bytes(MAX_PROGRAM_SIZE + 1))
        assert machine.state.memory[PROGRAM_START] == 0

    def test_reset_clears_program_state(self, machine):
        machine.load(program(0x6A05, 0xA123))
        machine.step()
        machine.step()
        machine.key_down(1)

        machine.reset()

        assert not machine.state.V.any()
        assert machine.state.I == 0
        assert machine.state.pc == PROGRAM_START
        assert not machine.state.keypad.any()
        assert machine.state.memory[PROGRAM_START] == 0

    def test_seeded_random_is_reproducible(self, stats):
        results = []
        for _ in range(2):
            machine = Machine(seed=7, callbacks=[stats])
            machine.load(program(0xC0FF, 0xC1FF))
            machine.step()
            machine.step()
            results.append((int(machine.state.V[0]), int(machine.state.V[1])))

        assert results[0] == results[1]

    def test_injected_key(self, stats):
        key = jax.random.PRNGKey(3)
        assert jnp.array_equal(Machine(rng=key, callbacks=[stats]).state.rng, key)
