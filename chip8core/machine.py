"""Host-facing CHIP-8 machine.

``Machine`` wraps the functional core (an ``EmulatorState`` threaded through
jitted pure functions) behind the small imperative surface a front end needs:
reset, load, step, keypad events and display polling.

The machine is not synchronized. A host that steps from one thread and
delivers key events or reads the display from another must serialize those
calls itself.
"""

from typing import List, Optional

import jax
import jax.numpy as jnp
import numpy as np

from chip8core.constants import NUM_KEYS, FAULT_NONE
from chip8core.emulator import step, load_program
from chip8core.errors import OutOfRangeAccess, UnknownOpcode
from chip8core.logging import MachineCallback, ConsoleCallback
from chip8core.state import EmulatorState, create_state


class Machine:
    """A single CHIP-8 machine instance driven one instruction at a time."""

    def __init__(
        self,
        rng: Optional[jax.Array] = None,
        seed: int = 0,
        callbacks: Optional[List[MachineCallback]] = None,
        strict: bool = False,
    ):
        """Create a machine in its reset state.

        Args:
            rng: PRNG key for CXNN. Takes precedence over ``seed``
            seed: Seed used to build the PRNG key when ``rng`` is None
            callbacks: Event callbacks, defaults to console logging
            strict: Raise UnknownOpcode from step instead of only reporting it
        """
        self.rng = rng if rng is not None else jax.random.PRNGKey(seed)
        self.callbacks = callbacks if callbacks is not None else [ConsoleCallback()]
        self.strict = strict
        self._state = create_state(self.rng)

    @property
    def state(self) -> EmulatorState:
        return self._state

    @state.setter
    def state(self, state: EmulatorState):
        self._state = state

    def reset(self):
        """Reinitialize memory, registers, stack, display, timers and keypad."""
        self._state = create_state(self.rng)
        for callback in self.callbacks:
            callback.on_reset()

    def load(self, program: bytes):
        """Copy a program image to 0x200. Raises LoadOverflow if it does not fit."""
        self._state = load_program(self._state, program)
        for callback in self.callbacks:
            callback.on_load(len(program))

    def step(self):
        """Execute exactly one instruction cycle.

        Raises:
            OutOfRangeAccess: The step faulted, or the machine was already
                halted by an earlier fault and has not been reset.
            UnknownOpcode: Only in strict mode, after stepping past the word.
        """
        if int(self._state.fault) != FAULT_NONE:
            raise self._fault_error()

        address = int(self._state.pc)
        self._state = step(self._state)
        for callback in self.callbacks:
            callback.on_step(self._state)

        if int(self._state.fault) != FAULT_NONE:
            error = self._fault_error()
            for callback in self.callbacks:
                callback.on_fault(error)
            raise error

        if bool(self._state.tone):
            for callback in self.callbacks:
                callback.on_tone()

        if bool(self._state.unknown_opcode):
            error = UnknownOpcode(int(self._state.opcode), address)
            for callback in self.callbacks:
                callback.on_unknown_opcode(error)
            if self.strict:
                raise error

    def _fault_error(self) -> OutOfRangeAccess:
        return OutOfRangeAccess(
            int(self._state.fault), int(self._state.pc), int(self._state.opcode)
        )

    def display_dirty(self) -> bool:
        """True if the display changed since the last read_display call."""
        return bool(self._state.display_dirty)

    def read_display(self) -> np.ndarray:
        """Return the 2048 display cells (row-major 64x32) and clear the dirty flag."""
        cells = np.asarray(self._state.display, dtype=np.uint8)
        self._state = self._state.replace(display_dirty=jnp.array(False))
        return cells

    def sound_active(self) -> bool:
        """True while the sound timer is running."""
        return int(self._state.sound_timer) > 0

    def key_down(self, key_id: int):
        """Mark key ``key_id`` (0x0-0xF) as pressed."""
        self._set_key(key_id, True)

    def key_up(self, key_id: int):
        """Mark key ``key_id`` (0x0-0xF) as released."""
        self._set_key(key_id, False)

    def _set_key(self, key_id: int, pressed: bool):
        if not 0 <= key_id < NUM_KEYS:
            raise ValueError(f"Key id must be in 0..{NUM_KEYS - 1}, got {key_id}")
        self._state = self._state.replace(keypad=self._state.keypad.at[key_id].set(pressed))
