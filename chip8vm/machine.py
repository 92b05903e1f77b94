"""Stateful CHIP-8 machine driven by an external loop.

``Machine`` wraps the immutable ``EmulatorState`` pytree: each call swaps in
the next state, and faults recorded by compiled code are raised as
``Chip8Error`` exceptions. A typical driver::

    machine = Machine(MachineConfig(instructions_per_tick=10))
    machine.load(load_rom("pong.ch8"))
    while True:
        for key, is_down in poll_input():
            machine.set_key(key, is_down)
        machine.tick()
        if machine.drawn:
            redraw(machine.framebuffer)
"""

from typing import Optional

import jax
import jax.numpy as jnp
import numpy as np

from chip8vm.config import MachineConfig
from chip8vm.constants import PROGRAM_START, FAULT_NONE
from chip8vm.emulator import run_tick, set_key, load_program
from chip8vm.errors import Chip8Error, raise_for_fault
from chip8vm.logging import MachineLogger
from chip8vm.state import EmulatorState, RunState, create_state


class Machine:
    """CHIP-8 CPU with reset/load/set_key/tick entry points."""

    def __init__(self, config: MachineConfig = MachineConfig(), logger: Optional[MachineLogger] = None):
        self.config = config.validate()
        self.logger = logger or MachineLogger(log_level=config.log_level)
        self._rng = jax.random.PRNGKey(config.seed)
        self.state: EmulatorState = None
        self.reset()

    def reset(self):
        """Reinitialize every register, memory (font kept), the screen and the run state."""
        self._rng, rng = jax.random.split(self._rng)
        self.state = create_state(rng, font=self.config.font, strict=self.config.strict)
        self.logger.log_reset(self.config.instructions_per_tick, self.config.strict)

    def load(self, program):
        """Copy a program image to 0x200. Other state is left as is.

        Raises:
            OutOfBounds: the program is longer than 0xE00 bytes; memory is not modified
        """
        program = bytes(program)
        self.state = load_program(self.state, program)
        self.logger.log_load(len(program), PROGRAM_START)

    def set_key(self, index: int, is_down: bool):
        """Record a key event, resuming a pending FX0A on key press."""
        was_waiting = self.run_state is RunState.AWAITING_KEY
        register = self.key_register
        self.state = set_key(self.state, index, is_down)
        if was_waiting and self.run_state is RunState.RUNNING:
            self.logger.log_key_resume(index, register)

    def tick(self):
        """Run one tick of the CPU.

        Does nothing while waiting for a key. Raises the fault of the first
        failing instruction; partial progress within the tick is kept and every
        later tick raises the same error until ``reset``.
        """
        if self.run_state is RunState.AWAITING_KEY:
            return

        already_faulted = int(self.state.fault) != FAULT_NONE
        self.state = run_tick(self.state, self.config.instructions_per_tick)
        try:
            raise_for_fault(self.state)
        except Chip8Error as e:
            if not already_faulted:
                self.logger.log_fault(e, self.pc)
            raise

        if self.run_state is RunState.AWAITING_KEY:
            self.logger.log_key_wait(self.key_register, self.pc)

    @property
    def run_state(self) -> RunState:
        return self.state.run_state

    @property
    def key_register(self) -> Optional[int]:
        """Register FX0A stores the next key press into, None when running."""
        if self.run_state is RunState.AWAITING_KEY:
            return int(self.state.key_register)
        return None

    @property
    def V(self) -> np.ndarray:
        return np.asarray(self.state.V)

    @property
    def I(self) -> int:
        return int(self.state.I)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @pc.setter
    def pc(self, address: int):
        self.state = self.state.replace(pc=jnp.astype(address, jnp.uint16))

    @property
    def sp(self) -> int:
        return int(self.state.stack.pointer)

    @property
    def stack(self) -> np.ndarray:
        return np.asarray(self.state.stack.data)

    @property
    def memory(self) -> np.ndarray:
        return np.asarray(self.state.memory)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def sound_active(self) -> bool:
        """Whether a tone should be playing."""
        return self.sound_timer > 0

    @property
    def keypad(self) -> np.ndarray:
        return np.asarray(self.state.keypad)

    @property
    def display(self) -> np.ndarray:
        """Screen as a (64, 32) boolean array indexed [x, y]."""
        return np.asarray(self.state.display)

    @property
    def framebuffer(self) -> np.ndarray:
        """Screen as a flat uint8 array of 0/1 pixels indexed ``x + y * 64``."""
        return self.display.T.reshape(-1).astype(np.uint8)

    @property
    def drawn(self) -> bool:
        """Whether the last tick changed the screen."""
        return bool(self.state.drawn)
