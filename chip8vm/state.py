"""CHIP-8 emulator state structures."""

import enum

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, FAULT_NONE,
)


class RunState(enum.Enum):
    """Execution state of the CPU."""
    RUNNING = "running"
    AWAITING_KEY = "awaiting_key"


@dataclass
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The run state is stored as ``awaiting_key`` plus ``key_register`` so the
    whole structure stays a pytree; ``run_state`` gives the enum view.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = field(default_factory=lambda: StackState())
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    awaiting_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    drawn: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    fault: jnp.ndarray = field(default_factory=lambda: jnp.astype(FAULT_NONE, jnp.uint8))
    fault_opcode: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    strict: bool = field(pytree_node=False, default=False)

    @property
    def run_state(self) -> RunState:
        return RunState.AWAITING_KEY if bool(self.awaiting_key) else RunState.RUNNING


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    font: tuple = FONT_DATA,
    strict: bool = False,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, strict=strict)
    font_array = jnp.array(font, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(font)].set(font_array))
