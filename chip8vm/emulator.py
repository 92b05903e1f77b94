"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import decode
from chip8vm.constants import (
    PROGRAM_START, MEMORY_SIZE, MAX_PROGRAM_SIZE, NUM_KEYS, INSTRUCTION_SIZE,
    FAULT_NONE, FAULT_PC_OUT_OF_RANGE,
)
from chip8vm.errors import OutOfBounds
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction

# Handlers indexed by the top nibble of the opcode
INSTRUCTION_TABLE = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The program counter is expected to already point past the instruction;
    handlers that change control flow overwrite it.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.group, INSTRUCTION_TABLE, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance the program counter.

    A byte past the end of memory reads as zero.
    """
    pc = jnp.astype(state.pc, jnp.int32)
    high = state.memory.at[pc].get(mode="fill", fill_value=0)
    low = state.memory.at[pc + 1].get(mode="fill", fill_value=0)
    return state.replace(pc=jnp.astype(state.pc + INSTRUCTION_SIZE, jnp.uint16)), _pack_u16(high, low)


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle, recording a fault if PC is out of range."""
    return jax.lax.cond(
        state.pc >= MEMORY_SIZE,
        lambda s: s.replace(fault=jnp.astype(FAULT_PC_OUT_OF_RANGE, jnp.uint8)),
        lambda s: execute(*fetch(s)),
        state
    )


def decrement_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.astype(jnp.maximum(jnp.astype(state.delay_timer, jnp.int32) - 1, 0), jnp.uint8),
        sound_timer=jnp.astype(jnp.maximum(jnp.astype(state.sound_timer, jnp.int32) - 1, 0), jnp.uint8),
    )


def _run_instructions(state: EmulatorState, instructions_per_tick: int) -> EmulatorState:
    def cond_fn(carry):
        count, state = carry
        return (count < instructions_per_tick) & ~state.awaiting_key & (state.fault == FAULT_NONE)

    def body_fn(carry):
        count, state = carry
        return count + 1, step(state)

    state = state.replace(drawn=jnp.zeros((), dtype=jnp.bool_))
    _, state = jax.lax.while_loop(cond_fn, body_fn, (jnp.zeros((), dtype=jnp.int32), state))
    return jax.lax.cond(state.fault == FAULT_NONE, decrement_timers, lambda s: s, state)


@partial(jax.jit, static_argnums=1)
def run_tick(state: EmulatorState, instructions_per_tick: int) -> EmulatorState:
    """Execute one tick: up to ``instructions_per_tick`` instructions, then a timer update.

    The loop stops early when FX0A starts waiting for a key or an instruction
    faults. A state that is already waiting for a key is returned unchanged,
    and so is a state carrying a fault. Timers are not updated on a faulted tick.
    """
    runnable = ~state.awaiting_key & (state.fault == FAULT_NONE)
    return jax.lax.cond(
        runnable,
        lambda s: _run_instructions(s, instructions_per_tick),
        lambda s: s,
        state
    )


def set_key(state: EmulatorState, key: int, is_down: bool) -> EmulatorState:
    """Record a key event.

    While FX0A is waiting, a key press stores the key in the captured register
    and resumes execution. Key releases never resume.
    """
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"key must be in range 0-{NUM_KEYS - 1}, got {key}")

    state = state.replace(keypad=state.keypad.at[key].set(bool(is_down)))
    if is_down and bool(state.awaiting_key):
        state = state.replace(
            V=state.V.at[state.key_register].set(jnp.astype(key, jnp.uint8)),
            awaiting_key=jnp.zeros((), dtype=jnp.bool_),
        )
    return state


def load_program(state: EmulatorState, program) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200.

    Raises:
        OutOfBounds: the program does not fit between 0x200 and the end of memory
        ValueError: a value is not a byte
    """
    program = bytes(program)
    if len(program) > MAX_PROGRAM_SIZE:
        raise OutOfBounds(PROGRAM_START, len(program))
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(filename: str) -> bytes:
    """Read a ROM image from disk."""
    with open(filename, 'rb') as f:
        return f.read()
