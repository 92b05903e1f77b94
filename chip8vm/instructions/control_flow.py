"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import NUM_KEYS, FAULT_STACK_OVERFLOW
from chip8vm.stack import push, is_full
from chip8vm.instructions.system import raise_fault, execute_undefined, selector_index


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    def _call(state):
        state = state.replace(stack=push(state.stack, state.pc))
        return execute_jump(state, instruction)

    return jax.lax.cond(
        is_full(state.stack),
        lambda state: raise_fault(state, instruction, FAULT_STACK_OVERFLOW),
        _call,
        state
    )


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=jnp.astype(s.pc + 2, jnp.uint16)),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0.

    The target is not masked to 12 bits; an address past the end of memory
    fails on the next fetch.
    """
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jump_address)


def _key_pressed(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    key_index = state.V[instruction.x]
    return (key_index < NUM_KEYS) & state.keypad[key_index & 0xF]


execute_skip_if_key_pressed = make_skip_instruction(_key_pressed)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: ~_key_pressed(state, inst)
)


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    return jax.lax.switch(
        selector_index([0x9E, 0xA1], instruction.nn),
        [
            execute_skip_if_key_pressed,
            execute_skip_if_key_not_pressed,
            execute_undefined,
        ],
        state, instruction
    )
