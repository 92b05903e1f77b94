"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FAULT_UNKNOWN_OPCODE, FAULT_STACK_UNDERFLOW
from chip8vm.stack import pop, is_empty


def selector_index(selectors, value) -> jnp.ndarray:
    """Position of value in selectors, or len(selectors) when absent."""
    matches = jnp.asarray(selectors) == value
    return jnp.where(jnp.any(matches), jnp.argmax(matches), len(selectors))


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def raise_fault(state: EmulatorState, instruction: DecodedInstruction, code: int) -> EmulatorState:
    """Record a fault for the current instruction, leaving the rest of the state untouched."""
    return state.replace(
        fault=jnp.astype(code, jnp.uint8),
        fault_opcode=jnp.astype(instruction.word, jnp.uint16),
    )


def execute_undefined(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Opcode without a handler: ignored, or a fault in strict mode."""
    if state.strict:
        return raise_fault(state, instruction, FAULT_UNKNOWN_OPCODE)
    return no_op(state, instruction)


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(
        display=jnp.zeros_like(state.display),
        drawn=jnp.ones((), dtype=jnp.bool_),
    )


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def _return(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(
        is_empty(state.stack),
        lambda state: raise_fault(state, instruction, FAULT_STACK_UNDERFLOW),
        _return,
        state
    )


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions. 0NNN (SYS addr) is undefined."""
    return jax.lax.cond(
        0x00E0 == instruction.word,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.word,
            execute_return,
            execute_undefined,
            state, instruction
        ),
        state, instruction
    )
