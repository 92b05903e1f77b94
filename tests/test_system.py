"""Tests for system instructions (0xxx)."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, FAULT_NONE
from chip8vm.constants import FAULT_UNKNOWN_OPCODE, FAULT_STACK_UNDERFLOW


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))
    state = state.replace(display=state.display.at[63, 31].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.drawn


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_nested_calls_return_in_order(fresh_state):
    """Returns unwind nested calls last-in first-out."""
    state = fresh_state.replace(pc=jnp.astype(0x202, jnp.uint16))
    state = execute(state, 0x2300)
    state = state.replace(pc=jnp.astype(0x302, jnp.uint16))
    state = execute(state, 0x2400)
    assert state.stack.pointer == 2

    state = execute(state, 0x00EE)
    assert state.pc == 0x302
    state = execute(state, 0x00EE)
    assert state.pc == 0x202


def test_return_on_empty_stack_faults(fresh_state):
    """00EE with nothing on the stack records an underflow and keeps PC."""
    state = execute(fresh_state, 0x00EE)

    assert state.fault == FAULT_STACK_UNDERFLOW
    assert state.fault_opcode == 0x00EE
    assert state.pc == fresh_state.pc
    assert state.stack.pointer == 0


def test_sys_instruction_ignored(fresh_state):
    """0NNN is ignored by default."""
    state = execute(fresh_state, 0x0123)

    assert state.fault == FAULT_NONE
    assert state.pc == fresh_state.pc
    assert jnp.array_equal(state.V, fresh_state.V)


def test_sys_instruction_strict(strict_state):
    """0NNN faults in strict mode."""
    state = execute(strict_state, 0x0123)

    assert state.fault == FAULT_UNKNOWN_OPCODE
    assert state.fault_opcode == 0x0123
