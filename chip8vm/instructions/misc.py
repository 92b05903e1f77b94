"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, FONT_HEIGHT, MEMORY_SIZE, NUM_REGISTERS, FAULT_OUT_OF_BOUNDS
from chip8vm.instructions.system import raise_fault, execute_undefined, selector_index


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Pause until a key is pressed, then store it in VX.

    Execution resumes from the key event, see ``chip8vm.emulator.set_key``.
    """
    return state.replace(
        awaiting_key=jnp.ones((), dtype=jnp.bool_),
        key_register=jnp.astype(instruction.x, jnp.uint8),
    )


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register. I is not clamped to the address space and VF is not affected."""
    new_i = state.I + jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_HEIGHT
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    # Vectorized BCD conversion
    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + jnp.astype(state.I, jnp.int32)
    new_memory = state.memory.at[indices].set(digits, mode="drop")
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I. I is left unchanged."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
    current_memory_values = state.memory.at[base_indices].get(mode="fill", fill_value=0)
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = state.memory.at[base_indices].set(new_memory_values, mode="drop")
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I. I is left unchanged."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
    memory_values = state.memory.at[base_indices].get(mode="fill", fill_value=0)
    new_V = jnp.where(register_mask, memory_values, state.V)
    return state.replace(V=new_V)


def bounded(handler, access_size):
    """Wrap an I-relative handler so accesses past the end of memory fault."""
    def bounded_handler(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        out_of_bounds = jnp.astype(state.I, jnp.int32) + access_size(instruction) > MEMORY_SIZE
        return jax.lax.cond(
            out_of_bounds,
            lambda state, instruction: raise_fault(state, instruction, FAULT_OUT_OF_BOUNDS),
            handler,
            state, instruction
        )
    bounded_handler.__doc__ = handler.__doc__
    return bounded_handler


MISC_SELECTORS = [0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65]


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    return jax.lax.switch(
        selector_index(MISC_SELECTORS, instruction.nn),
        [
            execute_get_delay_timer,
            execute_wait_for_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            bounded(execute_bcd_conversion, lambda inst: 3),
            bounded(execute_store_registers, lambda inst: inst.x + 1),
            bounded(execute_load_registers, lambda inst: inst.x + 1),
            execute_undefined,
        ],
        state, instruction
    )
