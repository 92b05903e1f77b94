"""CHIP-8 ALU operations (8xxx).

Every operation maps ``(vx, vy, vf)`` to the new ``(vx, vf)``. Logic
operations pass ``vf`` through untouched.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.instructions.system import execute_undefined


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    not_borrow = jnp.astype(vx > vy, jnp.uint8)
    return jnp.astype(vx - vy, jnp.uint8), not_borrow


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit. VY is ignored."""
    return jnp.astype(vx >> 1, jnp.uint8), jnp.astype(vx & 1, jnp.uint8)


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    not_borrow = jnp.astype(vy > vx, jnp.uint8)
    return jnp.astype(vy - vx, jnp.uint8), not_borrow


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit. VY is ignored."""
    shifted_bit = jnp.astype((vx & 0x80) >> 7, jnp.uint8)
    return jnp.astype((jnp.astype(vx, jnp.int32) << 1) & 0xFF, jnp.uint8), shifted_bit


# 8XY0-8XY7 map to themselves, 8XYE to the last slot
ALU_OPERATIONS = [alu_set, alu_or, alu_and, alu_xor, alu_add,
                  alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left]
VALID_OPERATIONS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    def _execute(state, instruction):
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        result, vf = jax.lax.switch(
            jnp.where(instruction.n == 0xE, 8, instruction.n),
            ALU_OPERATIONS,
            vx, vy, state.V[15]
        )
        # VF first so that an 8FYN result overwrites the flag
        new_V = state.V.at[15].set(vf)
        new_V = new_V.at[instruction.x].set(result)
        return state.replace(V=new_V)

    return jax.lax.cond(
        VALID_OPERATIONS[instruction.n],
        _execute,
        execute_undefined,
        state, instruction
    )
