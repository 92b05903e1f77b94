"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
import jax.numpy as jnp
from chip8vm import execute, FONT_START, FAULT_NONE
from chip8vm.constants import FAULT_OUT_OF_BOUNDS, FAULT_UNKNOWN_OPCODE
from chip8vm.state import RunState


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value, digits", [(156, (1, 5, 6)), (0, (0, 0, 0)), (255, (2, 5, 5)), (7, (0, 0, 7))])
    def test_bcd(self, fresh_state, value, digits):
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA300)
        state = execute(state, 0xF033)

        assert tuple(int(d) for d in state.memory[0x300:0x303]) == digits
        assert state.I == 0x300

    def test_bcd_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0x6063)
        state = execute(state, 0xAFFE)
        state = execute(state, 0xF033)

        assert state.fault == FAULT_OUT_OF_BOUNDS
        assert state.memory[0xFFE] == 0


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """Glyphs are five bytes apart from the start of memory."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            expected = FONT_START + digit * 5
            assert state.I == expected, f"Font address wrong for digit {digit:X}"

    def test_font_address_not_wrapped(self, fresh_state):
        """VX above 0xF still multiplies by five."""
        state = execute(fresh_state, 0x60FF)
        state = execute(state, 0xF029)
        assert state.I == 0xFF * 5


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load(self, fresh_state):
        """I does not change on store or load."""
        state = fresh_state

        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0x6304)  # V3 = 4, not stored
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xF255)  # Store V0-V2
        assert state.I == 0x300
        assert [int(b) for b in state.memory[0x300:0x304]] == [1, 2, 3, 0]

        state = state.replace(V=jnp.zeros_like(state.V))

        state = execute(state, 0xF265)  # Load V0-V2
        assert [int(v) for v in state.V[:4]] == [1, 2, 3, 0]
        assert state.I == 0x300

    def test_store_all_registers(self, fresh_state):
        state = fresh_state.replace(V=jnp.arange(16, dtype=jnp.uint8) + 0x10)
        state = execute(state, 0xA400)

        state = execute(state, 0xFF55)

        assert [int(b) for b in state.memory[0x400:0x410]] == list(range(0x10, 0x20))

    def test_store_past_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0xAFFE)

        state = execute(state, 0xF255)  # needs 0xFFE-0x1000

        assert state.fault == FAULT_OUT_OF_BOUNDS
        assert state.fault_opcode == 0xF255

    def test_load_up_to_last_byte(self, fresh_state):
        state = fresh_state.replace(memory=fresh_state.memory.at[0xFFF].set(0x99))
        state = execute(state, 0xAFFF)

        state = execute(state, 0xF065)

        assert state.fault == FAULT_NONE
        assert state.V[0] == 0x99


class TestKeypad:
    """Test keypad wait."""

    def test_wait_for_key_pauses(self, fresh_state):
        """FX0A enters the waiting state and captures X."""
        state = fresh_state
        initial_pc = state.pc

        state = execute(state, 0xF50A)

        assert state.run_state is RunState.AWAITING_KEY
        assert state.key_register == 5
        assert state.pc == initial_pc

    def test_wait_ignores_held_keys(self, fresh_state):
        """A key already held does not satisfy FX0A; a new press is needed."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[7].set(True))

        state = execute(state, 0xF00A)

        assert state.run_state is RunState.AWAITING_KEY
        assert state.V[0] == 0


class TestMiscInstructionDispatch:
    """Test misc instruction dispatch logic."""

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_not_clamped(self, fresh_state):
        """FX1E - I may move past the address space; VF is untouched."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xAF80)  # I = 0xF80
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0xF80 + 0xFF
        assert state.V[15] == 0

    def test_undefined_misc_instruction(self, fresh_state, strict_state):
        state = execute(fresh_state, 0xF0FF)
        assert state.fault == FAULT_NONE

        state = execute(strict_state, 0xF0FF)
        assert state.fault == FAULT_UNKNOWN_OPCODE
