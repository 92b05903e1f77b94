"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, RunState, create_state
from chip8vm.emulator import execute, fetch, run_tick, set_key, load_program, load_rom
from chip8vm.decode import DecodedInstruction, decode
from chip8vm.config import MachineConfig
from chip8vm.machine import Machine
from chip8vm.errors import (
    Chip8Error, ProgramCounterOutOfRange, UnknownOpcode, OutOfBounds, StackOverflow, StackUnderflow,
)
from chip8vm.constants import *

__all__ = [
    "Machine",
    "MachineConfig",
    "EmulatorState",
    "RunState",
    "create_state",
    "fetch",
    "execute",
    "run_tick",
    "set_key",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "Chip8Error",
    "ProgramCounterOutOfRange",
    "UnknownOpcode",
    "OutOfBounds",
    "StackOverflow",
    "StackUnderflow",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "KEY_MAPPING",
]
