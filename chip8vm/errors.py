"""CHIP-8 execution errors."""

from chip8vm.constants import (
    FAULT_NONE, FAULT_PC_OUT_OF_RANGE, FAULT_UNKNOWN_OPCODE, FAULT_OUT_OF_BOUNDS,
    FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW, MEMORY_SIZE,
)


class Chip8Error(Exception):
    """Base class for errors raised while running a CHIP-8 program."""


class ProgramCounterOutOfRange(Chip8Error):
    """Program counter points past the end of memory at fetch time."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"program counter out of range: 0x{pc:04X}")


class UnknownOpcode(Chip8Error):
    """Opcode has no registered handler."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"unknown opcode: {opcode:04X}")


class OutOfBounds(Chip8Error):
    """Access or program image extends past the end of memory."""

    def __init__(self, address: int, size: int):
        self.address = address
        self.size = size
        super().__init__(
            f"{size} byte(s) at 0x{address:04X} exceed memory of 0x{MEMORY_SIZE:04X} bytes"
        )


class StackOverflow(Chip8Error):
    """Subroutine call with a full stack."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"stack overflow at opcode {opcode:04X}")


class StackUnderflow(Chip8Error):
    """Return from subroutine with an empty stack."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"stack underflow at opcode {opcode:04X}")


def raise_for_fault(state) -> None:
    """Raise the exception matching the fault recorded in an emulator state."""
    fault = int(state.fault)
    if fault == FAULT_NONE:
        return

    opcode = int(state.fault_opcode)
    if fault == FAULT_PC_OUT_OF_RANGE:
        raise ProgramCounterOutOfRange(int(state.pc))
    if fault == FAULT_UNKNOWN_OPCODE:
        raise UnknownOpcode(opcode)
    if fault == FAULT_OUT_OF_BOUNDS:
        # Only I-relative accesses fault inside the machine
        raise OutOfBounds(int(state.I), _access_size(opcode))
    if fault == FAULT_STACK_OVERFLOW:
        raise StackOverflow(opcode)
    if fault == FAULT_STACK_UNDERFLOW:
        raise StackUnderflow(opcode)
    raise Chip8Error(f"unrecognized fault code {fault}")


def _access_size(opcode: int) -> int:
    """Number of bytes an I-relative instruction touches."""
    if opcode & 0xF000 == 0xD000:
        return opcode & 0x000F
    if opcode & 0xF0FF == 0xF033:
        return 3
    return ((opcode & 0x0F00) >> 8) + 1
