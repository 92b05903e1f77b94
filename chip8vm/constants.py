"""CHIP-8 machine constants."""

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

FONT_START = 0x000
FONT_HEIGHT = 5
FONT_DATA = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
)

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

SPRITE_WIDTH = 8
MAX_SPRITE_HEIGHT = 15

NUM_REGISTERS = 16
NUM_KEYS = 16
STACK_SIZE = 16

INSTRUCTION_SIZE = 2
INSTRUCTIONS_PER_TICK = 10

# Fault codes recorded in EmulatorState.fault
FAULT_NONE = 0
FAULT_PC_OUT_OF_RANGE = 1
FAULT_UNKNOWN_OPCODE = 2
FAULT_OUT_OF_BOUNDS = 3
FAULT_STACK_OVERFLOW = 4
FAULT_STACK_UNDERFLOW = 5

# Conventional QWERTY layout for the hex keypad:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
KEY_MAPPING = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}
