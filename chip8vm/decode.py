"""CHIP-8 instruction decoding."""

from chex import dataclass

GROUP_MASK = 0xF000
X_MASK = 0x0F00
Y_MASK = 0x00F0
N_MASK = 0x000F
NN_MASK = 0x00FF
NNN_MASK = 0x0FFF


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of a 16-bit instruction word.

    Works on plain ints and on traced JAX integers alike.
    """
    word: int    # Full 16-bit instruction
    group: int   # Top nibble, selects the handler
    x: int       # Register index in bits 8-11
    y: int       # Register index in bits 4-7
    n: int       # 4-bit immediate
    nn: int      # 8-bit immediate
    nnn: int     # 12-bit address


def decode(instruction: int) -> DecodedInstruction:
    return DecodedInstruction(
        word=instruction,
        group=(instruction & GROUP_MASK) >> 12,
        x=(instruction & X_MASK) >> 8,
        y=(instruction & Y_MASK) >> 4,
        n=instruction & N_MASK,
        nn=instruction & NN_MASK,
        nnn=instruction & NNN_MASK,
    )
