"""Machine configuration."""

from flax.struct import dataclass

from chip8vm.constants import FONT_DATA, INSTRUCTIONS_PER_TICK


@dataclass
class MachineConfig:
    """Static settings for a CHIP-8 machine.

    Attributes:
        instructions_per_tick: Instructions executed by each call to ``tick``
        font: The 80 bytes of hexadecimal glyphs copied to the bottom of memory
        seed: Seed for the random number generator used by CXNN
        strict: Fail with UnknownOpcode on undefined opcodes instead of ignoring them
        log_level: Level of the machine's console logger
    """
    instructions_per_tick: int = INSTRUCTIONS_PER_TICK
    font: tuple = FONT_DATA
    seed: int = 0
    strict: bool = False
    log_level: str = "WARNING"

    def validate(self) -> "MachineConfig":
        """Check settings, raising ValueError on the first invalid one."""
        if int(self.instructions_per_tick) < 1:
            raise ValueError(
                f"instructions_per_tick must be positive, got {self.instructions_per_tick}"
            )
        if len(self.font) != len(FONT_DATA):
            raise ValueError(f"font must be {len(FONT_DATA)} bytes, got {len(self.font)}")
        if any(not 0 <= b <= 0xFF for b in self.font):
            raise ValueError("font bytes must be in range 0-255")
        return self
