"""Session configuration."""

import dataclasses
from typing import Any, Dict, Tuple

from flax.struct import dataclass

from vipchip.constants import DEFAULT_CLOCK_RATE, TIMER_FREQUENCY


@dataclass
class EmulatorConfig:
    """Configuration of one emulation session.

    Attributes:
        clock_rate: Target instructions per second. Executed in batches of
            ``clock_rate // 60`` per 60Hz tick.
        scale: Window pixels per CHIP-8 pixel (frontend only)
        fg_color: RGB color of lit pixels (frontend only)
        bg_color: RGB color of dark pixels (frontend only)
        key_wait_stores_index: FX0A stores the key index (True) or the
            legacy pressed flag (False)
        seed: Seed of the CXNN random stream
    """
    clock_rate: int = DEFAULT_CLOCK_RATE
    scale: int = 20
    fg_color: Tuple[int, int, int] = (0xFF, 0xFF, 0xFF)
    bg_color: Tuple[int, int, int] = (0x00, 0x00, 0x00)
    key_wait_stores_index: bool = True
    seed: int = 0

    @property
    def instructions_per_tick(self) -> int:
        """Number of instructions executed per 60Hz tick."""
        return self.clock_rate // TIMER_FREQUENCY

    def validate(self) -> "EmulatorConfig":
        """Raise ``ValueError`` for unusable settings; return self otherwise."""
        if self.clock_rate <= 0:
            raise ValueError(f"clock_rate must be positive, got {self.clock_rate}")
        if self.instructions_per_tick == 0:
            raise ValueError(
                f"clock_rate must be at least {TIMER_FREQUENCY}, got {self.clock_rate}"
            )
        if self.scale <= 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        for name in ("fg_color", "bg_color"):
            color = getattr(self, name)
            if len(color) != 3 or any(not 0 <= c <= 255 for c in color):
                raise ValueError(f"{name} must be three bytes, got {color}")
        return self

    def as_dict(self) -> Dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in dataclasses.fields(self)}
