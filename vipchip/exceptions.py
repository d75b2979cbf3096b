"""Exceptions raised at the edges of an emulation session."""

from vipchip.constants import Fault


class EmulatorError(Exception):
    """Base class for vipchip errors."""


class RomLoadError(EmulatorError):
    """The program could not be loaded into memory."""


class FatalFault(EmulatorError):
    """The machine hit a condition it cannot continue from."""

    def __init__(self, fault: Fault, pc: int):
        self.fault = Fault(fault)
        self.pc = pc
        super().__init__(f"{self.fault.description} at PC 0x{pc:03X}")
