"""The $FFF9 memory map control: which device the CPU sees at each address."""

from __future__ import annotations

from enum import Enum

__all__ = ["Device", "MemoryMap"]

SYSTEM_SIZE = 0x10000
SUSIE_START = 0xFC00
SUSIE_SIZE = 0x100
MIKIE_START = 0xFD00
MIKIE_SIZE = 0x100
BROM_START = 0xFE00
BROM_SIZE = 0x200
VECTOR_START = 0xFFFA
VECTOR_SIZE = 6
MEMMAP_ADDRESS = 0xFFF9


class Device(Enum):
    """A piece of hardware that can answer CPU accesses."""

    RAM = "ram"
    SUSIE = "susie"
    MIKIE = "mikie"
    ROM = "rom"
    MEMMAP = "memmap"


_REGIONS = (
    ("susie", 0x01, SUSIE_START, SUSIE_START + SUSIE_SIZE, Device.SUSIE),
    ("mikie", 0x02, MIKIE_START, MIKIE_START + MIKIE_SIZE, Device.MIKIE),
    ("rom", 0x04, BROM_START, BROM_START + BROM_SIZE - 8, Device.ROM),
    ("vectors", 0x08, VECTOR_START, VECTOR_START + VECTOR_SIZE, Device.ROM),
)


class MemoryMap:
    """Holds the device seen at every CPU address, switched by writes to $FFF9.

    A set bit in the control byte hides the device and exposes RAM beneath it.
    """

    READ_CYCLES = 5
    WRITE_CYCLES = 5
    OBJECT_SIZE = 1

    def __init__(self) -> None:
        self._handlers: list[Device] = []
        self._enabled: dict[str, bool | None] = {}
        self.reset()

    def reset(self) -> None:
        """Map everything to RAM, then enable all devices."""
        self._handlers = [Device.RAM] * SYSTEM_SIZE
        self._handlers[MEMMAP_ADDRESS] = Device.MEMMAP
        self._enabled = {name: None for name, *_ in _REGIONS}
        self.poke(0, 0)

    def poke(self, addr: int, data: int) -> None:
        """Apply a control byte; only regions whose state changes are remapped."""
        for name, bit, start, end, device in _REGIONS:
            enabled = not (data & bit)
            if enabled != self._enabled[name]:
                self._enabled[name] = enabled
                target = device if enabled else Device.RAM
                self._handlers[start:end] = [target] * (end - start)

    def peek(self, addr: int) -> int:
        """Return the control byte that describes the current mapping."""
        return sum(bit for name, bit, *_ in _REGIONS if not self._enabled[name])

    def handler(self, addr: int) -> Device:
        """Return the device that answers the CPU at ``addr``."""
        if not 0 <= addr < SYSTEM_SIZE:
            raise IndexError(f"address {addr:#x} is outside the address space")
        return self._handlers[addr]

    def save_state(self) -> dict[str, bool]:
        return {
            "mikie_enabled": bool(self._enabled["mikie"]),
            "susie_enabled": bool(self._enabled["susie"]),
            "rom_enabled": bool(self._enabled["rom"]),
            "vectors_enabled": bool(self._enabled["vectors"]),
        }

    def load_state(self, state: dict[str, bool]) -> None:
        """Restore saved flags and rebuild the address mapping from them."""
        self._enabled = {
            "susie": bool(state["susie_enabled"]),
            "mikie": bool(state["mikie_enabled"]),
            "rom": bool(state["rom_enabled"]),
            "vectors": bool(state["vectors_enabled"]),
        }
        control = self.peek(0)
        self._enabled = {name: None for name, *_ in _REGIONS}
        self.poke(0, control)