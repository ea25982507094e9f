"""Hardware models for a handheld console: memory map, timers, audio channels and serial link."""

__version__ = "0.1.0"

__all__ = ["memmap", "timers", "audio", "uart"]