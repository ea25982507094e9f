"""Mikey audio channels and the stereo mixer that combines them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .timers import Timer, get_lfsr_next

__all__ = ["AudioRegister", "AudioChannel", "StereoMixer"]

CHANNEL_COUNT = 4


class AudioRegister(IntEnum):
    """Offsets of the eight registers every channel has."""

    VOLUME = 0
    SHIFT_FEEDBACK = 1
    OUTPUT = 2
    LOW_SHIFT = 3
    BACKUP = 4
    CONTROL = 5
    COUNT = 6
    MISC = 7


def _to_int8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def _c_div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


@dataclass
class AudioChannel:
    """One sound channel: a counter, a 12-bit waveshaper and a signed output level."""

    timer: Timer = field(default_factory=lambda: Timer(audio=True))
    volume: int = 0
    output: int = 0
    integrate_enable: bool = False
    waveshaper: int = 0

    def reset(self) -> None:
        """Clear the counter, the waveshaper and the output level."""
        self.timer.reset()
        self.volume = 0
        self.output = 0
        self.integrate_enable = False
        self.waveshaper = 0

    def poke(self, reg: int, data: int, now: int) -> bool:
        """Write register ``reg`` (0-7) at cycle ``now``.

        Returns True when the write restarts the counter, so the next timer
        event should be rescheduled at once.
        """
        reg = AudioRegister(reg & 0x7)
        data &= 0xFF
        timer = self.timer
        if reg is AudioRegister.VOLUME:
            self.volume = _to_int8(data)
        elif reg is AudioRegister.SHIFT_FEEDBACK:
            self.waveshaper = (self.waveshaper & 0x001FFF) | (data << 13)
        elif reg is AudioRegister.OUTPUT:
            self.output = _to_int8(data)
        elif reg is AudioRegister.LOW_SHIFT:
            self.waveshaper = (self.waveshaper & 0x1FFF00) | data
        elif reg is AudioRegister.BACKUP:
            timer.backup = data
        elif reg is AudioRegister.CONTROL:
            self.integrate_enable = bool(data & 0x20)
            self.waveshaper &= 0x1FEFFF
            if data & 0x80:
                self.waveshaper |= 0x001000
            return timer.write_control_a(data & 0x7F, now)
        elif reg is AudioRegister.COUNT:
            timer.current = data
        else:
            self.waveshaper = (self.waveshaper & 0x1FF0FF) | ((data & 0xF0) << 4)
            timer.borrow_in = bool(data & 0x02)
            timer.borrow_out = bool(data & 0x01)
            timer.last_clock = bool(data & 0x04)
        return False

    def peek(self, reg: int) -> int:
        """Read register ``reg`` (0-7)."""
        reg = AudioRegister(reg & 0x7)
        timer = self.timer
        if reg is AudioRegister.VOLUME:
            return self.volume & 0xFF
        if reg is AudioRegister.SHIFT_FEEDBACK:
            return (self.waveshaper >> 13) & 0xFF
        if reg is AudioRegister.OUTPUT:
            return self.output & 0xFF
        if reg is AudioRegister.LOW_SHIFT:
            return self.waveshaper & 0xFF
        if reg is AudioRegister.BACKUP:
            return timer.backup & 0xFF
        if reg is AudioRegister.CONTROL:
            value = 0x20 if self.integrate_enable else 0
            if timer.enable_reload:
                value |= 0x10
            if timer.enable_count:
                value |= 0x08
            if self.waveshaper & 0x001000:
                value |= 0x80
            return value | timer.linking
        if reg is AudioRegister.COUNT:
            return timer.current & 0xFF
        value = 0x01 if timer.borrow_out else 0
        if timer.borrow_in:
            value |= 0x02
        if timer.last_clock:
            # The last-clock flag reads back in bit 3, as the hardware model does.
            value |= 0x08
        return value | ((self.waveshaper >> 4) & 0xF0)

    def clock_output(self) -> int:
        """Advance the waveshaper after the counter expired and return the new output level."""
        if self.timer.backup or self.timer.linking:
            self.waveshaper = get_lfsr_next(self.waveshaper)
        high = bool(self.waveshaper & 0x0001)
        if self.integrate_enable:
            level = self.output + self.volume if high else self.output - self.volume
            self.output = max(-128, min(127, level))
        else:
            self.output = _to_int8(self.volume if high else -self.volume)
        return self.output


@dataclass
class StereoMixer:
    """Combines the four channel outputs into left and right levels.

    ``stereo`` holds the channel enables as stored internally (the register
    value inverted): bits 4-7 enable a channel on the left, bits 0-3 on the
    right. A set ``pan`` bit scales that side by the channel's attenuation
    nibble. The levels last emitted survive a reset, so the next mix reports
    the change from them.
    """

    stereo: int = 0xFF
    pan: int = 0x00
    attenuation: list[int] = field(default_factory=lambda: [0xFF] * CHANNEL_COUNT)
    left: int = 0
    right: int = 0

    def reset(self) -> None:
        """Enable every channel on both sides, unpanned at full volume."""
        self.stereo = 0xFF
        self.pan = 0x00
        self.attenuation = [0xFF] * CHANNEL_COUNT

    def mix(self, outputs: list[int], teatime: int) -> tuple[int, int, int]:
        """Mix channel ``outputs`` at cycle offset ``teatime``.

        Returns ``(time, left_delta, right_delta)``: the time in sound clock
        units and how far each side's level moved since the previous mix.
        """
        if len(outputs) != CHANNEL_COUNT:
            raise ValueError(f"expected {CHANNEL_COUNT} channel outputs, got {len(outputs)}")
        left = 0
        right = 0
        for index, (output, atten) in enumerate(zip(outputs, self.attenuation)):
            if self.stereo & (0x10 << index):
                if self.pan & (0x10 << index):
                    left += _c_div(output * (atten & 0xF0), 16 * 16)
                else:
                    left += output
            if self.stereo & (0x01 << index):
                if self.pan & (0x01 << index):
                    right += _c_div(output * (atten & 0x0F), 16)
                else:
                    right += output
        left_delta = left - self.left
        right_delta = right - self.right
        self.left = left
        self.right = right
        return teatime >> 2, left_delta, right_delta