"""Mikey hardware counters and the audio waveshaper shift register."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Timer", "get_lfsr_next"]

CTRL_A_IRQEN = 0x80
CTRL_A_RTD = 0x40
CTRL_A_RELOAD = 0x10
CTRL_A_COUNT = 0x08
CTRL_A_DIVIDE = 0x07

CTRL_B_TDONE = 0x08
CTRL_B_LASTCK = 0x04
CTRL_B_CIN = 0x02
CTRL_B_COUT = 0x01

LINKED = 0x07

# Feedback taps selected by the nine switch bits, in switch order.
_SWITCH_TAPS = (7, 0, 1, 2, 3, 4, 5, 10, 11)


def get_lfsr_next(current: int) -> int:
    """Advance a waveshaper value one step.

    Bits 0-11 hold the shift register and bits 12-20 the feedback switches.
    The new low bit is the inverted parity of the selected taps.
    """
    switches = current >> 12
    lfsr = current & 0xFFF
    parity = 0
    for index, tap in enumerate(_SWITCH_TAPS):
        if (switches >> index) & 1:
            parity ^= (lfsr >> tap) & 1
    feedback = 0 if parity else 1
    return (switches << 12) | ((lfsr << 1) & 0xFFE) | feedback


@dataclass
class Timer:
    """One down-counter, clocked by a divided system clock or by a linked timer.

    The counter is advanced lazily: ``step`` works out how many ticks have
    elapsed since ``last_count``. With ``audio`` set, a reload that still
    leaves the counter negative clamps it to zero, and the done flag is only
    raised when a one-shot count expires.
    """

    audio: bool = False
    backup: int = 0
    enable_reload: bool = False
    enable_count: bool = False
    linking: int = 0
    current: int = 0
    timer_done: bool = False
    last_clock: bool = False
    borrow_in: bool = False
    borrow_out: bool = False
    last_link_carry: bool = False
    last_count: int = 0

    def reset(self) -> None:
        """Return every register and flag to zero."""
        self.backup = 0
        self.enable_reload = False
        self.enable_count = False
        self.linking = 0
        self.current = 0
        self.timer_done = False
        self.last_clock = False
        self.borrow_in = False
        self.borrow_out = False
        self.last_link_carry = False
        self.last_count = 0

    @property
    def is_linked(self) -> bool:
        return self.linking == LINKED

    @property
    def divide(self) -> int:
        """Shift applied to the system cycle count; zero when linked."""
        return 0 if self.is_linked else 4 + self.linking

    @property
    def running(self) -> bool:
        return self.enable_count and (self.enable_reload or not self.timer_done)

    def write_control_a(self, data: int, now: int) -> bool:
        """Apply a control A byte at cycle ``now``.

        Returns True when the write restarts counting, so the next timer
        event should be rescheduled immediately. The interrupt enable bit is
        left to the caller.
        """
        self.enable_reload = bool(data & CTRL_A_RELOAD)
        self.enable_count = bool(data & CTRL_A_COUNT)
        self.linking = data & CTRL_A_DIVIDE
        if data & CTRL_A_RTD:
            self.timer_done = False
        if data & (CTRL_A_RTD | CTRL_A_COUNT):
            self.last_count = now
            return True
        return False

    def read_control_a(self, interrupt_enabled: bool) -> int:
        value = CTRL_A_IRQEN if interrupt_enabled else 0
        if self.enable_reload:
            value |= CTRL_A_RELOAD
        if self.enable_count:
            value |= CTRL_A_COUNT
        return value | self.linking

    def write_control_b(self, data: int) -> None:
        self.timer_done = bool(data & CTRL_B_TDONE)
        self.last_clock = bool(data & CTRL_B_LASTCK)
        self.borrow_in = bool(data & CTRL_B_CIN)
        self.borrow_out = bool(data & CTRL_B_COUT)

    def read_control_b(self) -> int:
        value = 0
        if self.timer_done:
            value |= CTRL_B_TDONE
        if self.last_clock:
            value |= CTRL_B_LASTCK
        if self.borrow_in:
            value |= CTRL_B_CIN
        if self.borrow_out:
            value |= CTRL_B_COUT
        return value

    def step(self, now: int, link_carry: bool = False) -> bool:
        """Bring the counter up to cycle ``now``; return True if it expired.

        ``link_carry`` is the borrow out of the timer this one is linked to,
        used only in linked mode. A stopped timer is left untouched.
        """
        if not self.running:
            return False

        if self.is_linked:
            decval = 1 if link_carry else 0
            self.last_link_carry = bool(link_carry)
        else:
            decval = (now - self.last_count) >> self.divide

        if not decval:
            self.borrow_in = False
            self.borrow_out = False
            return False

        self.last_count += decval << self.divide
        self.current -= decval
        if self.current < 0:
            self.borrow_out = True
            if self.enable_reload:
                self.current += self.backup + 1
                if self.audio and self.current < 0:
                    self.current = 0
                if not self.audio:
                    self.timer_done = True
            else:
                self.current = 0
                self.timer_done = True
        else:
            self.borrow_out = False
        self.borrow_in = True
        return self.borrow_out

    def next_event(self, now: int) -> int | None:
        """Predict the cycle of the next expiry, or None if it cannot be predicted.

        A counter still negative after a long gap asks for an update on the
        very next cycle.
        """
        if not self.running or self.is_linked:
            return None
        if self.current < 0:
            return now + 1
        return now + ((self.current + 1) << self.divide)