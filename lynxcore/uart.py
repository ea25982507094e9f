"""The ComLynx serial port: a UART whose transmit line loops back into receive."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

__all__ = ["ComLynx"]

UART_TX_INACTIVE = 0x80000000
UART_RX_INACTIVE = 0x80000000
UART_BREAK_CODE = 0x00008000
UART_MAX_RX_QUEUE = 32
UART_TX_TIME_PERIOD = 11
UART_RX_TIME_PERIOD = 11
UART_RX_NEXT_DELAY = 44

SERCTL_TXINTEN = 0x80
SERCTL_RXINTEN = 0x40
SERCTL_PAREN = 0x10
SERCTL_RESETERR = 0x08
SERCTL_TXBRK = 0x02
SERCTL_PAREVEN = 0x01

SERCTL_TXRDY_TXEMPTY = 0xA0
SERCTL_RXRDY = 0x40
SERCTL_OVERRUN = 0x08
SERCTL_FRAMERR = 0x04
SERCTL_RXBRK = 0x02
SERCTL_PARBIT = 0x01


@dataclass
class ComLynx:
    """Serial port state, clocked by ``tick`` once per timer 4 expiry.

    Bytes that arrive wait in a queue of at most 32 entries and are delivered
    one at a time. Everything transmitted is looped back into the receiver,
    ahead of whatever is already waiting. ``tx_callback``, when set, is called
    with each byte as its transmission finishes.
    """

    cable_present: bool = False
    tx_callback: Callable[[int], None] | None = None
    rx_irq_enable: bool = False
    tx_irq_enable: bool = False
    tx_countdown: int = UART_TX_INACTIVE
    rx_countdown: int = UART_RX_INACTIVE
    sendbreak: bool = False
    tx_data: int = 0
    rx_data: int = 0
    rx_ready: bool = False
    parity_enable: bool = False
    parity_even: bool = False
    framing_error: bool = False
    overrun_error: bool = False
    rx_queue: deque[int] = field(default_factory=deque)

    @property
    def waiting(self) -> int:
        """Number of received bytes not yet delivered."""
        return len(self.rx_queue)

    def reset(self) -> None:
        """Clear all port state; the cable and the callback are kept."""
        self.rx_irq_enable = False
        self.tx_irq_enable = False
        self.tx_countdown = UART_TX_INACTIVE
        self.rx_countdown = UART_RX_INACTIVE
        self.rx_queue.clear()
        self.framing_error = False
        self.overrun_error = False
        self.sendbreak = False
        self.tx_data = 0
        self.rx_data = 0
        self.rx_ready = False
        self.parity_enable = False
        self.parity_even = False

    def _queue(self, data: int, front: bool) -> None:
        if len(self.rx_queue) >= UART_MAX_RX_QUEUE:
            return
        # Start the receiver only if idle, otherwise the byte would never be taken.
        if not self.rx_queue:
            self.rx_countdown = UART_RX_TIME_PERIOD
        if front:
            self.rx_queue.appendleft(data)
        else:
            self.rx_queue.append(data)

    def receive(self, data: int) -> None:
        """Accept a byte from the cable; it is dropped when the queue is full."""
        self._queue(data, front=False)

    def loopback(self, data: int) -> None:
        """Put a transmitted byte at the front of the receive queue."""
        self._queue(data, front=True)

    def write_control(self, data: int) -> None:
        """Write the SERCTL register."""
        self.tx_irq_enable = bool(data & SERCTL_TXINTEN)
        self.rx_irq_enable = bool(data & SERCTL_RXINTEN)
        self.parity_enable = bool(data & SERCTL_PAREN)
        self.sendbreak = bool(data & SERCTL_TXBRK)
        self.parity_even = bool(data & SERCTL_PAREVEN)
        if data & SERCTL_RESETERR:
            self.overrun_error = False
            self.framing_error = False
        if self.sendbreak:
            # A break sustains itself for as long as the bit stays set.
            self.tx_countdown = UART_TX_TIME_PERIOD
            self.loopback(UART_BREAK_CODE)

    def read_control(self) -> int:
        """Read the SERCTL status bits."""
        value = 0
        if self.tx_countdown & UART_TX_INACTIVE:
            value |= SERCTL_TXRDY_TXEMPTY
        if self.rx_ready:
            value |= SERCTL_RXRDY
        if self.overrun_error:
            value |= SERCTL_OVERRUN
        if self.framing_error:
            value |= SERCTL_FRAMERR
        if self.rx_data & UART_BREAK_CODE:
            value |= SERCTL_RXBRK
        if self.rx_data & 0x0100:
            value |= SERCTL_PARBIT
        return value

    def write_data(self, data: int) -> None:
        """Start transmitting a byte; it also arrives back at the receiver."""
        self.tx_data = data
        self.tx_countdown = UART_TX_TIME_PERIOD
        self.loopback(self.tx_data)

    def read_data(self) -> int:
        """Take the received byte and clear the ready flag."""
        self.rx_ready = False
        return self.rx_data & 0xFF

    def tick(self) -> None:
        """Advance the receive and transmit countdowns by one bit period."""
        if not self.rx_countdown:
            if self.rx_queue:
                self.rx_data = self.rx_queue.popleft()
            if self.rx_queue:
                self.rx_countdown = UART_RX_TIME_PERIOD + UART_RX_NEXT_DELAY
            else:
                self.rx_countdown = UART_RX_INACTIVE
            if self.rx_ready:
                self.overrun_error = True
            self.rx_ready = True
        elif not self.rx_countdown & UART_RX_INACTIVE:
            self.rx_countdown -= 1

        if not self.tx_countdown:
            if self.sendbreak:
                self.tx_data = UART_BREAK_CODE
                self.tx_countdown = UART_TX_TIME_PERIOD
                self.loopback(self.tx_data)
            else:
                self.tx_countdown = UART_TX_INACTIVE
            if self.tx_callback is not None:
                self.tx_callback(self.tx_data)
        elif not self.tx_countdown & UART_TX_INACTIVE:
            self.tx_countdown -= 1

    def irq_pending(self) -> bool:
        """Whether the level-sensitive serial interrupt is asserted."""
        if (self.tx_countdown & UART_TX_INACTIVE) and self.tx_irq_enable:
            return True
        return bool(self.rx_ready and self.rx_irq_enable)