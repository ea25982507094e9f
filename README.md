# lynxcore

Pure-Python models of parts of the hardware of a handheld game console. It is a
library meant as building blocks for an emulator. It has no dependencies outside
the standard library.

## Modules

### `lynxcore.memmap`

`MemoryMap` records which `Device` (`RAM`, `SUSIE`, `MIKIE`, `ROM`, `MEMMAP`)
answers the CPU at each of the 65536 addresses. Writing a control byte with
`poke(addr, data)` selects the mapping, as a write to `$FFF9` does:

- bit 0 hides Suzy at `$FC00-$FCFF`;
- bit 1 hides Mikey at `$FD00-$FDFF`;
- bit 2 hides the ROM at `$FE00-$FFF7`;
- bit 3 hides the vectors at `$FFFA-$FFFF`.

A hidden region shows RAM. `peek(addr)` returns the current control byte, and
`handler(addr)` returns the device at an address. `handler` raises
`IndexError` for an address outside the address space. `reset()` enables
every device. `save_state()` returns the four enable flags as a dict, and
`load_state(state)` restores them and rebuilds the mapping.

```python
from lynxcore.memmap import Device, MemoryMap

mm = MemoryMap()
mm.poke(0xFFF9, 0x02)
assert mm.handler(0xFD20) is Device.RAM
assert mm.peek(0xFFF9) == 0x02
```

### `lynxcore.timers`

`Timer` is one down-counter. A timer counts from the system cycle count
divided by `2 ** (4 + linking)`, or, when `linking` is 7, from the borrow out
of the timer it is linked to.

- `write_control_a(data, now)` and `write_control_b(data)` set the control
  registers. `read_control_a(interrupt_enabled)` and `read_control_b()` read
  them back.
- `step(now, link_carry)` brings the counter up to cycle `now` and returns
  whether it expired.
- `next_event(now)` predicts the cycle of the next expiry. It returns `None`
  for a stopped or linked timer.

`get_lfsr_next(current)` advances the 12-bit audio waveshaper one step. The
feedback switches are held in bits 12-20.

### `lynxcore.audio`

`AudioChannel` is one sound channel, built from an audio `Timer`, a
waveshaper, a volume and a signed output level. `poke(reg, data, now)` and
`peek(reg)` access its eight registers. The offsets are named by
`AudioRegister`. `clock_output()` advances the waveshaper after an expiry and
returns the new output level. When `integrate_enable` is set, the level is
integrated and clamped to -128..127.

`StereoMixer` combines four channel outputs. It applies the stereo enable
bits, the pan bits and the per-channel attenuation nibbles.
`mix(outputs, teatime)` returns `(time, left_delta, right_delta)`: `time` is
`teatime >> 2`, and the two deltas are how far each side moved since the
previous mix. It raises `ValueError` unless exactly four outputs are given.

### `lynxcore.uart`

`ComLynx` is the serial port. Every byte it transmits loops back into its own
receive queue.

- `receive(data)` queues an incoming byte. The queue holds at most 32 bytes,
  and extra bytes are dropped.
- `loopback(data)` queues a byte at the front of the queue.
- `write_control(data)` and `read_control()` access SERCTL.
- `write_data(data)` and `read_data()` access SERDAT.
- `tick()` advances the receive and transmit countdowns by one bit period.
- `irq_pending()` reports the level-sensitive serial interrupt.

An optional `tx_callback` is called with each byte as its transmission
finishes.

## What the package does not do

It has no CPU, no cartridge loader, no sprite engine and no display or
register-level Mikey model that ties these parts together. It has no command
and no frontend: it does not load game images, draw frames or play sound. The
parts above must be driven by the caller.

## Tests

```
pip install -e .[test]
pytest
```