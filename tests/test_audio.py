import pytest

from lynxcore.audio import AudioChannel, AudioRegister, StereoMixer


@pytest.mark.parametrize(
    "reg",
    [AudioRegister.VOLUME, AudioRegister.SHIFT_FEEDBACK, AudioRegister.OUTPUT,
     AudioRegister.LOW_SHIFT, AudioRegister.BACKUP, AudioRegister.COUNT],
)
@pytest.mark.parametrize("value", [0x00, 0x5A, 0x80, 0xFF])
def test_plain_registers_round_trip(reg, value):
    channel = AudioChannel()
    channel.poke(reg, value, 0)
    assert channel.peek(reg) == value


def test_volume_is_signed():
    channel = AudioChannel()
    channel.poke(AudioRegister.VOLUME, 0x80, 0)
    assert channel.volume == -128


def test_control_round_trip_and_reschedule():
    channel = AudioChannel()
    assert channel.poke(AudioRegister.CONTROL, 0x80 | 0x20 | 0x10 | 0x08 | 0x03, 1234) is True
    assert channel.peek(AudioRegister.CONTROL) == 0xBB
    assert channel.timer.last_count == 1234
    assert channel.waveshaper & 0x1000


def test_control_without_count_does_not_reschedule():
    channel = AudioChannel()
    assert channel.poke(AudioRegister.CONTROL, 0x10, 99) is False
    assert channel.timer.last_count == 0


def test_misc_register_bits():
    channel = AudioChannel()
    channel.poke(AudioRegister.MISC, 0xF0 | 0x04 | 0x02 | 0x01, 0)
    assert channel.timer.borrow_out
    assert channel.timer.borrow_in
    assert channel.timer.last_clock
    # last clock reads back in bit 3
    assert channel.peek(AudioRegister.MISC) == 0xF0 | 0x08 | 0x02 | 0x01


def test_shift_registers_do_not_clobber_each_other():
    channel = AudioChannel()
    channel.poke(AudioRegister.LOW_SHIFT, 0xAB, 0)
    channel.poke(AudioRegister.SHIFT_FEEDBACK, 0xCD, 0)
    channel.poke(AudioRegister.MISC, 0x70, 0)
    assert channel.peek(AudioRegister.LOW_SHIFT) == 0xAB
    assert channel.peek(AudioRegister.SHIFT_FEEDBACK) == 0xCD
    assert channel.peek(AudioRegister.MISC) & 0xF0 == 0x70


def test_clock_output_high_bit_gives_volume():
    channel = AudioChannel()
    channel.poke(AudioRegister.BACKUP, 1, 0)
    channel.poke(AudioRegister.VOLUME, 5, 0)
    assert channel.clock_output() == 5
    assert channel.waveshaper & 1


def test_clock_output_low_bit_gives_negative_volume():
    channel = AudioChannel()
    channel.poke(AudioRegister.BACKUP, 1, 0)
    channel.poke(AudioRegister.VOLUME, 5, 0)
    channel.waveshaper = (0x2 << 12) | 0x1
    assert channel.clock_output() == -5
    assert channel.waveshaper & 1 == 0


def test_clock_output_without_backup_keeps_waveshaper():
    channel = AudioChannel()
    channel.waveshaper = 0x1
    channel.poke(AudioRegister.VOLUME, 7, 0)
    assert channel.clock_output() == 7
    assert channel.waveshaper == 0x1


def test_integrate_clamps():
    channel = AudioChannel()
    channel.poke(AudioRegister.CONTROL, 0x20, 0)
    channel.poke(AudioRegister.OUTPUT, 120, 0)
    channel.poke(AudioRegister.VOLUME, 20, 0)
    channel.waveshaper = 0x1
    assert channel.clock_output() == 127
    channel.poke(AudioRegister.OUTPUT, 0x88, 0)
    channel.waveshaper = 0x0
    assert channel.clock_output() == -128


def test_reset_clears_channel():
    channel = AudioChannel()
    channel.poke(AudioRegister.VOLUME, 9, 0)
    channel.poke(AudioRegister.CONTROL, 0xFF, 10)
    channel.reset()
    assert channel.peek(AudioRegister.VOLUME) == 0
    assert channel.peek(AudioRegister.CONTROL) == 0


def test_mix_unpanned_sums_and_reports_deltas():
    mixer = StereoMixer()
    assert mixer.mix([1, 2, 3, 4], 8) == (2, 10, 10)
    assert mixer.mix([1, 2, 3, 4], 12) == (3, 0, 0)
    time, left, right = mixer.mix([0, 0, 0, 0], 0)
    assert (left, right) == (-10, -10)
    assert (mixer.left, mixer.right) == (0, 0)


def test_mix_channels_disabled_give_silence():
    mixer = StereoMixer()
    mixer.stereo = 0x00
    assert mixer.mix([50, 50, 50, 50], 0) == (0, 0, 0)


def test_mix_one_side_only():
    mixer = StereoMixer()
    mixer.stereo = 0x01
    _, left, right = mixer.mix([7, 100, 100, 100], 0)
    assert left == 0
    assert right == 7


def test_mix_panned_is_symmetric_for_negative_levels():
    up = StereoMixer(pan=0xFF)
    down = StereoMixer(pan=0xFF)
    _, ul, ur = up.mix([16, 0, 0, 0], 0)
    _, dl, dr = down.mix([-16, 0, 0, 0], 0)
    assert (dl, dr) == (-ul, -ur)
    assert ul < 16


def test_mix_rejects_wrong_channel_count():
    with pytest.raises(ValueError):
        StereoMixer().mix([1, 2, 3], 0)