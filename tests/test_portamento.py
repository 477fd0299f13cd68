from musynth.pitch import get_pitch
from musynth.portamento import apply_portamento, convert_cents, init_portamento
from musynth.voice import Voice


def gliding_voice(start=0):
    return Voice(c_flags=0x400, port_duration=25600, port_time=0, port_cur_pitch=start)


def test_init_portamento_from_last_note():
    voice = Voice(last_note=60, port_duration=500, port_time=7)
    init_portamento(voice)
    assert voice.port_cur_pitch == 60 << 16
    assert voice.port_time == 500


def test_init_portamento_type_one_restarts():
    voice = Voice(last_note=10, port_type=1, port_duration=500, port_time=7)
    init_portamento(voice)
    assert voice.port_time == 0
    voice.c_flags = 0x1000
    init_portamento(voice)
    assert voice.port_time == 500


def test_init_portamento_skipped_during_legato():
    voice = Voice(c_flags=0x20000, last_note=60, port_time=7, port_cur_pitch=3)
    init_portamento(voice)
    assert voice.port_time == 7
    assert voice.port_cur_pitch == 3


def test_apply_inactive_returns_target():
    voice = Voice(port_duration=25600, port_time=0, port_cur_pitch=0)
    assert apply_portamento(voice, 60 << 16, 256) == 60 << 16
    assert voice.port_cur_pitch == 0


def test_apply_moves_upward():
    voice = gliding_voice()
    target = 60 << 16
    result = apply_portamento(voice, target, 256)
    assert 0 < result < target
    assert result == voice.port_cur_pitch
    assert voice.port_time == 256


def test_apply_moves_downward():
    voice = gliding_voice(start=72 << 16)
    target = 60 << 16
    result = apply_portamento(voice, target, 256)
    assert target < result < 72 << 16


def test_apply_overshoot_ends_glide():
    voice = gliding_voice()
    target = 60 << 16
    assert apply_portamento(voice, target, 1_000_000) == target
    assert voice.port_time == voice.port_duration
    assert apply_portamento(voice, target, 256) == target


def test_glide_is_monotonic_and_reaches_target():
    voice = gliding_voice()
    target = 48 << 16
    previous = 0
    for _ in range(200):
        result = apply_portamento(voice, target, 256)
        assert previous <= result <= target
        previous = result
    assert previous == target


def test_convert_cents_root_key():
    voice = Voice()
    assert convert_cents(voice, 0x40 << 16, 0x5622) == 4096 << 16


def test_convert_cents_matches_pitch():
    voice = Voice()
    assert convert_cents(voice, 0x45 << 16, 32000) == get_pitch(0x45, voice.s_info, 32000) << 16


def test_convert_cents_detune_increases():
    voice = Voice()
    base = convert_cents(voice, 0x40 << 16, 32000)
    half = convert_cents(voice, (0x40 << 16) | 0x8000, 32000)
    most = convert_cents(voice, (0x40 << 16) | 0xF000, 32000)
    assert base < half < most