import pytest

from musynth.pitch import get_pitch, pitch_up_one

MIX = 32000
ROOT = 60


def _info(root, rate):
    return (root << 24) | rate


def test_root_key_at_mix_rate_is_unity_pitch():
    assert get_pitch(ROOT, _info(ROOT, MIX), MIX) == 4096


def test_octave_down_halves_pitch():
    base = get_pitch(ROOT, _info(ROOT, MIX), MIX)
    assert get_pitch(ROOT - 12, _info(ROOT, MIX), MIX) * 2 == base


def test_octave_up_doubles_pitch():
    base = get_pitch(ROOT, _info(ROOT, MIX), MIX)
    assert get_pitch(ROOT + 12, _info(ROOT, MIX), MIX) == base * 2


def test_pitch_increases_with_key():
    info = _info(ROOT, 22050)
    values = [get_pitch(k, info, MIX) for k in range(10, 127)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_default_sample_info():
    assert get_pitch(64, 0xFFFFFFFF, MIX) == get_pitch(64, 0x40005622, MIX)


def test_pitch_scales_inversely_with_mix_rate():
    info = _info(ROOT, 16000)
    assert get_pitch(ROOT, info, 16000) == get_pitch(ROOT, info, 32000) * 2


def test_get_pitch_rejects_zero_mix_rate():
    with pytest.raises(ValueError):
        get_pitch(ROOT, _info(ROOT, MIX), 0)


def test_get_pitch_rejects_key_outside_table():
    with pytest.raises(ValueError):
        get_pitch(200, _info(64, MIX), MIX)


def test_pitch_up_one_value():
    assert pitch_up_one(1000) == 1059


def test_pitch_up_one_zero():
    assert pitch_up_one(0) == 0


@pytest.mark.parametrize("note", [1, 17, 100, 4096, 30000, 65535])
def test_pitch_up_one_raises_note(note):
    raised = pitch_up_one(note)
    assert note <= raised <= note * 1.06