import pytest

from musynth.faders import (
    FX_MASTER,
    MUSIC_MASTER,
    NO_ID,
    SEQ_STOP,
    TYPE_FX,
    TYPE_MUSIC,
    TYPE_UNUSED,
    TYPE_USER_FX,
    MasterFaders,
    VolumeGroup,
)


def test_initial_state():
    faders = MasterFaders()
    assert faders[MUSIC_MASTER].volume == 1.0
    assert faders[FX_MASTER].volume == 1.0
    assert faders[0].volume == 0.0
    assert faders[31].type == TYPE_FX
    assert all(faders[i].type == TYPE_MUSIC for i in range(23, 31))
    assert all(f.pause_vol == 1.0 for f in faders.faders)


def test_immediate_volume():
    faders = MasterFaders()
    faders.set_volume(127, 0, 5, 0, NO_ID)
    assert faders[5].volume == pytest.approx(1.0)
    assert faders[5].target == faders[5].volume


def test_fade_reaches_target_and_rises():
    faders = MasterFaders()
    faders.set_volume(127, 10, 5, 0, NO_ID)
    assert faders[5].active
    seen = []
    while faders[5].active:
        faders.step()
        seen.append(faders[5].volume)
    assert seen == sorted(seen)
    assert seen[-1] == faders[5].target
    assert not faders.is_fade_out_active(5)


def test_fade_out_detection():
    faders = MasterFaders()
    faders.set_group_type(3, TYPE_MUSIC)
    faders.set_volume(127, 0, 3)
    faders.set_volume(0, 100, 3)
    assert faders.is_fade_out_active(3)
    faders.set_group_type(3, TYPE_UNUSED)
    assert not faders.is_fade_out_active(3)


def test_termination_callback_at_end_of_fade():
    calls = []
    faders = MasterFaders(on_terminate=lambda f: calls.append((f.seq_mode, f.seq_id)))
    faders.set_volume(0, 5, 2, SEQ_STOP, 42)
    while faders[2].active:
        faders.step()
    assert calls == [(SEQ_STOP, 42)]


def test_immediate_with_sequence_terminates():
    calls = []
    faders = MasterFaders(on_terminate=lambda f: calls.append(f.seq_id))
    faders.set_volume(0, 0, 2, SEQ_STOP, 7)
    assert calls == [7]


def test_selector_touches_only_matching_types():
    faders = MasterFaders()
    faders.set_volume(127, 0, VolumeGroup.MUSIC)
    assert all(faders[i].volume == pytest.approx(1.0) for i in range(23, 31))
    assert faders[31].volume == 0.0
    faders.set_group_type(4, TYPE_USER_FX)
    faders.set_volume(127, 0, VolumeGroup.USER_ALL)
    assert faders[4].volume == pytest.approx(1.0)
    assert faders[0].volume == 0.0


def test_pause_volume_fades():
    faders = MasterFaders()
    faders.pause_volume(0, 0, 7)
    assert faders[7].pause_active
    while faders[7].pause_active:
        faders.step()
    assert faders[7].pause_vol == faders[7].pause_target
    assert faders[7].pause_vol == 0.0


def test_invalid_group():
    faders = MasterFaders()
    with pytest.raises(ValueError):
        faders.set_volume(10, 0, 40)
    with pytest.raises(ValueError):
        faders.pause_volume(10, 0, 32)
    with pytest.raises(ValueError):
        faders.is_fade_out_active(99)