import pytest

from musynth.tempo import Tempo


def test_default_effects_tempo_is_120_bpm():
    tempo = Tempo()
    assert tempo.ticks_per_second(0xFF, 0) == 6144


def test_unset_sections_are_zero():
    tempo = Tempo()
    assert tempo.ticks_per_second(0, 0) == 0
    assert tempo.ticks_per_second(0xFF, 5) == 0


def test_fx_default_matches_explicit_120():
    tempo = Tempo()
    tempo.set_bpm(120, 3, 7)
    assert tempo.ticks_per_second(3, 7) == tempo.ticks_per_second(0xFF, 0)


def test_doubling_bpm_doubles_ticks():
    tempo = Tempo()
    tempo.set_bpm(120, 1, 0)
    tempo.set_bpm(240, 2, 0)
    assert tempo.ticks_per_second(2, 0) == 2 * tempo.ticks_per_second(1, 0)


def test_sections_are_independent():
    tempo = Tempo()
    tempo.set_bpm(90, 4, 2)
    tempo.set_bpm(180, 4, 3)
    assert tempo.ticks_per_second(4, 2) * 2 == tempo.ticks_per_second(4, 3)
    assert tempo.ticks_per_second(5, 2) == 0


def test_ticks_grow_with_bpm():
    tempo = Tempo()
    values = []
    for bpm in range(30, 300, 10):
        tempo.set_bpm(bpm, 0, 0)
        values.append(tempo.ticks_per_second(0, 0))
    assert values == sorted(values)


@pytest.mark.parametrize("midi_set", [8, 100, -1])
def test_invalid_set_rejected(midi_set):
    tempo = Tempo()
    with pytest.raises(ValueError):
        tempo.set_bpm(120, midi_set, 0)
    with pytest.raises(ValueError):
        tempo.ticks_per_second(midi_set, 0)


def test_invalid_section_rejected():
    tempo = Tempo()
    with pytest.raises(ValueError):
        tempo.set_bpm(120, 0, 16)
    with pytest.raises(ValueError):
        tempo.ticks_per_second(0, -1)