"""Tempo table: sequencer ticks per second for each MIDI set and section."""

from __future__ import annotations

_U32 = 0xFFFFFFFF
_FX_SET = 0xFF
_NUM_SETS = 8
_NUM_SECTIONS = 16


class Tempo:
    """Ticks-per-second table for 8 MIDI sets, plus one for sound effects.

    A fresh table has the effects set's first section at 120 bpm.
    """

    def __init__(self) -> None:
        self._table = [[0] * _NUM_SECTIONS for _ in range(_NUM_SETS + 1)]
        self.set_bpm(120, _FX_SET, 0)

    @staticmethod
    def _row(midi_set: int) -> int:
        if midi_set == _FX_SET:
            return _NUM_SETS
        if not 0 <= midi_set < _NUM_SETS:
            raise ValueError(f"invalid MIDI set {midi_set}")
        return midi_set

    @staticmethod
    def _check_section(section: int) -> None:
        if not 0 <= section < _NUM_SECTIONS:
            raise ValueError(f"invalid section {section}")

    def set_bpm(self, bpm: int, midi_set: int, section: int) -> None:
        """Set the tempo of ``section`` in ``midi_set`` (0xFF for effects)."""
        row = self._row(midi_set)
        self._check_section(section)
        self._table[row][section] = ((((bpm << 3) & _U32) * 1536) & _U32) // 240

    def ticks_per_second(self, midi_set: int, section: int) -> int:
        """Ticks per second of ``section`` in ``midi_set`` (0xFF for effects)."""
        row = self._row(midi_set)
        self._check_section(section)
        return self._table[row][section]