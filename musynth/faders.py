"""Master volume faders for the synthesizer's volume groups."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional

NO_ID = 0xFFFFFFFF
NUM_FADERS = 32

MUSIC_MASTER = 21
FX_MASTER = 22

TYPE_MUSIC = 0
TYPE_FX = 1
TYPE_USER_MUSIC = 2
TYPE_USER_FX = 3
TYPE_UNUSED = 4

SEQ_STOP = 1
SEQ_PAUSE = 2
SEQ_MUTE = 3

_MS_TO_TIME = 256
_FRAME_TIME = 1280.0


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


_ONE_OVER_127 = _f32(1.0 / 127.0)


def _level(volume: int) -> float:
    """Gain of a 7-bit volume."""
    return _f32(float(volume & 0xFF) * _ONE_OVER_127)


class VolumeGroup(IntEnum):
    """Selectors that address several volume groups at once, by group type."""

    USER_MUSIC = 0xFA
    USER_FX = 0xFB
    USER_ALL = 0xFC
    MUSIC = 0xFD
    FX = 0xFE
    ALL = 0xFF


_SELECTED_TYPES = {
    VolumeGroup.ALL: frozenset({TYPE_MUSIC, TYPE_FX}),
    VolumeGroup.USER_ALL: frozenset({TYPE_USER_MUSIC, TYPE_USER_FX}),
    VolumeGroup.USER_MUSIC: frozenset({TYPE_USER_MUSIC}),
    VolumeGroup.USER_FX: frozenset({TYPE_USER_FX}),
    VolumeGroup.MUSIC: frozenset({TYPE_MUSIC}),
    VolumeGroup.FX: frozenset({TYPE_FX}),
}


@dataclass
class Fader:
    """State of one volume group's fader and its pause fader.

    ``time`` runs from 1 down to 0 over a fade, dropping by ``delta_time``
    each frame; the pause fader works the same way.
    """

    type: int = TYPE_UNUSED
    volume: float = 0.0
    start: float = 0.0
    target: float = 0.0
    time: float = 0.0
    delta_time: float = 0.0
    pause_vol: float = 1.0
    pause_start: float = 0.0
    pause_target: float = 0.0
    pause_time: float = 0.0
    pause_delta_time: float = 0.0
    seq_mode: int = 0
    seq_id: int = NO_ID
    active: bool = False
    pause_active: bool = False


class MasterFaders:
    """The 32 volume group faders.

    ``on_terminate(fader)`` is called when a fade ends for a fader whose
    ``seq_mode`` asks for its sequence to be stopped, paused or muted.
    """

    def __init__(self, on_terminate: Optional[Callable[[Fader], None]] = None) -> None:
        self.on_terminate = on_terminate
        self.faders = [Fader() for _ in range(NUM_FADERS)]
        self.faders[31].type = TYPE_FX
        for fader in self.faders[23:31]:
            fader.type = TYPE_MUSIC
        self.faders[MUSIC_MASTER].volume = 1.0
        self.faders[FX_MASTER].volume = 1.0

    def __getitem__(self, vgroup: int) -> Fader:
        return self.faders[self._index(vgroup)]

    @staticmethod
    def _index(vgroup: int) -> int:
        if not 0 <= vgroup < NUM_FADERS:
            raise ValueError(f"invalid volume group {vgroup}")
        return vgroup

    def _targets(self, vgroup: int) -> Optional[list[Fader]]:
        try:
            selector = VolumeGroup(vgroup)
        except ValueError:
            return None
        types = _SELECTED_TYPES[selector]
        return [f for f in self.faders if f.type in types]

    def _terminate(self, fader: Fader) -> None:
        if fader.seq_mode in (SEQ_STOP, SEQ_PAUSE, SEQ_MUTE) and self.on_terminate is not None:
            self.on_terminate(fader)

    def _setup(self, fader: Fader, volume: int, ltime: int, seq_mode: int, seq_id: int) -> None:
        fader.seq_mode = seq_mode
        fader.seq_id = seq_id
        if ltime != 0:
            fader.start = fader.volume
            fader.target = _level(volume)
            fader.time = 1.0
            fader.delta_time = _f32(_FRAME_TIME / float(ltime))
        else:
            fader.target = _level(volume)
            fader.volume = fader.target
            if fader.seq_id != NO_ID:
                self._terminate(fader)

    def set_volume(self, volume: int, time: int, vgroup: int, seq_mode: int = 0,
                   seq_id: int = NO_ID) -> None:
        """Fade a group (or a selection of groups) to ``volume`` over ``time`` ms.

        A time of 0 sets the volume at once.  The sequence id only applies
        to a single group; selections fade with no sequence attached.
        """
        ltime = (time & 0xFFFF) * _MS_TO_TIME
        targets = self._targets(vgroup)
        if targets is not None:
            for fader in targets:
                self._setup(fader, volume, ltime, seq_mode, NO_ID)
                fader.active = True
            return
        fader = self.faders[self._index(vgroup)]
        self._setup(fader, volume, ltime, seq_mode, seq_id)
        fader.active = True

    def pause_volume(self, volume: int, time: int, vgroup: int) -> None:
        """Fade the pause volume of a group (or selection) over ``time`` ms (at least 1)."""
        time &= 0xFFFF
        if time == 0:
            time = 1
        ltime = time * _MS_TO_TIME
        targets = self._targets(vgroup)
        if targets is None:
            targets = [self.faders[self._index(vgroup)]]
        for fader in targets:
            fader.pause_start = fader.pause_vol
            fader.pause_target = _level(volume)
            fader.pause_time = 1.0
            fader.pause_delta_time = _f32(_FRAME_TIME / float(ltime))
            fader.pause_active = True

    def step(self) -> None:
        """Advance every running fade by one frame."""
        for fader in self.faders:
            if fader.active:
                span = _f32(fader.target - fader.start)
                fader.volume = _f32(fader.target - _f32(fader.time * span))
                fader.time = _f32(fader.time - fader.delta_time)
                if fader.time <= 0.0:
                    fader.volume = fader.target
                    self._terminate(fader)
                    fader.active = False
            if fader.pause_active:
                span = _f32(fader.pause_target - fader.pause_start)
                fader.pause_vol = _f32(fader.pause_target - _f32(fader.pause_time * span))
                fader.pause_time = _f32(fader.pause_time - fader.pause_delta_time)
                if fader.pause_time <= 0.0:
                    fader.pause_vol = fader.pause_target
                    fader.pause_active = False

    def is_fade_out_active(self, vgroup: int) -> bool:
        """True while a used group is fading to a lower volume."""
        fader = self.faders[self._index(vgroup)]
        return fader.type != TYPE_UNUSED and fader.active and fader.start > fader.target

    def set_group_type(self, vgroup: int, group_type: int) -> None:
        """Set which kind of sound a volume group belongs to."""
        self.faders[self._index(vgroup)].type = group_type