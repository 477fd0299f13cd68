"""Voice inputs computed from MIDI controllers, variables, LFOs and time."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .controllers import NO_CHANNEL, MidiControllers
from .voice import MAX_SOURCES, NO_MIDI, CtrlDest, CtrlSource, Voice

_U32 = 0xFFFFFFFF
_CENTRE = 0x2000
_MAX_VALUE = 0x3FFF
_FULL_SCALE = 0x10000
_VARIABLE_FLAG = 0x10
_ALL_DIRTY = 0x7FFF

NUM_STUDIOS = 8
NUM_AUX_PARAMETERS = 4

_CTRL_LFO0 = 160
_CTRL_LFO1 = 161
_CTRL_NOTE = 162
_CTRL_VELOCITY = 163
_CTRL_TIME = 164

# Controllers whose values are centred around 0x2000.
_CENTRED_CTRLS = frozenset({128, 1, 10, _CTRL_LFO0, _CTRL_LFO1, 131})

_EX_CTRL_MAP = {
    0x80: 0x80,
    0x81: 0x82,
    0x82: 0xA0,
    0x83: 0xA1,
    0x84: 0x83,
    0x85: 0x84,
    0x86: 0xA2,
    0x87: 0xA3,
    0x88: 0xA4,
}

_AUX_A_MASKS = (0x80000001, 0x80000002, 0x80000004, 0x80000008)
_AUX_B_MASKS = (0x80000010, 0x80000020, 0x80000040, 0x80000080)

_LPF_LOW_DEFAULT = 80
_LPF_HIGH_DEFAULT = 16000


def _s32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    return ((value + 0x80000000) & _U32) - 0x80000000


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _centred(value: int) -> int:
    """Clamp a signed offset and move it back around the centre."""
    return _clamp(value, -_CENTRE, _CENTRE - 1) + _CENTRE


class InputKind(Enum):
    """Per-voice inputs, with the voice attribute and dirty bit of each."""

    VOLUME = ("inp_volume", 0x1)
    PANNING = ("inp_panning", 0x2)
    SURROUND_PANNING = ("inp_surround_panning", 0x4)
    PITCH_BEND = ("inp_pitch_bend", 0x8)
    DOPPLER = ("inp_doppler", 0x10)
    MODULATION = ("inp_modulation", 0x20)
    PEDAL = ("inp_pedal", 0x40)
    PRE_AUX_A = ("inp_pre_aux_a", 0x100)
    REVERB = ("inp_reverb", 0x200)
    PRE_AUX_B = ("inp_pre_aux_b", 0x400)
    POST_AUX_B = ("inp_post_aux_b", 0x800)
    TREMOLO = ("inp_tremolo", 0x1000)
    FILTER_SWITCH = ("inp_filter_switch", 0x2000)
    FILTER_PARAMETER = ("inp_filter_parameter", 0x4000)

    def __init__(self, attr: str, mask: int) -> None:
        self.attr = attr
        self.mask = mask


def translate_ex_ctrl(ctrl: int) -> int:
    """Map an extended controller number to its internal controller."""
    return _EX_CTRL_MAP.get(ctrl & 0xFF, ctrl & 0xFF)


def add_ctrl(dest: CtrlDest, ctrl: int, scale: int, comb: int, is_var: bool) -> None:
    """Add a source to an input; combine mode 0 starts the input afresh.

    Sources beyond the fourth are ignored.  A variable source reads the
    voice variable ``ctrl`` instead of a controller.
    """
    if comb == 0:
        dest.sources.clear()
    if len(dest.sources) >= MAX_SOURCES:
        return
    if is_var:
        comb |= _VARIABLE_FLAG
    else:
        ctrl = translate_ex_ctrl(ctrl)
    dest.sources.append(CtrlSource(midi_ctrl=ctrl & 0xFF, combine=comb & 0xFF, scale=scale))


def _default_source(ctrl: int) -> list[CtrlSource]:
    return [CtrlSource(midi_ctrl=ctrl, combine=0, scale=_FULL_SCALE)]


class Inputs:
    """Evaluates voice and studio inputs against the controller state.

    ``real_time`` is the synthesizer clock (1/256 ms) used by time sources.
    ``aux_a_inputs`` and ``aux_b_inputs`` hold the studio aux parameter
    inputs, indexed by studio and parameter.
    """

    def __init__(self, controllers: MidiControllers) -> None:
        self.controllers = controllers
        self.real_time = 0
        self.aux_a_inputs = [[CtrlDest() for _ in range(NUM_AUX_PARAMETERS)]
                             for _ in range(NUM_STUDIOS)]
        self.aux_b_inputs = [[CtrlDest() for _ in range(NUM_AUX_PARAMETERS)]
                             for _ in range(NUM_STUDIOS)]

    # Setup

    def init_voice(self, voice: Voice) -> None:
        """Give a voice its default controller routing and mark it all dirty."""
        voice.inp_volume.sources = [
            CtrlSource(midi_ctrl=7, combine=0, scale=_FULL_SCALE),
            CtrlSource(midi_ctrl=11, combine=2, scale=_FULL_SCALE),
        ]
        voice.inp_panning.sources = _default_source(10)
        voice.inp_surround_panning.sources = _default_source(131)
        voice.inp_pitch_bend.sources = _default_source(128)
        voice.inp_modulation.sources = _default_source(1)
        voice.inp_pedal.sources = _default_source(64)
        voice.inp_portamento.sources = _default_source(65)
        voice.inp_pre_aux_a.sources = []
        voice.inp_reverb.sources = _default_source(91)
        voice.inp_pre_aux_b.sources = []
        voice.inp_post_aux_b.sources = _default_source(93)
        voice.inp_doppler.sources = _default_source(132)
        voice.inp_tremolo.sources = []
        voice.inp_filter_switch.sources = _default_source(0x4F)
        voice.inp_filter_parameter.sources = _default_source(0x1F)
        voice.midi_dirty_flags = _ALL_DIRTY
        voice.lfo_used_by_input = [False, False]
        voice.time_used_by_input = False
        self.controllers.set_lpf_default_range(_LPF_LOW_DEFAULT, _LPF_HIGH_DEFAULT)

    def init_global(self) -> None:
        """Clear all studio aux inputs and mark every channel dirty."""
        for studio in (*self.aux_a_inputs, *self.aux_b_inputs):
            for dest in studio:
                dest.sources.clear()
        self.controllers.reset_global_dirty_flags()
        self.controllers.set_lpf_default_range(_LPF_LOW_DEFAULT, _LPF_HIGH_DEFAULT)

    # Evaluation

    def _centred_source(self, voice: Optional[Voice], ctrl: int, midi: int,
                        midi_set: int) -> int:
        if ctrl in (_CTRL_LFO0, _CTRL_LFO1):
            if voice is None:
                return 0
            n = ctrl - _CTRL_LFO0
            voice.lfo_used_by_input[n] = True
            return voice.lfo[n].value << 1
        return self.controllers.get_ctrl(ctrl, midi, midi_set) - _CENTRE

    def _plain_source(self, voice: Optional[Voice], ctrl: int, midi: int,
                      midi_set: int) -> int:
        if ctrl == _CTRL_NOTE:
            return voice.org_note << 7 if voice is not None else 0
        if ctrl == _CTRL_VELOCITY:
            return voice.org_volume >> 9 if voice is not None else 0
        if ctrl == _CTRL_TIME:
            if voice is None:
                return 0
            voice.time_used_by_input = True
            return min(_s32((self.real_time - voice.mac_start_time) >> 8), _MAX_VALUE)
        return self.controllers.get_ctrl(ctrl, midi, midi_set)

    @staticmethod
    def _add(value: int, tmp: int, signed: bool) -> int:
        if signed:
            return _centred(_s32(value + tmp - _CENTRE))
        return _clamp(_s32(value + tmp), 0, _MAX_VALUE)

    @staticmethod
    def _subtract(value: int, tmp: int, signed: bool) -> int:
        if signed:
            return _centred(_s32(value - _CENTRE - tmp))
        return _clamp(_s32(value - tmp), 0, _MAX_VALUE)

    def _combine_centred(self, op: int, value: int, tmp: int,
                         signed: bool) -> tuple[int, bool]:
        if op == 0:
            return (tmp + _CENTRE) & _U32, True
        if op == 1:
            return self._add(value, tmp, signed), signed
        if op == 2:
            if signed:
                vtmp = _s32((value - _CENTRE) * tmp) >> 13
            else:
                vtmp = _s32(((tmp * value) & _U32) >> 13)
            return _centred(vtmp), True
        if op == 3:
            return self._subtract(value, tmp, signed), signed
        return value, signed

    def _combine_plain(self, op: int, value: int, tmp: int,
                       signed: bool) -> tuple[int, bool]:
        if op == 0:
            return tmp & _U32, False
        if op == 1:
            if signed:
                return self._add(value, tmp, signed), signed
            return min((value + tmp) & _U32, _MAX_VALUE), signed
        if op == 2:
            if signed:
                return _centred(_s32(tmp * (value - _CENTRE)) >> 14), signed
            return min(((value * tmp) & _U32) >> 14, _MAX_VALUE), signed
        if op == 3:
            return self._subtract(value, tmp, signed), signed
        return value, signed

    def _evaluate(self, voice: Optional[Voice], dest: CtrlDest, midi: int,
                  midi_set: int) -> int:
        value = 0
        signed = False
        for source in dest.sources:
            ctrl = source.midi_ctrl
            if source.combine & _VARIABLE_FLAG:
                raw = _s32(voice.variables.get(ctrl, 0)) if voice is not None else 0
                centred = True
            elif ctrl in _CENTRED_CTRLS:
                raw = self._centred_source(voice, ctrl, midi, midi_set)
                centred = True
            else:
                raw = self._plain_source(voice, ctrl, midi, midi_set)
                centred = False
            tmp = _s32(raw * (source.scale >> 1)) >> 15
            op = source.combine & 0xF
            if centred:
                tmp = _clamp(tmp, -_CENTRE, _CENTRE - 1)
                value, signed = self._combine_centred(op, value, tmp, signed)
            else:
                tmp = min(tmp, _MAX_VALUE)
                value, signed = self._combine_plain(op, value, tmp, signed)
        dest.old_value = value & 0xFFFF
        return dest.old_value

    def get(self, voice: Voice, kind: InputKind) -> int:
        """Value of a voice input; recomputed only when its dirty bit is set."""
        dest: CtrlDest = getattr(voice, kind.attr)
        if not voice.midi_dirty_flags & kind.mask:
            return dest.old_value
        voice.midi_dirty_flags &= ~kind.mask
        return self._evaluate(voice, dest, voice.midi, voice.midi_set)

    def _global(self, dests: list[list[CtrlDest]], masks: tuple[int, ...], studio: int,
                index: int, midi: int, midi_set: int) -> int:
        if not 0 <= studio < NUM_STUDIOS:
            raise ValueError(f"invalid studio {studio}")
        if not 0 <= index < NUM_AUX_PARAMETERS:
            raise ValueError(f"invalid aux parameter {index}")
        dest = dests[studio][index]
        if not self.controllers.take_global_dirty(midi, midi_set, masks[index]):
            return dest.old_value
        return self._evaluate(None, dest, midi, midi_set)

    def aux_a(self, studio: int, index: int, midi: int, midi_set: int) -> int:
        """Value of a studio's aux A parameter input for a MIDI channel."""
        return self._global(self.aux_a_inputs, _AUX_A_MASKS, studio, index, midi, midi_set)

    def aux_b(self, studio: int, index: int, midi: int, midi_set: int) -> int:
        """Value of a studio's aux B parameter input for a MIDI channel."""
        return self._global(self.aux_b_inputs, _AUX_B_MASKS, studio, index, midi, midi_set)

    # Extended controllers

    def get_ex_ctrl(self, voice: Voice, ctrl: int) -> int:
        """Read an extended controller of a voice as a 14-bit value."""
        target = translate_ex_ctrl(ctrl)
        if target == _CTRL_LFO0:
            return ((voice.lfo[0].value << 1) + _CENTRE) & 0xFFFF
        if target == _CTRL_LFO1:
            return ((voice.lfo[1].value << 1) + _CENTRE) & 0xFFFF
        if voice.midi == NO_MIDI:
            return 0
        return self.controllers.get_ctrl(ctrl & 0xFF, voice.midi, voice.midi_set)

    def set_ex_ctrl(self, voice: Voice, ctrl: int, value: int) -> None:
        """Write an extended controller of a voice, clamped to 14 bits.

        LFO controllers are read-only and ignored.
        """
        value = ((value + 0x8000) & 0xFFFF) - 0x8000
        value = _clamp(value, 0, _MAX_VALUE)
        if translate_ex_ctrl(ctrl) in (_CTRL_LFO0, _CTRL_LFO1):
            return
        if voice.midi != NO_CHANNEL:
            self.controllers.set_ctrl14(ctrl & 0xFF, voice.midi, voice.midi_set, value)