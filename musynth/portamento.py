"""Portamento glides and conversion of note cents to playback pitch."""

from __future__ import annotations

from .pitch import get_pitch, pitch_up_one
from .voice import Voice

_U32 = 0xFFFFFFFF
_PORTAMENTO_ACTIVE = 0x400
_PORTAMENTO_CTRL_SEEN = 0x1000
_LEGATO_GLIDE = 0x20000


def _s32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    return ((value + 0x80000000) & _U32) - 0x80000000


def _div_trunc(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def init_portamento(voice: Voice) -> None:
    """Start a glide from the voice's last note, unless a legato glide runs."""
    if voice.c_flags & _LEGATO_GLIDE:
        return
    if voice.port_type == 1 and not voice.c_flags & _PORTAMENTO_CTRL_SEEN:
        voice.port_time = 0
    else:
        voice.port_time = voice.port_duration
    voice.port_cur_pitch = (voice.last_note << 16) & _U32


def apply_portamento(voice: Voice, ccents: int, delta_time: int) -> int:
    """Move the glide ``delta_time`` toward ``ccents`` and return the pitch to use.

    Pitches are note numbers in 16.16 fixed point.  Once the glide would
    reach or pass the target it ends and the target is returned.
    """
    ccents &= _U32
    remaining = _s32(((voice.port_duration - voice.port_time) & _U32) >> 8)
    if not voice.c_flags & _PORTAMENTO_ACTIVE or remaining <= 0:
        return ccents

    old = voice.port_cur_pitch & _U32
    step = _s32(_s32(delta_time) * (_s32(ccents - old) >> 8))
    voice.port_cur_pitch = (old + _div_trunc(step, remaining)) & _U32
    current = voice.port_cur_pitch

    if (old < ccents and current < ccents) or (old > ccents and current > ccents):
        voice.port_time = (voice.port_time + delta_time) & _U32
        return current
    voice.port_time = voice.port_duration
    return ccents


def convert_cents(voice: Voice, ccents: int, mix_frequency: int) -> int:
    """Playback pitch (16.16) of a 16.16 note value for the voice's sample.

    The fraction of the note interpolates toward the next semitone.
    """
    ccents &= _U32
    cpitch = (get_pitch(ccents >> 16, voice.s_info, mix_frequency) << 16) & _U32
    detune = ccents & 0xFFFF
    if detune:
        base = cpitch >> 16
        step = (pitch_up_one(base) & 0xFFFF) - (base & 0xFFFF)
        cpitch = (cpitch + detune * step) & _U32
    return cpitch