"""MIDI controller state for every channel of every MIDI set and effect voice."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .voice import Voice

FX_SET = 0xFF
NO_CHANNEL = 0xFF
NUM_SETS = 8
NUM_CHANNELS = 16
NUM_FX_CHANNELS = 64
NUM_CTRLS = 134

MAX_PB_RANGE = 24
MAX_LPF_BOUNDARY = 0x3FFF
ALL_DIRTY = 0x7FFF
ALL_GLOBAL_DIRTY = 0xFF

_RPN_PITCH_BEND_RANGE = 0x0000
_RPN_LPF_LOWER = 0x7F7D
_RPN_LPF_UPPER = 0x7F7E

_CTRL_DATA_ENTRY_HI = 6
_CTRL_DATA_ENTRY_LO = 38
_CTRL_DATA_DEC = 96
_CTRL_DATA_INC = 97
_CTRL_RPN_LSB = 100
_CTRL_RPN_MSB = 101

_COLD_VALUES = {7: 0x7F, 10: 0x40, 11: 0x7F, 98: 0x7F, 99: 0x7F, 100: 0x7F, 101: 0x7F,
                128: 0x40, 132: 0x40}
_WARM_VALUES = {1: 0x00, 11: 0x7F, 33: 0x00, 43: 0x7F, 64: 0x00, 65: 0x00, 66: 0x00,
                67: 0x00, 69: 0x00, 128: 0x40}

COLD_DEFAULTS: bytes = bytes(_COLD_VALUES.get(i, 0) for i in range(NUM_CTRLS))


@dataclass
class ChannelDefaults:
    """Per-channel settings that new voices on the channel pick up."""

    pb_range: int = 0
    lpf_lower_frq_boundary: int = 0
    lpf_upper_frq_boundary: int = 0


def _pair_base(ctrl: int) -> Optional[int]:
    """First controller of the 14-bit pair ``ctrl`` belongs to, or None."""
    if ctrl < 64:
        return ctrl & 31
    if ctrl in (128, 129, 132, 133):
        return ctrl & 254
    return None


class MidiControllers:
    """Controller values, last notes, channel defaults and dirty flags.

    ``voices`` is the synthesizer's voice list; voices listening to a channel
    are marked dirty when its controllers change.  ``on_key_state_update``,
    when set, is called with each such voice.
    """

    def __init__(self, voices: Sequence[Voice]) -> None:
        self.voices = voices
        self.on_key_state_update: Optional[Callable[[Voice], None]] = None
        self._midi_ctrl = [[bytearray(NUM_CTRLS) for _ in range(NUM_CHANNELS)]
                           for _ in range(NUM_SETS)]
        self._fx_ctrl = [bytearray(NUM_CTRLS) for _ in range(NUM_FX_CHANNELS)]
        self._midi_last_note = [[0] * NUM_CHANNELS for _ in range(NUM_SETS)]
        self._fx_last_note = [0] * NUM_FX_CHANNELS
        self._global_dirty = [[0] * NUM_CHANNELS for _ in range(NUM_SETS)]
        self._defaults = [[ChannelDefaults() for _ in range(NUM_CHANNELS)]
                          for _ in range(NUM_SETS)]
        self._fx_defaults = [ChannelDefaults() for _ in range(NUM_FX_CHANNELS)]
        self._lpf_low_default = 0
        self._lpf_high_default = 0

    # Addressing

    @staticmethod
    def _check(channel: int, midi_set: int) -> None:
        if midi_set == FX_SET:
            if not 0 <= channel < NUM_FX_CHANNELS:
                raise ValueError(f"invalid effect channel {channel}")
            return
        if not 0 <= midi_set < NUM_SETS:
            raise ValueError(f"invalid MIDI set {midi_set}")
        if not 0 <= channel < NUM_CHANNELS:
            raise ValueError(f"invalid MIDI channel {channel}")

    @staticmethod
    def _check_ctrl(ctrl: int) -> None:
        if not 0 <= ctrl < NUM_CTRLS:
            raise ValueError(f"invalid controller {ctrl}")

    def _row(self, channel: int, midi_set: int) -> bytearray:
        self._check(channel, midi_set)
        if midi_set == FX_SET:
            return self._fx_ctrl[channel]
        return self._midi_ctrl[midi_set][channel]

    def _voices_on(self, channel: int, midi_set: int) -> list[Voice]:
        return [v for v in self.voices if v.midi_set == midi_set and v.midi == channel]

    # Registered parameters

    def _rpn(self, row: bytearray) -> int:
        return row[_CTRL_RPN_LSB] | (row[_CTRL_RPN_MSB] << 8)

    def _set_pb_range(self, channel: int, midi_set: int, value: int) -> None:
        self.channel_defaults(channel, midi_set).pb_range = value
        for voice in self._voices_on(channel, midi_set):
            voice.pb_upper_key_range = value
            voice.pb_lower_key_range = value

    def _set_lpf(self, channel: int, midi_set: int, upper: bool, value: int) -> None:
        defaults = self.channel_defaults(channel, midi_set)
        attr = "lpf_upper_frq_boundary" if upper else "lpf_lower_frq_boundary"
        setattr(defaults, attr, value)
        for voice in self._voices_on(channel, midi_set):
            setattr(voice, attr, value)

    @staticmethod
    def _lpf_attr(rpn: int) -> Optional[bool]:
        if rpn == _RPN_LPF_LOWER:
            return False
        if rpn == _RPN_LPF_UPPER:
            return True
        return None

    def _rpn_hi(self, channel: int, midi_set: int, row: bytearray, value: int) -> None:
        rpn = self._rpn(row)
        if rpn == _RPN_PITCH_BEND_RANGE:
            self._set_pb_range(channel, midi_set, min(value, MAX_PB_RANGE))
            return
        upper = self._lpf_attr(rpn)
        if upper is not None:
            defaults = self.channel_defaults(channel, midi_set)
            old = defaults.lpf_upper_frq_boundary if upper else defaults.lpf_lower_frq_boundary
            self._set_lpf(channel, midi_set, upper, (value << 9) | (old & 0x1FF))

    def _rpn_lo(self, channel: int, midi_set: int, row: bytearray, value: int) -> None:
        upper = self._lpf_attr(self._rpn(row))
        if upper is not None:
            defaults = self.channel_defaults(channel, midi_set)
            old = defaults.lpf_upper_frq_boundary if upper else defaults.lpf_lower_frq_boundary
            self._set_lpf(channel, midi_set, upper, (value << 2) | (old & 0xFE00))

    def _rpn_step(self, channel: int, midi_set: int, row: bytearray, step: int) -> None:
        rpn = self._rpn(row)
        defaults = self.channel_defaults(channel, midi_set)
        if rpn == _RPN_PITCH_BEND_RANGE:
            value = defaults.pb_range
            if step < 0 and value != 0:
                value -= 1
            elif step > 0 and value < MAX_PB_RANGE:
                value += 1
            self._set_pb_range(channel, midi_set, value)
            return
        upper = self._lpf_attr(rpn)
        if upper is not None:
            value = defaults.lpf_upper_frq_boundary if upper else defaults.lpf_lower_frq_boundary
            if step < 0 and value != 0:
                value -= 1
            elif step > 0 and value != MAX_LPF_BOUNDARY:
                value += 1
            self._set_lpf(channel, midi_set, upper, value)

    # Controllers

    def set_ctrl(self, ctrl: int, channel: int, midi_set: int, value: int) -> None:
        """Set a 7-bit controller; data entry controllers also act on the current RPN."""
        if channel == NO_CHANNEL:
            return
        self._check_ctrl(ctrl)
        row = self._row(channel, midi_set)
        value &= 0xFF
        stored = value & 0x7F

        if ctrl == _CTRL_DATA_ENTRY_HI:
            self._rpn_hi(channel, midi_set, row, value)
            changed = True
        elif ctrl == _CTRL_DATA_ENTRY_LO:
            self._rpn_lo(channel, midi_set, row, value)
            changed = True
        elif ctrl == _CTRL_DATA_DEC:
            self._rpn_step(channel, midi_set, row, -1)
            changed = True
        elif ctrl == _CTRL_DATA_INC:
            self._rpn_step(channel, midi_set, row, 1)
            changed = True
        else:
            changed = row[ctrl] != stored

        row[ctrl] = stored
        if not changed:
            return
        for voice in self._voices_on(channel, midi_set):
            voice.midi_dirty_flags = ALL_DIRTY
            if self.on_key_state_update is not None:
                self.on_key_state_update(voice)
        if midi_set != FX_SET:
            self._global_dirty[midi_set][channel] = ALL_GLOBAL_DIRTY

    def set_ctrl14(self, ctrl: int, channel: int, midi_set: int, value: int) -> None:
        """Set a controller from a 14-bit value, both halves where it has a pair."""
        if channel == NO_CHANNEL:
            return
        value &= 0xFFFF
        high = (value >> 7) & 0xFF
        base = _pair_base(ctrl)
        if base is None:
            self.set_ctrl(ctrl, channel, midi_set, high)
            return
        low_ctrl = base + 32 if ctrl < 64 else base + 1
        self.set_ctrl(base, channel, midi_set, high)
        self.set_ctrl(low_ctrl, channel, midi_set, value & 0x7F)

    def get_ctrl(self, ctrl: int, channel: int, midi_set: int) -> int:
        """14-bit value of a controller; switches read as 0 or 0x3FFF."""
        if channel == NO_CHANNEL:
            return 0
        self._check_ctrl(ctrl)
        row = self._row(channel, midi_set)
        if ctrl < 0x40:
            base = ctrl & 0x1F
            return (row[base] << 7) | row[base + 0x20]
        if ctrl < 0x46:
            return 0 if row[ctrl] < 0x40 else 0x3FFF
        if 0x60 <= ctrl < 0x66:
            return 0
        if ctrl in (0x80, 0x81, 0x84, 0x85):
            base = ctrl & 0xFE
            return (row[base] << 7) | row[base + 1]
        return row[ctrl] << 7

    def reset_ctrl(self, channel: int, midi_set: int, cold: bool) -> None:
        """Reset a channel's controllers (cold: all of them) and forget its last note."""
        row = self._row(channel, midi_set)
        if cold:
            row[:] = COLD_DEFAULTS
        else:
            for ctrl, value in _WARM_VALUES.items():
                row[ctrl] = value
        self.set_last_note(channel, midi_set, 0xFF)

    # Channel defaults

    def channel_defaults(self, channel: int, midi_set: int) -> ChannelDefaults:
        """The channel's defaults, shared and mutable."""
        self._check(channel, midi_set)
        if midi_set == FX_SET:
            return self._fx_defaults[channel]
        return self._defaults[midi_set][channel]

    def reset_channel_defaults(self, channel: int, midi_set: int) -> None:
        """Pitch bend range of 2 semitones and the default filter range."""
        defaults = self.channel_defaults(channel, midi_set)
        defaults.pb_range = 2
        defaults.lpf_lower_frq_boundary = self._lpf_low_default
        defaults.lpf_upper_frq_boundary = self._lpf_high_default

    def set_lpf_default_range(self, low: int, high: int) -> None:
        """Filter range that reset channels start with."""
        self._lpf_low_default = low
        self._lpf_high_default = high

    # Last notes

    def set_last_note(self, channel: int, midi_set: int, key: int) -> None:
        """Remember the last note played on a channel."""
        self._check(channel, midi_set)
        if midi_set == FX_SET:
            self._fx_last_note[channel] = key & 0xFF
        else:
            self._midi_last_note[midi_set][channel] = key & 0xFF

    def last_note(self, channel: int, midi_set: int) -> int:
        """The last note played on a channel (0xFF after a reset)."""
        self._check(channel, midi_set)
        if midi_set == FX_SET:
            return self._fx_last_note[channel]
        return self._midi_last_note[midi_set][channel]

    def copy_fx_ctrl(self, ctrl: int, dest_id: int, src_id: int) -> None:
        """Copy a controller (both halves of a pair) between effect voices."""
        self._check_ctrl(ctrl)
        dest = self._row(dest_id, FX_SET)
        src = self._row(src_id, FX_SET)
        base = _pair_base(ctrl)
        if base is None:
            dest[ctrl] = src[ctrl]
            return
        other = base + 32 if ctrl < 64 else base + 1
        dest[base] = src[base]
        dest[other] = src[other]

    # Global dirty flags

    def reset_global_dirty_flags(self) -> None:
        """Mark every channel of every MIDI set dirty."""
        for flags in self._global_dirty:
            flags[:] = [ALL_GLOBAL_DIRTY] * NUM_CHANNELS

    def _check_global(self, channel: int, midi_set: int) -> None:
        if midi_set == FX_SET:
            raise ValueError("effect channels have no global dirty flags")
        self._check(channel, midi_set)

    def set_global_dirty(self, channel: int, midi_set: int, flag: int) -> None:
        """Set dirty bits of a channel."""
        self._check_global(channel, midi_set)
        self._global_dirty[midi_set][channel] |= flag

    def take_global_dirty(self, channel: int, midi_set: int, flag: int) -> bool:
        """True if any of ``flag`` was dirty; those bits are cleared."""
        self._check_global(channel, midi_set)
        flags = self._global_dirty[midi_set][channel]
        if flags & flag:
            self._global_dirty[midi_set][channel] = flags & ~flag
            return True
        return False