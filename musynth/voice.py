"""Per-voice synthesizer state shared by the controller, input and timing code."""

from __future__ import annotations

from dataclasses import dataclass, field

NO_ID = 0xFFFFFFFF
NO_MIDI = 0xFF
MAX_SOURCES = 4


@dataclass
class CtrlSource:
    """One controller feeding an input: which controller, how it combines, its scale."""

    midi_ctrl: int = 0
    combine: int = 0
    scale: int = 0x10000


@dataclass
class CtrlDest:
    """An input built from up to four controller sources, with its last value."""

    sources: list[CtrlSource] = field(default_factory=list)
    old_value: int = 0


@dataclass
class Lfo:
    """A low-frequency oscillator of a voice."""

    period: int = 0
    value: int = 0
    last_value: int = 0x7FFF
    time: int = 0


@dataclass
class Voice:
    """State of one synthesizer voice.

    ``midi`` is the MIDI channel the voice listens to (0xFF for none) and
    ``midi_set`` the MIDI set (0xFF for sound effects, where ``midi`` is the
    voice's own index).
    """

    index: int = 0
    id: int = NO_ID
    parent: int = NO_ID
    child: int = NO_ID
    block: bool = False
    midi: int = NO_MIDI
    midi_set: int = 0
    section: int = 0
    studio: int = 0
    c_flags: int = 0
    s_info: int = NO_ID

    org_note: int = 0
    org_volume: int = 0
    cur_note: int = 0
    cur_detune: int = 0
    last_note: int = 0
    cur_pitch: int = 0
    mac_start_time: int = 0

    pb_upper_key_range: int = 2
    pb_lower_key_range: int = 2
    pb_last: int = 0x2000
    lpf_lower_frq_boundary: int = 0
    lpf_upper_frq_boundary: int = 0

    port_type: int = 0
    port_time: int = 25600
    port_duration: int = 0
    port_cur_pitch: int = 0
    port_last_ctrl_state: int = 0

    midi_dirty_flags: int = 0
    lfo: list[Lfo] = field(default_factory=lambda: [Lfo(), Lfo()])
    lfo_used_by_input: list[bool] = field(default_factory=lambda: [False, False])
    time_used_by_input: bool = False
    variables: dict[int, int] = field(default_factory=dict)

    inp_volume: CtrlDest = field(default_factory=CtrlDest)
    inp_panning: CtrlDest = field(default_factory=CtrlDest)
    inp_surround_panning: CtrlDest = field(default_factory=CtrlDest)
    inp_pitch_bend: CtrlDest = field(default_factory=CtrlDest)
    inp_doppler: CtrlDest = field(default_factory=CtrlDest)
    inp_modulation: CtrlDest = field(default_factory=CtrlDest)
    inp_pedal: CtrlDest = field(default_factory=CtrlDest)
    inp_portamento: CtrlDest = field(default_factory=CtrlDest)
    inp_pre_aux_a: CtrlDest = field(default_factory=CtrlDest)
    inp_reverb: CtrlDest = field(default_factory=CtrlDest)
    inp_pre_aux_b: CtrlDest = field(default_factory=CtrlDest)
    inp_post_aux_b: CtrlDest = field(default_factory=CtrlDest)
    inp_tremolo: CtrlDest = field(default_factory=CtrlDest)
    inp_filter_switch: CtrlDest = field(default_factory=CtrlDest)
    inp_filter_parameter: CtrlDest = field(default_factory=CtrlDest)