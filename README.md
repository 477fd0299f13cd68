# musynth

A pure-Python model of the control side of a macro-driven sound synthesizer
of the kind used by game sound engines: the bookkeeping between MIDI-style
control data and the mixer. It uses nothing beyond the standard library.

## Modules

- `musynth.pitch`: `pitch_up_one(note)` raises a 16-bit pitch by one
  semitone; `get_pitch(key, sample_info, mix_frequency)` gives the 4.12
  fixed-point playback pitch of a key for a sample whose root key is in the
  top byte of `sample_info` and whose rate is in its low 24 bits
  (0xFFFFFFFF selects a built-in default).
- `musynth.tempo`: `Tempo`, a ticks-per-second table for 8 MIDI sets plus
  the effects set (0xFF), 16 sections each, with `set_bpm` and
  `ticks_per_second`. A new table has the effects set's first section at
  120 bpm.
- `musynth.voice`: the `Voice` dataclass with its `CtrlDest` inputs (each a
  list of up to four `CtrlSource` entries) and its two `Lfo` oscillators.
- `musynth.controllers`: `MidiControllers`, the controller store for every
  channel of 8 MIDI sets and 64 effect voices. `set_ctrl` and `set_ctrl14`
  write 7- and 14-bit values (data entry, increment and decrement act on the
  pitch bend range and filter boundary RPNs), `get_ctrl` reads 14-bit values,
  `reset_ctrl` does cold or warm resets, and there are channel defaults,
  last notes, `copy_fx_ctrl` and global dirty flags. Voices on a changed
  channel are marked dirty and passed to `on_key_state_update` if it is set.
- `musynth.inputs`: `Inputs` combines controller sources, voice variables,
  LFOs, note, velocity and time into per-voice inputs (`InputKind`) and the
  studio aux parameters (`aux_a`, `aux_b`), recomputing only when dirty.
  `add_ctrl` and `translate_ex_ctrl` build and map sources; `get_ex_ctrl`
  and `set_ex_ctrl` read and write extended controllers.
- `musynth.portamento`: `init_portamento`, `apply_portamento` (glides a
  16.16 note value toward its target) and `convert_cents` (16.16 note value
  to 16.16 playback pitch).
- `musynth.faders`: `MasterFaders`, 32 volume group faders with
  `set_volume`, `pause_volume`, `step`, `is_fade_out_active` and
  `set_group_type`; `VolumeGroup` selects several groups by type.
- `musynth.jobqueue`: `JobQueue`, a 32-slot ring of per-voice jobs
  (`JobType.LOW`, `EVENT`, `ZERO`) with `add`, `pending` and `handle`.

## Example

```python
from musynth.pitch import get_pitch
from musynth.tempo import Tempo
from musynth.controllers import MidiControllers
from musynth.inputs import Inputs, InputKind
from musynth.voice import Voice
from musynth.jobqueue import JobQueue, JobType

print(get_pitch(64, 0x40005622, 32000))   # 2822

tempo = Tempo()
print(tempo.ticks_per_second(0xFF, 0))    # 6144

voice = Voice(midi=0, midi_set=0)
controllers = MidiControllers([voice])
controllers.reset_ctrl(0, 0, cold=True)
print(controllers.get_ctrl(7, 0, 0))      # 16256

inputs = Inputs(controllers)
inputs.init_voice(voice)
print(inputs.get(voice, InputKind.VOLUME))  # 16129

queue = JobQueue()
queue.add(3, JobType.LOW, 0)
queue.handle({JobType.LOW: print})        # prints 3
```

## What it does not do

The package models control state only. It produces no audio, drives no
mixing hardware, has no envelope generator, loads no sound banks or sample
data, and runs no sequencer; callers supply those and connect them through
the callbacks (`on_key_state_update`, `on_terminate`) and the job handlers.

## Running the tests

```
pip install -e .[test]
pytest
```