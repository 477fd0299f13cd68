"""Control model of a sound synthesizer: pitch, tempo, MIDI controllers, voice inputs, portamento, faders and job queue."""

__version__ = "0.1.0"