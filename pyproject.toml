[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "musynth"
version = "0.1.0"
description = "Control model of a macro-driven game sound synthesizer: MIDI controllers, voice inputs, pitch tables, portamento, master faders and a voice job queue"
requires-python = ">=3.10"
dependencies = []
keywords = ["synthesizer", "midi", "controllers", "portamento", "fader", "audio", "sound"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["musynth"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
