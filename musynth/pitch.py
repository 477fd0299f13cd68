"""Pitch computation from keys and sample root keys."""

from __future__ import annotations

import struct

_U32 = 0xFFFFFFFF
_DEFAULT_SAMPLE_INFO = 0x40005622


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


_SEMITONE = _f32(1.0594631)
_FOUR_K = _f32(4096.0)

_TONE_UP: tuple[float, ...] = tuple(
    _f32(v)
    for v in (
        1.0, 1.0594635, 1.1224623, 1.1892071, 1.2599211, 1.3348398, 1.4142141,
        1.4983072, 1.5874014, 1.6817932, 1.7817984, 1.8877487, 2.000001, 2.118927,
        2.2449245, 2.378415, 2.519843, 2.6696806, 2.8284283, 2.9966154, 3.1748037,
        3.3635874, 3.5635967, 3.7754984, 4.000002, 4.237854, 4.48985, 4.75683,
        5.039686, 5.339362, 5.6568565, 5.993231, 6.3496075, 6.7271748, 7.1271935,
        7.5509977, 8.000004, 8.475709, 8.979701, 9.513661, 10.079373, 10.678724,
        11.313714, 11.986463, 12.699215, 13.4543495, 14.254387, 15.101996, 16.000008,
        16.951418, 17.959402, 19.027323, 20.158747, 21.357449, 22.627428, 23.972925,
        25.39843, 26.908699, 28.508774, 30.203993, 32.000015, 33.902836, 35.918804,
        38.054646, 40.317493, 42.714897, 45.254856, 47.94585, 50.79686, 53.817398,
        57.017548, 60.407986, 64.00003, 67.80567, 71.83761, 76.10929, 80.63499,
        85.429794, 90.50971, 95.8917, 101.59372, 107.634796, 114.035095, 120.81597,
        128.00006, 135.61134, 143.67522, 152.21858, 161.26997, 170.85959, 181.01942,
        191.7834, 203.18744, 215.26959, 228.07019, 241.63194, 256.00012, 271.2227,
        287.35043, 304.43716, 322.53995, 341.71918, 362.03885, 383.5668, 406.37488,
        430.53918, 456.14038, 483.2639, 512.00024, 542.4454, 574.70087, 608.8743,
        645.0799, 683.43835, 724.0777, 767.1336, 812.74976, 861.07837, 912.28076,
        966.5278, 1024.0005, 1084.8907, 1149.4017, 1217.7487, 1290.1598, 1366.8767,
        1448.1554, 1534.2672,
    )
)

_TONE_DOWN: tuple[float, ...] = tuple(
    _f32(v)
    for v in (
        1.0, 0.94387436, 0.8908987, 0.8408966, 0.7937002, 0.74915314,
        0.7071066, 0.66741943, 0.62996006, 0.59460354, 0.56123066, 0.52973175,
        0.5, 0.47193718, 0.44544888, 0.4204483, 0.3968506, 0.37457657,
        0.35355282, 0.33370972, 0.3149805, 0.2973013, 0.2806158, 0.26486588,
        0.25, 0.23596859, 0.22272491, 0.21022415, 0.1984253, 0.18728828,
        0.17677689, 0.16685486, 0.15748978, 0.14865112, 0.14030743, 0.13243294,
        0.125, 0.11798382, 0.11136246, 0.105112076, 0.09921265, 0.09364414,
        0.08838844, 0.08342743, 0.07874489, 0.07432556, 0.07015419, 0.06621647,
        0.0625, 0.058992386, 0.05568123, 0.052556038, 0.049606323, 0.046822548,
        0.04419422, 0.041713715, 0.039372444, 0.03716278, 0.035077095, 0.033107758,
        0.03125, 0.029496193, 0.027840614, 0.026277542, 0.024803162, 0.023410797,
        0.022096634, 0.020856857, 0.019686699, 0.01858139, 0.01753807, 0.016553879,
        0.015625, 0.01474762, 0.01391983, 0.013138771, 0.012401581, 0.011705399,
        0.011048317, 0.010428429, 0.009842873, 0.009290695, 0.008769035, 0.008276939,
        0.0078125, 0.00737381, 0.006959915, 0.0065698624, 0.0062007904, 0.0058526993,
        0.0055246353, 0.005214691, 0.004921913, 0.0046453476, 0.0043849945, 0.0041389465,
        0.00390625, 0.003686905, 0.0034799576, 0.0032844543, 0.0031003952, 0.0029268265,
        0.0027618408, 0.0026073456, 0.0024604797, 0.002322197, 0.0021924973, 0.0020694733,
        0.001953125, 0.0018434525, 0.0017404556, 0.0016422272, 0.0015497208, 0.0014629364,
        0.0013809204, 0.0013036728, 0.0012302399, 0.0011615753, 0.0010957718, 0.0010347366,
        9.765625e-4, 9.2220306e-4, 8.69751e-4, 8.211136e-4, 7.753372e-4, 7.314682e-4,
        6.904602e-4, 6.5135956e-4,
    )
)


def pitch_up_one(note: int) -> int:
    """Raise a 16-bit pitch value by one semitone, truncating the result."""
    return int(_f32(float(note & 0xFFFF) * _SEMITONE))


def get_pitch(key: int, sample_info: int, mix_frequency: int) -> int:
    """Playback pitch (4.12 fixed point) of ``key`` for a sample.

    ``sample_info`` holds the sample's root key in its top byte and its
    sample rate in the low 24 bits; 0xFFFFFFFF selects the built-in default.
    """
    if mix_frequency <= 0:
        raise ValueError("mix_frequency must be positive")
    key &= 0xFF
    sample_info &= _U32
    if sample_info == _U32:
        sample_info = _DEFAULT_SAMPLE_INFO

    root_key = sample_info >> 24
    rate = _f32(float(sample_info & 0xFFFFFF))

    if key != root_key:
        distance = abs(key - root_key)
        if distance >= len(_TONE_UP):
            raise ValueError(f"key {key} is too far from root key {root_key}")
        factor = _TONE_UP[distance] if root_key < key else _TONE_DOWN[distance]
        frequency = _f32(rate * factor)
    else:
        frequency = rate

    scaled = _f32(_FOUR_K * frequency)
    pitch = _f32(scaled / _f32(float(mix_frequency)))
    return int(pitch) & _U32