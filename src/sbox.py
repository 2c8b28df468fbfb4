import numpy as np

# PRESENT 4-bit S-box and its inverse
SBOX = (
    0xC, 0x5, 0x6, 0xB, 0x9, 0x0, 0xA, 0xD,
    0x3, 0xE, 0xF, 0x8, 0x4, 0x7, 0x1, 0x2,
)

SBOX_INV = (
    0x5, 0xE, 0xF, 0x8, 0xC, 0x1, 0x2, 0xD,
    0xB, 0x4, 0x6, 0x3, 0x0, 0x7, 0x9, 0xA,
)

# Lookup arrays for indexing with numpy integer arrays
SBOX_TABLE = np.array(SBOX, dtype=np.int64)
SBOX_INV_TABLE = np.array(SBOX_INV, dtype=np.int64)
SBOX_TABLE.setflags(write=False)
SBOX_INV_TABLE.setflags(write=False)

_PARITY4 = np.array([bin(x).count("1") & 1 for x in range(16)], dtype=np.int64)
_PARITY4.setflags(write=False)


def parity(value):
    """
    Parity (XOR of all bits) of a 16-bit value.

    Works on a plain int, returning an int, or elementwise on a numpy
    integer array, returning an array of 0/1.
    """
    if isinstance(value, np.ndarray):
        folded = value ^ (value >> 8)
        folded = folded ^ (folded >> 4)
        return _PARITY4[folded & 0xF]
    return bin(value & 0xFFFF).count("1") & 1
