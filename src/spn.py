from typing import Sequence, Tuple

from src.errors import InvalidConfiguration, InvalidKeySchedule
from src.sbox import SBOX, SBOX_INV

BLOCK_BITS = 16
KEY_BITS = 80
NUM_ROUNDS = 4
NUM_ROUND_KEYS = NUM_ROUNDS + 1
NIBBLES_PER_BLOCK = BLOCK_BITS // 4

BLOCK_MASK = (1 << BLOCK_BITS) - 1

# Bit i of the state moves to PBOX[i]: transpose of the 4x4 bit matrix
PBOX = tuple((i % 4) * 4 + i // 4 for i in range(BLOCK_BITS))


def _apply_sbox(block: int, table: Tuple[int, ...]) -> int:
    output = 0
    for i in range(NIBBLES_PER_BLOCK):
        nibble = (block >> (4 * i)) & 0xF
        output |= table[nibble] << (4 * i)
    return output


def substitute(block: int) -> int:
    """
    Apply the S-box independently to each of the four nibbles of a 16-bit block.
    """
    return _apply_sbox(block, SBOX)


def inverse_substitute(block: int) -> int:
    """
    Apply the inverse S-box to each nibble; exact inverse of substitute().
    """
    return _apply_sbox(block, SBOX_INV)


def permute(block: int) -> int:
    """
    Transpose the 16 bits viewed as a 4x4 matrix.

    The transpose is its own inverse, so the same function serves
    encryption and decryption.
    """
    output = 0
    for i in range(BLOCK_BITS):
        bit = (block >> i) & 1
        output |= bit << PBOX[i]
    return output


def expand_key(master_key: int, round_count: int = NUM_ROUND_KEYS) -> Tuple[int, ...]:
    """
    Slice an 80-bit master key into 16-bit round keys, most-significant chunk first.

    Args:
        master_key: The 80-bit master key as an int.
        round_count: Number of round keys to derive (at most 5).

    Returns:
        Tuple of round_count 16-bit round keys.

    Raises:
        InvalidConfiguration: if round_count * 16 exceeds the key width, or
            the master key does not fit in 80 bits.
    """
    if round_count < 1 or round_count * BLOCK_BITS > KEY_BITS:
        raise InvalidConfiguration(
            f"cannot derive {round_count} round keys of {BLOCK_BITS} bits "
            f"from a {KEY_BITS}-bit master key"
        )
    if master_key < 0 or master_key >> KEY_BITS:
        raise InvalidConfiguration(f"master key must be a non-negative {KEY_BITS}-bit value")

    return tuple(
        (master_key >> (KEY_BITS - BLOCK_BITS * (i + 1))) & BLOCK_MASK
        for i in range(round_count)
    )


def _check_schedule(round_keys: Sequence[int]) -> None:
    if len(round_keys) != NUM_ROUND_KEYS:
        raise InvalidKeySchedule(
            f"expected {NUM_ROUND_KEYS} round keys, got {len(round_keys)}"
        )


def _check_block(block: int) -> None:
    if not 0 <= block <= BLOCK_MASK:
        raise InvalidConfiguration(f"block must be a {BLOCK_BITS}-bit value, got {block:#x}")


def encrypt(plaintext: int, round_keys: Sequence[int]) -> int:
    """
    Encrypt a 16-bit block with a 5-entry round key schedule.
    """
    _check_schedule(round_keys)
    _check_block(plaintext)

    # Whitening
    state = plaintext ^ round_keys[0]

    for rnd in range(1, NUM_ROUNDS):
        state = substitute(state)
        state = permute(state)
        state ^= round_keys[rnd]

    # Final round has no permutation
    state = substitute(state)
    return state ^ round_keys[NUM_ROUNDS]


def decrypt(ciphertext: int, round_keys: Sequence[int]) -> int:
    """
    Decrypt a 16-bit block; exact inverse of encrypt() for the same schedule.
    """
    _check_schedule(round_keys)
    _check_block(ciphertext)

    state = ciphertext ^ round_keys[NUM_ROUNDS]
    state = inverse_substitute(state)

    for rnd in range(NUM_ROUNDS - 1, 0, -1):
        state ^= round_keys[rnd]
        state = permute(state)
        state = inverse_substitute(state)

    return state ^ round_keys[0]
