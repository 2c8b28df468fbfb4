"""
Differential key recovery of one nibble of the final round key.

Chosen plaintext pairs with the input difference delta_p are partially
decrypted through the last S-box under each key-nibble guess; the correct
guess reproduces the expected difference delta_u far more often than chance.
"""
from typing import Tuple

import numpy as np

from src.errors import NoSurvivingPairs
from src.sbox import SBOX_INV_TABLE
from src.utils import (
    NUM_CANDIDATES,
    accumulate_counts,
    check_nibble_index,
    pairs_to_array,
)

_CANDIDATES = np.arange(NUM_CANDIDATES, dtype=np.int64)


def filter_right_pairs(pairs, delta_p: int) -> np.ndarray:
    """
    Keep only the quadruples (p1, p2, c1, c2) with p1 ^ p2 == delta_p.

    Raises:
        EmptyPairSet: if pairs is empty.
        NoSurvivingPairs: if no quadruple has the required input difference.
    """
    data = pairs_to_array(pairs, 4)
    right = data[(data[:, 0] ^ data[:, 1]) == delta_p]
    if len(right) == 0:
        raise NoSurvivingPairs(
            f"none of the {len(data)} pairs has input difference {delta_p:#06x}"
        )
    return right


def differential_candidate_counts(pairs, delta_p: int, delta_u: int, nibble_index: int,
                                  workers: int = 1) -> Tuple[np.ndarray, int]:
    """
    Count, for every key-nibble candidate, the right pairs whose partially
    decrypted target nibbles differ by delta_u's target nibble.

    Returns:
        (counts, num_right_pairs) where counts is an int64 array of length 16.
    """
    check_nibble_index(nibble_index)
    right = filter_right_pairs(pairs, delta_p)
    shift = 4 * nibble_index
    target_diff = (delta_u >> shift) & 0xF

    def count_chunk(chunk):
        c1 = (chunk[:, 2] >> shift) & 0xF
        c2 = (chunk[:, 3] >> shift) & 0xF
        v1 = SBOX_INV_TABLE[c1[:, None] ^ _CANDIDATES[None, :]]
        v2 = SBOX_INV_TABLE[c2[:, None] ^ _CANDIDATES[None, :]]
        return ((v1 ^ v2) == target_diff).sum(axis=0).astype(np.int64)

    return accumulate_counts(count_chunk, right, workers), len(right)


def differential_attack(pairs, delta_p: int, delta_u: int, nibble_index: int,
                        workers: int = 1) -> int:
    """
    Recover one nibble of the final round key from chosen plaintext pairs.

    Args:
        pairs: (p1, p2, c1, c2) tuples or an (N, 4) integer array.
        delta_p: Plaintext difference that selects the right pairs.
        delta_u: Expected difference before the final S-box layer, already
            shifted to the target nibble.
        nibble_index: Target nibble of the final round key (0-3).
        workers: Number of threads to split the right pairs across.

    Returns:
        The candidate with the highest count, lowest value on ties.
    """
    counts, _ = differential_candidate_counts(pairs, delta_p, delta_u, nibble_index, workers)
    return int(np.argmax(counts))
