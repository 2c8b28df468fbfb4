"""
Matsui-style linear key recovery of one nibble of the final round key.

The last round of the cipher is an S-box layer followed by the round key XOR
with no permutation, so each ciphertext nibble depends on exactly one nibble
of the last round key. Guessing that nibble lets us peel off the final
S-box and test the linear approximation on the state just before it.
"""
import numpy as np

from src.sbox import SBOX_INV_TABLE, parity
from src.utils import (
    NUM_CANDIDATES,
    accumulate_counts,
    check_nibble_index,
    pairs_to_array,
)

_CANDIDATES = np.arange(NUM_CANDIDATES, dtype=np.int64)


def linear_candidate_counts(pairs, alpha: int, beta: int, nibble_index: int,
                            workers: int = 1) -> np.ndarray:
    """
    Count, for every key-nibble candidate, how many pairs satisfy
    <alpha, P> = <beta, U> where U is the partially decrypted target nibble.

    Args:
        pairs: (plaintext, ciphertext) tuples or an (N, 2) integer array.
        alpha: 16-bit mask over the plaintext.
        beta: 16-bit mask over the state before the final S-box layer,
            already shifted to the target nibble.
        nibble_index: Target nibble of the final round key (0-3).
        workers: Number of threads to split the pairs across.

    Returns:
        int64 array of length 16 indexed by candidate.
    """
    check_nibble_index(nibble_index)
    data = pairs_to_array(pairs, 2)
    shift = 4 * nibble_index
    beta_nibble = (beta >> shift) & 0xF

    def count_chunk(chunk):
        alpha_parity = parity(chunk[:, 0] & alpha)
        cipher_nibbles = (chunk[:, 1] >> shift) & 0xF
        # rows: pairs, columns: candidates
        u = SBOX_INV_TABLE[cipher_nibbles[:, None] ^ _CANDIDATES[None, :]]
        beta_parity = parity(u & beta_nibble)
        return (beta_parity == alpha_parity[:, None]).sum(axis=0).astype(np.int64)

    return accumulate_counts(count_chunk, data, workers)


def linear_attack(pairs, alpha: int, beta: int, nibble_index: int, workers: int = 1) -> int:
    """
    Recover one nibble of the final round key from known plaintext/ciphertext pairs.

    The candidate whose match count deviates most from half the pairs wins;
    ties go to the lowest candidate. Too few pairs for the bias simply gives
    an unreliable answer, it is not an error.

    Raises:
        EmptyPairSet: if pairs is empty.
    """
    data = pairs_to_array(pairs, 2)
    counts = linear_candidate_counts(data, alpha, beta, nibble_index, workers)
    return best_linear_candidate(counts, len(data))


def best_linear_candidate(counts: np.ndarray, total: int) -> int:
    """Candidate with the largest |count / total - 0.5|, lowest value on ties."""
    # |2 * count - total| orders candidates the same way without float rounding
    deviation = np.abs(2 * np.asarray(counts, dtype=np.int64) - total)
    return int(np.argmax(deviation))


def candidate_biases(counts: np.ndarray, total: int) -> np.ndarray:
    """Empirical bias count / total - 0.5 for each candidate."""
    return counts / total - 0.5
