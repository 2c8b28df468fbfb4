from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from src.errors import EmptyPairSet, InvalidConfiguration
from src.spn import NIBBLES_PER_BLOCK, encrypt

NUM_CANDIDATES = 16


def get_nibble(value: int, index: int) -> int:
    """Return nibble `index` (0 = least significant) of a 16-bit value."""
    return (value >> (4 * index)) & 0xF


def to_hex(value: int, width: int = 4) -> str:
    """Format an int as zero-padded upper-case hex, e.g. 0x3a83 -> '3A83'."""
    return format(value, f"0{width}X")


def check_nibble_index(nibble_index: int) -> None:
    if not 0 <= nibble_index < NIBBLES_PER_BLOCK:
        raise InvalidConfiguration(
            f"nibble index must be in 0..{NIBBLES_PER_BLOCK - 1}, got {nibble_index}"
        )


def pairs_to_array(pairs, width: int) -> np.ndarray:
    """
    Convert a collection of pair tuples into an (N, width) int64 array.

    Raises:
        EmptyPairSet: if the collection holds no pairs.
        InvalidConfiguration: if the entries are not tuples of `width` values.
    """
    data = np.asarray(pairs, dtype=np.int64)
    if data.size == 0:
        raise EmptyPairSet("no pairs supplied")
    if data.ndim != 2 or data.shape[1] != width:
        raise InvalidConfiguration(
            f"expected tuples of {width} values, got data of shape {data.shape}"
        )
    return data


def accumulate_counts(
    count_chunk: Callable[[np.ndarray], np.ndarray],
    data: np.ndarray,
    workers: int = 1
) -> np.ndarray:
    """
    Sum the 16-entry candidate counters produced by count_chunk over data.

    With workers > 1 the rows are split into contiguous chunks, counted on a
    thread pool and summed element-wise; the total is the same as a single
    pass over all rows.
    """
    if workers < 1:
        raise InvalidConfiguration(f"workers must be at least 1, got {workers}")
    if workers == 1 or len(data) < 2:
        return count_chunk(data)

    chunks = [c for c in np.array_split(data, workers) if len(c)]
    counts = np.zeros(NUM_CANDIDATES, dtype=np.int64)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for partial in pool.map(count_chunk, chunks):
            counts += partial
    return counts


def _plaintexts(num_pairs: int, random: bool, seed) -> np.ndarray:
    if random:
        rng = np.random.default_rng(seed)
        return rng.integers(0, 1 << 16, size=num_pairs)
    # Sequential plaintexts wrap around the 16-bit block
    return np.arange(num_pairs) & 0xFFFF


def generate_linear_pairs(
    round_keys: Sequence[int],
    num_pairs: int,
    random: bool = False,
    seed=None,
    progress: bool = False
) -> List[Tuple[int, int]]:
    """
    Encrypt num_pairs plaintexts under round_keys for a known-plaintext attack.

    Args:
        round_keys: 5-entry round key schedule.
        num_pairs: How many (plaintext, ciphertext) pairs to produce.
        random: Draw plaintexts uniformly at random instead of 0, 1, 2, ...
        seed: Seed for numpy's default_rng when random is set.
        progress: Show a tqdm progress bar.

    Returns:
        List of (plaintext, ciphertext) tuples.
    """
    pairs = []
    for p in tqdm(_plaintexts(num_pairs, random, seed), desc="Encrypting pairs",
                  unit="pair", disable=not progress):
        p = int(p)
        pairs.append((p, encrypt(p, round_keys)))
    return pairs


def generate_differential_pairs(
    round_keys: Sequence[int],
    num_pairs: int,
    delta_p: int,
    random: bool = False,
    seed=None,
    progress: bool = False
) -> List[Tuple[int, int, int, int]]:
    """
    Build chosen-plaintext quadruples (p1, p1 ^ delta_p, c1, c2) under round_keys.
    """
    quads = []
    for p1 in tqdm(_plaintexts(num_pairs, random, seed), desc="Encrypting chosen pairs",
                   unit="pair", disable=not progress):
        p1 = int(p1)
        p2 = p1 ^ delta_p
        quads.append((p1, p2, encrypt(p1, round_keys), encrypt(p2, round_keys)))
    return quads
