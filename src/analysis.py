import math
from typing import Tuple, Union

import numpy as np
from scipy.stats import norm

from src.sbox import SBOX, parity


def linear_bias(input_mask: int, output_mask: int) -> float:
    """
    Bias of the S-box linear approximation <input_mask, x> = <output_mask, S(x)>.

    Args:
        input_mask: 4-bit mask over the S-box input.
        output_mask: 4-bit mask over the S-box output.

    Returns:
        matches / 16 - 0.5, a value in [-0.5, 0.5].
    """
    matches = 0
    for x in range(16):
        if parity(input_mask & x) == parity(output_mask & SBOX[x]):
            matches += 1
    return matches / 16 - 0.5


def differential_probability(input_diff: int, output_diff: int) -> float:
    """
    Fraction of inputs x for which S(x) ^ S(x ^ input_diff) == output_diff.
    """
    count = sum(1 for x in range(16) if SBOX[x] ^ SBOX[x ^ input_diff] == output_diff)
    return count / 16


def find_best_linear_approximation() -> Tuple[int, int, float]:
    """
    Exhaustively search non-zero input/output masks for the largest |bias|.

    Masks are scanned input-ascending then output-ascending and only a
    strictly greater |bias| replaces the current best, so the first
    maximum in scan order is returned.

    Returns:
        (input_mask, output_mask, abs_bias)
    """
    best = (0, 0, -1.0)
    for input_mask in range(1, 16):
        for output_mask in range(1, 16):
            bias = abs(linear_bias(input_mask, output_mask))
            if bias > best[2]:
                best = (input_mask, output_mask, bias)
    return best


def find_best_differential() -> Tuple[int, int, float]:
    """
    Exhaustively search input differences 1..15 and output differences 0..15
    for the most probable S-box differential (first maximum in scan order).

    Returns:
        (input_diff, output_diff, probability)
    """
    best = (0, 0, -1.0)
    for input_diff in range(1, 16):
        for output_diff in range(16):
            prob = differential_probability(input_diff, output_diff)
            if prob > best[2]:
                best = (input_diff, output_diff, prob)
    return best


def linear_approximation_table() -> np.ndarray:
    """
    16x16 linear approximation table: entry [a, b] is (matches - 8) for
    input mask a and output mask b, i.e. 16 * linear_bias(a, b).
    """
    table = np.zeros((16, 16), dtype=int)
    for a in range(16):
        for b in range(16):
            table[a, b] = round(linear_bias(a, b) * 16)
    return table


def difference_distribution_table() -> np.ndarray:
    """
    16x16 difference distribution table: entry [dx, dy] counts the inputs x
    with S(x) ^ S(x ^ dx) == dy.
    """
    table = np.zeros((16, 16), dtype=int)
    for dx in range(16):
        for x in range(16):
            table[dx, SBOX[x] ^ SBOX[x ^ dx]] += 1
    return table


def required_pairs(bias: float, confidence_factor: float = 8.0) -> Union[int, float]:
    """
    Matsui's estimate of the known plaintexts needed for a linear attack,
    c / bias^2. A zero bias needs infinitely many.
    """
    if bias == 0:
        return math.inf
    return math.ceil(confidence_factor / bias ** 2)


def success_probability(bias: float, num_pairs: int) -> float:
    """
    Normal approximation of the probability that the counter of the correct
    key deviates from N/2 in the expected direction: Phi(2 * sqrt(N) * |bias|).
    """
    return float(norm.cdf(2 * math.sqrt(num_pairs) * abs(bias)))
