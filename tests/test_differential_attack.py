import numpy as np
import pytest
from src.differential_attack import (
    differential_attack,
    differential_candidate_counts,
    filter_right_pairs,
)
from src.errors import EmptyPairSet, InvalidConfiguration, NoSurvivingPairs
from src.sbox import SBOX, SBOX_INV
from src.spn import expand_key
from src.utils import generate_differential_pairs, get_nibble

SAMPLE_KEY = 0x1234_5678_90AB_CDEF_1234


@pytest.fixture(scope="module")
def round_keys():
    return expand_key(SAMPLE_KEY, 5)


@pytest.fixture(scope="module")
def chosen_pairs(round_keys):
    return generate_differential_pairs(round_keys, 5000, delta_p=0x0700)


def test_recovers_last_round_key_nibble(round_keys, chosen_pairs):
    recovered = differential_attack(chosen_pairs, delta_p=0x0700, delta_u=0x0005, nibble_index=0)
    assert recovered == get_nibble(round_keys[4], 0) == 0x4


def test_correct_candidate_count(chosen_pairs):
    counts, num_right = differential_candidate_counts(chosen_pairs, 0x0700, 0x0005, 0)
    assert num_right == 5000
    assert counts[4] == 1120
    assert counts.max() == 1120


def test_counts_match_reference_loop(chosen_pairs):
    sample = chosen_pairs[:200]
    counts, _ = differential_candidate_counts(sample, 0x0700, 0x0005, 0)
    expected = [0] * 16
    for _, _, c1, c2 in sample:
        for k in range(16):
            if SBOX_INV[get_nibble(c1, 0) ^ k] ^ SBOX_INV[get_nibble(c2, 0) ^ k] == 0x5:
                expected[k] += 1
    assert counts.tolist() == expected


def test_synthetic_pairs_point_at_key():
    # Build last-round outputs directly: every pair has difference 6 before the S-box
    key_nibble = 0xB
    quads = []
    for u1 in range(16):
        c1 = SBOX[u1] ^ key_nibble
        c2 = SBOX[u1 ^ 0x6] ^ key_nibble
        quads.append((u1, u1 ^ 0x1, c1, c2))
    counts, _ = differential_candidate_counts(quads, 0x1, 0x6, 0)
    assert counts[key_nibble] == 16


def test_wrong_difference_pairs_are_ignored(chosen_pairs):
    noise = [(p1, p1 ^ 0x0001, c1, c2) for p1, _, c1, c2 in chosen_pairs[:1000]]
    baseline, _ = differential_candidate_counts(chosen_pairs, 0x0700, 0x0005, 0)
    mixed, num_right = differential_candidate_counts(chosen_pairs + noise, 0x0700, 0x0005, 0)
    assert num_right == 5000
    assert mixed.tolist() == baseline.tolist()
    assert len(filter_right_pairs(noise + chosen_pairs[:3], 0x0700)) == 3


def test_workers_give_same_result(chosen_pairs):
    single, _ = differential_candidate_counts(chosen_pairs, 0x0700, 0x0005, 0, workers=1)
    threaded, _ = differential_candidate_counts(chosen_pairs, 0x0700, 0x0005, 0, workers=4)
    assert threaded.tolist() == single.tolist()
    data = np.array(chosen_pairs, dtype=np.int64)
    assert differential_attack(data, 0x0700, 0x0005, 0, workers=2) == 0x4


def test_ties_go_to_lowest_candidate():
    # Equal ciphertexts give a zero difference for every candidate
    assert differential_attack([(0x0000, 0x0700, 0x5555, 0x5555)], 0x0700, 0x0000, 0) == 0


def test_empty_pairs():
    with pytest.raises(EmptyPairSet):
        differential_attack([], 0x0700, 0x0005, 0)


def test_no_surviving_pairs(chosen_pairs):
    with pytest.raises(NoSurvivingPairs):
        differential_attack(chosen_pairs[:50], 0x0070, 0x0005, 0)


def test_bad_nibble_index(chosen_pairs):
    with pytest.raises(InvalidConfiguration):
        differential_attack(chosen_pairs[:10], 0x0700, 0x0005, -1)


def test_rejects_plaintext_ciphertext_pairs(chosen_pairs):
    # Two 2-tuples must not be merged into one quadruple
    _, _, c1, c2 = chosen_pairs[0]
    with pytest.raises(InvalidConfiguration):
        differential_candidate_counts([(0, 0x0700), (c1, c2)], 0x0700, 0x0005, 0)
