import pytest
from src.errors import InvalidConfiguration, InvalidKeySchedule
from src.spn import (
    decrypt,
    encrypt,
    expand_key,
    inverse_substitute,
    permute,
    substitute,
)

SAMPLE_KEY = 0x1234_5678_90AB_CDEF_1234


@pytest.fixture
def round_keys():
    return expand_key(SAMPLE_KEY, 5)


def test_substitute_roundtrip_all_blocks():
    for x in range(1 << 16):
        assert inverse_substitute(substitute(x)) == x
        assert substitute(inverse_substitute(x)) == x


def test_substitute_known_values():
    # Each nibble goes through the S-box on its own: 0 -> C, 1 -> 5, F -> 2
    assert substitute(0x0000) == 0xCCCC
    assert substitute(0x01F0) == 0xC52C


def test_permute_is_involution():
    for x in range(1 << 16):
        assert permute(permute(x)) == x


def test_permute_moves_bits_as_transpose():
    # bit 1 -> bit 4, bit 4 -> bit 1, diagonal bits stay put
    assert permute(1 << 1) == 1 << 4
    assert permute(1 << 4) == 1 << 1
    assert permute(0x8421) == 0x8421
    assert permute(0x000F) == 0x1111


def test_expand_key_sample_schedule(round_keys):
    assert round_keys == (0x1234, 0x5678, 0x90AB, 0xCDEF, 0x1234)


def test_expand_key_fewer_rounds():
    assert expand_key(SAMPLE_KEY, 2) == (0x1234, 0x5678)


def test_expand_key_rejects_too_many_rounds():
    with pytest.raises(InvalidConfiguration):
        expand_key(SAMPLE_KEY, 6)
    with pytest.raises(InvalidConfiguration):
        expand_key(SAMPLE_KEY, 0)


def test_expand_key_rejects_oversized_key():
    with pytest.raises(InvalidConfiguration):
        expand_key(1 << 80, 5)


def test_encrypt_known_vector(round_keys):
    ciphertext = encrypt(0xABCD, round_keys)
    assert ciphertext == 0x3A83
    assert decrypt(ciphertext, round_keys) == 0xABCD
    assert encrypt(0x0000, round_keys) == 0x73C4
    assert encrypt(0xFFFF, round_keys) == 0x46AA


def test_decrypt_inverts_encrypt_for_every_block(round_keys):
    for p in range(1 << 16):
        assert decrypt(encrypt(p, round_keys), round_keys) == p


def test_roundtrip_with_other_schedules():
    for key in (0, (1 << 80) - 1, 0xDEAD_BEEF_0000_FFFF_A5A5):
        schedule = expand_key(key)
        for p in (0x0000, 0x1234, 0xFFFF, 0x8001):
            assert decrypt(encrypt(p, schedule), schedule) == p


def test_final_round_skips_permutation(round_keys):
    # Flipping a bit of the last round key flips the same ciphertext bit
    tweaked = round_keys[:4] + (round_keys[4] ^ 0x0010,)
    assert encrypt(0xABCD, round_keys) ^ encrypt(0xABCD, tweaked) == 0x0010


def test_wrong_schedule_length(round_keys):
    with pytest.raises(InvalidKeySchedule):
        encrypt(0xABCD, round_keys[:4])
    with pytest.raises(InvalidKeySchedule):
        decrypt(0xABCD, round_keys + (0,))


def test_rejects_blocks_wider_than_16_bits(round_keys):
    # 0x1ABCD must not be silently treated as 0xABCD
    with pytest.raises(InvalidConfiguration):
        encrypt(0x1ABCD, round_keys)
    with pytest.raises(InvalidConfiguration):
        decrypt(0x13A83, round_keys)
    with pytest.raises(InvalidConfiguration):
        encrypt(-1, round_keys)
