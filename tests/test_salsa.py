import pytest

from scratchpad.salsa import (
    SIGMA,
    AuthenticationError,
    core_hsalsa20,
    core_salsa20,
    onetimeauth,
    onetimeauth_verify,
    secretbox,
    secretbox_open,
    stream,
    stream_salsa20,
    stream_salsa20_xor,
    stream_xor,
    verify16,
    verify32,
)

KEY = bytes(range(32))
NONCE24 = bytes(range(100, 124))
NONCE8 = bytes(range(8))
MESSAGE = b"There are strange things done in the midnight sun\nBy the men who toil for gold;\n"


def test_poly1305_reference_vector():
    key = bytes.fromhex("85d6be7857556d337f4452fe42d506a80103808afb0db2fd4abff6af4149f51b")
    tag = onetimeauth(b"Cryptographic Forum Research Group", key)
    assert tag == bytes.fromhex("a8061dc1305136c6c22b8baf0c0127a9")


def test_poly1305_empty_message_is_s_half_of_key():
    assert onetimeauth(b"", KEY) == KEY[16:]


def test_onetimeauth_verify():
    tag = onetimeauth(MESSAGE, KEY)
    assert onetimeauth_verify(tag, MESSAGE, KEY) is True
    assert onetimeauth_verify(tag, MESSAGE + b"!", KEY) is False


def test_verify_functions():
    assert verify16(b"a" * 16, b"a" * 16) is True
    assert verify16(b"a" * 16, b"b" + b"a" * 15) is False
    assert verify32(KEY, KEY) is True
    assert verify32(KEY, bytes(32)) is False
    with pytest.raises(ValueError):
        verify16(b"short", b"short")


def test_core_of_all_zero_state_is_zero():
    assert core_salsa20(bytes(16), bytes(32), bytes(16)) == bytes(64)
    assert core_hsalsa20(bytes(16), bytes(32), bytes(16)) == bytes(32)


def test_core_output_sizes_and_dependence_on_input():
    a = core_salsa20(bytes(16), KEY)
    b = core_salsa20(b"\x01" + bytes(15), KEY)
    assert len(a) == 64 and len(b) == 64
    assert a != b
    assert len(core_hsalsa20(bytes(16), KEY, SIGMA)) == 32


def test_core_rejects_bad_key_length():
    with pytest.raises(ValueError):
        core_salsa20(bytes(16), bytes(31))


def test_salsa20_stream_blocks_follow_counter():
    ks = stream_salsa20(128, NONCE8, KEY)
    assert ks[:64] == core_salsa20(NONCE8 + (0).to_bytes(8, "little"), KEY)
    assert ks[64:] == core_salsa20(NONCE8 + (1).to_bytes(8, "little"), KEY)


def test_salsa20_xor_round_trip():
    ct = stream_salsa20_xor(MESSAGE, NONCE8, KEY)
    assert ct != MESSAGE
    assert stream_salsa20_xor(ct, NONCE8, KEY) == MESSAGE


def test_stream_prefix_consistency_and_empty():
    assert stream(100, NONCE24, KEY)[:64] == stream(64, NONCE24, KEY)
    assert stream(0, NONCE24, KEY) == b""


def test_xsalsa20_is_salsa20_under_hsalsa20_subkey():
    subkey = core_hsalsa20(NONCE24[:16], KEY)
    assert stream(150, NONCE24, KEY) == stream_salsa20(150, NONCE24[16:], subkey)


def test_stream_xor_matches_keystream_and_round_trips():
    ks = stream(len(MESSAGE), NONCE24, KEY)
    ct = stream_xor(MESSAGE, NONCE24, KEY)
    assert bytes(a ^ b for a, b in zip(ct, ks)) == MESSAGE
    assert stream_xor(ct, NONCE24, KEY) == MESSAGE


def test_stream_rejects_bad_nonce_and_length():
    with pytest.raises(ValueError):
        stream(10, NONCE8, KEY)
    with pytest.raises(ValueError):
        stream_salsa20(-1, NONCE8, KEY)


def test_secretbox_round_trip_with_padding():
    padded = bytes(32) + MESSAGE
    box = secretbox(padded, NONCE24, KEY)
    assert len(box) == len(padded)
    assert box[:16] == bytes(16)
    assert secretbox_open(box, NONCE24, KEY) == padded


def test_secretbox_tampering_is_detected():
    box = bytearray(secretbox(bytes(32) + MESSAGE, NONCE24, KEY))
    box[40] ^= 1
    with pytest.raises(AuthenticationError):
        secretbox_open(bytes(box), NONCE24, KEY)


def test_secretbox_without_zero_padding_fails_to_open():
    box = secretbox(MESSAGE, NONCE24, KEY)
    with pytest.raises(AuthenticationError):
        secretbox_open(box, NONCE24, KEY)


def test_secretbox_wrong_key_fails():
    box = secretbox(bytes(32) + MESSAGE, NONCE24, KEY)
    with pytest.raises(AuthenticationError):
        secretbox_open(box, NONCE24, bytes(32))


def test_secretbox_short_input_rejected():
    with pytest.raises(ValueError):
        secretbox(bytes(31), NONCE24, KEY)
    with pytest.raises(ValueError):
        secretbox_open(bytes(31), NONCE24, KEY)