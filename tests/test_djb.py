import re

from scratchpad.djb import djb_hash, main


def test_empty_string_is_initial_value():
    assert djb_hash("") == 5381


def test_str_and_bytes_agree():
    assert djb_hash("node01") == djb_hash(b"node01")


def test_long_input_stays_within_64_bits():
    value = djb_hash("x" * 5000)
    assert 0 <= value < 2**64


def test_different_strings_differ():
    assert djb_hash("ab") != djb_hash("ba")


def test_main_returns_zero_and_prints_sections(capsys):
    assert main(["alpha", "beta"]) == 0
    out = capsys.readouterr().out
    assert '    "alpha" = ' in out
    assert out.count("mod 3 =") == 2
    assert out.count("mod 4 =") == 2


def test_main_buckets_are_consistent(capsys):
    main(["alpha", "beta", "gamma"])
    out = capsys.readouterr().out
    for m in re.finditer(r"L\((\w+)\) = (\d+) mod (\d+) = (\d+)", out):
        name, value, modulus, bucket = m.groups()
        assert int(value) == djb_hash(name) & 0xFF
        assert int(bucket) == int(value) % int(modulus)
        assert int(bucket) < int(modulus)


def test_main_with_no_arguments(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.strip() == ""