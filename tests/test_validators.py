import pytest

from evm_mcp.tools.validators import (
    is_valid_address,
    looks_like_name,
    normalize_address,
    parse_int_type,
    parse_slot,
    validate_int_type,
)


def test_is_valid_address():
    assert is_valid_address("0x" + "aB" * 20)
    assert is_valid_address("ab" * 20)
    assert not is_valid_address("0x" + "ab" * 19)
    assert not is_valid_address("0x" + "zz" * 20)
    assert not is_valid_address(None)
    assert not is_valid_address("")


def test_normalize_address():
    assert normalize_address(" 0x" + "AB" * 20 + " ") == "0x" + "ab" * 20
    assert normalize_address("cd" * 20) == "0x" + "cd" * 20
    with pytest.raises(ValueError):
        normalize_address("vitalik.eth")


def test_looks_like_name():
    assert looks_like_name("vitalik.eth")
    assert looks_like_name("sub.domain.eth")
    assert not looks_like_name("0x" + "ab" * 20)
    assert not looks_like_name("nodots")


@pytest.mark.parametrize("type_name,expected", [
    ("int8", (True, 8)),
    ("uint", (False, 256)),
    ("INT128", (True, 128)),
    (" uint64 ", (False, 64)),
])
def test_parse_int_type(type_name, expected):
    assert parse_int_type(type_name) == expected


@pytest.mark.parametrize("type_name", ["int7", "uint0", "int264", "bytes32", "float", ""])
def test_parse_int_type_rejects(type_name):
    with pytest.raises(ValueError):
        parse_int_type(type_name)


def test_validate_int_type_keeps_spelling():
    assert validate_int_type("uint32") == "uint32"


def test_parse_slot():
    assert parse_slot("0") == "0x" + "00" * 32
    assert parse_slot("0x10") == "0x" + "00" * 31 + "10"
    assert parse_slot(str(2**256 - 1)) == "0x" + "ff" * 32
    for bad in ("abc", "-1", str(2**256), "0x", "0x" + "1" * 65):
        with pytest.raises(ValueError):
            parse_slot(bad)
