import pytest

from netbench.byteorder import (
    IPV6_FLOWINFO_FLOWLABEL,
    flowinfo_label,
    flowinfo_priority,
    hton64,
    ntoh64,
)


def test_hton64_is_big_endian():
    assert hton64(1) == b"\x00" * 7 + b"\x01"


def test_hton64_max_value():
    assert hton64(2**64 - 1) == b"\xff" * 8


@pytest.mark.parametrize("value", [0, 1, 0x0102030405060708, 2**63, 2**64 - 1])
def test_round_trip(value):
    assert ntoh64(hton64(value)) == value


def test_hton64_byte_order_of_pattern():
    encoded = hton64(0x0102030405060708)
    assert list(encoded) == [1, 2, 3, 4, 5, 6, 7, 8]


@pytest.mark.parametrize("value", [-1, 2**64])
def test_hton64_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        hton64(value)


@pytest.mark.parametrize("data", [b"", b"\x00" * 7, b"\x00" * 9])
def test_ntoh64_rejects_wrong_length(data):
    with pytest.raises(ValueError):
        ntoh64(data)


def test_flowinfo_label_masks_label_bits():
    assert flowinfo_label(0x0FF12345) == 0x12345


def test_flowinfo_label_full_mask():
    assert flowinfo_label(0xFFFFFFFF) == IPV6_FLOWINFO_FLOWLABEL


def test_flowinfo_priority_extracts_high_bits():
    assert flowinfo_priority(0x0AB00000) == 0xAB


def test_flowinfo_priority_ignores_label():
    assert flowinfo_priority(0x000FFFFF) == 0


def test_flowinfo_rejects_out_of_range():
    with pytest.raises(ValueError):
        flowinfo_label(-1)
    with pytest.raises(ValueError):
        flowinfo_priority(2**32)