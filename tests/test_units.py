import pytest

from netbench.units import unit_atof, unit_atof_rate, unit_atoi, unit_format


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0.5K", 1024.0 * 0.5),
        ("1K", 1024.0),
        ("1M", 1024.0 * 1024.0),
        ("4G", 4.0 * 1024.0 * 1024.0 * 1024.0),
        ("3T", 3.0 * 1024.0 * 1024.0 * 1024.0 * 1024.0),
        ("0.5k", 1024.0 * 0.5),
        ("1k", 1024.0),
        ("1m", 1024.0 * 1024.0),
        ("4g", 4.0 * 1024.0 * 1024.0 * 1024.0),
        ("3t", 3.0 * 1024.0 * 1024.0 * 1024.0 * 1024.0),
    ],
)
def test_unit_atof(text, expected):
    assert unit_atof(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0.5K", 1024 * 0.5),
        ("1K", 1024),
        ("1M", 1024 * 1024),
        ("4G", int(4.0 * 1024 * 1024 * 1024)),
        ("3T", int(3.0 * 1024 * 1024 * 1024 * 1024)),
        ("0.5k", 1024 * 0.5),
        ("1k", 1024),
        ("1m", 1024 * 1024),
        ("4g", int(4.0 * 1024 * 1024 * 1024)),
        ("3t", int(3.0 * 1024 * 1024 * 1024 * 1024)),
    ],
)
def test_unit_atoi(text, expected):
    assert unit_atoi(text) == expected


def test_unit_atoi_returns_int():
    result = unit_atoi("1K")
    assert isinstance(result, int) and result == 1024


def test_unit_atof_rate_uses_powers_of_ten():
    assert unit_atof_rate("1k") == 1000.0
    assert unit_atof_rate("1M") == 1000.0 * 1000.0


def test_rate_and_binary_agree_without_suffix():
    assert unit_atof_rate("1.5") == unit_atof("1.5") == 1.5


def test_unknown_suffix_is_ignored():
    assert unit_atof("2x") == 2.0


def test_suffix_must_follow_number_directly():
    assert unit_atof("2 K") == 2.0


def test_exponent_without_digits_is_suffix_char():
    assert unit_atof("3e") == 3.0


def test_unparseable_number_raises():
    with pytest.raises(ValueError):
        unit_atof("abc")


def test_empty_string_raises():
    with pytest.raises(ValueError):
        unit_atoi("")


@pytest.mark.parametrize(
    "value, fmt, expected",
    [
        (1024.0, "A", "1.00 KByte"),
        (1024.0 * 1024.0, "A", "1.00 MByte"),
        (1000.0, "k", "8.00 Kbit"),
        (1000.0 * 1000.0, "a", "8.00 Mbit"),
        (4.0 * 1024 * 1024 * 1024, "A", "4.00 GByte"),
        (4.0 * 1024 * 1024 * 1024, "a", "34.4 Gbit"),
        (4.0 * 1024 * 1024 * 1024 * 1024, "A", "4.00 TByte"),
        (4.0 * 1024 * 1024 * 1024 * 1024, "a", "35.2 Tbit"),
        (4.0 * 1024 * 1024 * 1024 * 1024 * 1024, "A", "4096 TByte"),
        (4.0 * 1024 * 1024 * 1024 * 1024 * 1024, "a", "36029 Tbit"),
    ],
)
def test_unit_format(value, fmt, expected):
    assert unit_format(value, fmt, -1) == expected


def test_unit_format_default_precision_matches_minus_one():
    assert unit_format(1024.0, "A") == unit_format(1024.0, "A", -1)


def test_unit_format_fixed_unit_ignores_magnitude():
    assert unit_format(1024.0 * 1024.0, "K").endswith(" KByte")
    assert unit_format(1000.0, "b").endswith(" bit")


def test_unit_format_explicit_precision():
    assert unit_format(1024.0, "K", 3) == "1.000 KByte"


def test_unit_format_unknown_letter_is_adaptive():
    assert unit_format(1024.0, "Z") == unit_format(1024.0, "A")


def test_unit_format_rejects_bad_format():
    with pytest.raises(ValueError):
        unit_format(1.0, "AB")


def test_unit_format_rejects_bad_precision():
    with pytest.raises(ValueError):
        unit_format(1.0, "A", -5)