"""
Tests for damage magnitude decoder
"""
import pytest

from normalization.src.decoder import (
    EXPONENT_MULTIPLIERS,
    decode_magnitude,
    decoded_damage_column,
    exponent_multiplier,
    is_mapped_code,
)


def test_decode_known_values():
    """Test documented decode examples"""
    assert decode_magnitude(5, "K") == 5000
    assert decode_magnitude(2.5, "M") == 2500000
    assert decode_magnitude(3, "") == 3
    assert decode_magnitude(1, "B") == 1e9


@pytest.mark.parametrize("code,multiplier", [
    ("", 1), ("+", 1), ("-", 1), ("?", 1), ("0", 1),
    ("1", 10), ("2", 1e2), ("3", 1e3), ("4", 1e4), ("5", 1e5),
    ("6", 1e6), ("7", 1e7), ("8", 1e8),
    ("h", 1e2), ("H", 1e2), ("k", 1e3), ("K", 1e3),
    ("m", 1e6), ("M", 1e6), ("B", 1e9),
])
def test_exponent_table(code, multiplier):
    """Test every code in the decode table"""
    assert exponent_multiplier(code) == multiplier
    assert decode_magnitude(7, code) == 7 * multiplier


def test_letter_codes_case_insensitive():
    """Test lower and upper case letters decode the same"""
    for x in (0, 1, 2.5, 1234.5):
        assert decode_magnitude(x, "m") == decode_magnitude(x, "M")
        assert decode_magnitude(x, "k") == decode_magnitude(x, "K")
        assert decode_magnitude(x, "h") == decode_magnitude(x, "H")
        assert decode_magnitude(x, "b") == decode_magnitude(x, "B")


def test_unmapped_code_is_undefined():
    """Test codes outside the table yield None rather than 0"""
    assert decode_magnitude(5, "Z") is None
    assert decode_magnitude(0, "Z") is None
    assert decode_magnitude(5, "9") is None
    assert decode_magnitude(5, "KK") is None
    assert not is_mapped_code("Z")
    assert is_mapped_code("k")


def test_missing_inputs():
    """Test missing code counts as empty and missing mantissa as 0"""
    assert decode_magnitude(4, None) == 4
    assert decode_magnitude(None, "K") == 0
    assert is_mapped_code(None)


def test_decoded_damage_column_matches_python(spark):
    """Test Spark expression agrees with the Python decoder"""
    codes = list(EXPONENT_MULTIPLIERS) + ["k", "m", "h", "b", "Z", "9", None]
    rows = [(2.5, code) for code in codes]
    df = spark.createDataFrame(rows, "mantissa double, code string")

    result = df.withColumn(
        "usd", decoded_damage_column("mantissa", "code")
    ).collect()

    for row in result:
        expected = decode_magnitude(row["mantissa"], row["code"])
        if expected is None:
            assert row["usd"] is None
        else:
            assert row["usd"] == pytest.approx(expected)
