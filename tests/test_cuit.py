"""Tests del validador de CUIT."""

import pytest

from app.shared.utils.cuit import calculate_check_digit, clean_cuit, format_cuit, is_valid_cuit


@pytest.mark.parametrize(
    "cuit",
    ["30-71659554-0", "30716595540", "20-12345678-6", "27-12345678-0", "30-70987654-2"],
)
def test_valid_cuits(cuit):
    assert is_valid_cuit(cuit) is True


def test_wrong_check_digit_is_rejected():
    assert is_valid_cuit("30-71659554-9") is False


def test_unknown_prefix_is_rejected():
    # 12 no es un prefijo de CUIT
    assert is_valid_cuit("12-12345678-6") is False


@pytest.mark.parametrize("cuit", [None, "", "30-7165955-0", "307165955401", "abc"])
def test_malformed_cuits(cuit):
    assert is_valid_cuit(cuit) is False


def test_check_digit_of_ten_never_validates():
    # resto 1: el dígito calculado es 10 y ningún dígito lo iguala
    assert calculate_check_digit("2000000001") == 10
    assert all(not is_valid_cuit(f"20-00000001-{digit}") for digit in range(10))


def test_check_digit_zero_when_remainder_is_zero():
    assert calculate_check_digit("3071659554") == 0


def test_clean_and_format():
    assert clean_cuit("30-71659554-0") == "30716595540"
    assert clean_cuit(None) == ""
    assert format_cuit("30716595540") == "30-71659554-0"
    assert format_cuit("30-71659554-0") == "30-71659554-0"
    # Sin 11 dígitos se devuelve tal cual
    assert format_cuit("123") == "123"


def test_single_digit_change_is_detected():
    digits = "30716595540"
    for position in range(2, 11):
        altered = digits[:position] + str((int(digits[position]) + 1) % 10) + digits[position + 1:]
        assert is_valid_cuit(altered) is False, altered


def test_format_is_idempotent():
    formatted = format_cuit("30716595540")
    assert format_cuit(format_cuit(formatted)) == formatted


ARABIC_INDIC_DIGITS = str.maketrans("0123456789", "".join(chr(0x0660 + digit) for digit in range(10)))


def test_non_ascii_digits_are_rejected():
    cuit = "30-" + "71659554".translate(ARABIC_INDIC_DIGITS) + "-" + "0".translate(ARABIC_INDIC_DIGITS)

    assert is_valid_cuit(cuit) is False
    assert clean_cuit(cuit) == "30"
    assert is_valid_cuit("30716595540".translate(ARABIC_INDIC_DIGITS)) is False
