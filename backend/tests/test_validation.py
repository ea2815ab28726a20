from datetime import date

import pytest

from familygen.services.account_service import (
    age_in_years, is_valid_email, is_valid_password, is_valid_sex,
    parse_birth_date, validate_birth_date,
)

TODAY = date(2026, 6, 15)


# ---------------------------------------------------------------------------
# Password policy
# ---------------------------------------------------------------------------

def test_lowercase_only_password_fails():
    assert not is_valid_password("abcdefgh")


def test_strong_password_passes():
    assert is_valid_password("Abcdef1!")


@pytest.mark.parametrize("password", [
    "Abcde1!",       # 7 chars
    "abcdef1!",      # no uppercase
    "Abcdefg!",      # no digit
    "Abcdefg1",      # no symbol
    "Abcdef1#",      # symbol outside @$!%*?&
    "Abcdef1! ",     # whitespace is not an allowed character
])
def test_weak_passwords_fail(password):
    assert not is_valid_password(password)


# ---------------------------------------------------------------------------
# Email / sex
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("email", ["a@b.co", "first.last@example.com.br"])
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("email", ["plainaddress", "a@b", "a b@c.com", "@example.com"])
def test_invalid_emails(email):
    assert not is_valid_email(email)


def test_sex_must_be_m_or_f():
    assert is_valid_sex("M")
    assert is_valid_sex("F")
    assert not is_valid_sex("m")
    assert not is_valid_sex("X")
    assert not is_valid_sex(None)


# ---------------------------------------------------------------------------
# Birth date / coarse age
# ---------------------------------------------------------------------------

def test_age_ignores_month_and_day():
    # born late December of the previous year still counts as one year old
    assert age_in_years(date(2025, 12, 31), TODAY) == 1


@pytest.mark.parametrize("years,accepted", [(0, False), (1, True), (120, True), (121, False)])
def test_age_boundaries_are_inclusive(years, accepted):
    birth = date(TODAY.year - years, 3, 1).isoformat()
    assert (validate_birth_date(birth, TODAY) is not None) is accepted


def test_parse_birth_date_accepts_iso_datetime():
    assert parse_birth_date("1990-05-17T00:00:00") == date(1990, 5, 17)


@pytest.mark.parametrize("value", ["1990-02-30", "17/05/1990", "not a date", ""])
def test_parse_birth_date_rejects_invalid(value):
    assert parse_birth_date(value) is None
