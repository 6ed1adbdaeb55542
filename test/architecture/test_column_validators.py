"""Tests for column value validators."""

import pytest
from pydantic import ValidationError

from ddlforge.architecture.validators import (
    AllValidator,
    AlphanumericValidator,
    AlphaValidator,
    AnyValidator,
    EmailValidator,
    EnumValidator,
    LengthValidator,
    PatternValidator,
    RangeValidator,
    UrlValidator,
    column_validator_adapter,
)


def test_range():
    v = RangeValidator(min=0, max=150)
    assert v.to_sql("age") == "age >= 0 AND age <= 150"
    assert v.check(30)
    assert not v.check(151)
    assert v.description == "Value must be between 0 and 150"
    assert RangeValidator(min=0.5).to_sql("ratio") == "ratio >= 0.5"
    assert RangeValidator(max=10).description == "Value must be at most 10"


def test_bounds_required():
    with pytest.raises(ValidationError, match="At least one of min or max"):
        RangeValidator()
    with pytest.raises(ValidationError, match="greater than max"):
        LengthValidator(min=5, max=2)


def test_length():
    v = LengthValidator(min=3, max=20)
    assert v.to_sql("username") == "length(username) >= 3 AND length(username) <= 20"
    assert v.check("alice")
    assert not v.check("al")
    assert LengthValidator(min=1).description == "Length must be at least 1 characters"


def test_pattern_and_enum():
    p = PatternValidator(pattern="^[A-Z]{2}$", message="Two letter code")
    assert p.to_sql("country") == "country ~ '^[A-Z]{2}$'"
    assert p.check("FR")
    assert not p.check("fra")
    assert p.description == "Two letter code"
    assert PatternValidator(pattern="^it's$").to_sql("c") == "c ~ '^it''s$'"

    e = EnumValidator(values=["draft", "o'clock"])
    assert e.to_sql("status") == "status IN ('draft', 'o''clock')"
    assert e.check("draft")
    assert not e.check("other")


def test_builtin_patterns():
    assert EmailValidator().check("a.b@example.com")
    assert not EmailValidator().check("not-an-email")
    assert EmailValidator().to_sql("email").startswith("email ~ '^[a-zA-Z0-9")
    assert UrlValidator().check("https://example.com/x")
    assert not UrlValidator().check("ftp://example.com")
    assert AlphaValidator().check("abc")
    assert not AlphaValidator().check("ab c")
    assert AlphaValidator(allow_spaces=True).check("ab c")
    an = AlphanumericValidator(allow_underscores=True)
    assert an.check("user_1")
    assert an.description == "Value must contain only letters and numbers and underscores"


def test_composition():
    v = column_validator_adapter.validate_python(
        {
            "type": "any",
            "validators": [{"type": "email"}, {"type": "url"}],
        }
    )
    assert isinstance(v, AnyValidator)
    assert v.check("https://example.com")
    assert v.check("me@example.com")
    assert not v.check("neither")

    both = AllValidator(
        validators=[LengthValidator(max=10), AlphaValidator()],
    )
    assert both.to_sql("code") == "(length(code) <= 10) AND (code ~ '^[a-zA-Z]+$')"
    assert both.description == (
        "Length must be at most 10 characters AND Value must contain only letters"
    )


def test_unknown_validator_type():
    with pytest.raises(ValidationError):
        column_validator_adapter.validate_python({"type": "phone"})
