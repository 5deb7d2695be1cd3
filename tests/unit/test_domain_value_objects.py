"""Tests for domain value objects (slugs, money amounts)."""

from decimal import Decimal

import pytest

from app.domain.exceptions import ConflictException
from app.domain.value_objects.money import (
    is_valid_money,
    to_decimal,
    to_minor_units,
    to_money_str,
)
from app.domain.value_objects.slug import (
    RESERVED_SLUGS,
    SLUG_MAX_LENGTH,
    generate_slug,
    is_valid_slug,
    slug_candidates,
    unique_slug,
)


class TestGenerateSlug:
    """generate_slug: ASCII fold, hyphen runs, max 50 chars."""

    def test_lowercases_and_hyphenates(self) -> None:
        assert generate_slug("Acme Web Studio") == "acme-web-studio"

    def test_collapses_punctuation_runs(self) -> None:
        assert generate_slug("  Smith & Sons -- Digital!! ") == "smith-sons-digital"

    def test_folds_unicode_to_ascii(self) -> None:
        assert generate_slug("Café Crème") == "cafe-creme"

    def test_truncates_without_trailing_hyphen(self) -> None:
        slug = generate_slug("a" * 49 + " bcd")
        assert len(slug) <= SLUG_MAX_LENGTH
        assert not slug.endswith("-")

    def test_symbols_only_give_empty_slug(self) -> None:
        assert generate_slug("!!!") == ""


class TestIsValidSlug:
    def test_valid(self) -> None:
        assert is_valid_slug("acme")
        assert is_valid_slug("acme-studio-2")
        assert is_valid_slug("a" * 50)

    def test_invalid_shape(self) -> None:
        assert not is_valid_slug("ab")
        assert not is_valid_slug("a" * 51)
        assert not is_valid_slug("-acme")
        assert not is_valid_slug("acme-")
        assert not is_valid_slug("Acme")
        assert not is_valid_slug("acme_studio")

    def test_reserved_rejected_unless_allowed(self) -> None:
        assert "dashboard" in RESERVED_SLUGS
        assert not is_valid_slug("dashboard")
        assert is_valid_slug("dashboard", allow_reserved=True)


class TestUniqueSlug:
    def test_candidates_are_numbered(self) -> None:
        assert list(slug_candidates("acme", 3)) == ["acme", "acme-1", "acme-2"]

    def test_suffixed_candidates_stay_within_max_length(self) -> None:
        base = "a" * SLUG_MAX_LENGTH
        for candidate in slug_candidates(base, 12):
            assert len(candidate) <= SLUG_MAX_LENGTH

    async def test_returns_first_free_candidate(self) -> None:
        taken = {"acme", "acme-1"}

        async def exists(slug: str) -> bool:
            return slug in taken

        assert await unique_slug("acme", exists) == "acme-2"

    async def test_skips_reserved(self) -> None:
        async def exists(slug: str) -> bool:
            return False

        assert await unique_slug("admin", exists, reserved=RESERVED_SLUGS) == "admin-1"

    async def test_raises_conflict_when_exhausted(self) -> None:
        async def exists(slug: str) -> bool:
            return True

        with pytest.raises(ConflictException):
            await unique_slug("acme", exists, max_attempts=5)


class TestMoney:
    def test_is_valid_money(self) -> None:
        assert is_valid_money("0")
        assert is_valid_money("1500")
        assert is_valid_money("1500.5")
        assert is_valid_money("1500.50")
        assert not is_valid_money("-1")
        assert not is_valid_money("1.005")
        assert not is_valid_money("1,000")
        assert not is_valid_money("")

    def test_to_decimal_rounds_half_up_to_cents(self) -> None:
        assert to_decimal("2.005") == Decimal("2.01")
        assert to_decimal(3) == Decimal("3.00")

    def test_to_money_str(self) -> None:
        assert to_money_str(Decimal("10")) == "10.00"
        assert to_money_str(Decimal("0.1")) == "0.10"

    def test_to_minor_units(self) -> None:
        assert to_minor_units("110.00") == 11000
        assert to_minor_units(Decimal("0.99")) == 99
        assert to_minor_units("19.999") == 2000
