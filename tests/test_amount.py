"""Tests for resolver.amount."""

import pytest

from zapdesk_lnurl.errors import (
    AmountOutOfRangeError,
    CommentTooLongError,
    InvalidAmountError,
    InvalidCommentError,
)
from zapdesk_lnurl.models.schemas import AmountRequest, PayServiceDescriptor
from zapdesk_lnurl.resolver.amount import (
    coerce_amount,
    coerce_comment,
    support_comment,
    validate_amount,
    validate_comment,
    validate_request,
)


def _descriptor(min_msat=1000, max_msat=100_000, comment_allowed=0):
    return PayServiceDescriptor(
        callback="https://pay.example/cb",
        minSendable=min_msat,
        maxSendable=max_msat,
        commentAllowed=comment_allowed,
    )


class TestCoerceAmount:
    @pytest.mark.parametrize("value,expected", [(21, 21), ("1000", 1000), (5.0, 5), (" 42 ", 42)])
    def test_accepted(self, value, expected):
        assert coerce_amount(value) == expected

    @pytest.mark.parametrize(
        "value", [0, -1, 2.5, "abc", "", "-5", "1e3", None, True, [], float("nan")]
    )
    def test_rejected(self, value):
        with pytest.raises(InvalidAmountError):
            coerce_amount(value)


class TestCoerceComment:
    @pytest.mark.parametrize("value,expected", [(None, None), ("", None), ("ty", "ty")])
    def test_accepted(self, value, expected):
        assert coerce_comment(value) == expected

    @pytest.mark.parametrize("value", [123, 1.5, True, ["ty"], {"text": "ty"}])
    def test_rejected(self, value):
        with pytest.raises(InvalidCommentError):
            coerce_comment(value)


class TestSupportComment:
    def test_fits(self):
        assert support_comment(42, 32) == "Tip for support request #42"

    def test_service_takes_no_comment(self):
        assert support_comment(42, 0) is None

    def test_too_long_for_service(self):
        assert support_comment(42, 10) is None


class TestValidateAmount:
    def test_in_range(self):
        validate_amount(50, _descriptor())

    def test_bounds_inclusive(self):
        validate_amount(1, _descriptor())
        validate_amount(100, _descriptor())

    @pytest.mark.parametrize("amount", [0, 101])
    def test_out_of_range_reports_bounds(self, amount):
        with pytest.raises(AmountOutOfRangeError) as exc_info:
            validate_amount(amount, _descriptor())
        err = exc_info.value
        assert (err.min_sats, err.max_sats) == (1, 100)
        assert (err.min_msat, err.max_msat) == (1000, 100_000)
        assert "between 1 and 100 sats" in str(err)

    def test_zero_rejected_even_when_min_is_zero(self):
        with pytest.raises(AmountOutOfRangeError):
            validate_amount(0, _descriptor(min_msat=0))

    def test_msat_bounds_rounded_to_whole_sats(self):
        with pytest.raises(AmountOutOfRangeError) as exc_info:
            validate_amount(1, _descriptor(min_msat=1500, max_msat=9999))
        assert exc_info.value.min_sats == 2
        assert exc_info.value.max_sats == 9

    @pytest.mark.parametrize("amount", [-1, 1.5, "50", True])
    def test_invalid_amount_before_range(self, amount):
        with pytest.raises(InvalidAmountError):
            validate_amount(amount, _descriptor())


class TestValidateComment:
    def test_within_limit(self):
        validate_comment("hi", _descriptor(comment_allowed=2))

    def test_too_long(self):
        with pytest.raises(CommentTooLongError) as exc_info:
            validate_comment("hello", _descriptor(comment_allowed=3))
        assert exc_info.value.max_length == 3
        assert exc_info.value.length == 5

    def test_comments_not_accepted_by_service_are_ignored(self):
        validate_comment("a very long comment", _descriptor(comment_allowed=0))

    def test_empty_comment(self):
        validate_comment("", _descriptor(comment_allowed=1))
        validate_comment(None, _descriptor(comment_allowed=1))


class TestValidateRequest:
    def test_checks_amount_then_comment(self):
        with pytest.raises(AmountOutOfRangeError):
            validate_request(
                AmountRequest(amount_sats=500, comment="x" * 10),
                _descriptor(comment_allowed=1),
            )
        with pytest.raises(CommentTooLongError):
            validate_request(
                AmountRequest(amount_sats=50, comment="x" * 10),
                _descriptor(comment_allowed=1),
            )
