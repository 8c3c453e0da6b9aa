"""Tests for the engine exception hierarchy."""

from rdcredit_core.exceptions import RDCreditError, ValidationError


class TestRDCreditError:

    def test_defaults(self):
        err = RDCreditError("estimate failed")

        assert str(err) == "estimate failed"
        assert err.details == {}
        assert err.recoverable is False

    def test_repr(self):
        err = RDCreditError("boom", details={"step": "asc"})
        assert repr(err) == (
            "RDCreditError(message='boom', details={'step': 'asc'}, recoverable=False)"
        )


class TestValidationError:

    def test_single_error(self):
        err = ValidationError(["Must have qualifying R&D expenses"])

        assert str(err) == "Must have qualifying R&D expenses"
        assert err.errors == ["Must have qualifying R&D expenses"]
        assert err.warnings == []
        assert err.recoverable is True
        assert isinstance(err, RDCreditError)

    def test_joined_message_and_details(self):
        err = ValidationError(["first", "second"], warnings=["careful"])

        assert str(err) == "first; second"
        assert err.details == {"errors": ["first", "second"], "warnings": ["careful"]}

    def test_caller_details_not_modified(self):
        details = {"request_id": "abc"}
        err = ValidationError(["first"], warnings=["careful"], details=details)

        assert details == {"request_id": "abc"}
        assert err.details == {
            "request_id": "abc",
            "errors": ["first"],
            "warnings": ["careful"],
        }

    def test_no_warnings_key_without_warnings(self):
        err = ValidationError(["first"])
        assert "warnings" not in err.details
