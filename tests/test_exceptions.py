"""Tests for the duplicity-backup exception hierarchy.

These tests verify:
1. Exception structure (code, message, details)
2. Inheritance hierarchy
3. String representation and dictionary conversion
"""

import pytest

from duplicity_backup.exceptions import (
    CommandGenerationError,
    ConfigurationError,
    ConfigValidationError,
    DuplicityBackupError,
    LockError,
    NotificationError,
    SubprocessError,
)


class TestDuplicityBackupError:
    """Tests for base DuplicityBackupError class."""

    def test_basic_construction(self):
        error = DuplicityBackupError("TEST_CODE", "Test message")

        assert error.code == "TEST_CODE"
        assert error.message == "Test message"
        assert error.details == {}

    def test_none_details_becomes_empty_dict(self):
        assert DuplicityBackupError("TEST_CODE", "Test message", details=None).details == {}

    def test_str_without_details(self):
        assert str(DuplicityBackupError("TEST_CODE", "Test message")) == "TEST_CODE: Test message"

    def test_str_with_details(self):
        error = DuplicityBackupError("TEST_CODE", "Test message", details={"foo": "bar"})

        assert str(error) == "TEST_CODE: Test message (details: {'foo': 'bar'})"

    def test_to_dict(self):
        error = SubprocessError("NON_ZERO_EXIT", "exit status 1", details={"returncode": 1})

        assert error.to_dict() == {
            "code": "NON_ZERO_EXIT",
            "message": "exit status 1",
            "details": {"returncode": 1},
        }

    def test_can_be_raised_and_caught(self):
        with pytest.raises(DuplicityBackupError) as exc_info:
            raise CommandGenerationError("UNKNOWN_COMMAND", "did not understand command 'x'")

        assert exc_info.value.code == "UNKNOWN_COMMAND"


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ConfigurationError, CommandGenerationError, SubprocessError, NotificationError],
    )
    def test_subclasses_base(self, cls):
        assert issubclass(cls, DuplicityBackupError)

    def test_validation_error_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            raise ConfigValidationError("INVALID_CONFIG", "root is required")


class TestLockError:
    def test_default_code(self):
        error = LockError("Could not acquire lock /tmp/x.lock")

        assert isinstance(error, DuplicityBackupError)
        assert error.code == "LOCK_HELD"
        assert error.message == "Could not acquire lock /tmp/x.lock"

    def test_custom_code_and_details(self):
        error = LockError("stale", code="LOCK_STALE", details={"path": "/tmp/x.lock"})

        assert error.code == "LOCK_STALE"
        assert error.details == {"path": "/tmp/x.lock"}
