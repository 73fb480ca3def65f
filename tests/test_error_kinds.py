"""Tests for projsync.errors."""

import pytest

from projsync.errors import ErrorKind, Failure, fail, kind_for_os_error


class TestFailure:
    def test_str_includes_name(self):
        failure = fail(ErrorKind.SYNTAX, "Path value was not set.")
        assert str(failure) == "SyntaxError: Path value was not set."
        assert failure.name == "SyntaxError"

    def test_frozen(self):
        failure = fail(ErrorKind.NOT_FOUND, "gone")
        with pytest.raises(Exception):
            failure.message = "changed"

    def test_every_kind_has_display_name(self):
        for kind in ErrorKind:
            assert Failure(kind=kind, message="m").name.endswith("Error")


class TestKindForOsError:
    @pytest.mark.parametrize(
        "exc, expected",
        [
            (FileNotFoundError(), ErrorKind.NOT_FOUND),
            (IsADirectoryError(), ErrorKind.TYPE_MISMATCH),
            (NotADirectoryError(), ErrorKind.TYPE_MISMATCH),
            (FileExistsError(), ErrorKind.TYPE_MISMATCH),
            (PermissionError(), ErrorKind.PERMISSION),
            (OSError(28, "No space left on device"), ErrorKind.PERMISSION),
        ],
    )
    def test_mapping(self, exc, expected):
        assert kind_for_os_error(exc) is expected
