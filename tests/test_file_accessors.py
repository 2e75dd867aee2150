"""Tests for file and directory accessors.

Uses a temporary directory tree (see the file_tree fixture) to check
existence and kind validation, creation of missing paths, first-match
lists and OS-style path translation.
"""

import os
from pathlib import Path

import pytest

from paramkit.constants import OS_FILEPATH_CONVERSION_PARAM
from paramkit.exceptions import (
    ParameterConversionException,
    ParameterException,
    ParameterValidationException,
)
from paramkit.parameters import Parameters


def make(**entries):
    return Parameters.from_mapping({k: str(v) for k, v in entries.items()})


class TestExisting:
    """Tests for accessors requiring existing paths."""

    def test_existing_file(self, file_tree):
        """Test that an existing file is returned as a Path."""
        params = make(f=file_tree / "data.txt")
        assert params.get_existing_file("f") == file_tree / "data.txt"

    def test_existing_file_missing(self, file_tree):
        """Test that a nonexistent path is rejected."""
        params = make(f=file_tree / "nope.txt")
        with pytest.raises(ParameterValidationException, match="does not exist"):
            params.get_existing_file("f")

    def test_existing_file_is_directory(self, file_tree):
        """Test that a directory is not a file."""
        params = make(f=file_tree / "empty")
        with pytest.raises(ParameterValidationException, match="not a file"):
            params.get_existing_file("f")

    def test_existing_directory(self, file_tree):
        """Test directory checks."""
        params = make(d=file_tree / "full", f=file_tree / "data.txt")
        assert params.get_existing_directory("d") == file_tree / "full"
        with pytest.raises(ParameterValidationException, match="not a directory"):
            params.get_existing_directory("f")

    def test_existing_file_or_directory(self, file_tree):
        """Test that either kind is accepted."""
        params = make(d=file_tree / "full", f=file_tree / "data.txt", x=file_tree / "x")
        assert params.get_existing_file_or_directory("d").is_dir()
        assert params.get_existing_file_or_directory("f").is_file()
        with pytest.raises(ParameterValidationException):
            params.get_existing_file_or_directory("x")

    def test_existing_directories(self, file_tree):
        """Test that every listed path must be a directory."""
        params = make(
            ok=f"{file_tree / 'empty'}, {file_tree / 'full'}",
            bad=f"{file_tree / 'empty'},{file_tree / 'data.txt'}",
        )
        assert params.get_existing_directories("ok") == (file_tree / "empty", file_tree / "full")
        with pytest.raises(ParameterValidationException):
            params.get_existing_directories("bad")

    def test_unchecked_paths(self, file_tree):
        """Test accessors that do not check existence."""
        params = make(p=file_tree / "later.txt")
        assert params.get_file_or_directory("p") == file_tree / "later.txt"
        assert params.get_possibly_nonexistent_file("p") == file_tree / "later.txt"
        assert not (file_tree / "later.txt").exists()

    def test_optional_existing(self, file_tree):
        """Test optional existing file and directory accessors."""
        params = make(f=file_tree / "data.txt", d=file_tree / "empty")
        assert params.get_optional_existing_file("f") == file_tree / "data.txt"
        assert params.get_optional_existing_directory("d") == file_tree / "empty"
        assert params.get_optional_existing_file("g") is None


class TestFirstExisting:
    """Tests for first-existing-path accessors."""

    def test_first_existing_file(self, file_tree):
        """Test that the first existing file wins."""
        params = make(f=f"{file_tree / 'nope'}, {file_tree / 'empty'}, {file_tree / 'data.txt'}")
        assert params.get_first_existing_file("f") == file_tree / "data.txt"

    def test_first_existing_directory(self, file_tree):
        """Test that the first existing directory wins."""
        params = make(d=f"{file_tree / 'data.txt'},{file_tree / 'full'},{file_tree / 'empty'}")
        assert params.get_first_existing_directory("d") == file_tree / "full"

    def test_none_exist(self, file_tree):
        """Test that no match is a conversion error."""
        params = make(f=f"{file_tree / 'a'},{file_tree / 'b'}")
        with pytest.raises(ParameterConversionException, match="No provided path is an existing file"):
            params.get_first_existing_file("f")
        with pytest.raises(ParameterConversionException, match="existing directory"):
            params.get_first_existing_directory("f")


class TestCreatable:
    """Tests for accessors that may create paths."""

    def test_creatable_file_creates_parent(self, file_tree):
        """Test that missing parents are created but the file is not."""
        target = file_tree / "out" / "nested" / "result.txt"
        params = make(f=target)
        assert params.get_creatable_file("f") == target
        assert target.parent.is_dir()
        assert not target.exists()

    def test_creatable_file_existing_file(self, file_tree):
        """Test that an existing file is fine."""
        assert make(f=file_tree / "data.txt").get_creatable_file("f") == file_tree / "data.txt"

    def test_creatable_file_directory_exists(self, file_tree):
        """Test that a directory at the path is rejected."""
        with pytest.raises(ParameterValidationException, match="directory exists"):
            make(f=file_tree / "full").get_creatable_file("f")

    def test_optional_creatable_file(self, file_tree):
        """Test the optional creatable file accessor."""
        params = make(f=file_tree / "new.txt")
        assert params.get_optional_creatable_file("f") == file_tree / "new.txt"
        assert params.get_optional_creatable_file("g") is None

    def test_creatable_directory(self, file_tree):
        """Test that missing directories are created."""
        target = file_tree / "made" / "here"
        assert make(d=target).get_creatable_directory("d") == target
        assert target.is_dir()

    def test_creatable_directory_file_exists(self, file_tree):
        """Test that a file at the path is rejected."""
        with pytest.raises(ParameterValidationException, match="file exists"):
            make(d=file_tree / "data.txt").get_creatable_directory("d")

    def test_parent_is_a_file(self, file_tree):
        """Test that a file blocking the parent path is a validation error naming the key."""
        blocked = file_tree / "data.txt" / "sub"
        with pytest.raises(ParameterValidationException, match="Cannot create directory") as exc_info:
            make(d=blocked).get_creatable_directory("d")
        assert exc_info.value.key == "d"

        with pytest.raises(ParameterValidationException, match="Cannot create directory"):
            make(f=blocked / "out.txt").get_creatable_file("f")
        with pytest.raises(ParameterValidationException):
            make(d=blocked).get_and_make_directory("d")
        with pytest.raises(ParameterValidationException):
            make(d=blocked).get_empty_directory("d")

    def test_and_make_directory_absolute(self, file_tree, monkeypatch):
        """Test that get_and_make_directory returns an absolute path."""
        monkeypatch.chdir(file_tree)
        result = make(d="relative/dir").get_and_make_directory("d")
        assert result.is_absolute()
        assert result.resolve() == (file_tree / "relative" / "dir").resolve()
        assert result.is_dir()

    def test_empty_directory(self, file_tree):
        """Test empty directory checks."""
        assert make(d=file_tree / "empty").get_empty_directory("d") == file_tree / "empty"
        assert make(d=file_tree / "fresh").get_empty_directory("d").is_dir()

    def test_empty_directory_not_empty(self, file_tree):
        """Test that the error reports the entry count."""
        with pytest.raises(ParameterValidationException, match="contains 2 files"):
            make(d=file_tree / "full").get_empty_directory("d")


class TestRelativeAndSub:
    """Tests for relative resolution and sub-parameter files."""

    def test_existing_file_relative_to(self, file_tree):
        """Test resolving against a root directory."""
        params = make(f="a.txt")
        assert params.get_existing_file_relative_to(file_tree / "full", "f") == file_tree / "full" / "a.txt"

    def test_relative_to_missing_root(self, file_tree):
        """Test that a nonexistent root is a ParameterException."""
        with pytest.raises(ParameterException, match="non-existent directory"):
            make(f="a.txt").get_existing_file_relative_to(file_tree / "nope", "f")

    def test_relative_to_missing_file(self, file_tree):
        """Test that a missing relative file is a validation error."""
        with pytest.raises(ParameterValidationException, match="does not exist"):
            make(f="zzz.txt").get_existing_file_relative_to(file_tree, "f")

    def test_relative_to_directory_rejected(self, file_tree):
        """Test that a directory is not accepted as the relative file."""
        with pytest.raises(ParameterValidationException, match="not a file"):
            make(f="full").get_existing_file_relative_to(file_tree, "f")

    def test_sub_parameters(self, file_tree):
        """Test loading another parameter file named by a parameter."""
        sub = file_tree / "sub.params"
        sub.write_text("alpha: 1\nbeta.gamma: two\n")
        loaded = make(sub=sub).copy_namespace_if_present("x").get_sub_parameters("sub")
        assert loaded.namespace == ()
        assert loaded.get_integer("alpha") == 1
        assert loaded.get_string("beta.gamma") == "two"


@pytest.mark.skipif(os.sep != "/", reason="POSIX separator semantics")
class TestOSPathConversion:
    """Tests for the os_filepath_conversion switch."""

    def test_backslashes_translated_when_enabled(self, file_tree):
        """Test that Windows-style separators resolve when conversion is on."""
        windows_style = str(file_tree / "full").replace("/", "\\") + "\\a.txt"
        params = make(**{"f": windows_style, OS_FILEPATH_CONVERSION_PARAM: "true"})
        assert params.get_existing_file("f") == Path(file_tree / "full" / "a.txt")

    def test_literal_when_disabled(self, file_tree):
        """Test that paths are taken literally without the switch."""
        windows_style = str(file_tree / "full").replace("/", "\\") + "\\a.txt"
        params = make(**{"f": windows_style, OS_FILEPATH_CONVERSION_PARAM: "false"})
        with pytest.raises(ParameterValidationException):
            params.get_existing_file("f")

    def test_invalid_switch_value(self, file_tree):
        """Test that the switch itself must be a strict boolean."""
        params = make(**{"f": file_tree / "data.txt", OS_FILEPATH_CONVERSION_PARAM: "yes"})
        with pytest.raises(ParameterConversionException):
            params.get_existing_file("f")
