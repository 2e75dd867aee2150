"""Shared fixtures for paramkit tests."""

import pytest

from paramkit.parameters import Parameters


@pytest.fixture
def sample_params():
    """A small parameter set with nested namespaces."""
    return Parameters.from_mapping(
        {
            "seed": "7",
            "threshold": "0.25",
            "verbose": "true",
            "labels": "PER, ORG ,LOC",
            "model.beta": "0.3",
            "model.layers": "2,4,8",
            "model.decoder.width": "128",
            "model.decoder.kind": "greedy",
        }
    )


@pytest.fixture
def file_tree(tmp_path):
    """Directory with one file, one empty and one non-empty subdirectory."""
    (tmp_path / "data.txt").write_text("hello")
    (tmp_path / "empty").mkdir()
    (tmp_path / "full").mkdir()
    (tmp_path / "full" / "a.txt").write_text("a")
    (tmp_path / "full" / "b.txt").write_text("b")
    return tmp_path
