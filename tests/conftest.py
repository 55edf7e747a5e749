"""
Shared fixtures for the test suite.
"""

import hashlib
from pathlib import Path

import pytest

from category_sorter.classification.scanner import FileRecord
from category_sorter.config.categories import CategoryRegistry


class ScriptedPrompt:
    """Prompt function that replays canned answers and records the prompts."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []

    def __call__(self, text):
        self.prompts.append(text)
        if not self.responses:
            raise AssertionError("Prompted more times than scripted")
        return self.responses.pop(0)


@pytest.fixture
def registry():
    """Built-in category registry."""
    return CategoryRegistry.default()


@pytest.fixture
def sample_dir(tmp_path):
    """photo.jpg and photo_copy.jpg (identical) plus report.pdf."""
    (tmp_path / "photo.jpg").write_bytes(b"\xff\xd8\xff same picture")
    (tmp_path / "photo_copy.jpg").write_bytes(b"\xff\xd8\xff same picture")
    (tmp_path / "report.pdf").write_bytes(b"%PDF-1.4 report")
    return tmp_path


@pytest.fixture
def make_record(tmp_path):
    """Build a FileRecord whose hash is derived from ``content``."""
    def _make(name, content, category="Images"):
        path = tmp_path / name
        return FileRecord(
            path=path,
            name=name,
            extension=Path(name).suffix,
            category=category,
            content_hash=hashlib.sha256(content.encode()).hexdigest(),
        )
    return _make


@pytest.fixture
def scripted():
    """Factory for ScriptedPrompt instances."""
    return ScriptedPrompt
