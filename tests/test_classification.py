"""
Unit tests for the extension filter and file scanner.
"""

import os
import sys

import pytest
from pathlib import Path

from category_sorter.classification.extension_filter import (
    ExtensionFilter,
    SelectionKind,
    SelectionMode,
)
from category_sorter.classification.scanner import FileRecord, FileScanner
from category_sorter.deduplication.hash_engine import FileHasher
from category_sorter.utils.exceptions import (
    ConfigurationError,
    ErrorCode,
    FileReadError,
    TargetNotADirectoryError,
    TargetNotFoundError,
    TargetNotReadableError,
    ValidationError,
)


class TestSelectionMode:
    """Tests for SelectionMode construction."""

    def test_default_is_all(self):
        """Test no options select every category."""
        mode = SelectionMode.from_options()

        assert mode.kind is SelectionKind.ALL
        assert mode.categories == ()

    def test_only(self):
        """Test --only builds an ONLY selection."""
        mode = SelectionMode.from_options(only=["Images"])

        assert mode.kind is SelectionKind.ONLY
        assert mode.categories == ("Images",)

    def test_except(self):
        """Test --except builds an EXCEPT selection."""
        mode = SelectionMode.from_options(exclude=["Audio"])

        assert mode.kind is SelectionKind.EXCEPT

    @pytest.mark.parametrize("only,exclude", [
        (["Images"], ["Audio"]),
        (["Images"], ["Images"]),
        ([], []),
        (["Nope"], ["Images"]),
    ])
    def test_only_and_except_together(self, only, exclude):
        """Test --only with --except is always a configuration error."""
        with pytest.raises(ConfigurationError):
            SelectionMode.from_options(only=only, exclude=exclude)


class TestExtensionFilter:
    """Tests for ExtensionFilter."""

    @pytest.fixture
    def ext_filter(self, registry):
        return ExtensionFilter(registry)

    def test_all_is_union(self, ext_filter, registry):
        """Test ALL selects every registry extension."""
        assert ext_filter.target_extensions(SelectionMode.all()) == registry.all_extensions()

    def test_only_subset_of_all(self, ext_filter, registry):
        """Test every ONLY selection is contained in ALL."""
        everything = ext_filter.target_extensions(SelectionMode.all())
        for name in registry.names:
            assert ext_filter.target_extensions(SelectionMode.only([name])) <= everything

    def test_only_images(self, ext_filter, registry):
        """Test ONLY picks exactly the named category's extensions."""
        extensions = ext_filter.target_extensions(SelectionMode.only(["Images"]))

        assert extensions == registry.extensions_of("Images")
        assert ".pdf" not in extensions

    def test_except_disjoint_from_excluded(self, ext_filter, registry):
        """Test EXCEPT drops every extension of the excluded categories."""
        extensions = ext_filter.target_extensions(
            SelectionMode.excluding(["Images", "Audio"])
        )

        assert extensions.isdisjoint(registry.extensions_of("Images"))
        assert extensions.isdisjoint(registry.extensions_of("Audio"))
        assert registry.extensions_of("Documents") <= extensions

    def test_case_insensitive_names(self, ext_filter, registry):
        """Test category names are matched case-insensitively."""
        extensions = ext_filter.target_extensions(SelectionMode.only(["images"]))

        assert extensions == registry.extensions_of("Images")

    def test_unknown_category(self, ext_filter):
        """Test unknown categories raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            ext_filter.target_extensions(SelectionMode.only(["Images", "Spreadsheets"]))

        assert exc_info.value.details["categories"] == ["Spreadsheets"]

    def test_unknown_excluded_category(self, ext_filter):
        """Test EXCEPT validates names too."""
        with pytest.raises(ValidationError):
            ext_filter.target_extensions(SelectionMode.excluding(["Spreadsheets"]))

    def test_empty_selection(self, ext_filter):
        """Test an empty ONLY list is rejected."""
        with pytest.raises(ValidationError):
            ext_filter.target_extensions(SelectionMode.only([]))

    def test_validation_error_is_configuration_error(self, ext_filter):
        """Test ValidationError is reported as a configuration problem."""
        with pytest.raises(ConfigurationError):
            ext_filter.target_extensions(SelectionMode.only(["Nope"]))

    def test_selected_categories_keep_registry_order(self, ext_filter):
        """Test selected categories follow registry order."""
        mode = SelectionMode.only(["Audio", "Images"])

        assert ext_filter.selected_categories(mode) == ("Images", "Audio")


class TestFileRecord:
    """Tests for FileRecord validation."""

    def test_requires_absolute_path(self):
        """Test relative paths are rejected."""
        with pytest.raises(ValueError):
            FileRecord(Path("a.jpg"), "a.jpg", ".jpg", "Images", "abc")

    def test_name_must_match_path(self, tmp_path):
        """Test the base name must agree with the path."""
        with pytest.raises(ValueError):
            FileRecord(tmp_path / "a.jpg", "b.jpg", ".jpg", "Images", "abc")

    def test_extension_normalized(self, tmp_path):
        """Test extensions are stored lower-case."""
        record = FileRecord(tmp_path / "A.JPG", "A.JPG", ".JPG", "Images", "abc")

        assert record.extension == ".jpg"

    def test_immutable(self, tmp_path):
        """Test records cannot be modified."""
        record = FileRecord(tmp_path / "a.jpg", "a.jpg", ".jpg", "Images", "abc")

        with pytest.raises(AttributeError):
            record.category = "Documents"


class TestFileScanner:
    """Tests for FileScanner."""

    @pytest.fixture
    def scanner(self, registry):
        return FileScanner(registry)

    @pytest.fixture
    def all_extensions(self, registry):
        return ExtensionFilter(registry).target_extensions(SelectionMode.all())

    def test_scan_sample(self, scanner, sample_dir, all_extensions):
        """Test records are built for every matching file."""
        result = scanner.scan(sample_dir, all_extensions)

        names = [r.name for r in result.records]
        assert names == ["photo.jpg", "photo_copy.jpg", "report.pdf"]
        assert [r.category for r in result.records] == ["Images", "Images", "Documents"]
        assert result.records[0].content_hash == result.records[1].content_hash
        assert result.records[0].content_hash != result.records[2].content_hash
        assert all(r.path.is_absolute() for r in result.records)
        assert result.failures == []

    def test_only_top_level(self, scanner, sample_dir, all_extensions):
        """Test subdirectories are not traversed."""
        nested = sample_dir / "nested"
        nested.mkdir()
        (nested / "deep.jpg").write_bytes(b"deep")

        result = scanner.scan(sample_dir, all_extensions)

        assert "deep.jpg" not in [r.name for r in result.records]

    def test_directories_with_extension_ignored(self, scanner, sample_dir, all_extensions):
        """Test directories named like files are not scanned."""
        (sample_dir / "album.jpg").mkdir()

        result = scanner.scan(sample_dir, all_extensions)

        assert "album.jpg" not in [r.name for r in result.records]

    def test_filters_by_extension(self, scanner, sample_dir, registry):
        """Test only target extensions are picked up."""
        extensions = registry.extensions_of("Documents")

        result = scanner.scan(sample_dir, extensions)

        assert [r.name for r in result.records] == ["report.pdf"]

    def test_unmatched_and_extensionless_files(self, scanner, sample_dir, all_extensions):
        """Test unknown and missing extensions are left out."""
        (sample_dir / "notes.xyz").write_text("x")
        (sample_dir / "Makefile").write_text("all:")

        result = scanner.scan(sample_dir, all_extensions)

        assert len(result.records) == 3

    def test_extension_case_insensitive(self, scanner, tmp_path, all_extensions):
        """Test upper-case extensions match."""
        (tmp_path / "HOLIDAY.JPG").write_bytes(b"img")

        result = scanner.scan(tmp_path, all_extensions)

        assert result.records[0].category == "Images"
        assert result.records[0].extension == ".jpg"
        assert result.records[0].name == "HOLIDAY.JPG"

    def test_empty_directory(self, scanner, tmp_path, all_extensions):
        """Test an empty directory yields no records."""
        result = scanner.scan(tmp_path, all_extensions)

        assert result.records == []

    def test_missing_directory(self, scanner, tmp_path, all_extensions):
        """Test a missing directory raises TargetNotFoundError."""
        with pytest.raises(TargetNotFoundError):
            scanner.scan(tmp_path / "missing", all_extensions)

    def test_not_a_directory(self, scanner, sample_dir, all_extensions):
        """Test a file path raises TargetNotADirectoryError."""
        with pytest.raises(TargetNotADirectoryError):
            scanner.scan(sample_dir / "report.pdf", all_extensions)

    def test_unreadable_file_excluded(self, registry, sample_dir, all_extensions):
        """Test a hashing failure excludes only that file."""

        class FlakyHasher(FileHasher):
            def compute(self, file_path):
                if Path(file_path).name == "report.pdf":
                    raise FileReadError("Cannot read file: gone", file_path=str(file_path))
                return super().compute(file_path)

        scanner = FileScanner(registry, FlakyHasher())

        result = scanner.scan(sample_dir, all_extensions)

        assert [r.name for r in result.records] == ["photo.jpg", "photo_copy.jpg"]
        assert len(result.failures) == 1
        assert result.failures[0].file_path.endswith("report.pdf")

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced"
    )
    def test_permission_denied_excluded(self, scanner, sample_dir, all_extensions):
        """Test an unreadable file is reported and skipped."""
        locked = sample_dir / "report.pdf"
        locked.chmod(0)
        try:
            result = scanner.scan(sample_dir, all_extensions)
        finally:
            locked.chmod(0o644)

        assert "report.pdf" not in [r.name for r in result.records]
        assert len(result.failures) == 1

    def test_unlistable_directory(self, scanner, sample_dir, all_extensions, monkeypatch):
        """Test a listing failure becomes TargetNotReadableError."""

        def denied(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", denied)

        with pytest.raises(TargetNotReadableError) as exc_info:
            scanner.scan(sample_dir, all_extensions)

        assert exc_info.value.error_code == ErrorCode.TARGET_NOT_READABLE
        assert exc_info.value.details["directory"] == str(sample_dir)
        assert isinstance(exc_info.value.cause, PermissionError)

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced"
    )
    def test_directory_without_read_permission(self, scanner, sample_dir, all_extensions):
        """Test a directory that cannot be listed aborts the scan."""
        sample_dir.chmod(0o311)
        try:
            with pytest.raises(TargetNotReadableError):
                scanner.scan(sample_dir, all_extensions)
        finally:
            sample_dir.chmod(0o755)

    def test_rescan_of_category_folder(self, scanner, sample_dir, all_extensions):
        """Test a moved file scanned again forms no duplicate group by itself."""
        from category_sorter.deduplication.resolver import find_duplicate_groups

        images = sample_dir / "Images"
        images.mkdir()
        (sample_dir / "report.pdf").rename(images / "report.pdf")

        result = scanner.scan(images, all_extensions)

        assert len(result.records) == 1
        assert find_duplicate_groups(result.records) == []
