"""Tests for directory aggregates and input helpers."""

import os
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from depclean.scanner import (
    build_scan_config,
    expand_path,
    format_size,
    get_directory_size,
    get_last_modified,
    parse_size,
    resolve_root,
)


class TestExpandPath:
    def test_expands_tilde(self):
        """Expand ~/ to the home directory."""
        result = expand_path("~/test")
        assert str(result).startswith(str(Path.home()))
        assert result.name == "test"

    def test_handles_absolute_path(self):
        """Absolute paths are unchanged."""
        result = expand_path("/absolute/path")
        assert str(result) == "/absolute/path"

    def test_bare_tilde_is_not_expanded(self):
        """Only the ~/ prefix is expanded."""
        assert str(expand_path("~user/x")) == "~user/x"


class TestResolveRoot:
    def test_relative_path_uses_cwd(self, tmp_path):
        """Relative roots resolve against cwd."""
        assert resolve_root("projects", cwd=tmp_path) == tmp_path / "projects"

    def test_dot_is_cwd(self, tmp_path):
        assert resolve_root(".", cwd=tmp_path) == tmp_path

    def test_absolute_path_unchanged(self, tmp_path):
        assert resolve_root(str(tmp_path / "a" / ".." / "b")) == tmp_path / "b"

    def test_home_relative(self):
        """~/ roots resolve under home."""
        assert resolve_root("~/code") == Path.home() / "code"


class TestParseSize:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("100MB", 104857600),
            ("100mb", 104857600),
            ("1GB", 1024**3),
            ("1.5KB", 1536),
            ("512", 512),
            (" 10 MB ", 10 * 1024**2),
            ("0", 0),
            ("", 0),
        ],
    )
    def test_valid_sizes(self, text, expected):
        """Suffixes are case-insensitive binary units."""
        assert parse_size(text) == expected

    def test_malformed_is_zero(self):
        """Unparseable sizes mean no size filter."""
        assert parse_size("lots") == 0
        assert parse_size("MB") == 0

    def test_leading_number_is_used(self):
        """Trailing junk after a number is ignored."""
        assert parse_size("12abc") == 12


class TestFormatSize:
    def test_bytes(self):
        assert format_size(512) == "512 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.50 KB"

    def test_megabytes(self):
        assert format_size(50 * 1024**2) == "50.00 MB"

    def test_gigabytes(self):
        assert format_size(3 * 1024**3) == "3.00 GB"

    def test_unit_boundary(self):
        """1024 bytes is shown as KB."""
        assert format_size(1023) == "1023 B"
        assert format_size(1024) == "1.00 KB"


class TestGetDirectorySize:
    def test_empty_directory(self, tmp_path):
        """Empty directory has size 0."""
        assert get_directory_size(tmp_path) == 0

    def test_directory_with_files(self, tmp_path):
        (tmp_path / "test.txt").write_text("Hello, World!")
        assert get_directory_size(tmp_path) == len("Hello, World!")

    def test_nested_directory(self, tmp_path):
        """Files in subdirectories are counted."""
        subdir = tmp_path / "a" / "b"
        subdir.mkdir(parents=True)
        (subdir / "file.txt").write_text("test")
        (tmp_path / "top.txt").write_text("xy")
        assert get_directory_size(tmp_path) == 6

    def test_symlinks_not_followed(self, tmp_path):
        """Symlink targets are not counted."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"x" * 4096)
        inside = tmp_path / "inside"
        inside.mkdir()
        (inside / "link").symlink_to(outside, target_is_directory=True)
        (inside / "file-link").symlink_to(outside / "big.bin")

        assert get_directory_size(inside) == 0

    def test_missing_directory(self, tmp_path):
        """A missing directory has size 0."""
        assert get_directory_size(tmp_path / "missing") == 0

    def test_scandir_error_is_tolerated(self, tmp_path):
        """Listing errors are skipped."""
        (tmp_path / "f").write_text("abc")
        with patch("os.scandir", side_effect=PermissionError("denied")):
            assert get_directory_size(tmp_path) == 0


class TestGetLastModified:
    def set_mtime(self, path: Path, when: datetime) -> None:
        ts = when.timestamp()
        os.utime(path, (ts, ts))

    def test_uses_own_mtime_for_empty_directory(self, tmp_path):
        """An empty directory uses its own mtime."""
        when = datetime(2024, 1, 1, 8, 30)
        self.set_mtime(tmp_path, when)
        assert get_last_modified(tmp_path) == when

    def test_newest_nested_entry_wins(self, tmp_path):
        """The newest entry anywhere below decides."""
        old = datetime(2024, 1, 1)
        new = datetime(2024, 6, 1)
        nested = tmp_path / "a" / "b" / "file.txt"
        nested.parent.mkdir(parents=True)
        nested.write_text("x")
        for p in (nested, nested.parent, tmp_path / "a", tmp_path):
            self.set_mtime(p, old)
        self.set_mtime(nested, new)

        assert get_last_modified(tmp_path) == new

    def test_own_mtime_counts_when_newest(self, tmp_path):
        """The directory's own mtime counts too."""
        old = datetime(2024, 1, 1)
        new = datetime(2024, 6, 1)
        (tmp_path / "f").write_text("x")
        self.set_mtime(tmp_path / "f", old)
        self.set_mtime(tmp_path, new)

        assert get_last_modified(tmp_path) == new

    def test_missing_path_is_treated_as_recent(self, tmp_path):
        """An unstat-able path counts as just modified."""
        before = datetime.now() - timedelta(seconds=1)
        assert get_last_modified(tmp_path / "missing") >= before

    def test_scandir_error_is_tolerated(self, tmp_path):
        """Listing errors are skipped."""
        when = datetime(2024, 1, 1)
        self.set_mtime(tmp_path, when)
        with patch("os.scandir", side_effect=OSError("gone")):
            assert get_last_modified(tmp_path) == when


class TestBuildScanConfig:
    def test_from_cli_values(self, tmp_path):
        """Relative root, day count and size text become a ScanConfig."""
        now = datetime(2026, 1, 31, 12, 0)
        config = build_scan_config(
            path="work", max_depth=3, days=30, min_size="1KB", now=now, cwd=tmp_path
        )
        assert config.root == tmp_path / "work"
        assert config.max_depth == 3
        assert config.cutoff == now - timedelta(days=30)
        assert config.min_size_bytes == 1024

    def test_zero_days_cutoff_is_now(self, tmp_path):
        """--days 0 puts the cutoff at the reference time."""
        now = datetime(2026, 1, 31, 12, 0)
        config = build_scan_config(path=str(tmp_path), days=0, now=now)
        assert config.cutoff == now

    def test_malformed_min_size_is_zero(self, tmp_path):
        """An unparseable size threshold disables the size filter."""
        config = build_scan_config(path=str(tmp_path), min_size="huge")
        assert config.min_size_bytes == 0
