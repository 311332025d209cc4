"""
Tests for writing plugin cache containers.
"""

import gzip
import os
import tarfile
import unittest

from io_ops.archive_creators import TarGzArchiveCreator
from io_ops.file_scanner import FileScanner

from .test_utils import TempDirTestCase, TreeFactory


def _list_members(archive_path):
    with open(archive_path, "rb") as raw_file:
        with gzip.GzipFile(fileobj=raw_file, mode="rb") as decompressor:
            with tarfile.open(fileobj=decompressor, mode="r|") as tar:
                return [(m.name, m.type, m.size, m.linkname) for m in tar]


class TestTarGzArchiveCreator(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.source = TreeFactory.create_tree(
            self.temp_path / "cache",
            {
                "b/two.txt": "two",
                "a/one.txt": "one!",
                "a/sub": None,
                "top.txt": "",
            },
        )
        self.archive_path = self.temp_path / "out" / "plugins-cache.tar.gz"
        self.creator = TarGzArchiveCreator()

    def test_entries_are_preorder_and_sorted(self):
        self.creator.create_archive(self.source, self.archive_path, "cache")

        names = [name for name, _, _, _ in _list_members(self.archive_path)]
        self.assertEqual(
            names,
            [
                "cache",
                "cache/a",
                "cache/a/one.txt",
                "cache/a/sub",
                "cache/b",
                "cache/b/two.txt",
                "cache/top.txt",
            ],
        )

    def test_result_counts(self):
        result = self.creator.create_archive(self.source, self.archive_path, "cache")

        self.assertEqual(result.entries_written, 7)
        self.assertEqual(result.files_written, 3)
        self.assertEqual(result.bytes_written, 7)
        self.assertEqual(result.skipped_entries, 0)
        self.assertEqual(result.archive_path, self.archive_path)

    def test_repeated_backups_have_identical_entries(self):
        second_path = self.temp_path / "out" / "second.tar.gz"

        self.creator.create_archive(self.source, self.archive_path, "cache")
        self.creator.create_archive(self.source, second_path, "cache")

        self.assertEqual(_list_members(self.archive_path), _list_members(second_path))

    def test_creates_parent_directory(self):
        self.creator.create_archive(self.source, self.archive_path)
        self.assertTrue(self.archive_path.is_file())

    def test_empty_source_has_only_root_entry(self):
        empty = self.temp_path / "empty"
        empty.mkdir()

        result = self.creator.create_archive(empty, self.archive_path, "cache")

        members = _list_members(self.archive_path)
        self.assertEqual([(m[0], m[1]) for m in members], [("cache", tarfile.DIRTYPE)])
        self.assertEqual(result.files_written, 0)

    def test_missing_source_writes_nothing(self):
        with self.assertRaises(FileNotFoundError):
            self.creator.create_archive(self.temp_path / "absent", self.archive_path)
        self.assertFalse(self.archive_path.exists())

    def test_file_source_is_rejected(self):
        with self.assertRaises(NotADirectoryError):
            self.creator.create_archive(self.source / "top.txt", self.archive_path)

    def test_symlinks_are_stored_as_links(self):
        os.symlink("top.txt", self.source / "link")

        self.creator.create_archive(self.source, self.archive_path, "cache")

        members = {m[0]: m for m in _list_members(self.archive_path)}
        self.assertEqual(members["cache/link"][1], tarfile.SYMTYPE)
        self.assertEqual(members["cache/link"][3], "top.txt")

    def test_symlinked_source_root_is_archived_by_contents(self):
        real = TreeFactory.create_tree(self.temp_path / "real", {"p/a.txt": "alpha"})
        linked = self.temp_path / "linked-cache"
        os.symlink(real, linked)

        result = self.creator.create_archive(linked, self.archive_path, "cache")

        members = {m[0]: m for m in _list_members(self.archive_path)}
        self.assertEqual(members["cache"][1], tarfile.DIRTYPE)
        self.assertEqual(members["cache/p/a.txt"][1], tarfile.REGTYPE)
        self.assertEqual(result.files_written, 1)
        self.assertEqual(result.bytes_written, 5)

    def test_hard_links_are_stored_as_copies(self):
        os.link(self.source / "a" / "one.txt", self.source / "a" / "same.txt")

        self.creator.create_archive(self.source, self.archive_path, "cache")

        members = {m[0]: m for m in _list_members(self.archive_path)}
        self.assertEqual(members["cache/a/same.txt"][1], tarfile.REGTYPE)
        self.assertEqual(members["cache/a/same.txt"][2], 4)

    def test_unsupported_types_are_skipped(self):
        os.mkfifo(self.source / "pipe")

        result = self.creator.create_archive(self.source, self.archive_path, "cache")

        names = [m[0] for m in _list_members(self.archive_path)]
        self.assertNotIn("cache/pipe", names)
        self.assertEqual(result.skipped_entries, 1)

    def test_compression_level_is_clamped(self):
        self.assertEqual(TarGzArchiveCreator(compression_level=42).compression_level, 9)
        self.assertEqual(TarGzArchiveCreator(compression_level=-1).compression_level, 0)


class TestFileScanner(TempDirTestCase):
    def test_summarize_top_level(self):
        source = TreeFactory.create_tree(
            self.temp_path / "cache",
            {"zeta/a.bin": b"x" * 10, "alpha/b/c.bin": b"y" * 5, "loose.txt": "z"},
        )

        summary = FileScanner().summarize_top_level(source)

        self.assertEqual(summary, [("alpha", 5), ("zeta", 10)])

    def test_collect_stats(self):
        source = TreeFactory.create_tree(
            self.temp_path / "cache", {"a/one": "1", "a/two": "22", "b": None}
        )

        stats = FileScanner().collect_stats(source)

        self.assertEqual(stats.total_files, 2)
        self.assertEqual(stats.total_dirs, 3)
        self.assertEqual(stats.total_size, 3)


if __name__ == "__main__":
    unittest.main()
