#!/usr/bin/env python3
"""
File Manager Tests
==================

Image discovery, result persistence and result parsing.

Run:
    python -m unittest tests.test_file_manager
"""

import sys
import tempfile
import unittest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from chat_image_parser.delegates import FileManagerDelegate
from chat_image_parser.errors import FolderNotFound, NoImagesFound, ParseError


class TestFileManager(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self._tmp.name)
        self.file_manager = FileManagerDelegate(self.folder)

    def tearDown(self):
        self._tmp.cleanup()

    def touch(self, name, text=""):
        path = self.folder / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_missing_folder(self):
        with self.assertRaises(FolderNotFound):
            FileManagerDelegate(self.folder / "nope").ensure_folder()

    def test_lists_only_images_case_insensitive_and_sorted(self):
        for name in ["b.PNG", "a.jpg", "c.JpEg", "d.webp", "e.gif", "f.bmp", "notes.txt", "a.json"]:
            self.touch(name)
        (self.folder / "sub.png").mkdir()

        names = [p.name for p in self.file_manager.list_images()]

        self.assertEqual(names, ["a.jpg", "b.PNG", "c.JpEg", "d.webp", "e.gif", "f.bmp"])

    def test_no_images_is_fatal(self):
        self.touch("readme.txt")
        with self.assertRaises(NoImagesFound):
            self.file_manager.list_images()

    def test_save_result_next_to_image(self):
        image = self.touch("shelf.jpg")
        saved = self.file_manager.save_result(image, "shelf", '[{"price": "9.90"}]')

        self.assertEqual(saved, self.folder / "shelf.json")
        self.assertEqual(saved.read_text(encoding="utf-8"), '[{"price": "9.90"}]')

    def test_list_result_files(self):
        self.touch("b.json")
        self.touch("a.JSON")
        self.touch("a.jpg")
        self.assertEqual([p.name for p in self.file_manager.list_result_files()], ["a.JSON", "b.json"])

    def test_load_result_accepts_loose_json(self):
        path = self.touch("loose.json", "[{store_name: 'Lidl', price: '1.99',},]")
        self.assertEqual(self.file_manager.load_result(path), [{"store_name": "Lidl", "price": "1.99"}])

    def test_load_result_malformed(self):
        path = self.touch("bad.json", "Sorry, I cannot read this image.")
        with self.assertRaises(ParseError):
            self.file_manager.load_result(path)

    def test_merged_path(self):
        self.assertEqual(self.file_manager.merged_path, self.folder.resolve() / "merged_data.xlsx")


if __name__ == "__main__":
    unittest.main()
