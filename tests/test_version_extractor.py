import shutil
import tempfile
import unittest
from pathlib import Path

from wblauncher.classifier import classify
from wblauncher.errors import LauncherError
from wblauncher.version_extractor import (
    extract_archive,
    extract_version,
    guess_project_root,
    normalize_version,
    resolve_flat_folder,
    version_from_flat_folder,
    version_from_legacy_files,
)

from tests.support import CannedPrompter, make_session, make_settings, project_info, write_file, write_zip


def _storage_props(version):
    return (
        '<StorageProperties>\n'
        '  <Item Key="Owner" Value="ops"/>\n'
        f'  <Item Key="ProductVersion" Value="{version}"/>\n'
        '</StorageProperties>\n'
    )


class NormalizeTests(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_version("V21.0.3 SP1"), "21.0.3")
        self.assertEqual(normalize_version("18.2"), "18.2")
        self.assertIsNone(normalize_version("twenty"))
        self.assertIsNone(normalize_version(None))


class FlatFolderTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.folder = Path(self._td.name) / "Line4Flat"
        self.folder.mkdir()

    def tearDown(self):
        self._td.cleanup()

    def test_metadata_file_wins(self):
        write_file(self.folder / "Properties" / "ProjectInfo.xml", project_info("21.0.3"))
        write_file(self.folder / "Content" / "A" / "StorageProperties.xml", _storage_props("19.0"))
        write_file(self.folder / "Project.xml", '<Project BuildNumber="17.1"/>')
        self.assertEqual(version_from_flat_folder(self.folder), "21.0.3")

    def test_storage_properties_when_metadata_missing(self):
        write_file(self.folder / "Content" / "B" / "StorageProperties.xml", _storage_props("19.0"))
        write_file(self.folder / "Project.xml", '<Project BuildNumber="17.1"/>')
        self.assertEqual(version_from_flat_folder(self.folder), "19.0")

    def test_unparsable_metadata_falls_through(self):
        write_file(self.folder / "Properties" / "ProjectInfo.xml", "<ProjectInfo><Property Key=")
        write_file(self.folder / "Content" / "StorageProperties.xml", _storage_props("19.0"))
        self.assertEqual(version_from_flat_folder(self.folder), "19.0")

    def test_storage_properties_scanned_in_order_until_hit(self):
        write_file(self.folder / "Content" / "A" / "StorageProperties.xml", "<StorageProperties/>")
        write_file(self.folder / "Content" / "B" / "StorageProperties.xml", _storage_props("20.1"))
        self.assertEqual(version_from_flat_folder(self.folder), "20.1")

    def test_legacy_attribute_priority(self):
        write_file(self.folder / "Project.xml", '<Project FirmwareVersion="4.2"/>')
        write_file(self.folder / "Hardware.xml", '<Hardware><Cpu PlatformVersion="16.0"/></Hardware>')
        self.assertEqual(version_from_legacy_files(self.folder), "16.0")
        write_file(self.folder / "Settings.xml", '<Settings BuildNumber="15.1.7"/>')
        self.assertEqual(version_from_legacy_files(self.folder), "15.1.7")

    def test_legacy_plain_text_file(self):
        write_file(self.folder / "Settings.xml", "Name=Line4\nBuildNumber=14.3\n")
        self.assertEqual(version_from_flat_folder(self.folder), "14.3")

    def test_nothing_found(self):
        write_file(self.folder / "Project.xml", "<Project/>")
        self.assertIsNone(version_from_flat_folder(self.folder))


class ArchiveTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.tmp = Path(self._td.name)
        self.settings = make_settings(self.tmp)
        self.session = make_session()

    def tearDown(self):
        if self.session.extraction is not None:
            shutil.rmtree(self.session.extraction.root, ignore_errors=True)
        self._td.cleanup()

    def test_direct_metadata_read_does_not_extract(self):
        archive = write_zip(self.tmp / "Line4.wbz", {"Properties/ProjectInfo.xml": project_info("21.0")})
        version = extract_version(classify(archive, self.settings), self.session)
        self.assertEqual(version, "21.0")
        self.assertIsNone(self.session.extraction)

    def test_falls_back_to_extraction(self):
        archive = write_zip(self.tmp / "Line4.wbz", {
            "Project/Project.xml": "<Project/>",
            "Project/Content/X/StorageProperties.xml": _storage_props("18.0.2"),
        })
        version = extract_version(classify(archive, self.settings), self.session)
        self.assertEqual(version, "18.0.2")
        extraction = self.session.extraction
        self.assertIsNotNone(extraction)
        self.assertEqual(extraction.project_root, extraction.root / "Project")
        self.assertTrue(extraction.root.is_dir())

    def test_extraction_reused_within_session(self):
        archive = write_zip(self.tmp / "Line4.wbz", {"Settings.xml": '<Settings BuildNumber="15.0"/>'})
        first = extract_archive(archive, self.session)
        second = extract_archive(archive, self.session)
        self.assertIs(first, second)

    def test_project_root_guess_order(self):
        root = self.tmp / "x"
        write_file(root / "Line4" / "Project.xml", "<Project/>")
        write_file(root / "project" / "Settings.xml", "<Settings/>")
        self.assertEqual(guess_project_root(root, "Line4"), root / "project")
        shutil.rmtree(root / "project")
        self.assertEqual(guess_project_root(root, "Line4"), root / "Line4")
        shutil.rmtree(root / "Line4")
        self.assertIsNone(guess_project_root(root, "Line4"))
        write_file(root / "Settings.xml", "<Settings/>")
        self.assertEqual(guess_project_root(root, "Line4"), root)

    def test_no_version_anywhere(self):
        archive = write_zip(self.tmp / "Line4.wbz", {"Data/blob.bin": "x"})
        self.assertIsNone(extract_version(classify(archive, self.settings), self.session))


class LauncherTests(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.tmp = Path(self._td.name)
        self.settings = make_settings(self.tmp)
        self.launcher = write_file(self.tmp / "Line4.wbl", "ref")

    def tearDown(self):
        self._td.cleanup()

    def test_uses_sibling_flat_folder(self):
        write_file(self.tmp / "Line4Flat" / "Properties" / "ProjectInfo.xml", project_info("20.0"))
        prompter = CannedPrompter()
        version = extract_version(classify(self.launcher, self.settings), make_session(prompter))
        self.assertEqual(version, "20.0")
        self.assertEqual(prompter.calls, [])

    def test_prompts_for_missing_sibling(self):
        other = self.tmp / "somewhere"
        write_file(other / "Project.xml", '<Project PlatformVersion="19.1"/>')
        prompter = CannedPrompter(directories=[other])
        version = extract_version(classify(self.launcher, self.settings), make_session(prompter))
        self.assertEqual(version, "19.1")
        self.assertEqual(prompter.calls, [("directory", "Flat project folder")])

    def test_cancelled_prompt_means_no_version(self):
        version = extract_version(classify(self.launcher, self.settings), make_session(CannedPrompter()))
        self.assertIsNone(version)

    def test_required_flat_folder_cancelled_is_fatal(self):
        artifact = classify(self.launcher, self.settings)
        with self.assertRaises(LauncherError) as ctx:
            resolve_flat_folder(artifact, make_session(CannedPrompter()), required=True)
        self.assertEqual(ctx.exception.code, "flat_folder_missing")


if __name__ == "__main__":
    unittest.main()
