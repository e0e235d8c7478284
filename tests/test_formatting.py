"""
Tests for the pure formatting layer.

Run with:
    python -m pytest tests/test_formatting.py
"""
import unittest

from package_viewer.core import formatting
from package_viewer.core.formatting import (
    AUDIO_NOTICE,
    MISSING_DATA,
    NO_PREDOWNLOAD,
    NO_PREDOWNLOAD_PATCHES,
    build_sections,
    compose_message,
    format_size,
    format_version_heading,
    language_name,
    patch_entries,
    select_game_package,
)
from package_viewer.core.models import PackageResponse, SectionName

from payloads import GB, sample_payload


def _response(payload=None):
    return PackageResponse.model_validate(payload if payload is not None else sample_payload())


# ===========================================================================
# Language names / versions / sizes
# ===========================================================================

class TestLanguageName(unittest.TestCase):

    def test_known_codes(self):
        expected = {"zh-cn": "Chinese", "en-us": "English", "ja-jp": "Japanese", "ko-kr": "Korean"}
        for code, name in expected.items():
            self.assertEqual(language_name(code), name)

    def test_unknown_codes_pass_through(self):
        for code in ("fr-fr", "ZH-CN", "", "de"):
            self.assertEqual(language_name(code), code)


class TestVersionHeading(unittest.TestCase):

    def test_heading(self):
        self.assertEqual(format_version_heading("4.8.0", "5.1.0"), "Version: 4.8.0 to 5.1.0")

    def test_reversed_versions_rendered_as_given(self):
        self.assertEqual(format_version_heading("5.1.0", "4.8.0"), "Version: 5.1.0 to 4.8.0")

    def test_missing_target(self):
        self.assertEqual(format_version_heading("4.8.0", None), f"Version: 4.8.0 to {MISSING_DATA}")


class TestFormatSize(unittest.TestCase):

    def test_whole_gigabyte(self):
        self.assertEqual(format_size("1073741824"), "1.00GB")

    def test_fractional(self):
        self.assertEqual(format_size(str(GB + GB // 2)), "1.50GB")

    def test_missing_or_garbage(self):
        self.assertEqual(format_size(None), MISSING_DATA)
        self.assertEqual(format_size("abc"), MISSING_DATA)
        self.assertEqual(format_size(""), MISSING_DATA)

    def test_non_finite(self):
        for size in ("nan", "inf", "-inf", "1e400"):
            self.assertEqual(format_size(size), MISSING_DATA, size)


# ===========================================================================
# Section builder
# ===========================================================================

class TestBuildSections(unittest.TestCase):

    def setUp(self):
        self.sections = build_sections(_response())

    def test_three_sections_in_order(self):
        self.assertEqual(list(self.sections), list(SectionName))

    def test_main_section(self):
        main = self.sections[SectionName.MAIN]
        self.assertTrue(main.display_text.startswith("Game Version: 4.8.0"))
        self.assertIn("[Part 1]", main.display_text)
        self.assertIn("[Part 2]", main.display_text)
        self.assertIn("[Size] 8.00GB", main.display_text)
        self.assertIn("[Decompressed Size] 16.00GB", main.display_text)
        self.assertIn("[Language] Chinese", main.display_text)
        self.assertIn("[Language] English", main.display_text)

    def test_main_copy_text(self):
        copy_text = self.sections[SectionName.MAIN].copy_text
        self.assertIn("Part 2 (1.50GB):\nhttps://cdn.example/GenshinImpact_4.8.0.zip.002", copy_text)
        self.assertIn(AUDIO_NOTICE, copy_text)
        self.assertIn("English (13.00GB):\nhttps://cdn.example/Audio_English_4.8.0.zip", copy_text)

    def test_predownload_main(self):
        section = self.sections[SectionName.PREDOWNLOAD_MAIN]
        self.assertTrue(section.display_text.startswith("Game Version: 5.1.0"))
        self.assertIn("[Language] Japanese", section.display_text)

    def test_patch_heading_and_locale(self):
        section = self.sections[SectionName.PREDOWNLOAD_PATCHES]
        self.assertEqual(section.display_text.splitlines()[0], "Version: 4.8.0 to 5.1.0")
        self.assertEqual(section.copy_text.splitlines()[0], "Version: 4.8.0 to 5.1.0")
        self.assertIn("[Language] Chinese", section.display_text)
        self.assertNotIn("[Language] zh-cn", section.display_text)
        self.assertIn("Chinese (1.00GB):", section.copy_text)

    def test_unknown_locale_passes_through(self):
        section = self.sections[SectionName.PREDOWNLOAD_PATCHES]
        self.assertIn("[Language] xx-yy", section.display_text)

    def test_patches_keep_api_order(self):
        payload = sample_payload()
        patches = payload["data"]["game_packages"][0]["pre_download"]["patches"]
        newer = dict(patches[0], version="5.0.0")
        patches.insert(0, newer)
        text = build_sections(_response(payload))[SectionName.PREDOWNLOAD_PATCHES].display_text
        first = text.index("Version: 5.0.0 to 5.1.0")
        second = text.index("Version: 4.8.0 to 5.1.0")
        self.assertLess(first, second)


class TestMissingData(unittest.TestCase):

    def test_no_predownload(self):
        payload = sample_payload()
        payload["data"]["game_packages"][0]["pre_download"] = {"major": None, "patches": []}
        sections = build_sections(_response(payload))
        self.assertEqual(sections[SectionName.PREDOWNLOAD_MAIN].display_text, NO_PREDOWNLOAD)
        self.assertEqual(sections[SectionName.PREDOWNLOAD_PATCHES].display_text, NO_PREDOWNLOAD_PATCHES)
        self.assertTrue(sections[SectionName.MAIN].display_text.startswith("Game Version: 4.8.0"))

    def test_predownload_key_absent(self):
        payload = sample_payload()
        del payload["data"]["game_packages"][0]["pre_download"]
        sections = build_sections(_response(payload))
        self.assertEqual(sections[SectionName.PREDOWNLOAD_MAIN].copy_text, NO_PREDOWNLOAD)

    def test_no_game_packages(self):
        sections = build_sections(_response({"retcode": 0, "message": "OK", "data": {"game_packages": []}}))
        self.assertEqual(len(sections), 3)
        for section in sections.values():
            self.assertIn(MISSING_DATA, section.display_text)

    def test_data_absent(self):
        sections = build_sections(_response({"retcode": 0}))
        self.assertIn(MISSING_DATA, sections[SectionName.MAIN].display_text)

    def test_missing_package_fields(self):
        payload = sample_payload()
        pkg = payload["data"]["game_packages"][0]["main"]["major"]["game_pkgs"][0]
        del pkg["url"]
        del pkg["size"]
        main = build_sections(_response(payload))[SectionName.MAIN]
        self.assertIn(f"[URL] {MISSING_DATA}", main.display_text)
        self.assertIn(f"Part 1 ({MISSING_DATA}):", main.copy_text)
        self.assertIn("[Part 2]", main.display_text)

    def test_missing_target_version(self):
        payload = sample_payload()
        del payload["data"]["game_packages"][0]["pre_download"]["major"]
        section = build_sections(_response(payload))[SectionName.PREDOWNLOAD_PATCHES]
        self.assertEqual(section.display_text.splitlines()[0], f"Version: 4.8.0 to {MISSING_DATA}")

    def test_null_patches(self):
        payload = sample_payload()
        payload["data"]["game_packages"][0]["pre_download"]["patches"] = None
        sections = build_sections(_response(payload))
        self.assertEqual(sections[SectionName.PREDOWNLOAD_PATCHES].display_text, NO_PREDOWNLOAD_PATCHES)
        self.assertTrue(sections[SectionName.PREDOWNLOAD_MAIN].display_text.startswith("Game Version: 5.1.0"))

    def test_null_lists_and_game(self):
        payload = sample_payload()
        package = payload["data"]["game_packages"][0]
        package["game"] = None
        package["main"]["major"]["game_pkgs"] = None
        package["main"]["major"]["audio_pkgs"] = None
        main = build_sections(_response(payload))[SectionName.MAIN]
        self.assertTrue(main.display_text.startswith("Game Version: 4.8.0"))
        self.assertIn(f"Game packages: {MISSING_DATA}", main.copy_text)
        self.assertNotIn("Audio Packages:", main.display_text)

    def test_numeric_size_and_version(self):
        payload = sample_payload()
        major = payload["data"]["game_packages"][0]["main"]["major"]
        major["version"] = 5
        major["game_pkgs"][0]["size"] = 2 * GB
        major["game_pkgs"][0]["decompressed_size"] = 123
        main = build_sections(_response(payload))[SectionName.MAIN]
        self.assertTrue(main.display_text.startswith("Game Version: 5"))
        self.assertIn("[Size] 2.00GB", main.display_text)
        self.assertIn("[Decompressed Size] 0.00GB", main.display_text)


class TestGamePackageSelection(unittest.TestCase):

    def test_selects_matching_game_id(self):
        payload = sample_payload()
        other = sample_payload()["data"]["game_packages"][0]
        other["game"]["id"] = "other"
        other["main"]["major"]["version"] = "9.9.9"
        payload["data"]["game_packages"].insert(0, other)
        response = _response(payload)
        self.assertEqual(select_game_package(response, "gopR6Cufr3").main.major.version, "4.8.0")
        self.assertEqual(select_game_package(response).main.major.version, "9.9.9")
        self.assertEqual(select_game_package(response, "missing").game.id, "other")

    def test_patch_entries_pair_with_target(self):
        package = select_game_package(_response())
        entries = patch_entries(package.pre_download)
        self.assertEqual(len(entries), 1)
        self.assertEqual((entries[0].source_version, entries[0].target_version), ("4.8.0", "5.1.0"))
        self.assertEqual([pkg.language for pkg in entries[0].audio_pkgs], ["zh-cn", "xx-yy"])

    def test_patch_entries_without_branch(self):
        self.assertEqual(patch_entries(None), [])


# ===========================================================================
# Message composer
# ===========================================================================

class TestComposeMessage(unittest.TestCase):

    def setUp(self):
        self.sections = build_sections(_response())

    def test_idempotent(self):
        self.assertEqual(compose_message(self.sections), compose_message(self.sections))

    def test_all_sections_with_headings(self):
        message = compose_message(self.sections)
        self.assertTrue(message.startswith("== Main ==\nVersion: 4.8.0"))
        self.assertIn("\n\n== Pre-download Main ==\n", message)
        self.assertIn("\n\n== Pre-download Patches ==\nVersion: 4.8.0 to 5.1.0", message)

    def test_subset_uses_canonical_order(self):
        message = compose_message(self.sections, [SectionName.PREDOWNLOAD_PATCHES, SectionName.MAIN])
        self.assertNotIn("Pre-download Main", message)
        self.assertLess(message.index("== Main =="), message.index("== Pre-download Patches =="))

    def test_accepts_plain_names(self):
        message = compose_message(self.sections, ["PREDOWNLOAD_MAIN"])
        self.assertTrue(message.startswith("== Pre-download Main ==\n"))

    def test_empty_selection(self):
        self.assertEqual(compose_message(self.sections, []), "")
        self.assertEqual(compose_message({}), "")

    def test_does_not_mutate_sections(self):
        before = dict(self.sections)
        compose_message(self.sections)
        self.assertEqual(before, self.sections)


class TestModuleConstants(unittest.TestCase):

    def test_language_table_has_four_locales(self):
        self.assertEqual(len(formatting.LANGUAGE_NAMES), 4)


if __name__ == '__main__':
    unittest.main()
