"""
Pure text rendering for game package documents.

Nothing in here touches the network, the clipboard or the GUI; every function
takes validated models and returns strings, so it is safe to call from any
thread.
"""
import math
from typing import Dict, Iterable, List, Optional

from .models import (
    AudioPackage,
    Branch,
    FormattedSection,
    GamePackage,
    Major,
    Package,
    PackageResponse,
    PatchEntry,
    SectionName,
)

LANGUAGE_NAMES: Dict[str, str] = {
    "zh-cn": "Chinese",
    "en-us": "English",
    "ja-jp": "Japanese",
    "ko-kr": "Korean",
}

MISSING_DATA = "Missing data"
NO_PREDOWNLOAD = "No pre-download available."
NO_PREDOWNLOAD_PATCHES = "No pre-download patches available."
AUDIO_NOTICE = "You also need to download an audio pack corresponding to your system's region language."

BYTES_PER_GB = 1024 ** 3


def language_name(code: str) -> str:
    """Returns the display name for a locale code, or the code itself if unknown."""
    return LANGUAGE_NAMES.get(code, code)


def format_version_heading(source: Optional[str], target: Optional[str]) -> str:
    return f"Version: {_or_missing(source)} to {_or_missing(target)}"


def format_size(size: Optional[str]) -> str:
    """
    Converts a byte count sent as a decimal string into gigabytes.

    The API reports sizes as strings; anything missing or unparseable renders
    as the missing-data placeholder instead of a misleading 0.00GB.
    """
    if size is None:
        return MISSING_DATA
    try:
        size_bytes = float(size)
    except (TypeError, ValueError):
        return MISSING_DATA
    if not math.isfinite(size_bytes):
        return MISSING_DATA
    return f"{size_bytes / BYTES_PER_GB:.2f}GB"


def _or_missing(value: Optional[str]) -> str:
    return value if value else MISSING_DATA


def select_game_package(response: PackageResponse, game_id: Optional[str] = None) -> Optional[GamePackage]:
    """Picks the game package matching game_id, falling back to the first one."""
    if response.data is None or not response.data.game_packages:
        return None
    packages = response.data.game_packages
    if game_id:
        for package in packages:
            if package.game.id == game_id:
                return package
    return packages[0]


def patch_entries(branch: Optional[Branch]) -> List[PatchEntry]:
    """Pairs every patch with the branch's target version, keeping API order."""
    if branch is None:
        return []
    target = branch.major.version if branch.major else None
    return [
        PatchEntry(
            source_version=patch.version,
            target_version=target,
            game_pkgs=patch.game_pkgs,
            audio_pkgs=patch.audio_pkgs,
        )
        for patch in branch.patches
    ]


# --- Detailed (display) rendering ---

def _display_packages(game_pkgs: Iterable[Package], audio_pkgs: Iterable[AudioPackage]) -> List[str]:
    lines = ["Game Packages:"]
    game_pkgs = list(game_pkgs)
    if not game_pkgs:
        lines.append(MISSING_DATA)
        lines.append("")
    for index, pkg in enumerate(game_pkgs, start=1):
        lines.append(f"[Part {index}]")
        lines.append(f"[URL] {_or_missing(pkg.url)}")
        lines.append(f"[Size] {format_size(pkg.size)}")
        lines.append(f"[Decompressed Size] {format_size(pkg.decompressed_size)}")
        lines.append("")

    audio_pkgs = list(audio_pkgs)
    if audio_pkgs:
        lines.append("Audio Packages:")
        for pkg in audio_pkgs:
            lines.append(f"[Language] {language_name(_or_missing(pkg.language))}")
            lines.append(f"[URL] {_or_missing(pkg.url)}")
            lines.append(f"[Size] {format_size(pkg.size)}")
            lines.append(f"[Decompressed Size] {format_size(pkg.decompressed_size)}")
            lines.append("")
    return lines


# --- Compact (copy) rendering ---

def _copy_packages(game_pkgs: Iterable[Package], audio_pkgs: Iterable[AudioPackage]) -> List[str]:
    lines = []
    game_pkgs = list(game_pkgs)
    if not game_pkgs:
        lines.append(f"Game packages: {MISSING_DATA}")
    for index, pkg in enumerate(game_pkgs, start=1):
        lines.append(f"Part {index} ({format_size(pkg.size)}):")
        lines.append(_or_missing(pkg.url))

    audio_pkgs = list(audio_pkgs)
    if audio_pkgs:
        lines.append("")
        lines.append(AUDIO_NOTICE)
        for pkg in audio_pkgs:
            lines.append(f"{language_name(_or_missing(pkg.language))} ({format_size(pkg.size)}):")
            lines.append(_or_missing(pkg.url))
    return lines


def _render_major(major: Major) -> tuple:
    display = [f"Game Version: {_or_missing(major.version)}", ""]
    display += _display_packages(major.game_pkgs, major.audio_pkgs)
    copy = [f"Version: {_or_missing(major.version)}"]
    copy += _copy_packages(major.game_pkgs, major.audio_pkgs)
    return _join(display), _join(copy)


def _render_patch(entry: PatchEntry) -> tuple:
    heading = format_version_heading(entry.source_version, entry.target_version)
    display = [heading, ""] + _display_packages(entry.game_pkgs, entry.audio_pkgs)
    copy = [heading] + _copy_packages(entry.game_pkgs, entry.audio_pkgs)
    return _join(display), _join(copy)


def _join(lines: List[str]) -> str:
    return "\n".join(lines).rstrip("\n")


def _placeholder(name: SectionName, text: str) -> FormattedSection:
    return FormattedSection(name=name, display_text=text, copy_text=text)


def build_main_section(package: Optional[GamePackage]) -> FormattedSection:
    name = SectionName.MAIN
    if package is None or package.main is None or package.main.major is None:
        return _placeholder(name, f"{MISSING_DATA}: no live game package in the response.")
    display, copy = _render_major(package.main.major)
    return FormattedSection(name=name, display_text=display, copy_text=copy)


def build_predownload_main_section(package: Optional[GamePackage]) -> FormattedSection:
    name = SectionName.PREDOWNLOAD_MAIN
    if package is None:
        return _placeholder(name, f"{MISSING_DATA}: no game package in the response.")
    if package.pre_download is None or package.pre_download.major is None:
        return _placeholder(name, NO_PREDOWNLOAD)
    display, copy = _render_major(package.pre_download.major)
    return FormattedSection(name=name, display_text=display, copy_text=copy)


def build_predownload_patches_section(package: Optional[GamePackage]) -> FormattedSection:
    name = SectionName.PREDOWNLOAD_PATCHES
    if package is None:
        return _placeholder(name, f"{MISSING_DATA}: no game package in the response.")
    entries = patch_entries(package.pre_download)
    if not entries:
        return _placeholder(name, NO_PREDOWNLOAD_PATCHES)
    rendered = [_render_patch(entry) for entry in entries]
    return FormattedSection(
        name=name,
        display_text="\n\n".join(display for display, _ in rendered),
        copy_text="\n\n".join(copy for _, copy in rendered),
    )


def build_sections(response: PackageResponse, game_id: Optional[str] = None) -> Dict[SectionName, FormattedSection]:
    """Builds the Main, Pre-download Main and Pre-download Patches sections, in that order."""
    package = select_game_package(response, game_id)
    return {
        SectionName.MAIN: build_main_section(package),
        SectionName.PREDOWNLOAD_MAIN: build_predownload_main_section(package),
        SectionName.PREDOWNLOAD_PATCHES: build_predownload_patches_section(package),
    }


def compose_message(
    sections: Dict[SectionName, FormattedSection],
    names: Optional[Iterable[SectionName]] = None,
) -> str:
    """
    Merges the copy text of the selected sections into one shareable message.

    Sections always come out in canonical order regardless of how `names` is
    ordered, each under a `== Title ==` heading and separated by a blank line.
    """
    selected = set(SectionName) if names is None else {SectionName(name) for name in names}
    blocks = []
    for name in SectionName:
        if name in selected and name in sections:
            section = sections[name]
            blocks.append(f"== {section.title} ==\n{section.copy_text}")
    return "\n\n".join(blocks)
