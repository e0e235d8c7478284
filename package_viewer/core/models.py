from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


DEFAULT_API_URL = "https://sg-hyp-api.hoyoverse.com/hyp/hyp-connect/api/getGamePackages"


def _number_to_str(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Config(BaseModel):
    api_url: str = DEFAULT_API_URL
    game_id: Optional[str] = "gopR6Cufr3"
    launcher_id: str = "VYTpXlbWo8"
    request_timeout: float = 10.0
    appearance_mode: str = "dark"
    last_section: str = "MAIN"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        # An explicit null falls back to the field default, like an absent key
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Package(_Frozen):
    url: Optional[str] = None
    md5: Optional[str] = None
    size: Optional[str] = None
    decompressed_size: Optional[str] = None

    @field_validator("size", "decompressed_size", mode="before")
    @classmethod
    def sizes_as_text(cls, value):
        return _number_to_str(value)


class AudioPackage(Package):
    language: Optional[str] = None


class Game(_Frozen):
    id: Optional[str] = None
    biz: Optional[str] = None


class Major(_Frozen):
    version: Optional[str] = None
    game_pkgs: List[Package] = []
    audio_pkgs: List[AudioPackage] = []
    res_list_url: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def version_as_text(cls, value):
        return _number_to_str(value)


class Patch(_Frozen):
    """A delta package; `version` is the version being patched from."""
    version: Optional[str] = None
    game_pkgs: List[Package] = []
    audio_pkgs: List[AudioPackage] = []
    res_list_url: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def version_as_text(cls, value):
        return _number_to_str(value)


class Branch(_Frozen):
    major: Optional[Major] = None
    patches: List[Patch] = []


class GamePackage(_Frozen):
    game: Game = Game()
    main: Optional[Branch] = None
    pre_download: Optional[Branch] = None


class Data(_Frozen):
    game_packages: List[GamePackage] = []


class PackageResponse(_Frozen):
    """Validated body of a getGamePackages call."""
    retcode: int
    message: str = ""
    data: Optional[Data] = None


class PatchEntry(_Frozen):
    """One version-to-version transition inside a branch."""
    source_version: Optional[str] = None
    target_version: Optional[str] = None
    game_pkgs: List[Package] = []
    audio_pkgs: List[AudioPackage] = []


class SectionName(str, Enum):
    MAIN = "MAIN"
    PREDOWNLOAD_MAIN = "PREDOWNLOAD_MAIN"
    PREDOWNLOAD_PATCHES = "PREDOWNLOAD_PATCHES"

    @property
    def label(self) -> str:
        return SECTION_TITLES[self]


SECTION_TITLES = {
    SectionName.MAIN: "Main",
    SectionName.PREDOWNLOAD_MAIN: "Pre-download Main",
    SectionName.PREDOWNLOAD_PATCHES: "Pre-download Patches",
}


class FormattedSection(_Frozen):
    name: SectionName
    display_text: str
    copy_text: str

    @property
    def title(self) -> str:
        return self.name.label
