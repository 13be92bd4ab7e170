# store_config.py
from __future__ import annotations

import configparser
import os
import platform
from dataclasses import dataclass
from pathlib import Path

from app_meta import APP_NAME
from models import DataType


DEFAULT_CONFIG_TEXT = """\
[Gather]
allow_duplicates = false
use_session_bundles = true
data_type = all
"""


def _windows_appdata_dir() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    return Path.home() / "AppData" / "Roaming"


def _linux_xdg_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def user_config_dir(app_name: str) -> Path:
    sysname = (platform.system() or "").lower()
    if sysname.startswith("windows"):
        return _windows_appdata_dir() / app_name
    if sysname.startswith("linux"):
        return _linux_xdg_config_dir() / app_name
    return Path.home() / ".config" / app_name


@dataclass(frozen=True)
class GatherOptions:
    allow_duplicates: bool = False
    use_session_bundles: bool = True
    data_type: DataType = DataType.NIL


def _type_label(t: DataType) -> str:
    return "all" if t is DataType.NIL else t.value


@dataclass(frozen=True)
class ConfigStore:
    app_name: str = APP_NAME
    filename: str = "bundlebay.cfg"

    @property
    def dir_path(self) -> Path:
        return user_config_dir(self.app_name)

    @property
    def file_path(self) -> Path:
        return self.dir_path / self.filename

    def ensure_exists(self) -> None:
        self.dir_path.mkdir(parents=True, exist_ok=True)
        if not self.file_path.exists():
            self.file_path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")

    def load(self) -> configparser.ConfigParser:
        self.ensure_exists()
        cfg = configparser.ConfigParser()
        cfg.read(self.file_path, encoding="utf-8")

        if not cfg.has_section("Gather"):
            cfg.add_section("Gather")
        cfg.set("Gather", "allow_duplicates", cfg.get("Gather", "allow_duplicates", fallback="false"))
        cfg.set("Gather", "use_session_bundles", cfg.get("Gather", "use_session_bundles", fallback="true"))
        cfg.set("Gather", "data_type", cfg.get("Gather", "data_type", fallback="all"))

        return cfg

    def save(self, cfg: configparser.ConfigParser) -> None:
        self.ensure_exists()
        with self.file_path.open("w", encoding="utf-8") as f:
            cfg.write(f)

    def gather_options(self) -> GatherOptions:
        """
        Falls back to the defaults for unparseable values.
        """
        cfg = self.load()
        d = GatherOptions()

        try:
            allow = cfg.getboolean("Gather", "allow_duplicates")
        except ValueError:
            allow = d.allow_duplicates
        try:
            use_sb = cfg.getboolean("Gather", "use_session_bundles")
        except ValueError:
            use_sb = d.use_session_bundles
        try:
            t = DataType.from_string(cfg.get("Gather", "data_type"))
        except ValueError:
            t = d.data_type

        return GatherOptions(allow_duplicates=allow, use_session_bundles=use_sb, data_type=t)

    def save_gather_options(self, opts: GatherOptions) -> None:
        cfg = self.load()
        cfg.set("Gather", "allow_duplicates", "true" if opts.allow_duplicates else "false")
        cfg.set("Gather", "use_session_bundles", "true" if opts.use_session_bundles else "false")
        cfg.set("Gather", "data_type", _type_label(opts.data_type))
        self.save(cfg)
