########## ini_config.py

import os
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

INI_DEFAULT_NAME = "NeuroLensWeb.ini"


@dataclass(frozen=True)
class AppSettings:
    gemini_model: str
    gemini_api_base: str
    gemini_timeout_seconds: int
    api_key_env: str
    api_key: str

    max_file_bytes: int
    default_content_type: str

    instruction: str
    system_directive_file: Optional[Path]

    max_sessions: int

    flask_host: str
    flask_port: int
    flask_debug: bool
    secret_key: str

    log_level: str


class IniConfig:
    """
    Adapter around ConfigParser and filesystem resolution.
    Keeps INI handling out of the app/service code.
    """

    def __init__(self, ini_path: Path):
        self._ini_path = ini_path
        self._cfg = ConfigParser()
        read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
        if not read_ok:
            raise FileNotFoundError(f"INI file not found or unreadable: {ini_path}")

    @property
    def ini_path(self) -> Path:
        return self._ini_path

    @staticmethod
    def from_env_or_default() -> "IniConfig":
        ini_raw = (os.getenv("APP_INI") or "").strip()
        # If APP_INI is not set, default to repo-root-relative ini location
        ini_path = Path(ini_raw) if ini_raw else (Path(__file__).resolve().parents[2] / INI_DEFAULT_NAME)
        return IniConfig(ini_path)

    def _str(self, section: str, key: str, default: str) -> str:
        return (self._cfg.get(section, key, fallback=default) or "").strip() or default

    def _optional_path(self, section: str, key: str) -> Optional[Path]:
        """
        Reads an optional filesystem path and resolves it.
        Relative paths are taken relative to the INI file.
        """
        raw = (self._cfg.get(section, key, fallback="") or "").strip()
        if not raw:
            return None
        p = Path(os.path.expandvars(os.path.expanduser(raw)))
        if not p.is_absolute():
            p = self._ini_path.parent / p
        return p.resolve()

    def load_settings(self) -> AppSettings:
        # Remote model
        gemini_model = self._str("gemini", "model", "gemini-3-pro-preview")
        gemini_api_base = self._str("gemini", "api_base", "https://generativelanguage.googleapis.com/v1beta")
        gemini_timeout_seconds = self._cfg.getint("gemini", "timeout_seconds", fallback=120)
        api_key_env = self._str("gemini", "api_key_env", "GEMINI_API_KEY")
        api_key = (os.getenv(api_key_env) or "").strip()

        # Upload limits
        max_file_mb = self._cfg.getint("upload", "max_file_mb", fallback=10)
        default_content_type = self._str("upload", "default_content_type", "application/octet-stream")

        # Prompt overrides (safe even if [prompt] section does not exist)
        instruction = (self._cfg.get("prompt", "instruction", fallback="") or "").strip()
        system_directive_file = self._optional_path("prompt", "system_directive_file")

        max_sessions = self._cfg.getint("sessions", "max_sessions", fallback=256)

        # Flask
        flask_host = self._str("flask", "host", "127.0.0.1")
        flask_port = self._cfg.getint("flask", "port", fallback=5000)
        flask_debug = self._cfg.getboolean("flask", "debug", fallback=False)
        secret_key = (self._cfg.get("flask", "secret_key", fallback="") or "").strip()

        log_level = self._str("logging", "level", "INFO").upper()

        # Validate
        if max_file_mb <= 0:
            raise ValueError(f"upload.max_file_mb must be positive, got {max_file_mb}")
        if system_directive_file is not None and not system_directive_file.is_file():
            raise FileNotFoundError(f"System directive file not found: {system_directive_file}")

        return AppSettings(
            gemini_model=gemini_model,
            gemini_api_base=gemini_api_base,
            gemini_timeout_seconds=gemini_timeout_seconds,
            api_key_env=api_key_env,
            api_key=api_key,
            max_file_bytes=max_file_mb * 1024 * 1024,
            default_content_type=default_content_type,
            instruction=instruction,
            system_directive_file=system_directive_file,
            max_sessions=max_sessions,
            flask_host=flask_host,
            flask_port=flask_port,
            flask_debug=flask_debug,
            secret_key=secret_key,
            log_level=log_level,
        )
