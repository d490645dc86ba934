from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .command_registry import COMMAND_SCOPES
from .constants import DISCORD_API_BASE_URL, DISCORD_API_TIMEOUT_SECONDS
from .errors import DiscordConfigError

CONFIG_FILENAME = "interaction-kit.yml"
DEFAULT_COMMANDS_FILE = "interaction-kit.commands.yml"
DEFAULT_BOT_TOKEN_ENV = "INTERACTION_KIT_DISCORD_BOT_TOKEN"
DEFAULT_APP_ID_ENV = "INTERACTION_KIT_DISCORD_APP_ID"
DEFAULT_COMMAND_SCOPE = "guild"
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY = 1.0
DEFAULT_RETRY_MAX_DELAY = 30.0


@dataclass(frozen=True)
class DiscordCommandRegistration:
    scope: str
    guild_ids: tuple[str, ...]


@dataclass(frozen=True)
class DiscordKitConfig:
    root: Path
    bot_token_env: str
    app_id_env: str
    bot_token: Optional[str]
    application_id: Optional[str]
    api_base_url: str
    timeout_seconds: float
    max_retries: int
    retry_base_delay: float
    retry_max_delay: float
    command_registration: DiscordCommandRegistration
    commands_file: Path

    @classmethod
    def from_raw(cls, *, root: Path, raw: Any) -> "DiscordKitConfig":
        cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}
        bot_token_env = str(cfg.get("bot_token_env", DEFAULT_BOT_TOKEN_ENV)).strip()
        app_id_env = str(cfg.get("app_id_env", DEFAULT_APP_ID_ENV)).strip()
        if not bot_token_env:
            raise DiscordConfigError("discord.bot_token_env must be non-empty")
        if not app_id_env:
            raise DiscordConfigError("discord.app_id_env must be non-empty")

        registration_raw = cfg.get("command_registration")
        registration_cfg = (
            registration_raw if isinstance(registration_raw, dict) else {}
        )
        scope = str(registration_cfg.get("scope", DEFAULT_COMMAND_SCOPE)).strip().lower()
        if scope not in COMMAND_SCOPES:
            raise DiscordConfigError(
                "discord.command_registration.scope must be 'global' or 'guild'"
            )

        api_base_url = str(cfg.get("api_base_url", DISCORD_API_BASE_URL)).strip()
        if not api_base_url:
            raise DiscordConfigError("discord.api_base_url must be non-empty")

        commands_file_value = cfg.get("commands_file", DEFAULT_COMMANDS_FILE)
        if not isinstance(commands_file_value, str) or not commands_file_value.strip():
            raise DiscordConfigError("discord.commands_file must be a string path")

        return cls(
            root=root,
            bot_token_env=bot_token_env,
            app_id_env=app_id_env,
            bot_token=os.environ.get(bot_token_env) or None,
            application_id=os.environ.get(app_id_env) or None,
            api_base_url=api_base_url.rstrip("/"),
            timeout_seconds=_parse_positive_float(
                cfg.get("timeout_seconds"),
                default=DISCORD_API_TIMEOUT_SECONDS,
                key="discord.timeout_seconds",
            ),
            max_retries=_parse_non_negative_int(
                cfg.get("max_retries"),
                default=DEFAULT_MAX_RETRIES,
                key="discord.max_retries",
            ),
            retry_base_delay=_parse_non_negative_float(
                cfg.get("retry_base_delay"),
                default=DEFAULT_RETRY_BASE_DELAY,
                key="discord.retry_base_delay",
            ),
            retry_max_delay=_parse_non_negative_float(
                cfg.get("retry_max_delay"),
                default=DEFAULT_RETRY_MAX_DELAY,
                key="discord.retry_max_delay",
            ),
            command_registration=DiscordCommandRegistration(
                scope=scope,
                guild_ids=tuple(_parse_string_ids(registration_cfg.get("guild_ids"))),
            ),
            commands_file=(root / commands_file_value).resolve(),
        )

    def require_credentials(self) -> tuple[str, str]:
        if not self.bot_token:
            raise DiscordConfigError(f"missing bot token env '{self.bot_token_env}'")
        if not self.application_id:
            raise DiscordConfigError(f"missing application id env '{self.app_id_env}'")
        return self.bot_token, self.application_id


def load_yaml_dict(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise DiscordConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise DiscordConfigError(f"Unable to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DiscordConfigError(f"{path} must contain a YAML mapping")
    return data


def load_config(root: Path) -> DiscordKitConfig:
    """Load ``interaction-kit.yml`` from ``root``; a missing file means defaults."""
    data = load_yaml_dict(root / CONFIG_FILENAME)
    return DiscordKitConfig.from_raw(root=root, raw=data.get("discord"))


def _parse_string_ids(value: Any) -> list[str]:
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
    parsed: list[str] = []
    for item in items:
        token = str(item).strip()
        if token:
            parsed.append(token)
    return parsed


def _parse_non_negative_int(value: Any, *, default: int, key: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise DiscordConfigError(f"{key} must be an integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise DiscordConfigError(f"{key} must be an integer") from exc
    if parsed < 0:
        raise DiscordConfigError(f"{key} must be >= 0")
    return parsed


def _parse_float(value: Any, *, key: str) -> float:
    if isinstance(value, bool):
        raise DiscordConfigError(f"{key} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise DiscordConfigError(f"{key} must be a number") from exc


def _parse_non_negative_float(value: Any, *, default: float, key: str) -> float:
    if value is None:
        return default
    parsed = _parse_float(value, key=key)
    if parsed < 0:
        raise DiscordConfigError(f"{key} must be >= 0")
    return parsed


def _parse_positive_float(value: Any, *, default: float, key: str) -> float:
    if value is None:
        return default
    parsed = _parse_float(value, key=key)
    if parsed <= 0:
        raise DiscordConfigError(f"{key} must be > 0")
    return parsed
