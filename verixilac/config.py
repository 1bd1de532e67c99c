"""Settings read from environment variables."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Mapping


class ConfigError(ValueError):
    """A setting is missing or malformed."""


_UNIT_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"([0-9]*(?:\.[0-9]*)?)([^0-9.]*)")
_MAX_NS = 2**63 - 1


def parse_duration(text: str) -> float:
    """Parse a duration such as ``"1m30s"`` or ``"250ms"`` into seconds."""
    s = text
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return 0.0
    if not s:
        raise ConfigError(f"invalid duration {text!r}")
    total = 0
    pos = 0
    while pos < len(s):
        match = _COMPONENT.match(s, pos)
        number, unit = match.group(1), match.group(2)
        if number in ("", "."):
            raise ConfigError(f"invalid duration {text!r}")
        if not unit:
            raise ConfigError(f"missing unit in duration {text!r}")
        if unit not in _UNIT_NS:
            raise ConfigError(f"unknown unit {unit!r} in duration {text!r}")
        total += int(Fraction(number) * _UNIT_NS[unit])
        if total > _MAX_NS:
            raise ConfigError(f"invalid duration {text!r}")
        pos = match.end()
    if negative:
        total = -total
    return total / 1_000_000_000


@dataclass(frozen=True)
class TelegramConfig:
    bot_token: str
    bot_public_url: str = ""
    bot_ingress_url: str = ""
    bot_ingress_app_name: str = ""
    bot_ingress_token: str = ""


@dataclass(frozen=True)
class BotConfig:
    telegram: TelegramConfig
    max_bet: int = 200
    min_deal: int = 1000
    timeout: float = 60.0


@dataclass(frozen=True)
class ApiConfig:
    listen_address: str = "0.0.0.0:80"


def _key(prefix: str, name: str) -> str:
    return (f"{prefix}_{name}" if prefix else name).upper()


def _lookup(
    environ: Mapping[str, str], key: str, default: str | None = None, required: bool = False
) -> str:
    if key in environ:
        return environ[key]
    if default is not None:
        return default
    if required:
        raise ConfigError(f"required key {key} missing value")
    return ""


def _parse_uint(key: str, value: str) -> int:
    error = ConfigError(f"assigning {key}: converting {value!r} to type uint64")
    if not value or value != value.strip() or value[0] in "+-":
        raise error
    try:
        if len(value) > 1 and value[0] == "0" and value[1].isdigit():
            number = int(value, 8)
        else:
            number = int(value, 0)
    except ValueError:
        raise error from None
    if not 0 <= number < 2**64:
        raise error
    return number


def _parse_seconds(key: str, value: str) -> float:
    try:
        return parse_duration(value)
    except ConfigError as exc:
        raise ConfigError(f"assigning {key}: {exc}") from None


def _read_telegram(prefix: str, environ: Mapping[str, str]) -> TelegramConfig:
    return TelegramConfig(
        bot_token=_lookup(environ, _key(prefix, "BOT_TOKEN"), required=True),
        bot_public_url=_lookup(environ, _key(prefix, "BOT_PUBLIC_URL")),
        bot_ingress_url=_lookup(environ, _key(prefix, "BOT_INGRESS_URL")),
        bot_ingress_app_name=_lookup(environ, _key(prefix, "BOT_INGRESS_APP_NAME")),
        bot_ingress_token=_lookup(environ, _key(prefix, "BOT_INGRESS_TOKEN")),
    )


def read_bot_config(prefix: str = "", environ: Mapping[str, str] | None = None) -> BotConfig:
    """Bot settings; Telegram settings live under ``TELEGRAM_``."""
    env = os.environ if environ is None else environ
    telegram = _read_telegram(_key(prefix, "TELEGRAM"), env)
    max_bet_key = _key(prefix, "MAX_BET")
    min_deal_key = _key(prefix, "MIN_DEAL")
    timeout_key = _key(prefix, "TIMEOUT")
    return BotConfig(
        telegram=telegram,
        max_bet=_parse_uint(max_bet_key, _lookup(env, max_bet_key, "200")),
        min_deal=_parse_uint(min_deal_key, _lookup(env, min_deal_key, "1000")),
        timeout=_parse_seconds(timeout_key, _lookup(env, timeout_key, "1m")),
    )


def read_telegram_config(
    prefix: str = "", environ: Mapping[str, str] | None = None
) -> TelegramConfig:
    env = os.environ if environ is None else environ
    return _read_telegram(prefix, env)


def read_api_config(prefix: str = "", environ: Mapping[str, str] | None = None) -> ApiConfig:
    env = os.environ if environ is None else environ
    return ApiConfig(
        listen_address=_lookup(env, _key(prefix, "LISTEN_ADDRESS"), "0.0.0.0:80")
    )