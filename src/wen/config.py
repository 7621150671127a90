"""Load the key=value configuration file."""

import dataclasses
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from wen.errors import ConfigError
from wen.prompts import DEFAULT_PROMPT_TEMPLATE

DEFAULT_CONFIG_PATHS = ("/etc/wen.conf", "./test.conf")
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_PROVIDER = "openai"
DEFAULT_MAX_TOKENS = 4096


@dataclasses.dataclass
class Config:
    """Settings read from the configuration file, with defaults filled in."""

    api_key: str
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    provider: str = DEFAULT_PROVIDER
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    stream: bool = True
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float | None = 60.0


def _parse_bool(value: str) -> bool:
    return value.lower() == "true" or value == "1"


def _parse_number(key: str, value: str, kind: type) -> int | float:
    try:
        return kind(value)
    except ValueError as e:
        raise ConfigError(f"invalid value for {key}: {value!r}") from e


def load_config(path: str | Path) -> Config:
    """Read one configuration file. Unknown keys and lines without ``=`` are ignored."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"failed to open config file: {path}")
    try:
        raw = dotenv_values(path, interpolate=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    values = {k.strip(): v.strip() for k, v in raw.items() if v is not None}
    api_key = values.get("api_key", "")
    if not api_key:
        raise ConfigError(f"api_key is missing from {path}")

    config = Config(api_key=api_key)
    for key in ("model", "api_url", "provider", "prompt_template"):
        if key in values:
            setattr(config, key, values[key])
    if "stream" in values:
        config.stream = _parse_bool(values["stream"])
    if "max_tokens" in values:
        config.max_tokens = int(_parse_number("max_tokens", values["max_tokens"], int))
    if "timeout" in values:
        timeout = float(_parse_number("timeout", values["timeout"], float))
        config.timeout = timeout if timeout > 0 else None
    return config


def load_first_config(paths: Iterable[str | Path] = DEFAULT_CONFIG_PATHS) -> Config:
    """Return the first configuration that loads; report the last failure otherwise."""
    error: ConfigError | None = None
    for path in paths:
        try:
            return load_config(path)
        except ConfigError as e:
            error = e
    raise error or ConfigError("no config file given")
