from __future__ import annotations

import os
import re
import typing as t
from pathlib import Path

import yaml
from pydantic import ValidationError

from . import schema

DEFAULT_CONFIG_FILENAME = "swanui.config.yaml"

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z0-9_]+)\}")


def _expand_env_value(val: str, missing: set[str]) -> str:
    """Expand ${VAR} placeholders in a single string.

    Multiple placeholders per string are supported. If an environment variable
    is missing its name is added to ``missing`` and the placeholder is left
    unchanged.
    """
    def repl(match: re.Match[str]) -> str:
        name = match.group(1)
        env_val = os.environ.get(name)
        if env_val is None or env_val == "":
            missing.add(name)
            return match.group(0)  # keep placeholder for later diagnostics
        return env_val

    return _ENV_PATTERN.sub(repl, val)


def _expand_env(obj: t.Any, missing: set[str]) -> t.Any:
    """Recursively expand ${VAR} placeholders in a loaded YAML structure."""
    if isinstance(obj, dict):
        return {k: _expand_env(v, missing) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env(v, missing) for v in obj]
    if isinstance(obj, str):
        return _expand_env_value(obj, missing)
    return obj


def _format_validation_error(e: ValidationError) -> str:
    errors = []
    for err in e.errors():
        loc = " -> ".join(str(x) for x in err["loc"])
        errors.append(f"  • {loc}: {err['msg']}")
    return (
        "Configuration validation failed:\n" + "\n".join(errors) +
        "\n\nPlease fix these errors and try again. "
        "Run 'swanui validate-config <file>' to check a file on its own."
    )


def load_config_text(text: str) -> schema.SwanUIConfig:
    """Expand placeholders in YAML text and validate it."""
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML: {e}")
    if not isinstance(raw, dict):
        raise ValueError("Configuration must be a YAML mapping")

    missing: set[str] = set()
    expanded = _expand_env(raw, missing)
    if missing:
        # Surface all missing vars at once to help the user export them.
        raise ValueError(
            "Missing environment variables for placeholders: "
            + ", ".join(sorted(missing))
        )

    try:
        return schema.validate_config(expanded)
    except ValidationError as e:
        raise ValueError(_format_validation_error(e))


def load_config(path: Path) -> schema.SwanUIConfig:
    return load_config_text(path.read_text(encoding="utf-8"))


def resolve_config(path: t.Optional[Path]) -> schema.SwanUIConfig:
    """Load ``path``, else ./swanui.config.yaml if present, else built-in defaults."""
    if path is not None:
        return load_config(path)
    default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if default_path.exists():
        return load_config(default_path)
    return schema.SwanUIConfig()
