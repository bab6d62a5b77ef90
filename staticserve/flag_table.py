from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from staticserve.argv import FlagRegistry

SERVER_FLAGS = Path(__file__).with_name("server_flags.yaml")

_KNOWN_KEYS = ("alias", "default", "boolean", "count", "help", "describe", "choices")


class FlagTableError(ValueError):
    pass


def _as_list(value: Any, *, flag: str, key: str) -> list[str]:
    if value is None:
        return []
    items = list(value) if isinstance(value, (list, tuple)) else [value]
    for item in items:
        # Unquoted yes/no/on/off and numbers load as bool/int.
        if not isinstance(item, str):
            raise FlagTableError(f"{key} for flag {flag!r} must be strings, got {item!r}; quote it in YAML")
    return items


def apply_flag_table(registry: FlagRegistry, table: dict[str, Any]) -> FlagRegistry:
    """Register every flag described by a parsed flag table.

    Keys are applied in a fixed order regardless of how they appear in the
    document, so ``default`` is always seen before ``boolean``/``count``.
    """

    if not isinstance(table, dict):
        raise FlagTableError("flag table must be a mapping")

    usage = table.get("usage")
    if usage is not None:
        registry.usage_text(str(usage))

    flags = table.get("flags") or {}
    if not isinstance(flags, dict):
        raise FlagTableError("'flags' must be a mapping of flag name -> options")

    for raw_name, options in flags.items():
        if not isinstance(raw_name, str):
            raise FlagTableError(f"flag name {raw_name!r} must be a string; quote it in YAML")
        name = raw_name
        options = options or {}
        if not isinstance(options, dict):
            raise FlagTableError(f"options for flag {name!r} must be a mapping")

        unknown = sorted(set(options) - set(_KNOWN_KEYS))
        if unknown:
            raise FlagTableError(f"unknown keys for flag {name!r}: {', '.join(unknown)}")

        spec = registry.register(name)
        if "alias" in options:
            spec.alias(*_as_list(options["alias"], flag=name, key="alias"))
        if "default" in options:
            spec.set_default(options["default"])
        if options.get("boolean"):
            spec.boolean()
        if options.get("count"):
            spec.counter()
        if options.get("help"):
            spec.help()
        if "describe" in options:
            spec.describe(str(options["describe"] or ""))
        if "choices" in options:
            spec.set_choices(_as_list(options["choices"], flag=name, key="choices"))

    return registry


def load_flag_table(path: str | Path, registry: FlagRegistry | None = None) -> FlagRegistry:
    """Build (or extend) a registry from a YAML flag table."""

    with open(path, "r", encoding="utf-8") as f:
        table = yaml.safe_load(f) or {}

    return apply_flag_table(registry if registry is not None else FlagRegistry(), table)
