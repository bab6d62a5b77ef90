from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from staticserve.argv import FlagRegistry


class FlagKind(enum.Enum):
    VALUE = "value"
    BOOLEAN = "boolean"
    COUNTER = "counter"
    HELP = "help"


class InvalidChoiceError(ValueError):
    """Raised by a strict registry when a value is not one of the allowed choices."""

    def __init__(self, flag: str, token: str | None, choices: list[str]) -> None:
        self.flag = flag
        self.token = token
        self.choices = list(choices)
        allowed = ", ".join(repr(c) for c in self.choices)
        super().__init__(f"Invalid value {token!r} for flag {flag!r}; expected one of: {allowed}")


@dataclass
class FlagSpec:
    """One recognised flag, configured through chained builder calls.

    Every builder method mutates the spec and returns it, so calls can be
    made in any order:

        registry.register("l").alias("log").set_choices(["debug", "info"]).set_default("info")
    """

    name: str
    aliases: list[str] = field(default_factory=list)
    kind: FlagKind = FlagKind.VALUE
    choices: list[str] = field(default_factory=list)
    default: Any = None
    description: str = ""
    value: Any = None

    def alias(self, *names: str) -> FlagSpec:
        for n in names:
            if n not in self.aliases:
                self.aliases.append(n)
        return self

    def set_default(self, value: Any) -> FlagSpec:
        self.default = value
        self.value = value
        return self

    def boolean(self) -> FlagSpec:
        self.kind = FlagKind.BOOLEAN
        self.value = self.default or False
        return self

    def counter(self) -> FlagSpec:
        self.kind = FlagKind.COUNTER
        self.value = self.default or 0
        return self

    def help(self) -> FlagSpec:
        self.kind = FlagKind.HELP
        self.description = "Show Help"
        return self

    def describe(self, text: str) -> FlagSpec:
        self.description = text
        return self

    def set_choices(self, choices: Iterable[str]) -> FlagSpec:
        for c in choices:
            if c not in self.choices:
                self.choices.append(c)
        return self

    @property
    def names(self) -> list[str]:
        """Canonical name followed by every alias."""
        return [self.name, *self.aliases]

    def initial_value(self) -> Any:
        if self.kind is FlagKind.BOOLEAN:
            return self.default or False
        if self.kind is FlagKind.COUNTER:
            return self.default or 0
        return self.default

    def execute(self, next_token: str | None, registry: FlagRegistry) -> bool:
        """Apply one occurrence of this flag.

        Returns True when ``next_token`` was consumed as the flag's value.
        """

        if self.kind is FlagKind.HELP:
            registry.show_help = True
            return False

        if self.kind is FlagKind.BOOLEAN:
            # Presence negates the default; it does not simply set True.
            self.value = not self.default
            return False

        if self.kind is FlagKind.COUNTER:
            self.value = (self.value or 0) + 1
            return False

        if self.choices:
            if next_token in self.choices:
                self.value = next_token
                return True
            if registry.strict:
                raise InvalidChoiceError(self.name, next_token, self.choices)
            return False

        self.value = next_token
        return True
