from __future__ import annotations

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence, Union

from staticserve.flags import FlagKind, FlagSpec
from staticserve.help_text import render_help


@dataclass(frozen=True)
class Configured:
    config: Mapping[str, Any]


@dataclass(frozen=True)
class HelpRequested:
    text: str


ParseResult = Union[Configured, HelpRequested]


def _program_name(raw_args: Sequence[str]) -> str:
    if len(raw_args) < 2 or not raw_args[1]:
        return ""
    try:
        return os.path.relpath(raw_args[1], os.getcwd())
    except ValueError:
        # Different drive on Windows.
        return raw_args[1]


class FlagRegistry:
    """Declarative set of flags plus the parser that fills them in.

    A registry is meant to be built once at startup and parsed once.
    ``parse`` mutates every spec's ``value`` slot and the ``show_help``
    marker in place, so parsing again without ``reset()`` accumulates on
    top of the previous run (counters keep counting). It is not safe to
    share one registry between threads.
    """

    def __init__(self, usage: str = "Usage: $0 [options]", *, strict: bool = False) -> None:
        self.usage = usage
        self.strict = strict
        self.specs: dict[str, FlagSpec] = {}
        self.show_help = False
        self.program_name = ""

    def register(self, name: str) -> FlagSpec:
        spec = self.specs.get(name)
        if spec is None:
            spec = FlagSpec(name=name)
            self.specs[name] = spec
        return spec

    # Chainable registry-level helpers.

    def usage_text(self, message: str) -> FlagRegistry:
        self.usage = message
        return self

    def alias(self, name: str, *aliases: str) -> FlagRegistry:
        self.register(name).alias(*aliases)
        return self

    def default(self, name: str, value: Any) -> FlagRegistry:
        self.register(name).set_default(value)
        return self

    def boolean(self, name: str) -> FlagRegistry:
        self.register(name).boolean()
        return self

    def count(self, name: str) -> FlagRegistry:
        self.register(name).counter()
        return self

    def help(self, name: str) -> FlagRegistry:
        self.register(name).help()
        return self

    def describe(self, name: str, text: str) -> FlagRegistry:
        self.register(name).describe(text)
        return self

    def choices(self, name: str, values: Iterable[str]) -> FlagRegistry:
        self.register(name).set_choices(values)
        return self

    def alias_index(self) -> dict[str, str]:
        index: dict[str, str] = {}
        for name, spec in self.specs.items():
            for a in spec.aliases:
                index[a] = name
        return index

    def reset(self) -> FlagRegistry:
        for spec in self.specs.values():
            spec.value = spec.initial_value()
        self.show_help = False
        return self

    def parse(self, raw_args: Sequence[str]) -> FlagRegistry:
        """Walk a full process argument vector and update every flag.

        ``raw_args[0]`` is the interpreter and ``raw_args[1]`` the script;
        scanning starts at ``raw_args[2]``. Unknown flags and bare tokens
        are ignored.
        """

        index = self.alias_index()
        self.program_name = _program_name(raw_args)
        args = list(raw_args[2:])

        skip_next = False
        for pos, arg in enumerate(args):
            if skip_next:
                skip_next = False
                continue

            next_token = args[pos + 1] if pos + 1 < len(args) else None

            if arg.startswith("--"):
                name = arg[2:]
                name = index.get(name, name)
                spec = self.specs.get(name)
                if spec is not None:
                    skip_next = spec.execute(next_token, self)
                continue

            if arg.startswith("-"):
                skip_next = self._execute_cluster(arg[1:], next_token, index)

        return self

    def _execute_cluster(self, cluster: str, next_token: str | None, index: Mapping[str, str]) -> bool:
        if not cluster:
            return False

        if cluster in index:
            names = [index[cluster]]
        else:
            names = [index.get(ch, ch) for ch in cluster]

        consumed = False
        for name in names:
            spec = self.specs.get(name)
            if spec is not None and spec.execute(next_token, self):
                consumed = True
        return consumed

    def snapshot(self) -> Mapping[str, Any]:
        """Return a read-only mapping of every name and alias to its value.

        Help flags never appear here; check ``show_help`` instead.
        """

        out: dict[str, Any] = {}
        for name, spec in self.specs.items():
            if spec.kind is FlagKind.HELP:
                continue
            for a in spec.aliases:
                out[a] = spec.value
            out[name] = spec.value
        return MappingProxyType(out)

    def render_help(self) -> str:
        return render_help(self.usage, self.program_name, self.specs.values())

    def resolve(self, raw_args: Sequence[str]) -> ParseResult:
        """Reset, parse and report the outcome without side effects on the process."""

        self.reset().parse(raw_args)
        if self.show_help:
            return HelpRequested(text=self.render_help())
        return Configured(config=self.snapshot())
