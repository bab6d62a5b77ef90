from __future__ import annotations

from typing import Any, Iterable

from staticserve.flags import FlagKind, FlagSpec

LINE_WIDTH = 80


def _flag_token(name: str) -> str:
    return f"--{name}" if len(name) > 1 else f"-{name}"


def _name_column(spec: FlagSpec) -> str:
    return ", ".join(_flag_token(n) for n in spec.names)


def _format_default(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _tag(spec: FlagSpec) -> str:
    choices = ""
    if spec.choices:
        choices = "[choices: " + ", ".join(f'"{c}"' for c in spec.choices) + "]"
    default = f"[default: {_format_default(spec.default)}]" if spec.default else ""
    kind = "[boolean]" if spec.kind is FlagKind.BOOLEAN else ""
    return f"{choices}{default}{kind}"


def render_help(usage: str, program_name: str, specs: Iterable[FlagSpec]) -> str:
    """Format usage text for a set of flags.

    The banner's ``$0`` placeholder is replaced by ``program_name``. Each row
    is the name column padded to the widest one, the description, then the
    tags pushed towards an 80 column budget.
    """

    specs = list(specs)
    lines = [usage.replace("$0", program_name, 1), "", "Options:"]

    names = [_name_column(s) for s in specs]
    max_width = max((len(n) for n in names), default=0)

    for spec, name in zip(specs, names):
        tag = _tag(spec)
        spacing = LINE_WIDTH - max_width - len(spec.description) - len(tag)
        row = " ".join(
            [
                name,
                " " * (max_width - len(name)),
                spec.description,
                " " * spacing if spacing > 0 else "",
                tag,
            ]
        )
        lines.append(row)

    return "\n".join(lines)
