"""Wrappers exposing ``@font-face`` rules through one capability interface.

`LiveFontFaceRule` delegates to a rule owned by an external style sheet
(any object implementing `StyleRuleBackend`). `ParsedFontFaceRule` keeps the
declarations in memory and lives in a `RuleSheet`. Both expose the same
read/write/serialise/remove operations described by `FontFaceRule`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
import re
from typing import Protocol, runtime_checkable

from fontprobe.exceptions import RuleError


_RULE_RE = re.compile(r"\s*@font-face\s*\{(?P<body>.*)\}\s*", re.IGNORECASE | re.DOTALL)


def _split_declarations(body: str) -> list[str]:
    parts: list[str] = []
    buffer: list[str] = []
    quote: str | None = None
    depth = 0
    for char in body:
        if quote:
            if char == quote:
                quote = None
        elif char in {'"', "'"}:
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == ";" and depth == 0:
            parts.append("".join(buffer))
            buffer = []
            continue
        buffer.append(char)
    parts.append("".join(buffer))
    return [part.strip() for part in parts if part.strip()]


def parse_declarations(text: str) -> dict[str, str]:
    """Return the declarations of an ``@font-face`` rule in source order."""
    match = _RULE_RE.fullmatch(text)
    if match is None:
        raise RuleError(f"Not an @font-face rule: {text!r}")
    declarations: dict[str, str] = {}
    for item in _split_declarations(match.group("body")):
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise RuleError(f"Malformed declaration {item!r} in {text!r}")
        declarations[name.strip().lower()] = value.strip()
    return declarations


def serialize_declarations(declarations: Mapping[str, str]) -> str:
    if not declarations:
        return "@font-face { }"
    body = " ".join(f"{name}: {value};" for name, value in declarations.items())
    return f"@font-face {{ {body} }}"


@runtime_checkable
class StyleRuleBackend(Protocol):
    """Rule object owned by an external style sheet."""

    def get_declaration(self, prop: str) -> str | None: ...

    def set_declaration(self, prop: str, value: str) -> None: ...

    def get_full_text(self) -> str: ...

    def replace_with(self, text: str) -> None: ...

    def remove_from_sheet(self) -> None: ...

    def index_in_sheet(self) -> int: ...


@runtime_checkable
class FontFaceRule(Protocol):
    """Operations shared by live and parsed ``@font-face`` rules."""

    @property
    def css_text(self) -> str: ...

    @property
    def style(self) -> MutableMapping[str, str]: ...

    def get_property_value(self, name: str) -> str: ...

    def set_property(self, name: str, value: str) -> None: ...

    def update(self, text: str) -> None: ...

    def delete(self) -> None: ...

    def index_of(self) -> int: ...


class DeclarationProxy(MutableMapping[str, str]):
    """Mapping view over the declarations of a rule.

    Writes go straight to the rule; an empty string removes the declaration.
    """

    def __init__(self, rule: FontFaceRule) -> None:
        self._rule = rule

    def __getitem__(self, name: str) -> str:
        value = self._rule.get_property_value(name)
        if not value:
            raise KeyError(name)
        return value

    def __setitem__(self, name: str, value: str) -> None:
        self._rule.set_property(name, value)

    def __delitem__(self, name: str) -> None:
        if name not in self:
            raise KeyError(name)
        self._rule.set_property(name, "")

    def __iter__(self) -> Iterator[str]:
        return iter(parse_declarations(self._rule.css_text))

    def __len__(self) -> int:
        return len(parse_declarations(self._rule.css_text))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self._rule.get_property_value(name))


class LiveFontFaceRule:
    """Rule backed by an external style sheet."""

    def __init__(self, backend: StyleRuleBackend) -> None:
        self.backend = backend

    @property
    def css_text(self) -> str:
        return self.backend.get_full_text()

    @property
    def style(self) -> DeclarationProxy:
        return DeclarationProxy(self)

    def get_property_value(self, name: str) -> str:
        return self.backend.get_declaration(name.lower()) or ""

    def set_property(self, name: str, value: str) -> None:
        self.backend.set_declaration(name.lower(), value)

    def update(self, text: str) -> None:
        parse_declarations(text)
        self.backend.replace_with(text)

    def delete(self) -> None:
        self.backend.remove_from_sheet()

    def index_of(self) -> int:
        return self.backend.index_in_sheet()


class ParsedFontFaceRule:
    """In-memory ``@font-face`` rule."""

    def __init__(
        self, declarations: dict[str, str] | None = None, *, sheet: RuleSheet | None = None
    ) -> None:
        self._declarations = dict(declarations or {})
        self.sheet = sheet

    @classmethod
    def parse(cls, text: str) -> ParsedFontFaceRule:
        return cls(parse_declarations(text))

    @property
    def css_text(self) -> str:
        return serialize_declarations(self._declarations)

    @property
    def style(self) -> DeclarationProxy:
        return DeclarationProxy(self)

    def get_property_value(self, name: str) -> str:
        return self._declarations.get(name.lower(), "")

    def set_property(self, name: str, value: str) -> None:
        key = name.lower()
        if value:
            self._declarations[key] = value
        else:
            self._declarations.pop(key, None)

    def update(self, text: str) -> None:
        self._declarations = parse_declarations(text)

    def delete(self) -> None:
        if self.sheet is None:
            raise RuleError("Rule is not attached to a sheet.")
        self.sheet.remove(self)

    def index_of(self) -> int:
        if self.sheet is None:
            return -1
        return self.sheet.index(self)

    def __repr__(self) -> str:
        return f"ParsedFontFaceRule({self.css_text!r})"


class RuleSheet:
    """Ordered collection of parsed rules."""

    def __init__(self) -> None:
        self._rules: list[ParsedFontFaceRule] = []

    def insert(
        self, rule: str | ParsedFontFaceRule, index: int | None = None
    ) -> ParsedFontFaceRule:
        """Insert ``rule`` (text or parsed) and return the attached rule."""
        parsed = ParsedFontFaceRule.parse(rule) if isinstance(rule, str) else rule
        if parsed.sheet is not None and parsed.sheet is not self:
            parsed.sheet.remove(parsed)
        elif parsed.sheet is self:
            self._rules.remove(parsed)
        position = len(self._rules) if index is None else index
        self._rules.insert(position, parsed)
        parsed.sheet = self
        return parsed

    def index(self, rule: ParsedFontFaceRule) -> int:
        for position, candidate in enumerate(self._rules):
            if candidate is rule:
                return position
        return -1

    def remove(self, rule: ParsedFontFaceRule) -> None:
        position = self.index(rule)
        if position < 0:
            raise RuleError("Rule does not belong to this sheet.")
        del self._rules[position]
        rule.sheet = None

    def __iter__(self) -> Iterator[ParsedFontFaceRule]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)


__all__ = [
    "DeclarationProxy",
    "FontFaceRule",
    "LiveFontFaceRule",
    "ParsedFontFaceRule",
    "RuleSheet",
    "StyleRuleBackend",
    "parse_declarations",
    "serialize_declarations",
]
