import re
from dataclasses import dataclass, fields, replace
from typing import Sequence

DELIMITER = "---"
BOM = "\ufeff"

BLOG_FIELDS: tuple[str, ...] = ("title", "date", "slug", "source", "excerpt")
PAGE_FIELDS: tuple[str, ...] = ("title", "slug", "source", "type")

_LINE_BREAKS = re.compile(r"\r?\n")
_FIELD_LINE = re.compile(r"^([A-Za-z0-9_-]+):\s*(.*)$")


@dataclass(frozen=True)
class FrontMatter:
    """Known front-matter fields. ``None`` means the field was not present."""

    title: str | None = None
    date: str | None = None
    slug: str | None = None
    source: str | None = None
    excerpt: str | None = None
    type: str | None = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def get(self, name: str) -> str | None:
        return getattr(self, name)


@dataclass(frozen=True)
class ParsedDocument:
    front_matter: FrontMatter
    body: str


def quote_value(value: object) -> str:
    text = "" if value is None else str(value)
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{_LINE_BREAKS.sub(" ", escaped).strip()}"'


def unquote_value(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        inner = value[1:-1]
        return re.sub(r"\\(.)", r"\1", inner)
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1]
    return value


def dump_document(front_matter: FrontMatter, field_order: Sequence[str], body: str) -> str:
    lines = [DELIMITER]
    for name in field_order:
        lines.append(f"{name}: {quote_value(front_matter.get(name))}")
    lines.append(DELIMITER)
    lines.append("")
    return "\n".join(lines) + f"\n{body}\n"


def parse_document(text: str) -> ParsedDocument:
    normalized = text[1:] if text.startswith(BOM) else text
    lines = _LINE_BREAKS.split(normalized)
    if not lines or lines[0].strip() != DELIMITER:
        return ParsedDocument(front_matter=FrontMatter(), body=normalized.strip())

    known = set(FrontMatter.field_names())
    values: dict[str, str] = {}
    end_line = -1
    for index in range(1, len(lines)):
        line = lines[index]
        if line.strip() == DELIMITER:
            end_line = index
            break
        match = _FIELD_LINE.match(line)
        if not match:
            continue
        key = match.group(1)
        if key in known:
            values[key] = unquote_value(match.group(2).strip())

    front_matter = replace(FrontMatter(), **values)
    if end_line == -1:
        return ParsedDocument(front_matter=front_matter, body=normalized.strip())

    body = "\n".join(lines[end_line + 1 :]).strip()
    return ParsedDocument(front_matter=front_matter, body=body)
