"""Frontmatter parsing, serialization and schema validation."""

import re
from datetime import date, datetime
from typing import Any

import yaml

from docgraph.contracts.document import (
    SLUG_PATTERN,
    DateValue,
    Depth,
    Frontmatter,
    FrontmatterValue,
    IntegerValue,
    StringListValue,
    StringValue,
    UnsupportedValue,
)
from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue
from docgraph.corpus.constants import (
    KNOWN_FIELDS,
    LIST_FIELDS,
    REQUIRED_FIELDS,
    STRING_FIELDS,
)

# Opening `---`, metadata, closing `---` on its own line, then the body
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<meta>.*?)^---[ \t]*(?:\r?\n|\Z)(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DEFAULT_SOURCE = "<frontmatter>"


class MalformedFrontmatterError(Exception):
    """Raised when a file has no frontmatter block or it is not a YAML mapping."""


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible dates such as 2024-02-30 as strings."""


def _construct_timestamp(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> Any:
    try:
        return yaml.SafeLoader.construct_yaml_timestamp(loader, node)
    except ValueError:
        return loader.construct_scalar(node)


_FrontmatterLoader.add_constructor("tag:yaml.org,2002:timestamp", _construct_timestamp)


def _load_yaml(text: str) -> Any:
    return yaml.load(text, Loader=_FrontmatterLoader)


def to_frontmatter_value(value: Any) -> FrontmatterValue | None:
    """Wrap a loaded YAML value in its tagged variant. Null becomes None."""
    if value is None:
        return None
    # bool is an int subclass and datetime a date subclass; check them first
    if isinstance(value, bool) or isinstance(value, datetime):
        return _unsupported(value)
    if isinstance(value, int):
        return IntegerValue(value=value)
    if isinstance(value, date):
        return DateValue(value=value)
    if isinstance(value, str):
        return StringValue(value=value)
    if isinstance(value, list):
        if all(_is_list_scalar(item) for item in value):
            return StringListValue(value=[str(item) for item in value])
        return _unsupported(value)
    return _unsupported(value)


def _is_list_scalar(item: Any) -> bool:
    if isinstance(item, bool):
        return False
    return isinstance(item, (str, int, date))


def _unsupported(value: Any) -> UnsupportedValue:
    # Kept as YAML flow text so datetimes and .nan/.inf load back as themselves
    dumped = yaml.safe_dump(value, default_flow_style=True, allow_unicode=True)
    return UnsupportedValue(
        type_name=type(value).__name__,
        text=dumped.removesuffix("...\n").strip(),
    )


def from_frontmatter_value(value: FrontmatterValue) -> Any:
    """Unwrap a tagged value into the plain Python value YAML would load."""
    match value:
        case UnsupportedValue(text=text):
            return _load_yaml(text)
        case StringListValue(value=items):
            return list(items)
        case _:
            return value.value


def parse(raw_text: str) -> tuple[Frontmatter, str]:
    """
    Split a markdown file into its frontmatter and body.

    Returns:
        (frontmatter, body) where body is everything after the closing `---`

    Raises:
        MalformedFrontmatterError: If the delimiters are missing, the YAML does
            not parse, or the block is not a key/value mapping.
    """
    text = raw_text.removeprefix("\ufeff")
    match = _FRONTMATTER_RE.match(text)
    if not match:
        raise MalformedFrontmatterError(
            "Missing frontmatter delimiters: file must start with '---' "
            "and the metadata block must be closed by a '---' line"
        )

    try:
        loaded = _load_yaml(match.group("meta"))
    except (yaml.YAMLError, ValueError, TypeError, RecursionError) as e:
        raise MalformedFrontmatterError(f"Unparseable frontmatter YAML: {e}") from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise MalformedFrontmatterError(
            f"Frontmatter must be a key/value mapping, got {type(loaded).__name__}"
        )

    raw: dict[str, FrontmatterValue] = {}
    for key, value in loaded.items():
        wrapped = to_frontmatter_value(value)
        if wrapped is not None:
            raw[str(key)] = wrapped

    return build_frontmatter(raw), match.group("body")


def serialize(frontmatter: Frontmatter, body: str = "") -> str:
    """Render frontmatter and body back into file text."""
    data = {key: from_frontmatter_value(value) for key, value in frontmatter.raw.items()}
    meta = ""
    if data:
        meta = yaml.safe_dump(
            data, sort_keys=False, allow_unicode=True, default_flow_style=False
        )
    return f"---\n{meta}---\n{body}"


def build_frontmatter(raw: dict[str, FrontmatterValue]) -> Frontmatter:
    """Decode raw values into a typed Frontmatter, dropping what does not decode."""
    fields, _ = _decode(raw, DEFAULT_SOURCE)
    return Frontmatter(raw=raw, **fields)


def validate(frontmatter: Frontmatter, path: str = DEFAULT_SOURCE) -> list[ValidationIssue]:
    """
    Check frontmatter against the document schema.

    Never raises for content problems: every violation comes back as an issue
    so a whole corpus can be scanned in one pass.
    """
    _, issues = _decode(frontmatter.raw, path)
    return issues


def _decode(
    raw: dict[str, FrontmatterValue], path: str
) -> tuple[dict[str, Any], list[ValidationIssue]]:
    fields: dict[str, Any] = {}
    issues: list[ValidationIssue] = []

    def issue(
        kind: IssueKind,
        key: str,
        message: str,
        severity: Severity = Severity.WARNING,
    ) -> None:
        issues.append(
            ValidationIssue(
                kind=kind, severity=severity, path=path, message=message, field=key
            )
        )

    for key in REQUIRED_FIELDS:
        if key not in raw:
            issue(IssueKind.MISSING_FIELD, key, f"Missing required field '{key}'")

    for key, value in raw.items():
        if key in STRING_FIELDS:
            if not isinstance(value, StringValue):
                issue(IssueKind.INVALID_TYPE, key, f"'{key}' must be a string")
            elif not value.value.strip():
                issue(IssueKind.MISSING_FIELD, key, f"'{key}' is empty")
            else:
                fields[key] = value.value
                if key in ("phase", "topic") and not SLUG_PATTERN.match(value.value):
                    issue(
                        IssueKind.INVALID_SLUG,
                        key,
                        f"'{key}' value '{value.value}' is not a kebab-case slug",
                    )

        elif key in LIST_FIELDS:
            if isinstance(value, StringListValue):
                fields[key] = list(value.value)
            else:
                issue(IssueKind.INVALID_TYPE, key, f"'{key}' must be a list of strings")

        elif key == "depth":
            allowed = [d.value for d in Depth]
            if isinstance(value, StringValue) and value.value in allowed:
                fields[key] = Depth(value.value)
            else:
                shown = value.value if isinstance(value, StringValue) else _describe(value)
                issue(
                    IssueKind.INVALID_DEPTH,
                    key,
                    f"Invalid depth enum value '{shown}'; "
                    f"must be one of: {', '.join(allowed)}",
                )

        elif key == "reading_time":
            if isinstance(value, IntegerValue) and value.value > 0:
                fields[key] = value.value
            else:
                issue(
                    IssueKind.INVALID_READING_TIME,
                    key,
                    f"'reading_time' must be a positive integer, got {_describe(value)}",
                )

        elif key == "updated":
            parsed = _decode_date(value)
            if parsed is None:
                issue(
                    IssueKind.INVALID_DATE,
                    key,
                    f"'updated' must be a YYYY-MM-DD date, got {_describe(value)}",
                )
            else:
                fields[key] = parsed

        elif key not in KNOWN_FIELDS:
            issue(
                IssueKind.UNKNOWN_FIELD,
                key,
                f"Unrecognized frontmatter field '{key}'",
                severity=Severity.INFO,
            )

    return fields, issues


def _decode_date(value: FrontmatterValue) -> date | None:
    if isinstance(value, DateValue):
        return value.value
    if isinstance(value, StringValue) and _ISO_DATE_RE.match(value.value):
        try:
            return date.fromisoformat(value.value)
        except ValueError:
            return None
    return None


def _describe(value: FrontmatterValue) -> str:
    match value:
        case UnsupportedValue(type_name=type_name, text=text):
            return f"{type_name} {text}"
        case StringListValue(value=items):
            return f"list {items}"
        case _:
            return f"{value.kind} {value.value!r}"


__all__ = [
    "MalformedFrontmatterError",
    "parse",
    "serialize",
    "validate",
    "build_frontmatter",
    "to_frontmatter_value",
    "from_frontmatter_value",
]
