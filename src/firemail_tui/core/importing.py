# =============================================================================
# Bulk Import Parsing
# =============================================================================
# Turns operator-supplied text into account candidates, one line at a time.
#
# Format (one account per line, fields joined by a configurable separator):
#
#   email----password----client_id----refresh_token
#
# Validation is shallow and local: a bad line never stops the
# rest of the text from being processed, and every rejection echoes the
# line number and the raw text so the operator can fix the source and paste
# it again. Uniqueness is the backend's business.
# =============================================================================

import re
from dataclasses import dataclass, field
from enum import Enum

from firemail_tui.core.account import AccountFields


# Default field separator (four hyphens)
DEFAULT_SEPARATOR = "----"

# Field order on an import line
FIELD_NAMES = ("email", "password", "client id", "refresh token")

# local@domain.tld with no whitespace and a single "@"
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s.]+(\.[^@\s.]+)+$")


def is_valid_email(address: str) -> bool:
    """Basic address-shape check: one "@" and a dotted domain."""
    return EMAIL_PATTERN.match(address) is not None


class FailureSource(Enum):
    """Where an import failure was detected."""
    PARSE = "parse"         # Rejected locally by the line parser
    BACKEND = "backend"     # Rejected by the backend (duplicate, validation)


@dataclass(frozen=True)
class ImportFailure:
    """
    One rejected import line.

    Attributes:
        line_number: 1-based line number in the original text.
        text: The raw line, verbatim.
        reason: Which constraint failed.
        source: Whether the parser or the backend rejected it.
    """

    line_number: int
    text: str
    reason: str
    source: FailureSource = FailureSource.PARSE

    def describe(self) -> str:
        """Human-readable description naming the line and the reason."""
        return f"Line {self.line_number}: {self.reason}: {self.text}"


@dataclass(frozen=True)
class ImportLine:
    """
    A single non-blank line of import text and its parse result.

    Exactly one of `fields` and `reason` is set.
    """

    line_number: int
    raw: str
    fields: AccountFields | None = None
    reason: str | None = None

    @property
    def is_parsed(self) -> bool:
        return self.fields is not None

    def failure(self, source: FailureSource = FailureSource.PARSE) -> ImportFailure:
        """
        Convert this line into a failure entry.

        Args:
            source: Who rejected the line.

        Raises:
            ValueError: If the line was parsed successfully.
        """
        if self.reason is None:
            raise ValueError(f"Line {self.line_number} was not rejected")
        return ImportFailure(self.line_number, self.raw, self.reason, source)


def parse_line(line: str, line_number: int, separator: str = DEFAULT_SEPARATOR) -> ImportLine | None:
    """
    Parse one line of import text.

    Args:
        line: The raw line, without its line terminator.
        line_number: 1-based position of the line in the original text.
        separator: Field separator.

    Returns:
        None for blank or whitespace-only lines (they are skipped),
        otherwise an ImportLine that is either parsed or rejected.

    Raises:
        ValueError: If the separator is empty.
    """
    if not separator:
        raise ValueError("Separator must not be empty")

    stripped = line.strip()
    if not stripped:
        return None

    parts = [part.strip() for part in stripped.split(separator)]
    if len(parts) != len(FIELD_NAMES):
        return ImportLine(
            line_number,
            line,
            reason=f"expected {len(FIELD_NAMES)} fields separated by "
                   f"{separator!r}, got {len(parts)}",
        )

    for name, value in zip(FIELD_NAMES, parts):
        if not value:
            return ImportLine(line_number, line, reason=f"{name} is empty")

    email, password, client_id, refresh_token = parts
    if not is_valid_email(email):
        return ImportLine(line_number, line, reason="invalid email address")

    return ImportLine(
        line_number,
        line,
        fields=AccountFields(
            email=email,
            password=password,
            client_id=client_id,
            refresh_token=refresh_token,
        ),
    )


def split_lines(text: str) -> list[str]:
    """
    Split text on "\\n", dropping one trailing "\\r" per line.

    Unlike str.splitlines() this leaves form feeds, vertical tabs and the
    Unicode line separators inside the line they belong to, so line numbers
    match what the operator sees in an editor.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_text(text: str, separator: str = DEFAULT_SEPARATOR) -> list[ImportLine]:
    """
    Parse every line of an import text.

    Lines are numbered from 1 in the order they appear; blank lines keep
    their number but produce no entry.

    Returns:
        The non-blank lines, parsed or rejected, in original order.
    """
    if not separator:
        raise ValueError("Separator must not be empty")

    lines: list[ImportLine] = []
    for number, raw in enumerate(split_lines(text), start=1):
        parsed = parse_line(raw, number, separator)
        if parsed is not None:
            lines.append(parsed)
    return lines


@dataclass
class ImportOutcome:
    """
    Aggregate result of one import operation.

    Failures are kept in two runs: local parse failures in line order,
    followed by backend failures in the order the backend returned them.
    The two runs are not merged or re-sorted.

    Attributes:
        success_count: Accounts the backend created.
        failure_count: Local rejections plus backend-reported failures.
        failures: Ordered failure entries.
        error: Set when the whole backend call failed (transport error).
               In that case nothing should be assumed persisted.
        reload_error: Set when the import went through but the table
                      reload after it failed. Counts and failures are
                      still valid; the table shows the previous list.
    """

    success_count: int = 0
    failure_count: int = 0
    failures: list[ImportFailure] = field(default_factory=list)
    error: str | None = None
    reload_error: str | None = None

    @property
    def failed(self) -> bool:
        """True if the operation as a whole failed."""
        return self.error is not None

    @property
    def failure_lines(self) -> list[str]:
        """Failure descriptions, in report order."""
        return [failure.describe() for failure in self.failures]

    def summary(self) -> str:
        """
        Render the outcome for the operator.

        Returns:
            "Successfully imported N account(s)" when nothing failed,
            "Imported S account(s), F failed" plus one line per failure
            otherwise, or "Import failed: ..." for a transport error.
            A failed reload adds "Reload failed: ..." after the first line.
        """
        if self.error is not None:
            lines = [f"Import failed: {self.error}"]
        elif self.failure_count == 0:
            lines = [f"Successfully imported {self.success_count} account(s)"]
        else:
            lines = [f"Imported {self.success_count} account(s), {self.failure_count} failed"]

        if self.reload_error is not None:
            lines.append(f"Reload failed: {self.reload_error}")
        lines.extend(self.failure_lines)
        return "\n".join(lines)
