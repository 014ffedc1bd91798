"""Parser for Debian-style control files such as Packages indexes."""

import logging
import re
from collections.abc import Iterator

from debian import deb822

from libaosc.errors import ControlFormatError, EncodingError
from libaosc.models import Package, Packages

logger = logging.getLogger(__name__)

# start of a field: "Key: value" or "Key:" with the value on continuation lines
_FIELD_START_RE = re.compile(r"^[^\s:#-][^\s:]*\s*:")


def _split_paragraphs(text: str) -> Iterator[list[tuple[int, str]]]:
    """Yield runs of non-blank lines together with their 1-based line numbers."""
    lines: list[tuple[int, str]] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        line = line.removesuffix("\r")
        if line.strip() == "":
            if lines:
                yield lines
                lines = []
        else:
            lines.append((lineno, line))
    if lines:
        yield lines


def _check_paragraph(lines: list[tuple[int, str]]) -> list[str]:
    """Validate the syntax of one paragraph and return its field lines."""
    field_lines: list[str] = []
    for lineno, line in lines:
        if line.startswith("#"):
            continue
        if line[0] in " \t":
            if not field_lines:
                raise ControlFormatError("continuation line without a preceding field", lineno)
        elif not _FIELD_START_RE.match(line):
            raise ControlFormatError(f"expected 'Key: value' or a continuation line, got {line!r}", lineno)
        field_lines.append(line)
    return field_lines


def iter_paragraphs(text: str) -> Iterator[deb822.Packages]:
    """Split control file text into paragraphs.

    Every line is checked before its paragraph is yielded, so a syntax error
    surfaces as soon as the parser reaches it.

    Raises:
        ControlFormatError: A line is neither a field, a continuation nor a comment
    """
    for lines in _split_paragraphs(text):
        field_lines = _check_paragraph(lines)
        if not field_lines:
            # comment-only block
            continue
        yield deb822.Packages(field_lines)


def _decode(data: bytes | bytearray | memoryview) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Packages index is not valid UTF-8: {e}") from e


def parse_packages(data: bytes | bytearray | memoryview | str) -> Packages:
    """Parse a whole Packages index.

    Args:
        data: The decompressed index, either raw UTF-8 bytes or text

    Returns:
        All packages in document order; empty for an empty or blank document

    Raises:
        EncodingError: data is bytes and not valid UTF-8
        ControlFormatError: The document is structurally invalid
    """
    text = data if isinstance(data, str) else _decode(data)
    packages = Packages([Package.from_fields(paragraph) for paragraph in iter_paragraphs(text)])
    logger.debug(f"Parsed {len(packages)} packages")
    return packages


def parse_package(data: bytes | bytearray | memoryview | str) -> Package:
    """Parse a document holding exactly one package paragraph."""
    packages = parse_packages(data)
    if len(packages) != 1:
        raise ControlFormatError(f"expected exactly one paragraph, found {len(packages)}")
    return packages[0]
