"""Tests for the control file parser."""

import pytest

from libaosc.control import iter_paragraphs, parse_package, parse_packages
from libaosc.errors import ControlFormatError, EncodingError, ParseControlError
from libaosc.models import Packages

from .conftest import BASH_PARAGRAPH


class TestParsePackages:
    """Tests for parse_packages()."""

    def test_single_paragraph(self) -> None:
        """The bash paragraph maps onto one record."""
        packages = parse_packages(BASH_PARAGRAPH)

        assert len(packages) == 1
        bash = packages[0]
        assert bash.name == "bash"
        assert bash.architecture == "amd64"
        assert bash.version == "5.2-1"
        assert bash.installed_size == 3200
        assert bash.filename == "pool/bash_5.2-1_amd64.deb"
        assert bash.size == 1048576
        assert bash.sha256 == "abc123"
        assert bash.description == "the Bourne Again shell"
        assert bash.depends is None

    def test_missing_required_fields_default_to_empty(self) -> None:
        """Section and Maintainer are absent from the bash paragraph."""
        bash = parse_package(BASH_PARAGRAPH)

        assert bash.section == ""
        assert bash.maintainer == ""

    def test_missing_optional_fields_are_none(self) -> None:
        bash = parse_package(BASH_PARAGRAPH)

        for attr in ("depends", "provides", "conflicts", "replaces", "breaks", "features"):
            assert getattr(bash, attr) is None

    def test_all_fields(self, packages_index: str) -> None:
        zsh = parse_packages(packages_index)[1]

        assert zsh.name == "zsh"
        assert zsh.section == "shells"
        assert zsh.maintainer == "AOSC OS Maintainers <maintainers@aosc.io>"
        assert zsh.depends == "glibc, ncurses, pcre2"
        assert zsh.provides == "zsh-static"
        assert zsh.conflicts == "zsh-beta"
        assert zsh.replaces == "zsh-beta"
        assert zsh.breaks == "oh-my-zsh (<< 2020)"
        assert zsh.features == "shell"

    def test_document_order_preserved(self, packages_index: str) -> None:
        packages = parse_packages(packages_index)

        assert [p.name for p in packages] == ["bash", "zsh"]

    def test_two_paragraphs_one_blank_line(self) -> None:
        text = "Package: a\nVersion: 1\n\nPackage: b\nVersion: 2\n"

        packages = parse_packages(text)

        assert [(p.name, p.version) for p in packages] == [("a", "1"), ("b", "2")]

    def test_duplicate_names_kept(self) -> None:
        text = "Package: a\nArchitecture: amd64\n\nPackage: a\nArchitecture: noarch\n"

        packages = parse_packages(text)

        assert [p.architecture for p in packages] == ["amd64", "noarch"]

    def test_extra_blank_lines_ignored(self) -> None:
        text = "\n\n  \nPackage: a\n\n\n\t\nPackage: b\n\n\n"

        assert [p.name for p in parse_packages(text)] == ["a", "b"]

    def test_crlf_line_endings(self) -> None:
        packages = parse_packages("Package: a\r\nSize: 12\r\n\r\nPackage: b\r\n")

        assert [p.name for p in packages] == ["a", "b"]
        assert packages[0].size == 12

    @pytest.mark.parametrize("text", ["", "\n", "\n\n   \n\t\n"])
    def test_empty_document(self, text: str) -> None:
        packages = parse_packages(text)

        assert isinstance(packages, Packages)
        assert len(packages) == 0

    @pytest.mark.parametrize("field", ["Size", "Installed-Size"])
    @pytest.mark.parametrize("value", ["lots", "-12", "1.5", "12k", "99999999999999999999999"])
    def test_bad_numbers_become_zero(self, field: str, value: str) -> None:
        text = f"Package: foo\nVersion: 1.0\n{field}: {value}\nDescription: still here\n"

        foo = parse_package(text)

        assert foo.size == 0
        assert foo.installed_size == 0
        assert foo.version == "1.0"
        assert foo.description == "still here"

    def test_continuation_lines_folded(self, packages_index: str) -> None:
        bash = parse_packages(packages_index)[0]

        assert bash.description.startswith("The GNU Bourne Again shell\n")
        assert "sh-compatible command language interpreter" in bash.description
        assert "Korn and C shells" in bash.description

    def test_field_names_are_case_sensitive(self) -> None:
        foo = parse_package("Package: foo\nsize: 10\nDEPENDS: bar\n")

        assert foo.size == 0
        assert foo.depends is None

    def test_unknown_fields_ignored(self) -> None:
        foo = parse_package("Package: foo\nPriority: optional\nX-Unknown: yes\n")

        assert foo.name == "foo"

    def test_comment_lines_skipped(self) -> None:
        packages = parse_packages("# generated\nPackage: foo\n# inline\nVersion: 1\n\n# trailing\n")

        assert len(packages) == 1
        assert packages[0].version == "1"

    def test_bytes_input(self) -> None:
        packages = parse_packages("Package: fünf\n".encode("utf-8"))

        assert packages[0].name == "fünf"

    def test_invalid_utf8(self) -> None:
        with pytest.raises(EncodingError):
            parse_packages(b"Package: \xff\xfe\n")

    def test_invalid_line_rejects_document(self) -> None:
        text = "Package: a\n\nPackage: b\nthis is not a field\n"

        with pytest.raises(ControlFormatError) as excinfo:
            parse_packages(text)

        assert excinfo.value.lineno == 4
        assert isinstance(excinfo.value, ParseControlError)

    def test_leading_continuation_line(self) -> None:
        with pytest.raises(ControlFormatError) as excinfo:
            parse_packages(" dangling\nPackage: a\n")

        assert excinfo.value.lineno == 1

    def test_key_with_space(self) -> None:
        with pytest.raises(ControlFormatError):
            parse_packages("Package: a\nBad Key: value\n")


class TestParsePackage:
    """Tests for parse_package()."""

    def test_more_than_one_paragraph(self, packages_index: str) -> None:
        with pytest.raises(ControlFormatError):
            parse_package(packages_index)

    def test_no_paragraph(self) -> None:
        with pytest.raises(ControlFormatError):
            parse_package("\n\n")


def test_iter_paragraphs_yields_deb822(packages_index: str) -> None:
    paragraphs = list(iter_paragraphs(packages_index))

    assert len(paragraphs) == 2
    assert paragraphs[1]["Package"] == "zsh"
    assert paragraphs[1]["X-AOSC-Features"] == "shell"
