"""Data models for AOSC OS package index entries."""

import logging
from collections.abc import Iterator, Mapping
from typing import TypeAlias

from debian import deb822
from pydantic import BaseModel, ConfigDict, NonNegativeInt, RootModel

from libaosc.utils import try_parse_uint

logger = logging.getLogger(__name__)

OptionalStr: TypeAlias = str | None

# attribute name -> control field name, in the order fields are written out
CONTROL_FIELDS: dict[str, str] = {
    "name": "Package",
    "version": "Version",
    "section": "Section",
    "architecture": "Architecture",
    "installed_size": "Installed-Size",
    "maintainer": "Maintainer",
    "filename": "Filename",
    "size": "Size",
    "sha256": "SHA256",
    "depends": "Depends",
    "provides": "Provides",
    "conflicts": "Conflicts",
    "replaces": "Replaces",
    "breaks": "Breaks",
    "features": "X-AOSC-Features",
    "description": "Description",
}
INTEGER_FIELDS = frozenset({"installed_size", "size"})
OPTIONAL_FIELDS = frozenset({"depends", "provides", "conflicts", "replaces", "breaks", "features"})


class Package(BaseModel):
    """A single paragraph of a Packages index."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    architecture: str = ""
    version: str = ""
    section: str = ""
    installed_size: NonNegativeInt = 0
    maintainer: str = ""
    filename: str = ""
    size: NonNegativeInt = 0
    sha256: str = ""
    description: str = ""
    depends: OptionalStr = None
    provides: OptionalStr = None
    conflicts: OptionalStr = None
    replaces: OptionalStr = None
    breaks: OptionalStr = None
    features: OptionalStr = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> "Package":
        """Build a package from the fields of one control paragraph.

        Field names are matched case-sensitively. Missing string fields fall back to
        an empty string, missing or malformed sizes to 0, missing optional fields to None.

        Args:
            fields: Mapping of control field names to their (unfolded) values

        Returns:
            The package record
        """
        # deb822 keys compare case-insensitively, plain str keys do not
        fields = {str(key): value for key, value in fields.items()}

        values: dict[str, str | int | None] = {}
        for attr, field in CONTROL_FIELDS.items():
            raw = fields.get(field)
            if attr in INTEGER_FIELDS:
                number = try_parse_uint(raw)
                if number is None:
                    if raw is not None:
                        logger.debug(f"Invalid {field} value {raw!r} for {fields.get('Package')!r}, using 0")
                    number = 0
                values[attr] = number
            elif raw is not None:
                values[attr] = raw
        return cls.model_validate(values)

    def to_deb822(self) -> deb822.Packages:
        """Serialize back into a control paragraph.

        Empty string fields and absent optional fields are left out.
        """
        paragraph = deb822.Packages()
        for attr, field in CONTROL_FIELDS.items():
            value = getattr(self, attr)
            if attr in INTEGER_FIELDS:
                paragraph[field] = str(value)
            elif value:
                paragraph[field] = value
            elif attr in OPTIONAL_FIELDS and value is not None:
                # present but empty is kept distinct from absent
                paragraph[field] = value
        return paragraph


class Packages(RootModel[tuple[Package, ...]]):
    """Ordered collection of packages, in the order of the source document."""

    model_config = ConfigDict(frozen=True)

    root: tuple[Package, ...] = ()

    def __iter__(self) -> Iterator[Package]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Package:
        return self.root[index]

    def dump(self) -> str:
        """Serialize the collection to control file text."""
        return "\n".join(package.to_deb822().dump() for package in self.root)
