"""libaosc: fetch and parse AOSC OS package indexes."""

import logging

from .control import parse_package, parse_packages
from .errors import (
    ControlFormatError,
    DecompressionError,
    EncodingError,
    FetchPackagesError,
    IoError,
    ParseControlError,
    TransportError,
    WorkerFailure,
)
from .fetcher import FetchPackages, FetchPackagesAsync, build_packages_url
from .models import Package, Packages
from .storage import load_packages

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ControlFormatError",
    "DecompressionError",
    "EncodingError",
    "FetchPackages",
    "FetchPackagesAsync",
    "FetchPackagesError",
    "IoError",
    "Package",
    "Packages",
    "ParseControlError",
    "TransportError",
    "WorkerFailure",
    "build_packages_url",
    "load_packages",
    "parse_package",
    "parse_packages",
]
