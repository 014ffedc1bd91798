"""Host architecture and AOSC OS branch detection."""

import logging
import platform
from enum import StrEnum
from pathlib import Path

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")
CPUINFO = Path("/proc/cpuinfo")

# fmt: off
# machine name as reported by uname -> AOSC OS architecture
ARCH_NAMES = {
    "x86_64": "amd64", "amd64": "amd64",
    "i386": "i486", "i486": "i486", "i586": "i486", "i686": "i486", "x86": "i486",
    "ppc": "powerpc", "powerpc": "powerpc",
    "ppc64": "ppc64", "ppc64le": "ppc64el",
    "aarch64": "arm64", "arm64": "arm64",
    "mips64": "loongson3",
    "riscv64": "riscv64",
}
# fmt: on


class AOSCBranch(StrEnum):
    MAINLINE = "mainline"
    AFTERGLOW = "afterglow"


def _loongarch_has_simd(cpuinfo: Path) -> bool:
    try:
        text = cpuinfo.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        logger.debug(f"Unable to read {cpuinfo}: {e}")
        return False
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip().lower() == "features":
            return "lsx" in value.split()
    return False


def get_arch_name(machine: str | None = None, cpuinfo: Path = CPUINFO) -> str | None:
    """Map a machine name to the AOSC OS architecture name.

    Args:
        machine: Machine name as reported by uname. Defaults to the running host.
        cpuinfo: Where to look up LoongArch SIMD support

    Returns:
        The architecture name (e.g. "amd64"), or None if AOSC OS does not support it

    Examples:
        >>> get_arch_name("x86_64")
        'amd64'
    """
    machine = (machine or platform.machine()).lower()
    if machine == "loongarch64":
        return "loongarch64" if _loongarch_has_simd(cpuinfo) else "loongarch64_nosimd"
    return ARCH_NAMES.get(machine)


def aosc_branch(os_release: Path = OS_RELEASE) -> AOSCBranch | None:
    """Work out which AOSC OS branch the host runs from its os-release NAME."""
    try:
        text = os_release.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Unable to read {os_release}: {e}")
        return None

    for line in text.splitlines():
        if not line.startswith("NAME="):
            continue
        name = line.removeprefix("NAME=").strip().strip("\"'")
        match name:
            case "AOSC OS":
                return AOSCBranch.MAINLINE
            case "AOSC OS/Retro" | "Afterglow":
                return AOSCBranch.AFTERGLOW
            case _:
                return None
    return None
