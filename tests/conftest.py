"""Shared fixtures for the libaosc test suite."""

import lzma

import httpx
import pytest

BASH_PARAGRAPH = """\
Package: bash
Architecture: amd64
Version: 5.2-1
Installed-Size: 3200
Filename: pool/bash_5.2-1_amd64.deb
Size: 1048576
SHA256: abc123
Description: the Bourne Again shell
"""

PACKAGES_INDEX = """\
Package: bash
Version: 5.2.37
Section: shells
Architecture: amd64
Installed-Size: 9012
Maintainer: AOSC OS Maintainers <maintainers@aosc.io>
Filename: pool/stable/main/b/bash_5.2.37_amd64.deb
Size: 1896540
SHA256: 0d9a5f1d1ac1bc3d7d2e8a63f2b96c8e4d1ad3e6f2cc7fa8d6b9f7c43f1e2a9b
Depends: glibc (>= 2.40), ncurses, readline
Description: The GNU Bourne Again shell
 Bash is an sh-compatible command language interpreter.
 .
 It also incorporates useful features from the Korn and C shells.

Package: zsh
Version: 5.9-1
Section: shells
Architecture: amd64
Installed-Size: 14112
Maintainer: AOSC OS Maintainers <maintainers@aosc.io>
Filename: pool/stable/main/z/zsh_5.9-1_amd64.deb
Size: 3112048
SHA256: 7e5c1b9d0f3e4a2b6c8d9e0f1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b
Depends: glibc, ncurses, pcre2
Provides: zsh-static
Conflicts: zsh-beta
Replaces: zsh-beta
Breaks: oh-my-zsh (<< 2020)
X-AOSC-Features: shell
Description: A powerful shell with scripting language
"""


@pytest.fixture
def packages_index() -> str:
    return PACKAGES_INDEX


@pytest.fixture
def packages_index_xz() -> bytes:
    return lzma.compress(PACKAGES_INDEX.encode("utf-8"), format=lzma.FORMAT_XZ)


@pytest.fixture
def mirror():
    """Fake mirror serving a fixed set of paths.

    Returns a tuple of (transport, routes, requests). A route maps a URL path to
    either the body to serve with status 200, a bare status code, or a
    (body, headers) tuple. Every request the transport sees is appended to
    requests. Unknown paths answer 404.
    """
    routes: dict[str, bytes | int | tuple[bytes, dict[str, str]]] = {}
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        route = routes.get(request.url.path, 404)
        if isinstance(route, int):
            return httpx.Response(route)
        if isinstance(route, tuple):
            body, headers = route
            return httpx.Response(200, content=body, headers=headers)
        return httpx.Response(200, content=route)

    return httpx.MockTransport(handler), routes, requests
