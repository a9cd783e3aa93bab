"""Platform detection and release artifact resolution.

Maps the host operating system and CPU architecture onto the naming used by
the upstream bore release artifacts and builds the download URL for a
version tag. Everything here is pure: no network and no filesystem access.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from borecli.core.errors import ConfigError, UnsupportedArchitecture, UnsupportedPlatform

DEFAULT_RELEASE_HOST = "https://github.com"
DEFAULT_REPOSITORY = "Aditya-ds-1806/bore"

ARTIFACT_NAME_TEMPLATE = "bore_{version}_{os}_{arch}.tar.gz"
ARTIFACT_URL_TEMPLATE = "{host}/{repo}/releases/download/v{version}/{file_name}"

BINARY_NAME = "bore"
COMPANION_BINARY_NAME = "bore-server"

# Raw OS identifier (platform.system() or sys.platform, lower-cased)
# -> release OS name.
SUPPORTED_PLATFORM_NAMES: Mapping[str, str] = MappingProxyType({
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
    "win32": "windows",
})

# Raw machine identifier (platform.machine(), lower-cased) -> release arch name.
SUPPORTED_ARCH_NAMES: Mapping[str, str] = MappingProxyType({
    # 64-bit x86
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    # 64-bit ARM
    "aarch64": "arm64",
    "arm64": "arm64",
    # 32-bit ARM
    "arm": "armv6",
    "armv6l": "armv6",
    "armv7l": "armv6",
    # 32-bit x86
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "ia32": "386",
})


@dataclass(frozen=True)
class PlatformInfo:
    """Raw host identifiers, lower-cased."""

    os: str
    arch: str


@dataclass(frozen=True)
class PlatformTriple:
    """Host platform expressed in release naming, plus the version to fetch."""

    os_name: str
    arch_name: str
    version: str


@dataclass(frozen=True)
class ArtifactReference:
    file_name: str
    url: str


def get_platform_info() -> PlatformInfo:
    """Read the raw operating system and machine identifiers of this host."""
    return PlatformInfo(
        os=platform.system().lower(),
        arch=platform.machine().lower(),
    )


def normalize_version(version: str) -> str:
    """Strip surrounding whitespace and a leading 'v' from a version tag."""
    version = version.strip()
    if version[:1] in ("v", "V"):
        version = version[1:]
    return version


def resolve_platform(raw_os: str, raw_arch: str, version: str) -> PlatformTriple:
    """Translate raw host identifiers into release naming.

    Args:
        raw_os: Operating system identifier, e.g. 'Linux' or 'win32'.
        raw_arch: Machine identifier, e.g. 'x86_64' or 'aarch64'.
        version: Release version, with or without a leading 'v'.

    Returns:
        The resolved PlatformTriple.

    Raises:
        UnsupportedPlatform: If the OS has no published artifact.
        UnsupportedArchitecture: If the architecture has no published artifact.
        ConfigError: If the version is empty.
    """
    os_name = SUPPORTED_PLATFORM_NAMES.get(raw_os.strip().lower())
    if os_name is None:
        raise UnsupportedPlatform(raw_os)

    arch_name = SUPPORTED_ARCH_NAMES.get(raw_arch.strip().lower())
    if arch_name is None:
        raise UnsupportedArchitecture(raw_os, raw_arch)

    normalized = normalize_version(version)
    if not normalized:
        raise ConfigError(f"A release version is required, got '{version}'")

    return PlatformTriple(os_name=os_name, arch_name=arch_name, version=normalized)


def build_artifact_reference(
    triple: PlatformTriple,
    release_host: str = DEFAULT_RELEASE_HOST,
    repository: str = DEFAULT_REPOSITORY,
) -> ArtifactReference:
    """Build the artifact file name and download URL for a platform triple."""
    file_name = ARTIFACT_NAME_TEMPLATE.format(
        version=triple.version,
        os=triple.os_name,
        arch=triple.arch_name,
    )
    url = ARTIFACT_URL_TEMPLATE.format(
        host=release_host.rstrip("/"),
        repo=repository.strip("/"),
        version=triple.version,
        file_name=file_name,
    )
    return ArtifactReference(file_name=file_name, url=url)


def resolve_artifact(
    raw_os: str,
    raw_arch: str,
    version: str,
    release_host: str = DEFAULT_RELEASE_HOST,
    repository: str = DEFAULT_REPOSITORY,
) -> ArtifactReference:
    """Resolve raw host identifiers and a version into an ArtifactReference."""
    triple = resolve_platform(raw_os, raw_arch, version)
    return build_artifact_reference(triple, release_host, repository)


def resolve_os_name(raw_os: str) -> str:
    """Return the release OS name for a raw identifier.

    Raises:
        UnsupportedPlatform: If the OS is not supported.
    """
    os_name = SUPPORTED_PLATFORM_NAMES.get(raw_os.strip().lower())
    if os_name is None:
        raise UnsupportedPlatform(raw_os)
    return os_name


def is_windows(os_name: str) -> bool:
    return os_name.lower() in ("windows", "win32")


def binary_name(os_name: str) -> str:
    """Executable file name of the bore client on the given OS."""
    return f"{BINARY_NAME}.exe" if is_windows(os_name) else BINARY_NAME


def companion_binary_name(os_name: str) -> str:
    """File name of the bore-server executable bundled in the same archive."""
    return f"{COMPANION_BINARY_NAME}.exe" if is_windows(os_name) else COMPANION_BINARY_NAME
