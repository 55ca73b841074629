"""Object path mapping.

Every compilation unit maps to exactly one object artifact that lives
directly inside the build directory. Subdirectories in the source path are
flattened into the file name so no mirrored directory tree has to be created:

    src/a.c      -> build/a.c.o
    src/sub/b.c  -> build/sub.b.c.o

Flattening is not injective ("sub/b.c" and "sub.b.c" both become
"sub.b.c.o"). Colliding entries, and only those, get a short digest of their
original source path inserted before the extension so each unit still owns a
distinct artifact.
"""

import hashlib
import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Optional

from ..platform import HostPlatform

logger = logging.getLogger(__name__)

_DIGEST_LENGTH = 8


def flatten(path: str, separators: Sequence[str]) -> str:
    """Replace every separator character in path with '.'."""
    for separator in separators:
        path = path.replace(separator, ".")
    return path


def object_path(source: str, build_dir: str, extension: str, host: Optional[HostPlatform] = None) -> str:
    """Map one compilation unit to its object artifact path.

    Args:
        source: Source path relative to the source directory
        build_dir: Flat build output directory
        extension: Object file extension without the leading dot
        host: Host flag set (defaults to the running host)

    Returns:
        Artifact path inside build_dir
    """
    host = host or HostPlatform.current()
    return host.join(build_dir, flatten(f"{source}.{extension}", host.separators))


def find_collisions(
    sources: Sequence[str], build_dir: str, extension: str, host: Optional[HostPlatform] = None
) -> dict[str, list[str]]:
    """Find distinct sources that flatten to the same artifact path.

    Returns:
        Mapping of artifact path -> the distinct sources sharing it, only for
        artifacts claimed by more than one source
    """
    claims: dict[str, list[str]] = defaultdict(list)
    for source in sources:
        artifact = object_path(source, build_dir, extension, host)
        if source not in claims[artifact]:
            claims[artifact].append(source)
    return {artifact: owners for artifact, owners in claims.items() if len(owners) > 1}


def _disambiguated(source: str, build_dir: str, extension: str, host: HostPlatform) -> str:
    digest = hashlib.sha1(source.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
    return host.join(build_dir, flatten(f"{source}.{digest}.{extension}", host.separators))


def object_paths(
    sources: Sequence[str], build_dir: str, extension: str, host: Optional[HostPlatform] = None
) -> list[str]:
    """Map a list of compilation units to object artifacts, index-aligned.

    The mapping is pure and order-preserving: the result has the same length
    as sources and result[i] is the artifact for sources[i].

    Args:
        sources: Source paths relative to the source directory
        build_dir: Flat build output directory
        extension: Object file extension without the leading dot
        host: Host flag set (defaults to the running host)

    Returns:
        List of artifact paths
    """
    host = host or HostPlatform.current()
    colliding = {source for owners in find_collisions(sources, build_dir, extension, host).values() for source in owners}

    artifacts = []
    for source in sources:
        if source in colliding:
            artifact = _disambiguated(source, build_dir, extension, host)
            logger.warning(f"Object path collision for {source}, using {artifact}")
        else:
            artifact = object_path(source, build_dir, extension, host)
        artifacts.append(artifact)
    return artifacts
