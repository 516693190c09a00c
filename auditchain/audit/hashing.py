"""Chain hashing.

chain_hash = H(prev_hash || canonical_encoding), where prev_hash is the
predecessor's hex digest as ASCII, or empty for the genesis record.
Algorithms are looked up by name so records written under an older
algorithm stay verifiable after a migration.
"""

import hashlib
from collections.abc import Callable
from typing import Any

from auditchain.audit.errors import UnsupportedAlgorithmError

DEFAULT_CHAIN_ALGO = "sha256"

SUPPORTED_ALGORITHMS: dict[str, Callable[..., Any]] = {
    "sha256": hashlib.sha256,
}


def is_supported(algo: str) -> bool:
    """Check whether records hashed with `algo` can be verified."""
    return algo in SUPPORTED_ALGORITHMS


def compute_chain_hash(
    prev_hash: str | None,
    encoded: bytes,
    algo: str = DEFAULT_CHAIN_ALGO,
) -> str:
    """Compute the link hash of a record.

    Args:
        prev_hash: Predecessor's chain_hash, or None for the genesis record
        encoded: Canonical encoding of the record's logical fields
        algo: Registered algorithm name

    Returns:
        Lowercase hex digest

    Raises:
        UnsupportedAlgorithmError: If `algo` is not registered
    """
    try:
        factory = SUPPORTED_ALGORITHMS[algo]
    except KeyError:
        raise UnsupportedAlgorithmError(f"Unsupported chain algorithm: {algo}") from None

    digest = factory()
    digest.update((prev_hash or "").encode("ascii"))
    digest.update(encoded)
    return digest.hexdigest()
