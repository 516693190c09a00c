"""Chain verification.

Walks the medium from the first record to the last, recomputing each
link hash. Every problem found is collected; a single pass reports all
of them and the walk never stops early on a bad record.
"""

from pydantic import ValidationError

from auditchain.audit.encoding import canonical_encode, decode_fields
from auditchain.audit.errors import EncodingError
from auditchain.audit.hashing import compute_chain_hash, is_supported
from auditchain.audit.models import LogRecord, VerificationIssue, VerificationResult
from auditchain.audit.models.verification import (
    HASH_MISMATCH,
    MALFORMED,
    PREV_HASH_MISMATCH,
    UNSUPPORTED_ALGORITHM,
)
from auditchain.audit.store import AuditLogStore
from auditchain.observability.logging import get_logger
from auditchain.observability.metrics import CHAIN_LENGTH, VERIFICATIONS, VERIFICATION_ISSUES

logger = get_logger(__name__)


class ChainVerifier:
    """Read-only verifier over an AuditLogStore.

    Linking rule: each record's stored chain_prev_hash must equal the
    hash recomputed for the previous decodable record (None before the
    first record). A record that cannot be decoded, or whose algorithm
    is unknown, leaves the expected predecessor unknown, so the record
    after it is always reported as well.
    """

    def __init__(self, store: AuditLogStore) -> None:
        self._store = store

    async def verify(self) -> VerificationResult:
        """Verify the whole chain.

        Returns:
            VerificationResult listing every issue found, in storage order

        Raises:
            StorageUnavailable: If the medium cannot be read
        """
        issues: list[VerificationIssue] = []
        expected_prev: str | None = None
        predecessor_known = True
        head_hash: str | None = None
        position = 0

        async for line in self._store.iter_lines():
            position += 1

            try:
                fields = decode_fields(line)
                LogRecord.model_validate(fields)
            except (ValueError, ValidationError, RecursionError):
                issues.append(VerificationIssue(position=position, description=MALFORMED))
                predecessor_known = False
                head_hash = None
                continue

            stored_prev = fields["chain_prev_hash"]
            if not predecessor_known or stored_prev != expected_prev:
                issues.append(
                    VerificationIssue(position=position, description=PREV_HASH_MISMATCH)
                )

            algo = fields["chain_algo"]
            if not is_supported(algo):
                issues.append(
                    VerificationIssue(position=position, description=UNSUPPORTED_ALGORITHM)
                )
                predecessor_known = False
                head_hash = None
                continue

            try:
                encoded = canonical_encode(
                    fields["timestamp"],
                    fields["kind"],
                    fields["payload"],
                    fields["correlation_id"],
                )
            except EncodingError:
                issues.append(VerificationIssue(position=position, description=MALFORMED))
                predecessor_known = False
                head_hash = None
                continue

            recomputed = compute_chain_hash(stored_prev, encoded, algo)
            if recomputed != fields["chain_hash"]:
                issues.append(VerificationIssue(position=position, description=HASH_MISMATCH))

            expected_prev = recomputed
            predecessor_known = True
            head_hash = recomputed

        pending_tail = await self._store.has_partial_tail()

        result = VerificationResult(
            issues=issues,
            records_checked=position,
            head_hash=head_hash,
            pending_tail=pending_tail,
        )
        self._record_outcome(result)
        return result

    def _record_outcome(self, result: VerificationResult) -> None:
        VERIFICATIONS.labels(result="ok" if result.ok else "failed").inc()
        VERIFICATION_ISSUES.set(len(result.issues))
        CHAIN_LENGTH.set(result.records_checked)

        if result.ok:
            logger.info(
                "audit_chain_verified",
                records=result.records_checked,
                pending_tail=result.pending_tail,
            )
        else:
            logger.warning(
                "audit_chain_integrity_violation",
                records=result.records_checked,
                issue_count=len(result.issues),
                issues=result.messages(),
            )
