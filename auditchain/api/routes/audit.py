"""Chain verification endpoint for operators."""

from fastapi import APIRouter

from auditchain.api.dependencies import AuditLogDep
from auditchain.api.exceptions import StorageUnavailableError
from auditchain.api.models.events import VerifyResponse
from auditchain.audit.errors import StorageUnavailable
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/audit")


@router.get("/verify", response_model=VerifyResponse)
async def verify_chain(audit_log: AuditLogDep) -> VerifyResponse:
    """Walk the whole chain and report every discrepancy.

    Always returns 200 when the medium is readable; tampering shows up
    as `ok: false` with the issues listed.
    """
    logger.debug("verify_request")
    try:
        result = await audit_log.verify()
    except StorageUnavailable as e:
        raise StorageUnavailableError(e.message) from e

    return VerifyResponse.from_result(result)
