"""auditchain: tamper-evident, append-only audit log.

Records query, response-outcome and escalation events as a SHA-256 hash
chain so that any later alteration, deletion or reordering of a stored
record is detectable by walking the chain.

Usage:
    from auditchain.audit import AuditLog, QueryEvent
    from auditchain.audit.stores import JsonlAuditLogStore

    log = AuditLog(JsonlAuditLogStore("var/audit.jsonl"))
    record = await log.append_event(QueryEvent(text="...", category="javascript"))
    result = await log.verify()
"""

__version__ = "1.0.0"
