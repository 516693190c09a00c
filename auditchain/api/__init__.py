"""HTTP wrapper around the audit log.

Exposes event submission, chain verification, health and metrics.
"""
