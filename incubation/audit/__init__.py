"""Append-only audit log and side-channel notifications."""
from incubation.audit.sink import AuditSink

__all__ = ["AuditSink"]
