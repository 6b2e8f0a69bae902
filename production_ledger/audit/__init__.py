"""Audit logging package."""

from production_ledger.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
