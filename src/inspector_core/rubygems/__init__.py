"""Public registry ownership audit."""

from .auditor import AuditReport, RegistryAuditor
from .client import RubyGemsClient

__all__ = ["AuditReport", "RegistryAuditor", "RubyGemsClient"]
