"""Scan use case."""

from techdebt.application.scan.dto import AuditReport, ProjectScan, ScanOutcome
from techdebt.application.scan.use_case import ScanUseCase, resolve_project_path

__all__ = [
    "ScanUseCase",
    "ScanOutcome",
    "ProjectScan",
    "AuditReport",
    "resolve_project_path",
]
