"""FastAPI dependencies - config and use case providers."""

from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address

from techdebt.application.scan.use_case import ScanUseCase
from techdebt.domain.ports.config import AppConfig
from techdebt.infrastructure.config import load_config
from techdebt.infrastructure.reports.report_generator import ReportGenerator

limiter = Limiter(key_func=get_remote_address)


@lru_cache
def get_config() -> AppConfig:
    """Load config once at startup."""
    return load_config()


def get_scan_use_case() -> ScanUseCase:
    """Create ScanUseCase with scan settings."""
    return ScanUseCase(get_config().scan)


def get_report_generator() -> ReportGenerator:
    return ReportGenerator()
