"""Scan API - технический долг по файлам или проекту."""

import asyncio
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from techdebt.api.dependencies import get_config, get_report_generator, get_scan_use_case, limiter
from techdebt.application.scan.use_case import ScanUseCase
from techdebt.domain.entities.metrics import SourceUnit
from techdebt.domain.ports.config import AppConfig
from techdebt.infrastructure.reports.report_generator import ReportGenerator
from techdebt.infrastructure.scoring.enterprise_metrics import calculate_enterprise_metrics, generate_benchmarks

router = APIRouter(prefix="/scan", tags=["scan"])


class SourceFileDTO(BaseModel):
    path: str
    content: str


class ScanFilesRequest(BaseModel):
    """Запрос на скан переданных файлов."""
    files: list[SourceFileDTO]
    test_coverage: float = Field(default=0.0, ge=0, le=100)


class ProjectRequest(BaseModel):
    """Запрос на скан проекта с диска."""
    path: str
    test_coverage: float | None = Field(default=None, ge=0, le=100)


class ReportRequest(ProjectRequest):
    save: bool = False


def _resolve_path_allowed(path_str: str) -> Path:
    """Resolve path and ensure it is under cwd."""
    root = Path.cwd().resolve()
    path = Path(path_str).expanduser().resolve()
    try:
        path.relative_to(root)
    except ValueError:
        raise HTTPException(status_code=403, detail=f"Path must be inside workspace: {root}")
    return path


def _http_error(e: ValueError) -> HTTPException:
    message = str(e)
    status = 404 if "does not exist" in message else 400
    return HTTPException(status_code=status, detail=message)


@router.post("/files")
@limiter.limit("30/minute")
async def scan_files(
    request: Request,
    body: ScanFilesRequest,
    use_case: ScanUseCase = Depends(get_scan_use_case),
) -> dict:
    """Сканирует переданные файлы (path + content)."""
    units = [SourceUnit(path=f.path, content=f.content) for f in body.files]
    outcome = await asyncio.to_thread(use_case.scan, units, body.test_coverage)
    return outcome.to_dict()


@router.post("/project")
@limiter.limit("10/minute")
async def scan_project(
    request: Request,
    body: ProjectRequest,
    use_case: ScanUseCase = Depends(get_scan_use_case),
) -> dict:
    """Сканирует проект на диске.

    Path must be inside cwd. Test coverage defaults to the test-file ratio.
    """
    path = _resolve_path_allowed(body.path)
    try:
        scan = await asyncio.to_thread(use_case.scan_project, str(path), body.test_coverage)
    except ValueError as e:
        raise _http_error(e)
    return scan.outcome.to_dict()


@router.post("/project/report", response_class=PlainTextResponse)
@limiter.limit("10/minute")
async def project_report(
    request: Request,
    body: ReportRequest,
    use_case: ScanUseCase = Depends(get_scan_use_case),
    generator: ReportGenerator = Depends(get_report_generator),
    config: AppConfig = Depends(get_config),
) -> str:
    """Markdown отчёт по проекту; save=true also writes it to the reports dir."""
    path = _resolve_path_allowed(body.path)
    try:
        scan = await asyncio.to_thread(use_case.scan_project, str(path), body.test_coverage)
    except ValueError as e:
        raise _http_error(e)

    report = generator.generate_markdown(scan.outcome.result, scan.project_path, scan.outcome.ai_summary)
    if body.save:
        generator.save_report(report, Path(config.reports_dir), scan.project_path)
    return report


@router.post("/audit")
@limiter.limit("5/minute")
async def audit_dependencies(
    request: Request,
    body: ProjectRequest,
    use_case: ScanUseCase = Depends(get_scan_use_case),
) -> dict:
    """Аудит зависимостей (npm audit, pip-audit)."""
    path = _resolve_path_allowed(body.path)
    try:
        report = await asyncio.to_thread(use_case.audit_project, str(path))
    except ValueError as e:
        raise _http_error(e)
    return report.to_dict()


@router.post("/metrics")
@limiter.limit("10/minute")
async def enterprise_metrics(
    request: Request,
    body: ProjectRequest,
    use_case: ScanUseCase = Depends(get_scan_use_case),
) -> dict:
    """Enterprise KPIs and benchmark comparison for a project."""
    path = _resolve_path_allowed(body.path)
    try:
        scan = await asyncio.to_thread(use_case.scan_project, str(path), body.test_coverage)
    except ValueError as e:
        raise _http_error(e)

    metrics = calculate_enterprise_metrics(scan.outcome.result)
    return {
        "projectPath": scan.project_path,
        "metrics": metrics.to_dict(),
        "benchmarks": [b.to_dict() for b in generate_benchmarks(metrics)],
    }
