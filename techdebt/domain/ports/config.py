"""Config Port - scan and application configuration models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SEVERITY_WEIGHTS: dict[str, int] = {
    "blocker": 20,
    "critical": 15,
    "major": 10,
    "minor": 5,
    "info": 1,
}


class AuditConfig(BaseModel):
    """Dependency audit toggles (npm audit / pip-audit)."""

    npm: bool = True
    pip: bool = True
    timeout: int = 120  # seconds per tool invocation


class AIDetectionConfig(BaseModel):
    """Authorship classifier settings."""

    enabled: bool = True
    threshold: int = Field(default=70, ge=0, le=100)  # > threshold = AI-generated
    human_threshold: int = Field(default=30, ge=0, le=100)  # < human_threshold = human-written


class ScanConfig(BaseModel):
    """Configuration bundle for one scan."""

    model_config = ConfigDict(extra="ignore")

    ignore_globs: list[str] = [
        "**/node_modules/**",
        "**/dist/**",
        "**/.git/**",
        "**/build/**",
        "**/.next/**",
    ]
    include_extensions: list[str] = [
        ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".py", ".java", ".go", ".rs",
    ]
    max_file_size: int = 1024 * 1024  # bytes; larger files are skipped by the collector
    # Extra branch tokens counted by cyclomatic complexity for every language
    complexity_markers: list[str] = []
    duplicate_min_length: int = 50  # min joined chars of a 6-line window
    duplicate_ratio_threshold: float = 0.05  # duplicated lines / total lines
    require_tests: bool = True
    severity_weights: dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_SEVERITY_WEIGHTS))
    hourly_rate: float = 75.0  # USD per developer hour
    minutes_per_line: float = 30.0  # assumed development cost per line
    max_workers: int = Field(default=8, ge=1)
    audit: AuditConfig = AuditConfig()
    ai_detection: AIDetectionConfig = AIDetectionConfig()

    @field_validator("severity_weights")
    @classmethod
    def fill_missing_weights(cls, v: dict[str, int]) -> dict[str, int]:
        """Severities the table does not name keep their default weight."""
        return {**DEFAULT_SEVERITY_WEIGHTS, **v}


class SecurityConfig(BaseModel):
    """Security settings."""

    rate_limit_requests_per_minute: int = 100
    cors_origins: list[str] = ["http://localhost:5173"]


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Full application configuration."""

    server: ServerConfig = ServerConfig()
    security: SecurityConfig = SecurityConfig()
    scan: ScanConfig = ScanConfig()
    reports_dir: str = "output/reports"
    log_level: str = "INFO"
    # Log file: path relative to cwd or absolute. Empty = only stdout. Rotation when file exceeds max_mb.
    log_file: str = ""
    log_rotation_max_mb: int = 5
    log_rotation_backups: int = 3
