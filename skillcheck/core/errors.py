"""Error Hierarchy — typed, categorized exceptions for all skill-test failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors are recoverable by the caller; port and invariant errors are critical
    - to_response() produces the uniform error envelope for the caller's transport
    - Foreign exceptions never cross the engine boundary unwrapped

Design Decisions:
    - Single hierarchy with SkillCheckError base: callers catch one type
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from skillcheck.core.domain_types import SkillId


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_PORT = "external_port"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    invocation_id: str | None = None
    character_id: str | None = None
    skill_id: str | None = None
    stage: str | None = None
    debug_info: dict[str, Any] | None = None


class SkillCheckError(Exception):
    """Base exception for all skill-test engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING, ErrorSeverity.ERROR)

    def to_response(self) -> dict:
        """Convert to standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "invocation_id": self.context.invocation_id,
                    "character_id": self.context.character_id,
                    "skill_id": self.context.skill_id,
                    "stage": self.context.stage,
                },
            }
        }


# ─── Caller Errors ──────────────────────────────────────────────

class InvalidRequestError(SkillCheckError):
    """Skill-test request is malformed or missing fields."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class SkillNotFoundError(SkillCheckError):
    """Skill lookup port has no skill with the requested id."""
    def __init__(self, skill_id: SkillId, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.skill_id = ctx.skill_id or skill_id
        super().__init__(
            f"Skill '{skill_id}' not found",
            "SKILL_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx,
        )
        self.skill_id = skill_id


# ─── Engine / Port Errors ───────────────────────────────────────

class PortFailureError(SkillCheckError):
    """An injected port (skill lookup, event sink, attributes) failed."""
    def __init__(self, message: str, port: str, context: ErrorContext | None = None):
        super().__init__(
            f"Port '{port}' failed: {message}",
            "PORT_FAILURE", ErrorCategory.EXTERNAL_PORT,
            ErrorSeverity.CRITICAL, context,
        )
        self.port = port


class CalculationInvariantError(SkillCheckError):
    """A calculation produced a value the engine cannot represent or trust."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CALCULATION_INVARIANT_VIOLATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context,
        )
