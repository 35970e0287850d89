from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AIErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"        # connection refused, DNS, ...
    TIMEOUT = "timeout"
    AUTH = "auth"                      # invalid / missing key rejected by provider
    QUOTA = "quota"                    # rate limited or quota exhausted
    PROVIDER_ERROR = "provider_error"  # provider reported an error or blocked the prompt
    MALFORMED = "malformed"            # response did not have the expected shape


class ExtractErrorKind(str, Enum):
    MALFORMED_RESPONSE = "malformed_response"
    NO_VALID_DIAGRAMS = "no_valid_diagrams"


class RenderErrorKind(str, Enum):
    INVALID_REFERENCE = "invalid_reference"


class PipelineError(Exception):
    """
    Base class for every failure the pipeline reports to its caller.

    `kind` is machine-readable, `message` is meant for humans.
    """

    kind: str = "pipeline_error"
    status_code: int = 500

    def __init__(self, message: str, kind: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind.value if isinstance(kind, Enum) else kind

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class InputValidationError(PipelineError):
    """Bad or missing caller input. Rejected before any backend call."""

    kind = "validation_error"
    status_code = 400


class AIError(PipelineError):
    kind = AIErrorKind.PROVIDER_ERROR.value

    def __init__(self, message: str, kind: AIErrorKind = AIErrorKind.PROVIDER_ERROR):
        super().__init__(message, kind)


class AIConfigurationError(PipelineError):
    """Programmer / deployment error: unknown provider, missing API key."""

    kind = "configuration_error"


class ExtractError(PipelineError):
    kind = ExtractErrorKind.MALFORMED_RESPONSE.value

    def __init__(self, message: str, kind: ExtractErrorKind = ExtractErrorKind.MALFORMED_RESPONSE):
        super().__init__(message, kind)


class RenderError(PipelineError):
    kind = RenderErrorKind.INVALID_REFERENCE.value

    def __init__(
        self,
        message: str,
        kind: RenderErrorKind = RenderErrorKind.INVALID_REFERENCE,
        diagram_title: Optional[str] = None,
    ):
        super().__init__(message, kind)
        self.diagram_title = diagram_title


class ValidationSeverity(Enum):
    ERROR = "error"      # diagram is unusable and gets dropped
    WARNING = "warning"  # renders, but probably not what the article meant
    INFO = "info"        # worth knowing, rendered as-is


@dataclass
class ValidationIssue:
    """A single problem found in one candidate diagram"""
    severity: ValidationSeverity
    code: str           # machine-readable issue code
    message: str        # human-readable description
    node_id: Optional[str] = None
    edge_info: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "edge_info": self.edge_info,
            "suggestion": self.suggestion,
        }
