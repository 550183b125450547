"""
Multiverse Lens Exception Hierarchy

Structured exception types shared by the search engine, the extraction
engine and the content flows. All project errors inherit from LensError.

Usage:
    from src.exceptions import UpstreamCallFailure

    try:
        text = await generator.generate(TemplateName.QUERY_EXPANSION, {"query": q})
    except UpstreamCallFailure as e:
        logger.error(f"Generation failed: {e}")
"""

from __future__ import annotations


class LensError(Exception):
    """
    Base exception for all Multiverse Lens errors.

    Attributes:
        message: Human-readable error description
        code: Optional machine-readable error code for programmatic handling
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(LensError):
    """Base class for configuration-related errors."""

    pass


class TemplateConfigError(ConfigurationError):
    """A generation template failed validation at load time."""

    def __init__(self, template: str, reason: str) -> None:
        super().__init__(
            f"Invalid generation template '{template}': {reason}",
            code="CONFIG_INVALID",
        )
        self.template = template
        self.reason = reason


# =============================================================================
# Upstream Errors
# =============================================================================


class UpstreamCallFailure(LensError):
    """A generation, embedding, datastore or knowledge-graph call was unreachable or rejected."""

    def __init__(self, service: str, reason: str) -> None:
        super().__init__(
            f"Upstream call to {service} failed: {reason}",
            code="UPSTREAM_CALL",
        )
        self.service = service
        self.reason = reason


class ExtractionFailure(LensError):
    """An embedding response carried no locatable numeric array."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Could not extract embedding values: {reason}",
            code="EMBEDDING_EXTRACTION",
        )
        self.reason = reason


class EntityNotFoundError(LensError):
    """The knowledge graph has no record for the requested id."""

    def __init__(self, variant: str, entity_id: int) -> None:
        super().__init__(
            f"{variant.capitalize()} with id {entity_id} not found",
            code="ENTITY_NOT_FOUND",
        )
        self.variant = variant
        self.entity_id = entity_id


# =============================================================================
# Data Integrity Errors
# =============================================================================


class DimensionMismatchError(LensError):
    """A vector of the wrong length was offered to the vector datastore."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Embedding has {actual} dimensions, datastore requires {expected}",
            code="DIMENSION_MISMATCH",
        )
        self.expected = expected
        self.actual = actual


class EvaluationIntegrityError(LensError):
    """An evaluation record carries a missing or non-boolean check field."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(
            f"Evaluation check '{field}' must be a boolean, got {type(value).__name__}",
            code="EVALUATION_INTEGRITY",
        )
        self.field = field
        self.value = value


# =============================================================================
# Boundary Errors
# =============================================================================


class MissingRequiredInput(LensError):
    """A caller omitted a required identifier or parameter."""

    def __init__(self, parameter: str, hint: str | None = None) -> None:
        message = f"Missing required parameter: '{parameter}'"
        if hint:
            message += f". {hint}"
        super().__init__(message, code="MISSING_INPUT")
        self.parameter = parameter


def require_text(value: str | None, parameter: str) -> str:
    """Return the stripped value or raise MissingRequiredInput when it is blank."""
    if value is None or not value.strip():
        raise MissingRequiredInput(parameter, f"{parameter} must be a non-empty string")
    return value.strip()


def require_id(value: int | str | None, parameter: str) -> int:
    """Return the value as a positive integer id or raise MissingRequiredInput."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingRequiredInput(parameter)
    try:
        entity_id = int(value)
    except (TypeError, ValueError):
        raise MissingRequiredInput(parameter, f"{parameter} must be an integer id") from None
    if entity_id < 1:
        raise MissingRequiredInput(parameter, f"{parameter} must be a positive integer id")
    return entity_id
