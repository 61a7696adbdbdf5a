"""Custom exceptions for configuration management."""

from typing import List, Optional

from pydantic import ValidationError


class ConfigurationError(Exception):
    """
    Exception raised when configuration validation fails.

    Carries the individual problems found plus hints for the administrator,
    so a rejected option update can be reported in one readable message.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of suggestions to fix the errors
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    @classmethod
    def from_validation_errors(
        cls,
        message: str,
        validation_errors: List[ValidationError],
        suggestions: Optional[List[str]] = None,
    ) -> "ConfigurationError":
        """Build one error out of the problems of several pydantic validations.

        Args:
            message: Primary error message
            validation_errors: Failed validations, reported in order
            suggestions: Hints for fixing the configuration

        Returns:
            ConfigurationError listing every problem as `field -> path: reason`
        """
        errors = []
        for validation_error in validation_errors:
            errors.extend(describe_validation_error(validation_error))
        return cls(message, errors=errors, suggestions=suggestions)

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)


def describe_validation_error(error: ValidationError) -> List[str]:
    """One readable line per problem in a pydantic ValidationError."""
    lines = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"])
        error_type = item["type"]

        if error_type == "missing":
            lines.append(f"Missing required field: {field_path}")
        elif error_type in ("string_type", "int_type", "bool_type", "dict_type"):
            expected_type = error_type.replace("_type", "")
            lines.append(
                f"Invalid type for '{field_path}': expected {expected_type}, got {item.get('input')}"
            )
        elif "enum" in error_type:
            lines.append(f"Invalid value for '{field_path}': {item['msg']}")
        elif field_path:
            lines.append(f"{field_path}: {item['msg']}")
        else:
            lines.append(item["msg"])
    return lines
