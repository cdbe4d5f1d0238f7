# SPDX-License-Identifier: MIT
"""Custom exceptions for unibuild.

All unibuild exceptions inherit from UnibuildError, which includes
optional source location information for better error messages.
None of these errors are transient: retrying with the same inputs
raises the same error again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unibuild.util.source_location import SourceLocation


class UnibuildError(Exception):
    """Base class for all unibuild exceptions.

    Attributes:
        message: The error message.
        location: Optional source location where the error occurred.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class ConfigurationError(UnibuildError):
    """Invalid or unsatisfiable build configuration.

    Raised for unsupported platform/architecture pairings, empty
    architecture lists and versions that have neither an explicit
    value nor a registered default. Always fatal to the target.

    Attributes:
        field: The configuration field at fault (e.g. "xcode_version").
        reason: The message without the field prefix.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        location: SourceLocation | None = None,
    ) -> None:
        self.field = field
        self.reason = message
        if field:
            message = f"{field}: {message}"
        super().__init__(message, location)


class VariableNotFoundError(UnibuildError, LookupError):
    """A build variable is not defined on an action.

    Distinct from a variable that resolved to the empty string.

    Attributes:
        variable: The name that was looked up.
    """

    def __init__(
        self,
        variable: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.variable = variable
        super().__init__(f"no build variable named {variable!r}", location)


class SubstitutionError(UnibuildError):
    """Error during command template substitution."""


class MissingVariableError(SubstitutionError):
    """Referenced variable does not exist.

    Attributes:
        variable: The name of the missing variable.
    """

    def __init__(
        self,
        variable: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.variable = variable
        super().__init__(f"undefined variable: ${variable}", location)


class GraphError(UnibuildError):
    """Structural error in the action graph (e.g. two generators for one artifact)."""
