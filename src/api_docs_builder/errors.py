"""Exception hierarchy for api-docs-builder.

Every exception carries an ``exit_code`` used by the CLI when it aborts.
"""

EXIT_FAILURE = 1
EXIT_USAGE = 2


class ApiDocsError(Exception):
    """Base exception for all build errors."""

    exit_code: int = EXIT_FAILURE


class ConfigError(ApiDocsError):
    """Raised when the site configuration cannot be read or is invalid."""


class InputError(ApiDocsError):
    """Raised when an endpoint data file cannot be read or parsed."""


class DescriptionConflictError(ApiDocsError):
    """Two input files gave different non-empty descriptions for one group or subgroup."""

    def __init__(self, group: str, existing: str, incoming: str, subgroup: str | None = None):
        self.group = group
        self.subgroup = subgroup
        self.existing = existing
        self.incoming = incoming
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.subgroup is None:
            header = f'Conflicting group descriptions for "{self.group}":'
        else:
            header = f'Conflicting subgroup descriptions for "{self.subgroup}" in group "{self.group}":'
        return (
            f"{header}\n"
            f"  Existing: {self.existing!r}\n"
            f"  New:      {self.incoming!r}\n"
            "Fix: Use the same description in all controllers, or leave all but one blank."
        )
