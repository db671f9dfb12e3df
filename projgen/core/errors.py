# SPDX-License-Identifier: MIT
"""Custom exceptions for projgen.

All projgen exceptions inherit from ProjgenError. Configuration problems
are detected before any artifact is opened; artifact I/O failures abort
the whole generation run. Unsupported backend features are not raised,
they are collected and reported after the run.
"""

from __future__ import annotations


class ProjgenError(Exception):
    """Base class for all projgen exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(ProjgenError):
    """Invalid project description.

    Raised when a required field is missing or empty, a target references
    a module outside the source root, or the target set is inconsistent.
    """


class GenerateError(ProjgenError):
    """Error during the generate phase.

    Raised when a provider is driven out of order, e.g. a target is added
    to a workspace that was already closed.
    """


class ArtifactIOError(ProjgenError, OSError):
    """An output artifact could not be opened or written.

    Attributes:
        path: The path that could not be written.
    """

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        message = f'Could not open "{path}" for writing'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UnsupportedFeature(ProjgenError):
    """A backend was asked for something it cannot express.

    Never raised by providers; instances are collected in
    ``Provider.warnings`` so the caller can report them after the run.

    Attributes:
        provider: Name of the provider.
        feature: Short name of the unsupported feature.
        subject: What the feature was requested for (e.g. a target name).
    """

    def __init__(self, provider: str, feature: str, subject: str = "") -> None:
        self.provider = provider
        self.feature = feature
        self.subject = subject
        detail = f" for {subject!r}" if subject else ""
        super().__init__(f"{provider}: {feature} is not supported{detail}")
