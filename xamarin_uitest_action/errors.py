"""Errors raised by the UITest step.

Every subclass of StepError is fatal: it stops the run and marks the step as
failed. ExportFailure and ResultLogError are only ever logged as warnings.
"""


class StepError(Exception):
    """Base class for conditions that abort the whole run."""


class ConfigurationError(StepError):
    """Raised when the step inputs are invalid."""


class NotFoundError(StepError):
    """Raised when a simulator or a required tool cannot be found."""


class BuildError(StepError):
    """Raised when the solution cannot be built."""


class MissingAppBundleError(StepError):
    """Raised when a project referred by a test project produced no .app."""

    def __init__(self, project_name: str) -> None:
        super().__init__(f"No app generated for project: {project_name}")
        self.project_name = project_name


class TestRunFailedError(StepError):
    """Raised when the test runner reports a failure."""

    __test__ = False

    def __init__(self, message: str, result_log: str = "") -> None:
        super().__init__(message)
        self.result_log = result_log


class ExportFailure(Exception):
    """Raised when a value cannot be published to the pipeline."""


class ResultLogError(Exception):
    """Raised when the test result log cannot be read."""
