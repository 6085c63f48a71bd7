"""
Error taxonomy for the push pipeline.

Only clone and missing-configuration errors abort a run before any external
side effect. Git errors abort remediation but still let the commit status be
reported. Notification and status errors are logged by the component that
raised them and never reach the caller.
"""


class DelintError(Exception):
    """Base class for all pipeline errors."""


class CloneError(DelintError):
    """Repository or branch is inaccessible, or the credential was rejected."""


class MissingConfigurationError(DelintError):
    """The repository has no lint configuration at its root."""


class LintProcessError(DelintError):
    """The lint process could not be started or did not finish in time.

    A lint run that exits non-zero is a normal outcome, not this error.
    """


class GitOperationError(DelintError):
    """Branch, commit or push failed (conflict, permission, network, timeout)."""


class NotificationDeliveryError(DelintError):
    """The chat platform refused or failed to deliver a message."""


class StatusReportError(DelintError):
    """GitHub did not accept the commit status."""
