"""Platform error classification.

Service managers report failures as bare integer codes: sc.exe exits with a
Win32 error code, systemctl follows the LSB init-script exit codes, and
launchctl returns its own small set. The classifiers here turn those codes
into operator-readable text.

Example:
    from svcdeploy.errors import describe_error

    describe_error(1060)
    # 'The specified service does not exist as an installed service.'
"""

from dataclasses import dataclass

# Code used for failures that did not come from a platform command.
UNCLASSIFIED_CODE = -1

WIN32_ERRORS: dict[int, str] = {
    0: "The operation completed successfully.",
    2: "The system cannot find the file specified.",
    5: "Access is denied.",
    6: "The handle is invalid.",
    87: "The parameter is incorrect.",
    123: "The filename, directory name, or volume label syntax is incorrect.",
    1051: "A stop control has been sent to a service that other running services are dependent on.",
    1052: "The requested control is not valid for this service.",
    1053: "The service did not respond to the start or control request in a timely fashion.",
    1054: "A thread could not be created for the service.",
    1055: "The service database is locked.",
    1056: "An instance of the service is already running.",
    1057: "The account name is invalid or does not exist, or the password is invalid for the account name specified.",
    1058: "The service cannot be started, either because it is disabled or because it has no enabled devices associated with it.",
    1059: "Circular service dependency was specified.",
    1060: "The specified service does not exist as an installed service.",
    1061: "The service cannot accept control messages at this time.",
    1062: "The service has not been started.",
    1063: "The service process could not connect to the service controller.",
    1064: "An exception occurred in the service when handling the control request.",
    1065: "The database specified does not exist.",
    1066: "The service has returned a service-specific error code.",
    1067: "The process terminated unexpectedly.",
    1068: "The dependency service or group failed to start.",
    1069: "The service did not start due to a logon failure.",
    1070: "After starting, the service hung in a start-pending state.",
    1072: "The specified service has been marked for deletion.",
    1073: "The specified service already exists.",
    1078: "The name is already in use as either a service name or a service display name.",
    1115: "A system shutdown is in progress.",
}

# systemctl exit statuses (LSB init-script action codes)
LSB_EXIT_CODES: dict[int, str] = {
    0: "Success.",
    1: "Generic or unspecified error.",
    2: "Invalid or excess arguments.",
    3: "Unimplemented feature.",
    4: "Insufficient privilege.",
    5: "Program is not installed.",
    6: "Program is not configured.",
    7: "Program is not running.",
}

LAUNCHCTL_ERRORS: dict[int, str] = {
    0: "Success.",
    1: "Operation not permitted.",
    3: "No such process.",
    5: "Input/output error.",
    17: "File exists.",
    37: "Operation already in progress.",
    113: "Could not find specified service.",
    125: "Domain does not support specified action.",
}


@dataclass(frozen=True)
class ErrorRecord:
    """A raw platform error code paired with its description."""

    raw_code: int
    message: str


class ErrorClassifier:
    """Lookup table from platform error codes to descriptions.

    Unknown codes never raise; they map to a generic fallback.
    """

    def __init__(self, platform: str, table: dict[int, str]):
        self.platform = platform
        self._table = table

    def describe(self, raw_code: int) -> str:
        """Get the human-readable description for a raw code."""
        message = self._table.get(raw_code)
        if message is None:
            return f"Unknown error (code {raw_code})"
        return message

    def classify(self, raw_code: int) -> ErrorRecord:
        """Build an ErrorRecord for a raw code."""
        return ErrorRecord(raw_code=raw_code, message=self.describe(raw_code))


_CLASSIFIERS = {
    "win32": ErrorClassifier("win32", WIN32_ERRORS),
    "lsb": ErrorClassifier("lsb", LSB_EXIT_CODES),
    "launchd": ErrorClassifier("launchd", LAUNCHCTL_ERRORS),
}


def get_classifier(platform: str) -> ErrorClassifier:
    """Get the classifier for a platform family.

    Args:
        platform: One of 'win32', 'lsb', 'launchd'.

    Raises:
        ValueError: If the platform family is unknown.
    """
    if platform not in _CLASSIFIERS:
        raise ValueError(
            f"Unknown error platform: {platform}. Available: {list(_CLASSIFIERS)}"
        )
    return _CLASSIFIERS[platform]


def describe_error(raw_code: int, platform: str = "win32") -> str:
    """Describe a raw platform error code."""
    return get_classifier(platform).describe(raw_code)


class ServiceError(Exception):
    """A service primitive failed with a platform error code."""

    def __init__(self, operation: str, record: ErrorRecord):
        self.operation = operation
        self.record = record
        super().__init__(
            f"{operation} failed: {record.message} (error {record.raw_code})"
        )

    @classmethod
    def from_code(
        cls, operation: str, raw_code: int, classifier: ErrorClassifier
    ) -> "ServiceError":
        """Create an error from a raw code using the given classifier."""
        return cls(operation, classifier.classify(raw_code))
