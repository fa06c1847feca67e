"""Custom exceptions for sectionist services.

These signal programming-contract violations and storage failures. Ordinary
invalid user input is never reported through exceptions; see
``sectionist.models.results.FailureReason``.
"""


class InvariantViolationError(Exception):
    """Raised when the container/paragraph collections break an invariant.

    Reaching this means a bug in the caller or a corrupted state file,
    never a user mistake.

    Attributes:
        invariant: Short name of the broken rule (e.g. "unique_paragraph_order")
        message: Human-readable error message
    """

    def __init__(self, invariant: str, message: str):
        """Initialize InvariantViolationError.

        Args:
            invariant: Short name of the broken rule
            message: Human-readable error message
        """
        self.invariant = invariant
        self.message = message
        super().__init__(f"{invariant}: {message}")


class FileModifiedError(Exception):
    """Raised when a file is modified during an atomic write operation.

    This exception indicates that the file changed between the initial
    read and the final write, which could lead to data loss if the write
    were to proceed.

    Attributes:
        path: Path to the file that was modified
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str = "File was modified during write operation"):
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class StateFileError(Exception):
    """Raised when the editor state file cannot be parsed."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")
