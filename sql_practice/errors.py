class PracticeError(RuntimeError):
    """Base class for lifecycle failures that the caller has to handle."""


class InitializationError(PracticeError):
    """A store could not be opened or its schema/seed scripts failed to apply."""


class ScriptNotFoundError(InitializationError, FileNotFoundError):
    pass


class ResetError(PracticeError):
    """The practice store could not be rebuilt, even after one retry."""


class NotInitializedError(PracticeError):
    """A handle was requested before open() completed."""


class StoreBusyError(PracticeError):
    """The handle is exclusively held by a running statement or a reset."""


class ConnectionReplacedError(PracticeError):
    """The connection a statement was submitted against has since been replaced."""
