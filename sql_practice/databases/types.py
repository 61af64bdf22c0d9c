from enum import Enum


class StoreKind(Enum):
    """
    Enumeration of the two stores managed by the lifecycle manager.
    """
    MAIN = "main"
    PRACTICE = "practice"
