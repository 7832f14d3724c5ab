"""Custom exceptions for the reliefstl package."""


class ReliefError(Exception):
    """Base exception for reliefstl package."""

    pass


class InvalidArgumentError(ReliefError, ValueError):
    """Missing input or out-of-range parameter."""

    pass


class ModelIOError(ReliefError, OSError):
    """Open, read, write or short-transfer failure."""

    pass


class ModelMemoryError(ReliefError, MemoryError):
    """Facet or sample storage could not be allocated."""

    pass


class UnsupportedFormatError(ReliefError):
    """Input is the ASCII variant of STL, which is not supported."""

    pass


class TruncatedInputError(ReliefError):
    """Fewer bytes available than a field of the binary layout requires."""

    pass


class ConflictError(ReliefError, FileExistsError):
    """Output path already exists."""

    pass


class MeshGenerationError(ReliefError):
    """Mesh generation produced an inconsistent model.

    Raised when the number of triangles written differs from the number
    preallocated. This is a program defect, not a retryable condition.
    """

    pass
