# Errors raised by cifpy.
#


class CIFPError(Exception):
    pass


class FormatViolation(CIFPError):
    """
    A fixed column does not hold what the record format expects.
    The offending line is dropped by the caller.
    """

    def __init__(self, column: int, message: str | None = None):
        self.column = column
        CIFPError.__init__(self, message if message is not None else f"Invalid record format; failed on character {column}.")


class ResolutionError(CIFPError):
    """
    A name cannot be resolved to a single fix or navaid.
    """
    pass


class UnresolvedGeometryError(ResolutionError):
    """
    Geometry was requested from a leg part that is not anchored yet.
    """
    pass


class RestrictionViolation(CIFPError):
    pass
