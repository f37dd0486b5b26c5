"""Exception hierarchy for AlphaPolymer.

All errors derive from ``AlphaPolymerError`` (itself a ``ValueError``) so
callers can catch the whole family or a single failure kind.
"""


class AlphaPolymerError(ValueError):
    """Base class for all AlphaPolymer errors."""


class ParseError(AlphaPolymerError):
    """A sequence string could not be turned into a polymer."""


class InvalidResidueError(ParseError):
    """Letter is not in the residue catalog."""

    def __init__(self, character: str, position: int = -1):
        self.character = character
        self.position = position
        if position >= 0:
            message = (
                f"Amino acid letter '{character}' at position {position} "
                f"does not exist in the residue catalog"
            )
        else:
            message = f"Amino acid letter '{character}' does not exist in the residue catalog"
        super().__init__(message)


class UnterminatedModificationError(ParseError):
    """A '[' was opened but never closed."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(
            f"Couldn't find the closing ] for the modification opened at position {position}"
        )


class UnresolvedModificationError(ParseError):
    """Bracket content matched no known interpretation."""

    def __init__(self, token: str, position: int):
        self.token = token
        self.position = position
        super().__init__(
            f"Unable to parse the modification '{token}' at position {position}: "
            f"not a heavy marker, known name, chemical formula or mass"
        )


class PositionOutOfRangeError(AlphaPolymerError, IndexError):
    """Residue position or sub-range start outside the valid range."""

    def __init__(self, position: int, lower: int, upper: int):
        self.position = position
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"Position not in the correct range: [{lower}-{upper}] you specified: {position}"
        )


class InvalidArgumentError(AlphaPolymerError):
    """Caller contract violation (negative budgets, unknown names, ...)."""
