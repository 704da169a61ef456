"""Errors of DID and DID URL parsing."""

from typing import Optional


class NotADIDError(ValueError):
    """Input does not carry the "did:" scheme."""

    def __init__(self) -> None:
        super().__init__("not a DID")


class DIDSyntaxError(ValueError):
    """
    Exception raised when a DID or DID URL does not conform to its syntax.

    The error carries enough to render a byte-indexed diagnostic without
    scanning the input again.

    Attributes:
        input: The original input as provided to the parser
        offset: Index in input of the first illegal character, len(input) for
            an unexpected end of input, or None when undefined
        cause: Optional underlying error, such as NotADIDError
    """

    def __init__(
        self, input: str, offset: Optional[int], cause: Optional[Exception] = None
    ) -> None:
        super().__init__(input, offset)
        self.input = input
        self.offset = offset
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def incomplete(self) -> bool:
        """Whether the input ended before the syntax was satisfied."""
        return self.offset is not None and self.offset >= len(self.input)

    def __str__(self) -> str:
        s, i = self.input, self.offset
        if self.cause is not None:
            return f"invalid DID: {self.cause}"
        if i is None or i < 0:
            return "invalid DID"
        if i >= len(s):
            return "incomplete DID"
        if s[i] == "%":
            if len(s) - i < 3:
                return "incomplete DID percent-encoding"
            return f"illegal DID percent-encoding digits {s[i + 1:i + 3]!r}"
        return f"illegal character {s[i]!r} at DID byte {i + 1}"
