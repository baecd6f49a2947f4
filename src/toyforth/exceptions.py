"""Top level ToyForth exceptions"""

from typing import NamedTuple, Optional


class SourceLocation(NamedTuple):
    """Where in the input a failing token was"""

    filename: str
    lineno: int
    line: str
    column: int


class ForthError(Exception):
    """Base for all ToyForth errors"""

    location: Optional[SourceLocation] = None

    def at(self, location: SourceLocation) -> "ForthError":
        """Attach location, unless a more precise one is already known"""
        if self.location is None:
            self.location = location
        return self

    def headline(self) -> str:
        """The message, prefixed by the error kind for subclasses"""
        if type(self) in (UserResolvableError, UnexpectedError):
            return self.msg
        return f"{self.__doc__}: {self.msg}"


class UserResolvableError(ForthError):
    """An error which the user can probably solve"""

    def __init__(self, msg, suggested_fix=""):
        self.msg = msg
        self.suggested_fix = suggested_fix

    def __str__(self):
        if not self.suggested_fix:
            return self.headline()
        return f"{self.headline()}\n\n{self.suggested_fix}"


class UnexpectedError(ForthError):
    """An error which is unexpected and with no obvious solution"""

    def __init__(self, msg):
        self.msg = msg

    def __str__(self):
        return self.headline()
