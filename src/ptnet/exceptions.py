"""
ptnet - Exceptions raised by the net model, the exporters and the language.

All of them inherit from PetriNetError so callers can catch the whole family.
"""


class PetriNetError(Exception):
    """Base class for all ptnet errors."""


class InvalidReferenceError(PetriNetError, KeyError):
    """A place or transition reference is not a member of the net."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class DuplicateArcError(PetriNetError):
    """The arc being added already exists."""


class InconsistentStateError(PetriNetError):
    """An arc was recorded on only one of its endpoints.

    Only a bug can produce this: the net is corrupted and must not be used.
    """


class TokenOverflowError(PetriNetError, OverflowError):
    """Adding tokens would exceed MAX_TOKENS."""


class TokenUnderflowError(PetriNetError, ValueError):
    """Removing more tokens than the place holds."""


class ExportError(PetriNetError):
    """The output sink rejected a write or the output was not valid UTF-8."""


class NetDefinitionError(PetriNetError):
    """A net description could not be parsed or compiled."""
