from __future__ import annotations


class RouletteError(Exception):
    """Base class for every error the roulette reports to its caller."""

    status_code: int = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.__class__.__name__)
        self.message = str(self.args[0])


class ValidationError(RouletteError):
    """Malformed request body."""

    status_code = 400


class StoreUnavailable(RouletteError):
    """Backing store read/write failure."""

    status_code = 503


class InsufficientOptions(RouletteError):
    """Not enough options! Add at least two active, available restaurants."""

    status_code = 409


class RestaurantNotFound(RouletteError):
    """Restaurant not found."""

    status_code = 404


class NotActivator(RouletteError):
    """Only the activator can make changes."""

    status_code = 403


class NotUnlocked(RouletteError):
    """The roulette is locked. Enter the secret code to activate."""

    status_code = 403


class IncorrectCode(RouletteError):
    """The secret code is not correct. Please try again."""

    status_code = 401
