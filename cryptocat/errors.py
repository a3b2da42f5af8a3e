"""Error types raised and logged by the bot components."""


class CryptocatError(Exception):
    """Base class for all bot errors."""


class FetchError(CryptocatError):
    """Quote could not be fetched or parsed.

    Attributes:
        reason: Short human readable cause, safe to show to users.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class DispatchError(CryptocatError):
    """Reply to a command could not be sent."""


class PollError(CryptocatError):
    """A single poll iteration or event handling pass failed."""


class AckError(CryptocatError):
    """Callback query acknowledgment failed."""
