"""File for defining errors"""


class ChatPlayerError(Exception):
    """Base class for Chat Player errors."""


class InvalidParameter(ChatPlayerError):
    """Raised if an invalid parameter is specified."""
    pass


class TransportError(ChatPlayerError):
    """Raised when a request fails or returns an unusable response."""
    pass


class RetriesExceeded(ChatPlayerError):
    """Raised after the maximum number of retries has been reached."""
    pass


class VideoNotFound(ChatPlayerError):
    """Raised when video cannot be found."""
    pass


class ParsingError(ChatPlayerError):
    """Raised when video or chat data cannot be parsed."""
    pass


class VideoUnavailable(ChatPlayerError):
    """Raised when video is unavailable."""
    pass


class LoginRequired(ChatPlayerError):
    """Raised when video is login is required (e.g. if video is private)."""
    pass


class VideoUnplayable(ChatPlayerError):
    """Raised when video is unplayable (e.g. if video is members-only)."""
    pass


class NoChatReplay(ChatPlayerError):
    """Raised when the video does not contain a chat replay."""
    pass


class ChatDisabled(ChatPlayerError):
    """Raised when the chat is disabled."""
    pass


class URLNotProvided(ChatPlayerError):
    """Raised when no url is provided."""
    pass


class InvalidURL(ChatPlayerError):
    """Raised when the url is invalid."""
    pass


class NoContinuation(ChatPlayerError):
    """Raised when no continuation can be found."""
    pass


class CookieError(ChatPlayerError):
    """Raised when an error occurs while loading a cookie file."""
    pass
