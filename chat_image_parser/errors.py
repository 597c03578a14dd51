# chat_image_parser/errors.py
"""Exception hierarchy for the image parsing pipeline.

Fatal errors (``ConfigError``, ``SetupError``) end the run. ``InteractionError``
is retried per image and ``ParseError`` is skipped per file.
"""


class ParserError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(ParserError):
    """Unknown site name or otherwise unusable configuration."""


class SetupError(ParserError):
    """The run cannot start: missing folder, no images, no browser."""


class FolderNotFound(SetupError):
    pass


class NoImagesFound(SetupError):
    pass


class BrowserUnavailable(SetupError):
    """Chrome could not be spawned or its debugging port never answered."""


class NoBrowserContext(SetupError):
    pass


class InteractionError(ParserError):
    """A selector, click or upload failed while talking to the chat page."""


class AnalysisTimeout(InteractionError):
    """The page did not reach the expected state in time."""


class ParseError(ParserError):
    """A per-image result file could not be read as JSON."""
