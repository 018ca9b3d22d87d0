"""Custom exceptions for snipcut."""


class SnipcutError(Exception):
    """Base exception for snipcut."""

    pass


class InvalidDeletionError(SnipcutError, ValueError):
    """A deletion request was rejected at the EDL boundary.

    Raised for malformed intervals (end before start), negative durations
    and clip indices that do not exist.
    """

    pass


class FFmpegError(SnipcutError):
    """FFmpeg execution failed."""

    pass


class SilenceDetectionError(SnipcutError):
    """Amplitude-based silence detection failed or produced unusable output."""

    pass


class TranscriptionError(SnipcutError):
    """Transcription failed."""

    pass


class PipelineError(SnipcutError):
    """Pipeline execution failed."""

    pass
