import logging
import traceback


class PageError(Exception):
    """Base class for page storage errors"""


class PageNotFound(PageError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Page not found: {slug}")


class PageValidationError(PageError):
    """Submitted fields do not form a valid page"""


class PageReadError(PageError):
    """Stored page exists but cannot be read or parsed"""

    def __init__(self, slug: str, reason: str):
        self.slug = slug
        super().__init__(f"Failed to read page {slug}: {reason}")


class UploadError(PageError):
    """Uploaded file could not be written"""


def handle_exception(
    e: Exception,
    message: str = "An error occurred",
    source: str = "app",
):
    """
    Log an exception with its location and full traceback
    Args:
        e: The exception
        message: Custom error message
        source: Source of the error (store/web)
    """
    # Get full traceback
    error_traceback = "".join(traceback.format_tb(e.__traceback__))

    # Get original error location (for brief display)
    frames = traceback.extract_tb(e.__traceback__)
    if frames:
        tb = frames[-1]
        error_location = f'File "{tb.filename}", line {tb.lineno}, in {tb.name}'
    else:
        error_location = "unknown"

    error_message = (
        f"{message}: {str(e)}\n"
        f"Location: {error_location}\n"
        f"Full traceback:\n{error_traceback}"
    )

    extra = {"source": source}
    logging.error(error_message, extra=extra)
