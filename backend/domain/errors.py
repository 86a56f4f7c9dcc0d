"""Exception hierarchy shared by the store, services and API layer."""


class LandmarkBrowserError(Exception):
    """Base class for landmark browser errors."""

    pass


class ValidationError(LandmarkBrowserError):
    """Malformed request parameters or landmark fields (HTTP 400)."""

    pass


class NotFoundError(LandmarkBrowserError):
    """Unknown landmark id (HTTP 404)."""

    pass


class UpstreamError(LandmarkBrowserError):
    """Provider returned a non-success response or the request failed (HTTP 500)."""

    def __init__(self, message: str, provider: str = "", status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class BackgroundEnrichmentError(LandmarkBrowserError):
    """A backfill step failed. Logged and dropped, never surfaced to clients."""

    def __init__(self, landmark_id: int, title: str, cause: Exception):
        super().__init__(f"Background update failed for {title!r} (id={landmark_id}): {cause}")
        self.landmark_id = landmark_id
        self.title = title
        self.cause = cause
