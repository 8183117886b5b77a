class AppError(Exception):
    status_code: int = 500

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """The requested URL does not look like an image."""

    status_code = 400


class FetchError(AppError):
    """Downloading or saving the upstream image failed."""

    def __init__(self, detail: str, upstream_status: int | None = None) -> None:
        super().__init__(detail)
        self.upstream_status = upstream_status


class RenderError(AppError):
    """The image could not be decoded or rendered."""
