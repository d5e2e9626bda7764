class IngestionError(Exception):
    """Base class for errors raised by the ingestion pipeline."""


class ManifestError(IngestionError):
    """The route manifest is missing or cannot be read."""


class PageFetchError(IngestionError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url} ({reason})")
        self.url = url
        self.reason = reason
