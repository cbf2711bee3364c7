from .. import config
from .base import DocumentSource
from .http_source import HttpDocumentSource
from .local_source import LocalDocumentSource


def default_source() -> DocumentSource:
    """HTTP when SOURCE_BASE_URL is set, otherwise the local data directory."""
    if config.SOURCE_BASE_URL:
        return HttpDocumentSource()
    return LocalDocumentSource()
