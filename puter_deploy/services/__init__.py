"""Services for puter_deploy."""
from .api_client import PuterClient
from .filesystem import PuterFileSystem
from .hosting import PuterHosting

__all__ = [
    "PuterClient",
    "PuterFileSystem",
    "PuterHosting",
]
