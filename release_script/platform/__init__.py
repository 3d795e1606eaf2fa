"""Platform abstraction layer."""

from .files import atomic_write_text, clear_directory, copy_tree_contents, remove_path
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .process import Command, ProcessError, run

__all__ = [
    # files
    "atomic_write_text",
    "clear_directory",
    "copy_tree_contents",
    "remove_path",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # process
    "Command",
    "ProcessError",
    "run",
]
