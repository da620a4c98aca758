"""
Sources of release data: the GitHub release client and file sources over
release archives or local game directories.
"""

from .files import (
    DirectoryFileSource,
    FileSource,
    SourceFile,
    ZipFileSource,
    compile_pattern,
    match_path,
)
from .releases import DEFAULT_API_URL, DEFAULT_REPOSITORY, ReleaseClient

__all__ = [
    "DirectoryFileSource",
    "FileSource",
    "SourceFile",
    "ZipFileSource",
    "compile_pattern",
    "match_path",
    "DEFAULT_API_URL",
    "DEFAULT_REPOSITORY",
    "ReleaseClient",
]
