"""Tracking of files uploaded to the backend, with upload and download helpers."""

from __future__ import annotations

import os
from pathlib import Path

from krillin.client import SubtitleClient
from krillin.config import Config, ServerConfig


def _default_client() -> SubtitleClient:
    return SubtitleClient(Config(server=ServerConfig(host="localhost", port=8888)))


class FileManager:
    """Keeps the server-side paths of uploaded files in upload order."""

    def __init__(self, client: SubtitleClient | None = None) -> None:
        self.client = client or _default_client()
        self.files: list[str] = []

    def upload(self, path: str | os.PathLike[str]) -> str:
        """Upload one file, remember its server path and return it.

        Raises ApiError if the upload fails or the server reports an error.
        """
        remote = self.client.upload_file(path)
        self.files.append(remote)
        return remote

    def upload_many(self, paths: list[str | os.PathLike[str]]) -> list[str]:
        """Upload several files in one request and remember their server paths."""
        remote = self.client.upload_files(list(paths))
        self.files.extend(remote)
        return remote

    def file_count(self) -> int:
        """Return how many uploaded files are known."""
        return len(self.files)

    def file_name(self, index: int) -> str:
        """Return the base name of the file at index, or "" if there is none."""
        if not 0 <= index < len(self.files):
            return ""
        return os.path.basename(self.files[index])

    def download(self, index: int, dest: str | os.PathLike[str]) -> Path | None:
        """Download the file at index to dest; return None if index is out of range."""
        if not 0 <= index < len(self.files):
            return None
        return self.client.download(self.files[index], dest)