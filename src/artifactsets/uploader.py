"""
Uploader interface and a local zip-archive implementation.

The grouper hands every resolved artifact to an `Uploader`. The only
implementation shipped here packages each artifact into `<output_dir>/<name>.zip`,
storing files under their path relative to the artifact's root directory.
"""

from __future__ import annotations

import zipfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from strif import atomic_output_file

from artifactsets.definitions import invalid_name_chars

DEFAULT_COMPRESSION_LEVEL = 6


@dataclass(frozen=True)
class UploadOptions:
    continue_on_error: bool = False
    compression_level: int | None = None


@dataclass(frozen=True)
class UploadResult:
    artifact_name: str
    successful_items: int


class Uploader(Protocol):
    def upload(
        self,
        artifact_name: str,
        files: Sequence[Path],
        root_directory: Path,
        options: UploadOptions,
    ) -> UploadResult: ...


def check_artifact_name(name: str) -> None:
    """Raise `ValueError` if `name` can't be used as an artifact name."""
    bad = invalid_name_chars(name)
    if bad:
        raise ValueError(
            f"Artifact name {name!r} contains invalid characters: {' '.join(repr(c) for c in bad)}"
        )


class ZipArchiveUploader:
    """Writes each artifact as a zip archive in `output_dir`, atomically."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir: Path = output_dir

    def archive_path(self, artifact_name: str) -> Path:
        return self.output_dir / f"{artifact_name}.zip"

    def upload(
        self,
        artifact_name: str,
        files: Sequence[Path],
        root_directory: Path,
        options: UploadOptions,
    ) -> UploadResult:
        """
        Archive `files` under their paths relative to `root_directory`. Level 0
        stores without compression. A file that can't be read is skipped when
        `options.continue_on_error` is set; otherwise the `OSError` propagates and
        no archive is written.
        """
        check_artifact_name(artifact_name)
        level = options.compression_level
        if level is None:
            level = DEFAULT_COMPRESSION_LEVEL
        compression = zipfile.ZIP_STORED if level == 0 else zipfile.ZIP_DEFLATED

        successful = 0
        with atomic_output_file(self.archive_path(artifact_name), make_parents=True) as temp_path:
            with zipfile.ZipFile(
                Path(temp_path), "w", compression=compression, compresslevel=level
            ) as archive:
                for path in files:
                    arcname = Path(path).relative_to(root_directory).as_posix()
                    try:
                        archive.write(path, arcname)
                    except OSError:
                        if not options.continue_on_error:
                            raise
                        continue
                    successful += 1

        return UploadResult(artifact_name=artifact_name, successful_items=successful)
