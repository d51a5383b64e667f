"""
ArtifactGrouper: resolves each artifact definition, applies the continue-on-error
policy, and hands resolved artifacts to the uploader in definition order.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from artifactsets.definitions import ArtifactDefinition
from artifactsets.diagnostics import Diagnostic, error, info, warning
from artifactsets.errors import ArtifactSetsError
from artifactsets.file_resolver import PathResolver, Resolution
from artifactsets.roots import common_root
from artifactsets.uploader import Uploader, UploadOptions, UploadResult


@dataclass(frozen=True)
class ResolvedArtifact:
    name: str
    files: tuple[Path, ...]
    root_directory: Path


@dataclass
class GroupResult:
    """
    Everything one run produced. `failure` holds the fatal message when an
    artifact matched no files and continue-on-error was off; processing stopped
    there and nothing after it was uploaded.
    """

    artifacts: list[ResolvedArtifact] = field(default_factory=list)
    uploads: list[UploadResult] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    failure: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class UploadError(ArtifactSetsError):
    """The uploader raised. `result` holds what the run produced up to that point."""

    def __init__(self, artifact_name: str, result: GroupResult, cause: Exception) -> None:
        super().__init__(f'Failed to upload artifact "{artifact_name}": {cause}')
        self.artifact_name: str = artifact_name
        self.result: GroupResult = result


class ArtifactGrouper:
    """
    Resolves definitions into `ResolvedArtifact`s and uploads them.

    With `jobs > 1`, resolution runs on a bounded thread pool, but results are
    still consumed in definition order and uploads stay sequential, so a fatal
    empty artifact stops every upload that comes after it.
    """

    def __init__(
        self,
        resolver: PathResolver | None = None,
        uploader: Uploader | None = None,
        jobs: int = 1,
    ) -> None:
        self._resolver: PathResolver = resolver or PathResolver()
        self._uploader: Uploader | None = uploader
        self._jobs: int = max(1, jobs)

    def group(
        self,
        definitions: Sequence[ArtifactDefinition],
        base_directory: str | Path,
        options: UploadOptions | None = None,
    ) -> GroupResult:
        options = options or UploadOptions()
        base = Path(base_directory)
        result = GroupResult()

        if self._jobs == 1 or len(definitions) <= 1:
            for definition in definitions:
                resolution = self._resolver.resolve(base, definition.patterns)
                if not self._accept(definition, resolution, options, result):
                    break
            return result

        with ThreadPoolExecutor(max_workers=self._jobs) as pool:
            futures: list[Future[Resolution]] = [
                pool.submit(self._resolver.resolve, base, definition.patterns)
                for definition in definitions
            ]
            try:
                for definition, future in zip(definitions, futures):
                    if not self._accept(definition, future.result(), options, result):
                        break
            finally:
                for future in futures:
                    future.cancel()
        return result

    def _accept(
        self,
        definition: ArtifactDefinition,
        resolution: Resolution,
        options: UploadOptions,
        result: GroupResult,
    ) -> bool:
        """Record one resolved definition. Returns false if the run must stop."""
        name = definition.name
        result.diagnostics.extend(d.for_artifact(name) for d in resolution.diagnostics)

        if resolution.is_empty:
            message = f'Artifact "{name}": no files matched any provided path.'
            if options.continue_on_error:
                result.diagnostics.append(warning(message, artifact=name))
                return True
            result.diagnostics.append(error(message, artifact=name))
            result.failure = message
            return False

        artifact = ResolvedArtifact(
            name=name,
            files=resolution.files,
            root_directory=common_root(resolution.files),
        )
        result.artifacts.append(artifact)
        if self._uploader is None:
            return True

        result.diagnostics.append(
            info(f'Uploading artifact "{name}" with {len(artifact.files)} file(s).', artifact=name)
        )
        try:
            upload = self._uploader.upload(
                name, list(artifact.files), artifact.root_directory, options
            )
        except Exception as e:
            raise UploadError(name, result, e) from e
        result.uploads.append(upload)
        result.diagnostics.append(
            info(
                f'Uploaded artifact "{upload.artifact_name}" with '
                f"{upload.successful_items} successful item(s).",
                artifact=name,
            )
        )
        return True
