#!/usr/bin/env python3
"""
artifactsets: Group files into named, deduplicated artifact archives

Common usage:
  artifactsets --config artifacts.json
  artifactsets --config artifacts.json --continue-on-error
  artifactsets --config artifacts.json --list-files

The config file is a JSON array of {"name": ..., "path": ...} objects, where
"path" is a path, directory, or glob pattern, or a list of them. Relative paths
are resolved against the workspace ($GITHUB_WORKSPACE or the current directory).
"""

from __future__ import annotations

import argparse
import importlib.metadata
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from artifactsets.config import (
    check_compression_level,
    check_jobs,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from artifactsets.definitions import load_definitions_file
from artifactsets.diagnostics import print_diagnostics
from artifactsets.errors import ConfigError
from artifactsets.file_resolver import FileResolverConfig, PathResolver
from artifactsets.grouper import ArtifactGrouper, GroupResult, UploadError
from artifactsets.uploader import UploadOptions, ZipArchiveUploader

DEFAULT_OUTPUT_DIR = ".artifactsets"


@dataclass
class Options:
    """Command-line options for the artifactsets tool."""

    config: str | None
    workspace: str
    continue_on_error: bool
    compression_level: int | None
    output_dir: str
    jobs: int
    exclude: list[str]
    respect_ignore_file: bool
    list_files: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)` where `explicit_flags` tracks which
    options the user actually passed (for settings file merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="JSON file listing the artifacts to build (relative to the workspace)",
    )
    parser.add_argument(
        "-w",
        "--workspace",
        type=str,
        default=os.environ.get("GITHUB_WORKSPACE") or os.getcwd(),
        help="Base directory for relative paths (default: $GITHUB_WORKSPACE or the "
        "current directory)",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        dest="continue_on_error",
        help="Skip artifacts that match no files with a warning instead of failing",
    )
    parser.add_argument(
        "--compression-level",
        type=int,
        default=None,
        dest="compression_level",
        metavar="N",
        help="Zip compression level from 0 (store) to 9 (default: 6)",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        dest="output_dir",
        metavar="DIR",
        help="Directory for the artifact archives, relative to the workspace "
        "(default: %(default)s)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        metavar="N",
        help="Resolve up to N artifacts in parallel (default: %(default)s)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Drop resolved files matching this gitignore-style pattern. Can be repeated",
    )
    parser.add_argument(
        "--no-respect-ignore-file",
        action="store_true",
        dest="no_respect_ignore_file",
        help="Do not read .artifactsetsignore files",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print each artifact's resolved files (name, root, file) without archiving",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied,
    # even when the user passes the default value.
    _SENTINEL = object()
    _tracked_flags: dict[str, str] = {
        # argparse dest name -> Options field name
        "continue_on_error": "continue_on_error",
        "compression_level": "compression_level",
        "output_dir": "output_dir",
        "jobs": "jobs",
        "exclude": "exclude",
        "no_respect_ignore_file": "respect_ignore_file",
    }
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument(
        "--continue-on-error", dest="continue_on_error", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--compression-level", dest="compression_level", type=int, default=_SENTINEL
    )
    sentinel_parser.add_argument("-o", "--output-dir", dest="output_dir", default=_SENTINEL)
    sentinel_parser.add_argument("-j", "--jobs", type=int, default=_SENTINEL)
    sentinel_parser.add_argument("--exclude", action="append", default=None)
    sentinel_parser.add_argument(
        "--no-respect-ignore-file",
        dest="no_respect_ignore_file",
        action="store_true",
        default=_SENTINEL,
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for dest_name, field_name in _tracked_flags.items():
        val = getattr(sentinel_opts, dest_name, _SENTINEL)
        # For append actions, None means not supplied; a list means supplied
        if dest_name == "exclude":
            if val is not None:
                explicit_flags.add(field_name)
        elif val is not _SENTINEL:
            explicit_flags.add(field_name)

    return (
        Options(
            config=opts.config,
            workspace=opts.workspace,
            continue_on_error=opts.continue_on_error,
            compression_level=opts.compression_level,
            output_dir=opts.output_dir,
            jobs=opts.jobs,
            exclude=opts.exclude,
            respect_ignore_file=not opts.no_respect_ignore_file,
            list_files=opts.list_files,
            version=opts.version,
        ),
        explicit_flags,
    )


def _print_file_listing(result: GroupResult) -> None:
    for artifact in result.artifacts:
        for path in artifact.files:
            print(f"{artifact.name}\t{artifact.root_directory}\t{path}")


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the artifactsets CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code: 0 for success (including artifacts skipped under
        --continue-on-error), 1 for configuration errors or an artifact that
        matched no files, 2 if writing an archive failed.
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("artifactsets")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.config:
        print(
            "Error: No config specified. Use --config to name a JSON file of artifact"
            " definitions. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    workspace = Path(options.workspace).absolute()

    try:
        settings_path = find_config_file(workspace)
        if settings_path:
            merge_cli_with_config(options, load_config(settings_path), explicit_flags)
        if options.compression_level is not None:
            check_compression_level(options.compression_level)
        check_jobs(options.jobs)
        definitions = load_definitions_file(workspace / options.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not definitions:
        print("No artifacts to upload. Exiting.")
        return 0

    output_dir = workspace / options.output_dir
    resolver = PathResolver(
        FileResolverConfig(
            exclude=options.exclude,
            exclude_dirs=[output_dir],
            respect_ignore_file=options.respect_ignore_file,
        )
    )
    uploader = None if options.list_files else ZipArchiveUploader(output_dir)
    grouper = ArtifactGrouper(resolver, uploader=uploader, jobs=options.jobs)
    upload_options = UploadOptions(
        continue_on_error=options.continue_on_error,
        compression_level=options.compression_level,
    )

    try:
        result = grouper.group(definitions, workspace, upload_options)
    except UploadError as e:
        print_diagnostics(e.result.diagnostics)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print_diagnostics(result.diagnostics)
    if options.list_files:
        _print_file_listing(result)

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
