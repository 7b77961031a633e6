"""Command-line interface for praefixum."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.write import generate_all_artifacts
from collect.descriptors import DescriptorError
from contract.validation import validate_artifacts
from ids.formats import UniqueIdFormat, format_id
from ids.location import derive_location_key
from rules.config import ConfigError, load_config, resolve_output_dir
from verify.verify import verify_determinism

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )


def _add_descriptors(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--descriptors",
        default=None,
        help="Call-site descriptor JSONL (default: config descriptors)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="praefixum")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate interceptors from call-site descriptors"
    )
    _add_common_paths(generate_parser)
    _add_descriptors(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated source (default: config output dir)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate generated output")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of generated output"
    )
    _add_common_paths(verify_parser)
    _add_descriptors(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    literal_parser = subparsers.add_parser(
        "literal", help="Print the literal for one call-site parameter"
    )
    literal_parser.add_argument("path", help="Source file identity of the call site")
    literal_parser.add_argument("line", type=int, help="Line of the invocation")
    literal_parser.add_argument("column", type=int, help="Column of the invocation")
    literal_parser.add_argument(
        "--ordinal", type=int, default=0, help="Parameter ordinal (default: 0)"
    )
    literal_parser.add_argument(
        "--format",
        default=UniqueIdFormat.GUID.display_name,
        help="Guid, HtmlId, Timestamp or ShortHash (default: Guid)",
    )
    literal_parser.add_argument("--prefix", default=None, help="Literal prefix")

    return parser


def _resolve_path(path: str | None) -> Path | None:
    if path is None:
        return None
    return Path(path).expanduser().resolve()


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return resolve_output_dir(root, config.output_dir)
    return Path(artifacts_dir).expanduser().resolve()


def _handle_generate(root: Path, descriptors: str | None, out_dir: str | None) -> int:
    try:
        result = generate_all_artifacts(
            root=root,
            out_dir=_resolve_path(out_dir),
            descriptors=_resolve_path(descriptors),
        )
    except DescriptorError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    for failure in result.summary.failures:
        where = failure.location_key or (
            f"descriptor line {failure.line}" if failure.line else "<unknown location>"
        )
        sys.stderr.write(f"{where}: {failure.reason}\n")
    return 0 if result.ok else 1


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_artifacts(resolved_artifacts_dir)
    for warning in result.warnings:
        sys.stderr.write(f"{warning.location()}: warning: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(root: Path, descriptors: str | None, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(
            root=root,
            artifacts_dir=resolved_artifacts_dir,
            descriptors=_resolve_path(descriptors),
        )
    except (FileNotFoundError, NotADirectoryError, DescriptorError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def _handle_literal(args: argparse.Namespace) -> int:
    try:
        location_key = derive_location_key(args.path, args.line, args.column)
        literal = format_id(location_key, args.ordinal, args.format, args.prefix)
    except ValueError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    sys.stdout.write(f"{literal}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=_LOG_FORMAT, stream=sys.stderr)

    if args.command == "literal":
        return _handle_literal(args)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root, args.descriptors, args.out_dir)

        if args.command == "validate":
            return _handle_validate(root, args.artifacts_dir)

        if args.command == "verify":
            return _handle_verify(root, args.descriptors, args.artifacts_dir)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
