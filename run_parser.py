#!/usr/bin/env python3
"""Parse C/C++ headers into JavaCPP-style Java declarations.

Headers come either from a build manifest or from the command line. The
generated text is written to a file or stdout, and a JSON run report with
the parse statistics is written alongside.

Usage:
    python run_parser.py --manifest bindings/zlib.yml
    python run_parser.py --include mylib.h -I include --rules rules.yml --output out/MyLib.java
    python run_parser.py --c-include legacy.h -I include --beanify
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Optional

from core.build_manifest import BuildManifest, load_build_manifest
from core.run_artifacts import write_run_report, write_text_artifact
from core.startup_config import (
    ConfigValidationError,
    resolve_strict_config_validation,
    validate_include_paths,
)
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from parsing.config import LOG_LEVEL
from parsing.context import Context
from parsing.driver import ParseResult, parse_includes
from parsing.infomap import InfoMap
from parsing.rules import load_rule_files
from parsing.tokens import ParserError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="C/C++ header parser producing JavaCPP-style declarations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_parser.py --manifest bindings/zlib.yml\n"
            "  python run_parser.py --include mylib.h -I include --output out/MyLib.java\n"
        ),
    )
    parser.add_argument(
        "--manifest",
        default=None,
        help="Path to a build manifest YAML/JSON. Command-line inputs are appended to it.",
    )
    parser.add_argument(
        "--include",
        action="append",
        default=[],
        help="C++ header to parse. May be given several times.",
    )
    parser.add_argument(
        "--c-include",
        action="append",
        default=[],
        help="C header to parse before the C++ headers. May be given several times.",
    )
    parser.add_argument(
        "-I",
        "--include-path",
        action="append",
        default=[],
        dest="include_paths",
        help="Directory searched for includes. May be given several times.",
    )
    parser.add_argument(
        "--rules",
        action="append",
        default=[],
        help="YAML/JSON rule file layered over the default rules.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Include that may be missing without failing the run.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="File for the generated declarations. Default: stdout.",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Directory for the JSON run report. Default: output/run_reports",
    )
    parser.add_argument("--beanify", action="store_true", help="Name accessors getX/setX.")
    parser.add_argument("--virtualize", action="store_true", help="Make virtual functions overridable.")
    parser.add_argument("--immutable", action="store_true", help="Generate no variable setters.")
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=resolve_strict_config_validation(default=False),
        help="Fail fast on unreadable rule files and missing include directories.",
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        help="Logging level. Default: HEADERBIND_LOG_LEVEL or INFO.",
    )
    return parser.parse_args(argv)


def build_manifest_from_args(args: argparse.Namespace) -> BuildManifest:
    """Combine the optional manifest file with command-line inputs."""
    base = load_build_manifest(args.manifest) if args.manifest else None
    includes = (base.includes if base else []) + list(args.include)
    c_includes = (base.c_includes if base else []) + list(args.c_include)
    if not includes and not c_includes:
        raise ValueError("No headers to parse; pass --manifest, --include or --c-include")
    return BuildManifest(
        name=base.name if base else os.path.splitext(os.path.basename((includes or c_includes)[0]))[0],
        includes=includes,
        c_includes=c_includes,
        include_paths=(base.include_paths if base else []) + list(args.include_paths),
        rule_files=(base.rule_files if base else []) + list(args.rules),
        excludes=(base.excludes if base else []) + list(args.exclude),
        output_file=args.output or (base.output_file if base else None),
        report_dir=args.report_dir or (base.report_dir if base else "output/run_reports"),
    )


def execute_parse(
    *,
    manifest: BuildManifest,
    context: Context,
    strict_config: bool,
) -> tuple[ParseResult, dict[str, Any]]:
    """Parse every header of ``manifest`` and write the generated text."""
    with phase_scope("config"):
        include_report = validate_include_paths(manifest.include_paths, strict=strict_config)
        info_map = InfoMap.with_defaults()
        if manifest.rule_files:
            info_map = load_rule_files(manifest.rule_files, parent=info_map, strict=strict_config)
            logger.info("Loaded %d rules from %d files", len(info_map), len(manifest.rule_files))

    result = parse_includes(
        manifest.includes,
        info_map=info_map,
        include_paths=manifest.include_paths,
        excludes=manifest.excludes,
        c_includes=manifest.c_includes,
        context=context,
    )
    logger.info("Parse finished: %s", result.stats)

    with phase_scope("write"):
        text = result.text
        if manifest.output_file:
            path = write_text_artifact(text, manifest.output_file, result.line_separator)
            logger.info("Declarations written: %s", path)
        else:
            sys.stdout.write(text)

    report: dict[str, Any] = {
        "name": manifest.name,
        "output_file": manifest.output_file,
        "config": include_report,
        "status": "success",
    }
    report.update(result.to_report())
    return result, report


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    configure_structured_logging(level=args.log_level)
    run_id = set_run_id()
    os.environ["STRICT_CONFIG_VALIDATION"] = "true" if args.strict_config else "false"

    run_report: dict[str, Any] = {
        "run_id": run_id,
        "pipeline": "header_parse",
        "status": "failed",
    }
    report_dir = args.report_dir or "output/run_reports"
    name: Optional[str] = None
    try:
        manifest = build_manifest_from_args(args)
        report_dir = manifest.report_dir
        name = manifest.name
        context = Context(beanify=args.beanify, virtualize=args.virtualize, immutable=args.immutable)
        _, result = execute_parse(
            manifest=manifest,
            context=context,
            strict_config=args.strict_config,
        )
        run_report.update(result)
        report_path = write_run_report(run_report, run_id, output_dir=report_dir, name=name)
        logger.info("Run report written: %s", report_path)
    except (ParserError, ConfigValidationError, FileNotFoundError, ValueError) as exc:
        run_report["error"] = str(exc)
        report_path = write_run_report(run_report, run_id, output_dir=report_dir, name=name)
        logger.info("Run report written: %s", report_path)
        logger.error("Header parse failed: %s", exc)
        sys.exit(1)
    except Exception as exc:
        run_report["error"] = str(exc)
        report_path = write_run_report(run_report, run_id, output_dir=report_dir, name=name)
        logger.info("Run report written: %s", report_path)
        logger.error("Header parse failed: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
