"""Core shared contracts and utilities."""

from core.signature_contract import (
    SCOPE_SEPARATOR,
    is_java_identifier,
    make_signature_hash,
    qualify,
    sanitize_java_name,
    signature_part,
    unqualified,
)
from core.structured_logging import (
    configure_structured_logging,
    get_header,
    get_run_id,
    header_scope,
    phase_scope,
    set_run_id,
)
from core.startup_config import (
    ConfigValidationError,
    load_config_payload,
    report_config_problem,
    resolve_strict_config_validation,
    validate_include_paths,
)
from core.run_artifacts import write_run_report, write_text_artifact
from core.build_manifest import (
    BuildManifest,
    load_build_manifest,
    resolve_manifest_path,
)

__all__ = [
    "SCOPE_SEPARATOR",
    "is_java_identifier",
    "make_signature_hash",
    "qualify",
    "sanitize_java_name",
    "signature_part",
    "unqualified",
    "configure_structured_logging",
    "get_header",
    "get_run_id",
    "header_scope",
    "phase_scope",
    "set_run_id",
    "ConfigValidationError",
    "load_config_payload",
    "report_config_problem",
    "resolve_strict_config_validation",
    "validate_include_paths",
    "write_run_report",
    "write_text_artifact",
    "BuildManifest",
    "load_build_manifest",
    "resolve_manifest_path",
]
