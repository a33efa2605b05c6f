"""Signature and naming contract shared by the parser and run reports."""

from __future__ import annotations

import hashlib
import re

SCOPE_SEPARATOR = "::"

_WHITESPACE_RE = re.compile(r"\s+")


def java_identifier_part(c: str) -> bool:
    """Return True if ``c`` may appear inside a Java identifier."""
    return c.isalnum() or c in "_$"


def is_java_identifier(text: str) -> bool:
    return bool(text) and (text[0].isalpha() or text[0] in "_$") and all(
        java_identifier_part(c) for c in text
    )


def sanitize_java_name(text: str, replacement: str = "_") -> str:
    """Replace every character that is illegal in a Java identifier.

    Args:
        text: Raw name, e.g. ``"operator+="``.
        replacement: Substitute for illegal characters. An empty string
            drops them instead.

    Returns:
        The sanitized name.
    """
    return "".join(c if java_identifier_part(c) else replacement for c in text)


def signature_part(java_type: str) -> str:
    """Render one parameter of an overload signature.

    Only the last word of the Java type counts, so ``"@Const int"`` and
    ``"int"`` give the same part.

    Example:
        ``signature_part("IntPointer")`` returns ``"_IntPointer"`` and
        ``signature_part("int[]")`` returns ``"_int__"``.
    """
    return "_" + sanitize_java_name(java_type[java_type.rfind(" ") + 1:])


def qualify(namespace: str | None, name: str) -> str:
    """Prefix ``name`` with ``namespace`` unless it is already qualified."""
    if not namespace or name.startswith(namespace + SCOPE_SEPARATOR):
        return name
    return f"{namespace}{SCOPE_SEPARATOR}{name}"


def unqualified(name: str) -> str:
    """Return the last scope component of a qualified C++ name."""
    return name[name.rfind(SCOPE_SEPARATOR) + len(SCOPE_SEPARATOR):] if SCOPE_SEPARATOR in name else name


def make_signature_hash(
    signatures: list[str],
    digest_length: int = 12,
) -> str:
    """Create a stable short hash token over an ordered list of signatures.

    Two parses that produce the same declarations in the same order get the
    same token, which makes run reports easy to compare.
    """
    canonical = "\n".join(_WHITESPACE_RE.sub(" ", s).strip() for s in signatures)
    if not canonical:
        canonical = "<empty-signature>"
    length = max(8, min(digest_length, 40))
    digest = hashlib.sha1(canonical.encode("utf-8")).hexdigest()[:length]
    return f"sig_{digest}"
