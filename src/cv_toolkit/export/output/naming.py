"""
Module: export.output.naming

Purpose:
    Derive download file names from a user-supplied subject
    (usually the CV owner's full name).

Key Functions:
    - suggested_name(): "Jane Q. Public" -> "Jane_Q._Public_CV"
    - document_filename(): Append the container extension
"""

from __future__ import annotations

import re

from ..config import DEFAULT_NAME_SUFFIX

_WHITESPACE_RUN = re.compile(r"\s+")


def suggested_name(subject: str, suffix: str = DEFAULT_NAME_SUFFIX) -> str:
    """
    Build the suggested document name for a subject.

    Leading/trailing whitespace is dropped, each remaining run of
    whitespace becomes one underscore, and every other character is kept
    verbatim. An empty subject yields the suffix alone without its
    leading underscore.

    Example:
        >>> suggested_name("Jane Q. Public")
        'Jane_Q._Public_CV'
        >>> suggested_name("  A   B ")
        'A_B_CV'
        >>> suggested_name("")
        'CV'
    """
    stem = _WHITESPACE_RUN.sub("_", (subject or "").strip())
    if not stem:
        return suffix.lstrip("_") or "document"
    return f"{stem}{suffix}"


def document_filename(name: str, extension: str = ".pdf") -> str:
    """Append ``extension`` to a suggested name."""
    if not extension.startswith("."):
        extension = f".{extension}"
    return f"{name}{extension}"
