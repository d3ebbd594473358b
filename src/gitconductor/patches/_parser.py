"""Static inspection of patch text and ``git apply`` diagnostics.

Nothing here runs git. These parsers let a patch be previewed before any
command touches the repository.
"""

import re

_DIFF_HEADER = "diff --git "
_SUBJECT_PREFIX = re.compile(r"^\[PATCH[^\]]*\]\s*", re.IGNORECASE)
_GIT_FAILED_PREFIX = "git command failed:"
_PATCH_FAILED_PREFIX = "error: patch failed:"
_ERROR_PREFIX = "error:"


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


def parse_touched_files(text: str) -> list[str]:
    """Collect the distinct paths named by ``diff --git`` headers.

    The ``b/`` side is preferred so renames report their destination. Order
    of first appearance is kept.

    Examples:
        >>> parse_touched_files("diff --git a/x.txt b/y.txt\\n--- a/x.txt\\n")
        ['y.txt']
    """
    files: list[str] = []
    seen: set[str] = set()
    for line in _normalize_newlines(text).split("\n"):
        if not line.startswith(_DIFF_HEADER):
            continue
        parts = line[len(_DIFF_HEADER) :].split()
        if not parts:
            continue
        pick = parts[1] if len(parts) > 1 else parts[0]
        if not pick.startswith(("a/", "b/")):
            continue
        path = pick[2:].strip()
        if path and path not in seen:
            seen.add(path)
            files.append(path)
    return files


def extract_diff_payload(text: str) -> str:
    """Drop mailbox headers so the text can be checked with ``git apply``.

    Everything before the first ``diff --git`` line is removed. Text without
    such a line is returned with normalized newlines.
    """
    normalized = _normalize_newlines(text)
    if normalized.startswith(_DIFF_HEADER):
        return normalized
    index = normalized.find(f"\n{_DIFF_HEADER}")
    if index < 0:
        return normalized
    return normalized[index + 1 :]


def extract_patch_subjects(text: str, limit: int = 12) -> list[str]:
    """Return the ``Subject:`` lines of a mailbox patch, without ``[PATCH]`` tags."""
    subjects: list[str] = []
    for line in _normalize_newlines(text).split("\n"):
        if len(subjects) >= limit:
            break
        if not line.startswith("Subject:"):
            continue
        subject = line[len("Subject:") :].strip()
        if not subject:
            continue
        stripped = _SUBJECT_PREFIX.sub("", subject).strip()
        subjects.append(stripped or subject)
    return subjects


def extract_patch_subject(text: str) -> str | None:
    """Return the first mailbox subject, or None for a raw diff.

    Examples:
        >>> extract_patch_subject("From abc\\nSubject: [PATCH 1/2] Add parser\\n")
        'Add parser'
        >>> extract_patch_subject("diff --git a/x b/x\\n") is None
        True
    """
    subjects = extract_patch_subjects(text, limit=1)
    return subjects[0] if subjects else None


def _path_before_colon(rest: str) -> str | None:
    text = rest.strip()
    if not text:
        return None
    # Windows drive paths such as C:\repo\file.txt keep their first colon.
    start = 2 if len(text) >= 3 and text[1] == ":" and text[2] in "\\/" else 0  # noqa: PLR2004
    index = text.find(":", start)
    if index < 0:
        return None
    path = text[:index].strip()
    return path or None


def _is_candidate_path(path: str) -> bool:
    if not path or any(char.isspace() for char in path):
        return False
    if path.lower() == "patch":
        return False
    return "." in path or "/" in path or "\\" in path


def parse_apply_conflicts(diagnostic: str) -> list[str]:
    """Extract the paths ``git apply --check`` complained about.

    Recognizes ``error: patch failed: <path>:<line>`` and the generic
    ``error: <path>: <reason>``. Tokens that do not look like paths are
    ignored.

    Examples:
        >>> parse_apply_conflicts("error: patch failed: src/app.py:12\\n"
        ...                       "error: src/app.py: patch does not apply")
        ['src/app.py']
    """
    paths: list[str] = []
    seen: set[str] = set()
    for raw in _normalize_newlines(diagnostic).split("\n"):
        line = raw.strip()
        if line.startswith(_GIT_FAILED_PREFIX):
            line = line[len(_GIT_FAILED_PREFIX) :].strip()

        if line.startswith(_PATCH_FAILED_PREFIX):
            rest = line[len(_PATCH_FAILED_PREFIX) :]
        elif line.startswith(_ERROR_PREFIX):
            rest = line[len(_ERROR_PREFIX) :]
        else:
            continue

        path = _path_before_colon(rest)
        if path is not None and _is_candidate_path(path) and path not in seen:
            seen.add(path)
            paths.append(path)
    return paths
