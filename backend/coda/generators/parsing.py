"""Extraction of files from a model's free-text reply.

Grammar of a file block (label case-insensitive)::

    ("File" | "Path") ":" <path> NEWLINE
    "```" [<lang>] NEWLINE
    <body>
    "```"

Blocks are returned in reply order. Anything between blocks is ignored.
"""

import re

from coda.schemas.generation import GeneratedFile, Language

FILE_BLOCK_RE = re.compile(r"(?:File|Path):\s*([^\n]+)\n```(\w+)?\n(.+?)```", re.IGNORECASE | re.DOTALL)

_TAG_LANGUAGES: dict[str, Language] = {
    "rust": "rust",
    "rs": "rust",
    "typescript": "typescript",
    "ts": "typescript",
    "toml": "toml",
    "json": "json",
    "markdown": "markdown",
    "md": "markdown",
}

_EXTENSION_LANGUAGES: dict[str, Language] = {
    "rs": "rust",
    "ts": "typescript",
    "tsx": "typescript",
    "toml": "toml",
    "json": "json",
    "md": "markdown",
}

ALL_LANGUAGES: frozenset[str] = frozenset(_TAG_LANGUAGES.values())


def infer_language(
    path: str,
    declared: str | None,
    default: Language,
    accepted: frozenset[str] = ALL_LANGUAGES,
) -> Language:
    """Fence tag first, then file extension, then the template's primary language."""
    if declared:
        lang = _TAG_LANGUAGES.get(declared.lower())
        if lang in accepted:
            return lang
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    lang = _EXTENSION_LANGUAGES.get(ext)
    if lang in accepted:
        return lang
    return default


def _clean_path(raw: str) -> str:
    # Models like to decorate labels: "**File: `src/lib.rs`**"
    return raw.strip().strip("`*\"' ")


def parse_file_blocks(
    content: str,
    default: Language,
    accepted: frozenset[str] = ALL_LANGUAGES,
) -> list[GeneratedFile]:
    files = []
    for match in FILE_BLOCK_RE.finditer(content):
        path = _clean_path(match.group(1))
        files.append(
            GeneratedFile(
                path=path,
                content=match.group(3).strip(),
                language=infer_language(path, match.group(2), default, accepted),
            )
        )
    return files


def first_fenced_block(content: str, tags: tuple[str, ...]) -> str | None:
    """Body of the first fenced block tagged with one of *tags*, anywhere in the reply."""
    pattern = r"```(?:" + "|".join(re.escape(t) for t in tags) + r")\n(.+?)```"
    match = re.search(pattern, content, re.DOTALL)
    return match.group(1).strip() if match else None


def extract_instructions(content: str, labels: tuple[str, ...], default: str) -> str:
    pattern = r"(?:" + "|".join(re.escape(label) for label in labels) + r"):(.+?)(?=\n##|\Z)"
    match = re.search(pattern, content, re.IGNORECASE | re.DOTALL)
    if match:
        text = match.group(1).strip()
        if text:
            return text
    return default
