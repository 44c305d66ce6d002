"""Repository slug parsing for the command line.

Slugs are GitHub identifiers in ``owner/name`` format, not filesystem paths,
so they are split by hand rather than with ``pathlib``.
"""

from __future__ import annotations


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Split an ``owner/name`` slug into its parts.

    Raises
    ------
    ValueError
        If the slug does not have exactly one ``/`` with text on both sides.

    Examples
    --------
    >>> parse_repo_slug("libgit2/libgit2sharp")
    ('libgit2', 'libgit2sharp')

    """
    owner, sep, name = slug.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)
    return owner, name
