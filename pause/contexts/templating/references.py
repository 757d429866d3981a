"""
Template reference parsing.

A templates input is newline-delimited text. Each non-blank line that does not
start with "#" names one template in one of these forms:

    builtin:<name>        built-in template, kept as-is
    <name>                built-in template when <name> is a known built-in
    official:<name>       template from the official catalog repository
    github:<owner/repo>   GitHub repository
    http(s)://...         any repository URL, unchanged
    <owner/repo>          GitHub repository shorthand

Parsing is pure: no filesystem or network access.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse

BUILTIN_PREFIX = "builtin:"
OFFICIAL_PREFIX = "official:"
GITHUB_PREFIX = "github:"

GITHUB_URL = "https://github.com"
OFFICIAL_CATALOG_URL = f"{GITHUB_URL}/pause-org/pause-templates"

BUILTIN_TEMPLATES = ("latex-template", "typst-template", "html-template")


@dataclass(frozen=True)
class TemplateReference:
    """
    A normalized template reference.

    Attributes:
        value: "builtin:<name>" or a repository URL (possibly with a sub-path)
    """

    value: str

    def __str__(self) -> str:
        return self.value

    @property
    def is_builtin(self) -> bool:
        return self.value.startswith(BUILTIN_PREFIX)

    @property
    def builtin_name(self) -> str:
        """Template name of a built-in reference."""
        if not self.is_builtin:
            raise ValueError(f"Not a built-in template reference: {self.value}")
        return self.value[len(BUILTIN_PREFIX):]

    @property
    def url(self) -> str:
        """Repository URL of an external reference."""
        if self.is_builtin:
            raise ValueError(f"Built-in template reference has no URL: {self.value}")
        return self.value

    @property
    def base_name(self) -> str:
        """Last path component without a .git suffix; keys the local checkout."""
        path = self.value.rstrip("/")
        if path.endswith(".git"):
            path = path[: -len(".git")]
        return path.rsplit("/", 1)[-1].rsplit(":", 1)[-1]

    def repository(self) -> Tuple[str, Optional[str]]:
        """
        Split an external reference into repository URL and template sub-path.

        GitHub URLs deeper than owner/repo (e.g. official catalog entries) point
        at a directory inside the repository.

        Returns:
            Tuple of (clone URL, sub-path or None)
        """
        url = self.url
        parsed = urlparse(url)
        if parsed.netloc != urlparse(GITHUB_URL).netloc:
            return url, None

        parts = [part for part in parsed.path.split("/") if part]
        if len(parts) <= 2:
            return url, None

        owner, repo, *rest = parts
        return f"{parsed.scheme}://{parsed.netloc}/{owner}/{repo}", "/".join(rest)

    def github_slug(self) -> Optional[str]:
        """owner/repo for GitHub repositories, None for other hosts."""
        clone_url, _ = self.repository()
        parsed = urlparse(clone_url)
        if parsed.netloc != urlparse(GITHUB_URL).netloc:
            return None
        slug = parsed.path.strip("/")
        if slug.endswith(".git"):
            slug = slug[: -len(".git")]
        return slug


def normalize_reference(line: str, builtin_names: Iterable[str] = BUILTIN_TEMPLATES) -> str:
    """
    Normalize a single reference line.

    Examples:
        >>> normalize_reference("latex-template")
        'builtin:latex-template'
        >>> normalize_reference("owner/repo")
        'https://github.com/owner/repo'
        >>> normalize_reference("official:classic")
        'https://github.com/pause-org/pause-templates/classic'
    """
    line = line.strip()

    if line.startswith(BUILTIN_PREFIX):
        return line
    if line in set(builtin_names):
        return f"{BUILTIN_PREFIX}{line}"
    if line.startswith(OFFICIAL_PREFIX):
        return f"{OFFICIAL_CATALOG_URL}/{line[len(OFFICIAL_PREFIX):]}"
    if line.startswith(GITHUB_PREFIX):
        return f"{GITHUB_URL}/{line[len(GITHUB_PREFIX):]}"
    if line.startswith("http://") or line.startswith("https://"):
        return line

    return f"{GITHUB_URL}/{line}"


def parse_templates(
    templates_input: str, builtin_names: Iterable[str] = BUILTIN_TEMPLATES
) -> List[str]:
    """
    Parse a templates input into normalized reference strings.

    Blank lines and "#" comment lines are skipped. Order is preserved and
    duplicates are kept.

    Args:
        templates_input: Newline-delimited template references
        builtin_names: Names treated as built-in templates when given bare

    Returns:
        One normalized reference per remaining line
    """
    builtin_names = tuple(builtin_names)
    references = []
    for raw_line in templates_input.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        references.append(normalize_reference(line, builtin_names))
    return references


def parse_references(
    templates_input: str, builtin_names: Iterable[str] = BUILTIN_TEMPLATES
) -> List[TemplateReference]:
    """Like parse_templates(), wrapped as TemplateReference objects."""
    return [TemplateReference(value) for value in parse_templates(templates_input, builtin_names)]
