"""
Resolution of user-supplied sources into tarball descriptors.

Purely lexical: no network access happens here.
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote, urlparse

from ..models import SourceDescriptor, SourceKind
from ..infrastructure.error_handler import InvalidSourceFormat


GITHUB_HOST = 'github.com'
GIST_HOST = 'gist.github.com'
ALLOWED_HOSTS = frozenset({GITHUB_HOST, GIST_HOST})

CODELOAD = 'https://codeload.github.com'
DEFAULT_REF = 'HEAD'

_URL_SCHEMES = frozenset({'http', 'https', 'git', 'git+https', 'git+ssh', 'ssh'})
# git@github.com:owner/name(.git)
_SCP_LIKE = re.compile(r'^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>(?!/)[^#]+)(?:#(?P<ref>.+))?$')
# github:owner/name or gist:owner/id
_SHORTCUT = re.compile(r'^(?P<scheme>github|gist):(?P<path>[^#]+)(?:#(?P<ref>.+))?$')


@dataclass(frozen=True)
class ParsedHostUrl:
    """Host and path pieces pulled out of a URL-ish string."""

    host: str
    path: str
    ref: Optional[str] = None


def has_scheme(source: str) -> bool:
    """True if the string carries a URI scheme separator."""

    return '://' in source


def tarball_location(kind: SourceKind, owner: str, name: str, ref: Optional[str] = None) -> str:
    """Build the codeload tarball URL for a repository or gist."""

    committish = ref or DEFAULT_REF
    if kind is SourceKind.GIST:
        return f"{CODELOAD}/gist/{name}/tar.gz/{committish}"
    return f"{CODELOAD}/{owner}/{name}/tar.gz/{committish}"


def split_host_url(source: str) -> Optional[ParsedHostUrl]:
    """
    Split a URL, scp-like address or `github:` shortcut into host and path.

    Returns:
        ParsedHostUrl, or None if the string has no recognizable URL shape
    """

    source = source.strip()

    match = _SHORTCUT.match(source)
    if match:
        host = GIST_HOST if match.group('scheme') == 'gist' else GITHUB_HOST
        return ParsedHostUrl(host, match.group('path'), match.group('ref'))

    if has_scheme(source):
        parsed = urlparse(source)
        if parsed.scheme.lower() not in _URL_SCHEMES or not parsed.hostname:
            return None
        return ParsedHostUrl(
            parsed.hostname.lower(),
            unquote(parsed.path),
            unquote(parsed.fragment) or None
        )

    match = _SCP_LIKE.match(source)
    if match and '.' in match.group('host'):
        return ParsedHostUrl(match.group('host').lower(), match.group('path'), match.group('ref'))

    return None


def _strip_git_suffix(name: str) -> str:
    return name[:-4] if name.endswith('.git') else name


def descriptor_from_parts(parts: ParsedHostUrl, from_url: bool) -> Optional[SourceDescriptor]:
    """
    Turn host/path pieces into a descriptor when the host is a GitHub family host.

    Accepts ``owner/name``, ``owner/name.git``, ``owner/name/tree/<ref>``
    for repositories and ``owner/<id>`` for gists.
    """

    if parts.host not in ALLOWED_HOSTS:
        return None

    segments = [s for s in parts.path.split('/') if s]
    if len(segments) < 2:
        return None

    owner, name = segments[0], _strip_git_suffix(segments[1])
    ref = parts.ref
    kind = SourceKind.GIST if parts.host == GIST_HOST else SourceKind.GITHUB

    if kind is SourceKind.GITHUB and len(segments) > 2:
        # /tree/<ref> and /commit/<ref> name a revision; anything else is a
        # page inside the repository and carries no ref
        if segments[2] in ('tree', 'commit') and len(segments) > 3 and ref is None:
            ref = '/'.join(segments[3:])
    elif kind is SourceKind.GIST and len(segments) > 2 and ref is None:
        ref = segments[2]

    try:
        return SourceDescriptor(
            kind=kind,
            owner=owner,
            name=name,
            tarball_location=tarball_location(kind, owner, name, ref),
            ref=ref,
            from_url=from_url,
        )
    except ValueError:
        return None


class SourceResolver:
    """Parses `owner/name` shorthand or GitHub/Gist URLs into descriptors."""

    def resolve(self, source: str) -> SourceDescriptor:
        """
        Resolve a source string.

        Args:
            source: Shorthand ``owner/name`` or a GitHub/Gist URL

        Returns:
            SourceDescriptor for the source

        Raises:
            InvalidSourceFormat: If the string matches neither grammar
        """
        if not isinstance(source, str) or not source.strip():
            raise InvalidSourceFormat()

        source = source.strip()

        parts = split_host_url(source)
        if parts is not None:
            descriptor = descriptor_from_parts(parts, from_url=True)
            if descriptor is not None:
                return descriptor

        if not has_scheme(source) and '/' in source:
            path, _, ref = source.partition('#')
            segments = path.split('/')
            if len(segments) == 2 and all(segments):
                descriptor = descriptor_from_parts(
                    ParsedHostUrl(GITHUB_HOST, path, ref or None),
                    from_url=False
                )
                if descriptor is not None:
                    return descriptor

        raise InvalidSourceFormat()


def resolve(source: str) -> SourceDescriptor:
    return SourceResolver().resolve(source)


__all__ = [
    "ALLOWED_HOSTS",
    "ParsedHostUrl",
    "SourceResolver",
    "descriptor_from_parts",
    "has_scheme",
    "resolve",
    "split_host_url",
    "tarball_location",
]
