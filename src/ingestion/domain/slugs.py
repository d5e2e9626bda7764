import re
from urllib.parse import unquote, urlsplit

_DISALLOWED_RUN = re.compile(r"[^a-z0-9-]+")
_HYPHEN_RUN = re.compile(r"-{2,}")


def slugify(value: str, default: str) -> str:
    decoded = unquote(value or "")
    slug = _DISALLOWED_RUN.sub("-", decoded.lower()).strip("-")
    return slug or default


def slug_from_url(url: str, default: str = "post") -> str:
    try:
        segments = [segment for segment in urlsplit(url).path.split("/") if segment]
    except ValueError:
        return default
    if not segments:
        return default
    return slugify(segments[-1], default)


def slug_from_pathname(pathname: str, default: str = "page") -> str:
    normalized = "/home" if pathname == "/" else pathname
    raw = (normalized or "").lstrip("/").replace("/", "-").replace("+", "-")
    return _HYPHEN_RUN.sub("-", slugify(raw, default))


def allocate_slug(base: str, used: set[str]) -> str:
    slug = base
    n = 2
    while slug in used:
        slug = f"{base}-{n}"
        n += 1
    used.add(slug)
    return slug


class SlugAllocator:
    """Hands out unique slugs in first-come order for one import run."""

    def __init__(self) -> None:
        self.used: set[str] = set()

    def allocate(self, base: str) -> str:
        return allocate_slug(base, self.used)
