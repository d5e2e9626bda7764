import re
from urllib.parse import SplitResult, quote, urljoin, urlsplit

from src.ingestion.domain.models import RouteType

ASSET_EXTENSIONS = re.compile(r"\.(png|jpe?g|webp|svg|gif|css|js|woff2?|pdf)$", re.I)
BLOG_POST_PATH = re.compile(r"^/blog/[^/]+$")
DEFAULT_ASSESSMENT_PATH = "/dad-ready-assessment"

_DEFAULT_PORTS = {"http": 80, "https": 443}
# 與瀏覽器 URL 物件相同，保留路徑中合法的字元不做編碼
_PATH_SAFE_CHARS = "/%:@!$&'()*+,;=-._~"


def origin_of(parts: SplitResult) -> str:
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    port = parts.port
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


def canonical_origin(origin: str) -> str:
    return origin_of(urlsplit(origin.strip()))


def normalize_pathname(pathname: str) -> str:
    normalized = pathname or "/"
    if not normalized.startswith("/"):
        normalized = f"/{normalized}"
    normalized = re.sub(r"/{2,}", "/", normalized)
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized or "/"


def normalize_url(value: str, base: str, origin: str) -> str | None:
    """Return the canonical form of ``value`` or None when it must not be crawled.

    The canonical form is ``origin + normalized path``: no query, no fragment,
    same origin only, and never a static asset.
    """
    try:
        resolved = urlsplit(urljoin(base, (value or "").strip()))
        if resolved.scheme.lower() not in _DEFAULT_PORTS:
            return None
        site_origin = canonical_origin(origin)
        if origin_of(resolved) != site_origin:
            return None
    except ValueError:
        return None

    pathname = normalize_pathname(quote(resolved.path, safe=_PATH_SAFE_CHARS))
    if ASSET_EXTENSIONS.search(pathname):
        return None
    return f"{site_origin}{pathname}"


def pathname_of(url: str) -> str:
    return normalize_pathname(urlsplit(url).path)


def classify_route(pathname: str, assessment_path: str = DEFAULT_ASSESSMENT_PATH) -> RouteType:
    if pathname == "/":
        return "home"
    if pathname == "/blog":
        return "blogIndex"
    if BLOG_POST_PATH.match(pathname):
        return "blogPost"
    if pathname == assessment_path:
        return "assessment"
    return "page"


def normalize_blog_url(value: str, origin: str) -> str | None:
    """Canonical URL of a blog post, or None when ``value`` is not ``/blog/<slug>`` on ``origin``."""
    try:
        resolved = urlsplit(urljoin(origin, (value or "").strip()))
        site_origin = canonical_origin(origin)
        if origin_of(resolved) != site_origin:
            return None
    except ValueError:
        return None
    if not BLOG_POST_PATH.match(resolved.path):
        return None
    return f"{site_origin}{resolved.path}"
