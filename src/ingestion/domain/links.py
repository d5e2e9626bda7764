import re
from typing import Callable

from src.ingestion.domain.rules import normalize_url

# (html, page_url) -> canonical links
LinkExtractor = Callable[[str, str], list[str]]

# 刻意使用正規表示式而非完整 HTML 解析，遇到壞掉的屬性也不會中斷整頁
HREF_PATTERN = re.compile(
    r"""<a\b[^>]*\bhref\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+))""",
    re.I,
)
NON_NAVIGATIONAL_PREFIXES = ("mailto:", "tel:", "javascript:")


def extract_links(html: str, page_url: str, origin: str) -> list[str]:
    links: list[str] = []
    for match in HREF_PATTERN.finditer(html or ""):
        href = (match.group(1) or match.group(2) or match.group(3) or "").strip()
        if not href or href.startswith("#"):
            continue
        if href.lower().startswith(NON_NAVIGATIONAL_PREFIXES):
            continue

        normalized = normalize_url(href, page_url, origin)
        if normalized:
            links.append(normalized)
    return links


def regex_link_extractor(origin: str) -> LinkExtractor:
    def _extract(html: str, page_url: str) -> list[str]:
        return extract_links(html, page_url, origin)

    return _extract
