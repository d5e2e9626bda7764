from bs4 import BeautifulSoup
from src.config.logger_config import logger

from src.ingestion.domain.models import FeedItem
from src.ingestion.domain.rules import normalize_blog_url
from src.ingestion.domain.text import collapse_whitespace


def parse_rss_items(xml_text: str, origin: str) -> list[FeedItem]:
    soup = BeautifulSoup(xml_text or "", "xml")
    items: list[FeedItem] = []
    skipped = 0
    for node in soup.find_all("item"):
        link_node = node.find("link")
        link = normalize_blog_url(link_node.get_text() if link_node else "", origin)
        if not link:
            skipped += 1
            continue
        title_node = node.find("title")
        date_node = node.find("pubDate")
        items.append(
            FeedItem(
                title=collapse_whitespace(title_node.get_text() if title_node else ""),
                link=link,
                published_at=collapse_whitespace(date_node.get_text() if date_node else ""),
            )
        )
    if skipped:
        logger.warning("RSS: skipped {} items without a blog post link", skipped)
    return items
