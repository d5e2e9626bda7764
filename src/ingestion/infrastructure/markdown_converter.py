import re

import html2text

_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


class Html2TextConverter:
    """Converts a content fragment to markdown with ATX headings and unwrapped lines."""

    def convert(self, html: str) -> str:
        h = html2text.HTML2Text()
        h.body_width = 0
        h.ignore_links = False
        h.ignore_images = False
        h.mark_code = False
        markdown = h.handle(html or "")
        return _EXTRA_BLANK_LINES.sub("\n\n", markdown).strip()
