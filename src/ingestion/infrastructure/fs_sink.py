import json
from pathlib import Path
from typing import Any

from pathvalidate import validate_filename


class MarkdownFileSink:
    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_document(self, slug: str, text: str) -> Path:
        filename = f"{slug}.md"
        validate_filename(filename, platform="auto")
        file_path = self.output_dir / filename
        file_path.write_text(text, encoding="utf-8")
        return file_path


class JsonIndexSink:
    def __init__(self, index_path: str | Path) -> None:
        self.index_path = Path(index_path)

    def write_index(self, payload: dict[str, Any]) -> Path:
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        with self.index_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.write("\n")
        return self.index_path
