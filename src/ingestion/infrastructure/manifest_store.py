import json
from pathlib import Path

from src.ingestion.domain.errors import ManifestError
from src.ingestion.domain.models import Route, RouteManifest

_ROUTE_TYPES = {"home", "blogIndex", "blogPost", "page", "assessment"}


class JsonManifestStore:
    def __init__(self, manifest_path: str | Path) -> None:
        self.manifest_path = Path(manifest_path)

    def write_manifest(self, manifest: RouteManifest) -> Path:
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with self.manifest_path.open("w", encoding="utf-8") as f:
            json.dump(manifest.to_dict(), f, ensure_ascii=False, indent=2)
            f.write("\n")
        return self.manifest_path

    def read_manifest(self) -> RouteManifest:
        try:
            raw = self.manifest_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ManifestError(f"Route manifest not found: {self.manifest_path}") from exc
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Route manifest is not valid JSON: {self.manifest_path} ({exc.msg})") from exc
        if not isinstance(parsed, dict):
            raise ManifestError(f"Route manifest is not a JSON object: {self.manifest_path}")

        raw_routes = parsed.get("routes")
        routes: list[Route] = []
        for item in raw_routes if isinstance(raw_routes, list) else []:
            if not isinstance(item, dict):
                continue
            url = str(item.get("url") or "").strip()
            pathname = str(item.get("pathname") or "").strip()
            route_type = str(item.get("type") or "").strip()
            if not url or not pathname or route_type not in _ROUTE_TYPES:
                continue
            routes.append(Route(url=url, pathname=pathname, type=route_type))

        return RouteManifest(
            origin=str(parsed.get("origin") or ""),
            discovered_at=str(parsed.get("discoveredAtISO") or ""),
            routes=tuple(routes),
        )
