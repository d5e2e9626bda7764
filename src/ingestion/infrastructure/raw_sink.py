import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, TypedDict

FetchOutcome = Literal["success", "http_error", "retryable_error", "network_error"]


class FetchHttpMeta(TypedDict):
    status: int | None
    final_url: str | None
    content_type: str | None


class FetchErrorInfo(TypedDict):
    type: str
    message: str


class FetchTiming(TypedDict):
    started_at: str
    finished_at: str


class FetchEvent(TypedDict):
    """One line of the fetch log: a single HTTP attempt against the site."""

    run_id: str | None
    operation: str
    url: str
    attempt: int
    outcome: FetchOutcome
    http: FetchHttpMeta
    error: FetchErrorInfo | None
    timing: FetchTiming


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_fetch_event(
    *,
    run_id: str | None,
    operation: str,
    url: str,
    attempt: int,
    outcome: FetchOutcome,
    started_at: str,
    status: int | None = None,
    final_url: str | None = None,
    content_type: str | None = None,
    error: BaseException | None = None,
) -> FetchEvent:
    return FetchEvent(
        run_id=run_id,
        operation=operation,
        url=url,
        attempt=attempt,
        outcome=outcome,
        http=FetchHttpMeta(status=status, final_url=final_url, content_type=content_type),
        error=FetchErrorInfo(type=type(error).__name__, message=str(error)) if error is not None else None,
        timing=FetchTiming(started_at=started_at, finished_at=utc_timestamp()),
    )


class FetchEventJsonlSink:
    """Fetch log for one run: ``fetches_<run_id>.jsonl``, one ``FetchEvent`` per line.

    Events without a ``run_id`` are stamped with the sink's. ``outcome_counts``
    keeps a per-outcome tally so a run can report retries and failures without
    re-reading the file.
    """

    def __init__(self, output_dir: str | Path, run_id: str) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.run_id = run_id
        self.file_path = self.output_dir / f"fetches_{run_id}.jsonl"
        self.outcome_counts: dict[str, int] = {}
        self._lock = asyncio.Lock()
        self._handle = self.file_path.open("a", encoding="utf-8")
        self._closed = False

    async def write_event(self, event: FetchEvent) -> None:
        payload = dict(event)
        if payload.get("run_id") is None:
            payload["run_id"] = self.run_id
        line = json.dumps(payload, ensure_ascii=False)
        async with self._lock:
            if self._closed:
                raise RuntimeError(f"Fetch log {self.file_path} is closed.")
            self._handle.write(f"{line}\n")
            self._handle.flush()
            outcome = str(payload.get("outcome") or "unknown")
            self.outcome_counts[outcome] = self.outcome_counts.get(outcome, 0) + 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._handle.close()
