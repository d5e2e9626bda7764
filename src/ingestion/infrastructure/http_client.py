import asyncio

import aiohttp
from src.config.logger_config import logger

from src.ingestion.domain.models import FetchedPage
from src.ingestion.infrastructure.raw_sink import (
    FetchEventJsonlSink,
    FetchOutcome,
    build_fetch_event,
    utc_timestamp,
)

HTML_CONTENT_TYPES: tuple[str, ...] = ("text/html",)


class SiteHttpClient:
    """Fetches pages from the site with redirects followed.

    A network failure returns None. Any HTTP response, including non-2xx ones,
    comes back as a ``FetchedPage`` so the caller decides how to report it. The
    body is only read for 2xx responses whose content type matches
    ``body_types`` (all content types when ``body_types`` is None).
    """

    def __init__(
        self,
        request_timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        event_sink: FetchEventJsonlSink | None = None,
        run_id: str | None = None,
    ) -> None:
        self.request_timeout_seconds = request_timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self.event_sink = event_sink
        self.run_id = run_id

    async def fetch(
        self,
        session: aiohttp.ClientSession,
        url: str,
        retries: int = 1,
        *,
        body_types: tuple[str, ...] | None = HTML_CONTENT_TYPES,
        operation: str = "fetch_page",
    ) -> FetchedPage | None:
        timeout = aiohttp.ClientTimeout(
            total=self.request_timeout_seconds,
            connect=self.connect_timeout_seconds,
        )
        attempts = max(1, retries)
        for attempt in range(1, attempts + 1):
            started_at = utc_timestamp()
            try:
                async with session.get(url, timeout=timeout, allow_redirects=True) as resp:
                    content_type = resp.headers.get("Content-Type", "")
                    final_url = str(resp.url)
                    if (resp.status >= 500 or resp.status == 429) and attempt < attempts:
                        wait_time = 2**attempt
                        logger.warning(
                            "Server error {} for {}. Attempt {}/{}, retrying in {}s...",
                            resp.status,
                            url,
                            attempt,
                            attempts,
                            wait_time,
                        )
                        await self._write_event(
                            operation, url, attempt, started_at, status=resp.status, outcome="retryable_error"
                        )
                        await asyncio.sleep(wait_time)
                        continue

                    text = None
                    ok = 200 <= resp.status < 300
                    if ok and self._should_read_body(content_type, body_types):
                        text = await resp.text(errors="replace")

                    await self._write_event(
                        operation,
                        url,
                        attempt,
                        started_at,
                        status=resp.status,
                        final_url=final_url,
                        content_type=content_type,
                        outcome="success" if ok else "http_error",
                    )
                    return FetchedPage(
                        requested_url=url,
                        final_url=final_url,
                        status=resp.status,
                        content_type=content_type,
                        text=text,
                    )
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                await self._write_event(
                    operation,
                    url,
                    attempt,
                    started_at,
                    error=exc,
                    outcome="network_error",
                )
                if attempt == attempts:
                    logger.warning("Request to {} failed after {} attempt(s): {}", url, attempts, exc)
                    return None
                wait_time = 2**attempt
                logger.warning("Connection unstable for {} ({}). Retrying in {}s...", url, exc, wait_time)
                await asyncio.sleep(wait_time)

        return None

    @staticmethod
    def _should_read_body(content_type: str, body_types: tuple[str, ...] | None) -> bool:
        if body_types is None:
            return True
        lowered = content_type.lower()
        return any(kind in lowered for kind in body_types)

    async def _write_event(
        self,
        operation: str,
        url: str,
        attempt: int,
        started_at: str,
        *,
        outcome: FetchOutcome,
        status: int | None = None,
        final_url: str | None = None,
        content_type: str | None = None,
        error: BaseException | None = None,
    ) -> None:
        if self.event_sink is None:
            return
        event = build_fetch_event(
            run_id=self.run_id,
            operation=operation,
            url=url,
            attempt=attempt,
            outcome=outcome,
            started_at=started_at,
            status=status,
            final_url=final_url,
            content_type=content_type,
            error=error,
        )
        try:
            await self.event_sink.write_event(event)
        except Exception as exc:
            logger.warning("Failed to persist fetch event: {}", exc)
