"""Image-load monitoring.

The site reports how blob-hosted images load in the browser (load time,
retries, whether the proxy fallback was needed). The last
``MAX_METRICS`` reports are kept in memory for the admin dashboard.
"""

from __future__ import annotations

import math
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import structlog
from pydantic import Field

from solidsteel.models.common import CamelModel

log = structlog.get_logger()

MAX_METRICS = 100
PROXY_PATH = "/api/blob-proxy"


class ImageLoadMetric(CamelModel):
    url: str = Field(..., min_length=1)
    load_time: float = Field(..., ge=0, description="Milliseconds until load or failure")
    success: bool
    retries: int = Field(default=0, ge=0)
    final_url: str = Field(default="", description="URL that finally loaded (proxy or direct)")


class BlobErrorReport(CamelModel):
    message: str
    url: str
    retries: int = 0


@dataclass
class _Recorded:
    metric: ImageLoadMetric
    timestamp: float = field(default_factory=time.time)


def _hostname(url: str) -> str:
    return urlsplit(url).hostname or "unknown"


class ImageLoadMonitor:
    """Ring buffer of recent image-load metrics."""

    def __init__(self, max_metrics: int = MAX_METRICS) -> None:
        self._metrics: deque[_Recorded] = deque(maxlen=max_metrics)

    def record(self, metric: ImageLoadMetric) -> None:
        self._metrics.append(_Recorded(metric))
        log.debug(
            "image_load_recorded",
            url=metric.url[:80],
            success=metric.success,
            load_time=metric.load_time,
            retries=metric.retries,
        )

    def __len__(self) -> int:
        return len(self._metrics)

    def stats(self) -> dict[str, Any] | None:
        """Aggregate stats over the buffer, or None when empty."""
        metrics = [recorded.metric for recorded in self._metrics]
        if not metrics:
            return None

        total = len(metrics)
        successful = [m for m in metrics if m.success]
        avg_load_time = (
            sum(m.load_time for m in successful) / len(successful) if successful else 0
        )
        avg_retries = sum(m.retries for m in metrics) / total
        proxied = sum(1 for m in metrics if PROXY_PATH in m.final_url)

        return {
            "total": total,
            "successful": len(successful),
            "failed": total - len(successful),
            "successRate": f"{len(successful) / total * 100:.1f}",
            "avgLoadTime": math.floor(avg_load_time + 0.5),
            "avgRetries": f"{avg_retries:.1f}",
            "proxyUsageRate": f"{proxied / total * 100:.1f}",
            "failurePatterns": self.failure_patterns(),
        }

    def failure_patterns(self) -> dict[str, int]:
        """Failed loads counted by hostname."""
        return dict(
            Counter(
                _hostname(recorded.metric.url)
                for recorded in self._metrics
                if not recorded.metric.success
            )
        )

    def clear(self) -> None:
        self._metrics.clear()


def report_blob_error(report: BlobErrorReport, client_ip: str | None = None) -> None:
    log.error(
        "blob_client_error",
        message=report.message,
        url=report.url,
        retries=report.retries,
        client_ip=client_ip,
    )


image_load_monitor = ImageLoadMonitor()
