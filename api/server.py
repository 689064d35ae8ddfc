"""
FastAPI surface running one scan per request and returning its results.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from core.config import get_settings
from core.errors import ConfigError, ResolutionError, ResourceExhaustedError
from core.models import build_scan_config
from pipeline.orchestrator import Orchestrator
from pipeline.report import CollectingReporter

log = logging.getLogger(__name__)

app = FastAPI(title="tcpscan API", version="1.0")


class ScanPayload(BaseModel):
    host: str
    ports: List[int]
    ipv6: bool = False
    banner: bool = False
    verbose: bool = False
    concurrency: Optional[int] = None
    timeout_ms: Optional[int] = None


@app.post("/api/scan")
def api_scan(payload: ScanPayload):
    settings = get_settings()
    try:
        config = build_scan_config(
            host=payload.host,
            ports=payload.ports,
            ipv6=payload.ipv6,
            banner=payload.banner,
            verbose=payload.verbose,
            concurrency=settings.default_concurrency if payload.concurrency is None else payload.concurrency,
            timeout_ms=settings.default_timeout_ms if payload.timeout_ms is None else payload.timeout_ms,
        )
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    reporter = CollectingReporter()
    try:
        summary = Orchestrator().scan(config, reporter)
    except ResolutionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ResourceExhaustedError as exc:
        log.warning("scan of %s aborted: %s", config.host, exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        log.exception("scan failed")
        raise HTTPException(status_code=500, detail="scan failed") from exc

    return {
        "results": [r.to_dict() for r in reporter.results],
        "summary": summary.to_dict(),
    }


@app.get("/api/health")
def api_health():
    settings = get_settings()
    return {
        "status": "ok",
        "defaults": {
            "timeout_ms": settings.default_timeout_ms,
            "concurrency": settings.default_concurrency,
            "banner_size": settings.banner_size,
        },
    }
