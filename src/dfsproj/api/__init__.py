"""REST API serving final projections."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response

from dfsproj.api.schemas import AggregationReportResponse, ProjectionListResponse, SlotDiagnosticResponse
from dfsproj.config import Settings, load_settings
from dfsproj.errors import FeedUnavailableError, MalformedTimestampError
from dfsproj.export import export_projections_to_csv
from dfsproj.persistence import FeedStore
from dfsproj.pipeline import ProjectionResult, build_projections


logger = logging.getLogger("uvicorn.error")

CORS_ALLOW_HEADERS = [
    "Content-Type",
    "Content-Length",
    "Accept-Encoding",
    "X-CSRF-Token",
    "Authorization",
    "accept",
    "origin",
    "Cache-Control",
    "X-Requested-With",
]


def _report_to_response(result: ProjectionResult) -> AggregationReportResponse:
    report = result.report
    return AggregationReportResponse(
        sport=result.sport,
        service=result.service,
        slate=result.slate,
        reference_time=result.reference_time.isoformat(),
        total_slots=report.total_slots,
        emitted=report.emitted,
        duplicates_skipped=report.duplicates_skipped,
        ineligible_skipped=report.ineligible_skipped,
        rejected_draftables=result.rejected_draftables,
        unresolved_ids=report.unresolved_ids,
        missing_games=report.missing_games,
        skipped=[
            SlotDiagnosticResponse(provider_id=item.provider_id, name=item.name, reason=item.reason)
            for item in report.skipped
        ],
    )


def create_app(store: FeedStore | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    store = store or FeedStore(settings.feed_root, settings.db_path)

    app = FastAPI(title="dfsproj projections")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["POST", "OPTIONS", "GET", "PUT"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.state.feed_store = store
    app.state.settings = settings

    def run(sport: str, service: str, slate: Optional[str], date: Optional[str]) -> ProjectionResult:
        try:
            return build_projections(store, sport, service, slate=slate, date=date, settings=settings)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0]) if exc.args else str(exc)) from exc
        except MalformedTimestampError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except FeedUnavailableError as exc:
            logger.warning("Projection request %s/%s unavailable: %s", sport, service, exc)
            raise HTTPException(status_code=503, detail=str(exc)) from exc

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return "<html>The projections API works.</html>"

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/projections/{sport}/{service}", response_model=ProjectionListResponse)
    def projections(
        sport: str,
        service: str,
        slate: Optional[str] = Query(None),
        date: Optional[str] = Query(None),
    ) -> ProjectionListResponse:
        result = run(sport, service, slate, date)
        return ProjectionListResponse(data=result.records)

    @app.get("/projections/{sport}/{service}/report", response_model=AggregationReportResponse)
    def projections_report(
        sport: str,
        service: str,
        slate: Optional[str] = Query(None),
        date: Optional[str] = Query(None),
    ) -> AggregationReportResponse:
        return _report_to_response(run(sport, service, slate, date))

    @app.get("/projections/{sport}/{service}/export.csv")
    def projections_csv(
        sport: str,
        service: str,
        slate: Optional[str] = Query(None),
        date: Optional[str] = Query(None),
    ) -> Response:
        result = run(sport, service, slate, date)
        filename = f"projections_{result.sport.lower()}_{result.service}_{result.slate}.csv"
        return Response(
            content=export_projections_to_csv(result.records),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app
