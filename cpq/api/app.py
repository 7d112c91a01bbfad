"""FastAPI application: create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

# Load .env from project root
_project_root = Path(__file__).resolve().parent.parent.parent
load_dotenv(_project_root / ".env")

from cpq.engine import ENGINE_VERSION
from cpq.exceptions import CpqError, InvalidQuoteInputError, RateTableError
from cpq.models.quote import QuoteInput  # noqa: TCH001 (FastAPI resolves at runtime)

if TYPE_CHECKING:
    from cpq.engine import QuoteEngine
    from cpq.models.result import QuoteResult

logger = logging.getLogger(__name__)


class MarginTargetRequest(BaseModel):
    """Body for POST /api/quote/margin-target."""

    model_config = ConfigDict(populate_by_name=True)

    quote_input: QuoteInput = Field(alias="quoteInput")
    margin_target: float | None = Field(default=None, alias="marginTarget")


def _quote_payload(result: QuoteResult) -> dict[str, Any]:
    return {
        "quote": result.model_dump(mode="json"),
        "summary_dict": result.to_summary_dict(),
        "export_dict": result.to_export_dict(),
    }


def create_app(*, engine: QuoteEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    engine
        Optional pre-built quote engine for dependency injection (e.g.
        tests). If not provided, one is created from environment variables
        on first request.
    """
    app = FastAPI(title="Scan2Plan CPQ", version=ENGINE_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject engines
    app.state.engine = engine

    def _get_engine() -> QuoteEngine:
        eng: QuoteEngine | None = app.state.engine
        if eng is not None:
            return eng
        from cpq.api.deps import create_engine_from_env

        try:
            eng = create_engine_from_env()
        except RateTableError as exc:
            logger.exception("Failed to load rate table")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        app.state.engine = eng
        return eng

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": ENGINE_VERSION}

    # ------------------------------------------------------------------
    # POST /api/quote
    # ------------------------------------------------------------------

    @app.post("/api/quote")
    def quote(quote_input: QuoteInput) -> dict[str, Any]:
        eng = _get_engine()
        try:
            result = eng.compute_quote(quote_input)
        except InvalidQuoteInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except CpqError as exc:
            logger.exception("Engine error while pricing quote")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return _quote_payload(result)

    # ------------------------------------------------------------------
    # POST /api/quote/margin-target
    # ------------------------------------------------------------------

    @app.post("/api/quote/margin-target")
    def quote_margin_target(request: MarginTargetRequest) -> dict[str, Any]:
        from cpq.pricing.margin import apply_margin_target, resolve_margin_target

        eng = _get_engine()
        try:
            table = eng.rate_table
            target = resolve_margin_target(request.margin_target, table)
            original = eng.price_quote(request.quote_input)
            adjusted = apply_margin_target(original, target, table)
        except InvalidQuoteInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except CpqError as exc:
            logger.exception("Engine error while pricing quote")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        payload = _quote_payload(adjusted)
        payload["original_quote"] = original.model_dump(mode="json")
        return payload

    # ------------------------------------------------------------------
    # POST /api/quote/check-save
    # ------------------------------------------------------------------

    @app.post("/api/quote/check-save")
    def check_save(quote_input: QuoteInput) -> dict[str, Any]:
        eng = _get_engine()
        try:
            result = eng.compute_quote(quote_input)
        except InvalidQuoteInputError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except CpqError as exc:
            logger.exception("Engine error while pricing quote")
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        if not result.is_persistable:
            logger.warning(
                "Save refused: gross margin %.4f is below the floor",
                result.gross_margin,
            )
            raise HTTPException(
                status_code=409,
                detail={
                    "integrity_status": result.integrity_status.value,
                    "integrity_flags": [
                        flag.model_dump(mode="json")
                        for flag in result.integrity_flags
                    ],
                },
            )
        return {
            "integrity_status": result.integrity_status.value,
            "grand_total": result.grand_total,
            "gross_margin": result.gross_margin,
        }

    # ------------------------------------------------------------------
    # GET /api/sample-quote
    # ------------------------------------------------------------------

    @app.get("/api/sample-quote")
    def sample_quote() -> dict[str, Any]:
        sample_input = QuoteInput.model_validate(
            {
                "areas": [
                    {
                        "id": "area-0",
                        "name": "Main Building",
                        "buildingType": "1",
                        "squareFeet": 25000,
                        "disciplines": ["arch", "mepf"],
                        "lod": "300",
                        "scope": "full",
                        "additionalElevations": 4,
                    },
                    {
                        "id": "area-1",
                        "name": "Courtyard",
                        "buildingType": "14",
                        "squareFeet": 2,
                        "lod": "300",
                    },
                ],
                "dispatchLocation": "TROY",
                "distance": 40,
                "paymentTerms": "net30",
            }
        )
        result = _get_engine().compute_quote(sample_input)
        payload = _quote_payload(result)
        payload["quote_input"] = sample_input.model_dump(mode="json", by_alias=True)
        return payload

    # ------------------------------------------------------------------
    # GET /api/rate-table
    # ------------------------------------------------------------------

    @app.get("/api/rate-table")
    def rate_table() -> dict[str, Any]:
        return _get_engine().rate_table.model_dump(mode="json")

    return app
