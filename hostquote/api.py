"""FastAPI routes for HostQuote."""
import logging
import os
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from hostquote.allocator import allocate, required_resources
from hostquote.estimator import quote
from hostquote.models import (
    CalculationResult,
    OutOfRange,
    PricingConfig,
    QuoteRequest,
    TopologyResponse,
)
from hostquote.observability import RequestLoggingMiddleware, get_metrics_text, record_quote
from hostquote.pricing import DEFAULT_PRICING, PricingConfigError, get_pricing_config, get_pricing_names
from hostquote.report.html_report import generate_quote_html
from hostquote.report.pdf import generate_quote_pdf
from hostquote.report.templates import export_filename
from hostquote.resilience import get_report_timeout_sec, run_sync_with_timeout
from hostquote.security import RateLimitMiddleware

_LOG = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    raw = (os.environ.get("HOSTQUOTE_CORS_ORIGINS") or "").strip()
    if not raw:
        return []
    if raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


app = FastAPI(
    title="HostQuote",
    description="Hosting cost quotes for MIR-RT on BZ Cloud",
    version="1.0.0",
)
origins = _cors_origins()
if origins:
    app.add_middleware(CORSMiddleware, allow_origins=origins, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)


def _pricing_or_404(name: str) -> PricingConfig:
    try:
        config = get_pricing_config(name)
    except PricingConfigError as e:
        _LOG.error("Rate card %s is invalid: %s", name, e)
        raise HTTPException(status_code=500, detail=f"Rate card '{name}' is misconfigured.")
    if config is None:
        raise HTTPException(status_code=404, detail=f"Unknown rate card '{name}'.")
    return config


def _do_quote(body: QuoteRequest) -> tuple[CalculationResult, PricingConfig]:
    """Compute the quote or raise 422 naming the violated bound."""
    config = _pricing_or_404(body.pricing)
    outcome = quote(body.number_of_users, config)
    if isinstance(outcome, OutOfRange):
        record_quote(outcome.violated_bound)
        _LOG.info(
            "quote refused",
            extra={
                "number_of_users": body.number_of_users,
                "violated_bound": outcome.violated_bound,
                "limit": outcome.limit,
            },
        )
        raise HTTPException(status_code=422, detail=outcome.model_dump())
    record_quote("ok")
    _LOG.info(
        "quote computed",
        extra={
            "number_of_users": body.number_of_users,
            "total_vms": outcome.vm_configuration.total_vms,
            "total": round(outcome.total, 2),
        },
    )
    return outcome, config


@app.get("/v1/health")
def health():
    """Health check."""
    return {"status": "ok", "service": "hostquote"}


@app.get("/v1/metrics")
def metrics():
    """Prometheus-style metrics (request counts, quotes, uptime, duration)."""
    return PlainTextResponse(get_metrics_text(), media_type="text/plain; charset=utf-8")


@app.get("/v1/pricing")
def pricing_list():
    """List available rate cards."""
    return get_pricing_names()


@app.get("/v1/pricing/{name}", response_model=PricingConfig)
def pricing_detail(name: str):
    """Full rate card: resources, unit costs, allocation thresholds, prerequisites."""
    return _pricing_or_404(name)


@app.get("/v1/topology", response_model=TopologyResponse)
def topology(
    users: int = Query(..., ge=1, le=1_000_000, description="Number of users"),
    pricing: str = Query(DEFAULT_PRICING, max_length=64),
):
    """VM topology and raw resource requirements for a user count (no pricing)."""
    config = _pricing_or_404(pricing)
    vm = allocate(users, config.vm_calculation)
    return TopologyResponse(
        number_of_users=users,
        vm_configuration=vm,
        required_resources=required_resources(vm, config),
    )


@app.post("/v1/quote", response_model=CalculationResult)
def create_quote(body: QuoteRequest):
    """
    Itemized quote for a user count. 422 with {violated_bound, limit, message} when the
    count is outside the rate card prerequisites.
    """
    result, _ = _do_quote(body)
    return result


@app.post("/v1/report")
def report(body: QuoteRequest, req: Request):
    """Quote as a PDF attachment."""
    result, config = _do_quote(body)
    static_dir = getattr(req.app.state, "static_dir", None)
    try:
        pdf_bytes = run_sync_with_timeout(
            get_report_timeout_sec(),
            generate_quote_pdf,
            result,
            config,
            static_dir,
        )
    except TimeoutError:
        raise HTTPException(status_code=504, detail="Report generation timed out.")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={export_filename(result)}"},
    )


@app.post("/v1/report/html", response_class=HTMLResponse)
def report_html(body: QuoteRequest):
    """Printable HTML quote."""
    result, config = _do_quote(body)
    return HTMLResponse(generate_quote_html(result, config))


def set_static_dir(app: FastAPI, static_dir: Path):
    """Remember where quote assets (logo) live."""
    app.state.static_dir = Path(static_dir).resolve()
