"""FastAPI application factory for skillscan."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from skillscan import __version__
from skillscan.api.schemas import AuditBody
from skillscan.audit import run_audit
from skillscan.config import Config, load_config
from skillscan.observability import add_observability_middleware
from skillscan.output.json_output import report_payload
from skillscan.rules import all_rules, find_rule

log = logging.getLogger("skillscan.api")


def create_app(config: Config | None = None) -> FastAPI:
    """Build and return a configured FastAPI application."""
    app = FastAPI(
        title="skillscan",
        description="Security and quality audits for agent skill directories",
        version=__version__,
    )
    app.state.config = config if config is not None else load_config()

    # ---------------------------------------------------------------
    # Exception handlers: {"error": "..."} bodies
    # ---------------------------------------------------------------

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            loc = ".".join(str(part) for part in first.get("loc", []))
            msg = first.get("msg", "Invalid input")
            detail = f"{loc}: {msg}" if loc else msg
        else:
            detail = "Invalid JSON body"
        return JSONResponse(
            status_code=400,
            content={"error": detail},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        log.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc)},
        )

    add_observability_middleware(app)

    # ---------------------------------------------------------------
    # Routes
    # ---------------------------------------------------------------

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__}

    @app.get("/rules")
    def list_rules():
        rules = [r.to_dict() for r in all_rules()]
        return {"rules": rules, "total": len(rules)}

    @app.get("/rules/{rule_id:path}")
    def get_rule(rule_id: str):
        info = find_rule(rule_id)
        if info is None:
            raise HTTPException(status_code=404, detail=f"Unknown rule: {rule_id}")
        return info.to_dict()

    @app.post("/audit")
    def audit(body: AuditBody, request: Request):
        """Audit a skill directory; blocks until every scanner finishes."""
        path = Path(body.path)
        if not path.is_dir():
            raise HTTPException(status_code=400, detail=f"Path does not exist: {body.path}")
        cfg: Config = request.app.state.config
        if body.strict is not None:
            cfg = cfg.with_strict(body.strict)
        report = run_audit(path, cfg)
        return report_payload(report)

    return app
