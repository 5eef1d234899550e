"""REST interface for the linter - FastAPI application.

Endpoints are mounted both at the root and below /mwlint:

    GET  /            usage text
    GET  /examples    rule examples
    POST /            lint the request body (plain wikitext)

Run with ``mwlint-web`` or ``uvicorn --factory mwlint_server.web:create_app``.
"""
from contextlib import asynccontextmanager
from typing import Annotated, Any
import logging
import sys

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from mwlint_server import __version__
from mwlint_server.config import Config
from mwlint_server.core.linter import Rule, collect_examples, get_rules, lint_source
from mwlint_server.core.settings import Settings

logger = logging.getLogger(__name__)

USAGE = (
    "no GET endpoints available except /examples. "
    "Use POST to send mediawiki source code."
)


class CORSJSONResponse(JSONResponse):
    """JSON response readable from any origin."""

    def __init__(self, content: Any, status_code: int = 200, headers: dict | None = None, **kwargs):
        headers = dict(headers or {})
        headers["Access-Control-Allow-Origin"] = "*"
        super().__init__(content, status_code=status_code, headers=headers, **kwargs)


def json_response(payload: Any) -> Response:
    """
    Serialize ``payload`` into a CORS enabled JSON response.

    A payload that cannot be serialized is the only failure answered with
    500; lint errors are regular 200 payloads.
    """
    try:
        return CORSJSONResponse(payload)
    except (TypeError, ValueError) as e:
        logger.error(f"Could not serialize response: {e}", exc_info=True)
        return Response(status_code=500)


# ============================================================================
# Dependencies
# ============================================================================

def get_settings(request: Request) -> Settings:
    """Settings built once in ``create_app``."""
    return request.app.state.settings


def get_rule_battery(request: Request) -> list[Rule]:
    """Rules configured on the app, or the full battery."""
    rules = request.app.state.rules
    return get_rules() if rules is None else rules


SettingsDep = Annotated[Settings, Depends(get_settings)]
RulesDep = Annotated[list[Rule], Depends(get_rule_battery)]


# ============================================================================
# Routes
# ============================================================================

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def index() -> str:
    """Usage text."""
    return USAGE


@router.get("/examples")
def examples(rules: RulesDep) -> Response:
    """Examples of every rule, in rule order."""
    return json_response([example.to_dict() for example in collect_examples(rules)])


@router.post("/")
async def lint(request: Request, settings: SettingsDep, rules: RulesDep) -> Response:
    """Lint the wikitext sent as request body."""
    body = await request.body()
    source = body.decode("utf-8", errors="replace")

    result = await run_in_threadpool(lint_source, source, settings, rules)

    if result.is_error:
        logger.info(f"Lint request failed: {result.error}")
    else:
        logger.info(f"Lint request: {len(result.lints)} finding(s) in {len(source)} chars")

    return json_response(result.to_dict())


# ============================================================================
# Application
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    checker = app.state.settings.tex_checker
    logger.info(f"mwlint v{__version__} ready (formula checks: {'on' if checker else 'off'})")
    yield
    if checker is not None:
        stats = checker.stats()
        logger.info(
            f"Formula cache: {stats['size']}/{stats['capacity']} entries, "
            f"{stats['hits']} hits, {stats['misses']} misses"
        )


def create_app(settings: Settings | None = None, rules: list[Rule] | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Pipeline settings (default: built from ``Config.load()``)
        rules: Rule battery (default: all registered rules)
    """
    if settings is None:
        settings = Settings.from_config(Config.load())

    app = FastAPI(
        title="mwlint",
        description="Linter for MediaWiki source code",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rules = rules

    app.include_router(router)
    app.include_router(router, prefix="/mwlint")

    return app


def main():
    """Main entry point for the HTTP server."""
    import uvicorn

    config = Config.load()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    try:
        app = create_app(Settings.from_config(config))
        logger.info(f"Starting HTTP server on {config.host}:{config.port}...")
        uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
