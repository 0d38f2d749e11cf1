import logging
from io import BytesIO

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from idealab.config import Settings, load_settings
from idealab.credentials import CredentialStore, JsonFileStore
from idealab.errors import ConfigurationRequired, NoIdea, RequestInFlight
from idealab.gateway import build_gateway, check_connection, classify_exception
from idealab.pdf_report import build_pdf_report
from idealab.prompts import CATEGORIES
from idealab.session import GatewayFactory, IdeaLabSession
from models import (
    CategoryListResponse,
    ConnectionCheckResponse,
    CredentialInput,
    CredentialStatus,
    IdeaRequest,
    SessionSnapshot,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    credentials: CredentialStore | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> FastAPI:
    """
    Composition root: one session, one credential store, one gateway factory.
    """
    settings = settings or load_settings()
    credentials = credentials or CredentialStore(JsonFileStore(settings.state_path))
    if gateway_factory is None:
        def gateway_factory(api_key: str):
            return build_gateway(api_key, settings)

    app = FastAPI(title="Startup Idea Lab API", version="0.1")
    app.state.settings = settings
    app.state.credentials = credentials
    app.state.gateway_factory = gateway_factory
    app.state.session = IdeaLabSession(credentials, gateway_factory, settings=settings)
    logger.info("Idea lab ready (provider=%s, state file %s)", settings.provider, settings.state_path)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # the browser UI is served from elsewhere
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"message": "Startup Idea Lab API is running 🚀"}

    @app.get("/categories", response_model=CategoryListResponse)
    def categories_endpoint():
        return CategoryListResponse(categories=CATEGORIES)

    @app.get("/session", response_model=SessionSnapshot)
    async def session_endpoint():
        return app.state.session.snapshot()

    @app.post("/idea", response_model=SessionSnapshot)
    async def idea_endpoint(payload: IdeaRequest | None = None):
        session: IdeaLabSession = app.state.session
        try:
            return await session.request_idea(payload.category if payload else None)
        except ConfigurationRequired as exc:
            raise _configuration_required(exc)
        except RequestInFlight as exc:
            raise HTTPException(status_code=409, detail=str(exc))

    @app.post("/evaluation", response_model=SessionSnapshot)
    async def evaluation_endpoint():
        session: IdeaLabSession = app.state.session
        try:
            return await session.request_evaluation()
        except ConfigurationRequired as exc:
            raise _configuration_required(exc)
        except (RequestInFlight, NoIdea) as exc:
            raise HTTPException(status_code=409, detail=str(exc))

    @app.put("/credential", response_model=CredentialStatus)
    def save_credential(payload: CredentialInput):
        try:
            warning = app.state.credentials.save(payload.api_key)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        app.state.session.clear_messages()
        return CredentialStatus(configured=True, warning=warning)

    @app.delete("/credential", response_model=CredentialStatus)
    def clear_credential():
        app.state.credentials.clear()
        app.state.session.clear_messages()
        return CredentialStatus(configured=False)

    @app.post("/credential/test", response_model=ConnectionCheckResponse)
    async def test_credential():
        api_key = app.state.credentials.load()
        if not api_key:
            raise _configuration_required(ConfigurationRequired())
        try:
            gateway = app.state.gateway_factory(api_key)
        except Exception as exc:
            logger.warning("Could not build the model gateway: %s", exc)
            error = classify_exception(exc)
            return ConnectionCheckResponse(success=False, message=str(error), details=error.details())
        check = await check_connection(gateway)
        return ConnectionCheckResponse(success=check.success, message=check.message, details=check.details)

    @app.get("/export/pdf")
    async def export_pdf():
        state = app.state.session.state
        if state.idea is None:
            raise HTTPException(status_code=409, detail=str(NoIdea("Generate an idea before exporting a report.")))
        pdf_bytes = build_pdf_report(state.idea, state.evaluation)
        buffer = BytesIO(pdf_bytes)
        headers = {
            "Content-Disposition": 'attachment; filename="startup-idea-report.pdf"'
        }
        return StreamingResponse(buffer, media_type="application/pdf", headers=headers)

    return app


def _configuration_required(exc: ConfigurationRequired) -> HTTPException:
    return HTTPException(
        status_code=428,
        detail={"status": "configuration_required", "message": str(exc)},
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


_settings = load_settings()
configure_logging(_settings.log_level)
app = create_app(_settings)
