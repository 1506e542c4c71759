import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from storefront.core.config import settings
from storefront.core.logging_config import setup_logging

# 1. Infrastructure & Domain Imports
from storefront.domain.errors import FormValidationError, StorefrontError
from storefront.infrastructure.auth_client import SupabaseAuthClient
from storefront.infrastructure.state_manager import StateManager
from storefront.infrastructure.supabase_client import PostgrestClient
from storefront.infrastructure.repositories.catalog_repository import SupabaseCatalogRepository
from storefront.infrastructure.repositories.issue_repository import SupabaseIssueRepository
from storefront.infrastructure.repositories.order_repository import SupabaseOrderRepository
from storefront.application.catalog import CatalogReader
from storefront.application.confirmation import OrderConfirmationReader
from storefront.application.orchestrator import CheckoutOrchestrator
from storefront.application.support_chat import ChatSessionRegistry
from storefront.interfaces import storefront_api, support_api

setup_logging()
logger = logging.getLogger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError):
    body = {"notice": exc.notice, "redirect_to": exc.redirect_to}
    if isinstance(exc, FormValidationError):
        body["fields"] = exc.fields
    return JSONResponse(status_code=exc.status_code, content=body)


def create_app(
    state_manager=None,
    catalog_repo=None,
    order_repo=None,
    issue_repo=None,
    auth_client=None,
) -> FastAPI:
    # ---------------------------------------------------------
    # COMPOSITION ROOT
    # ---------------------------------------------------------
    closables = []
    if None in (catalog_repo, order_repo, issue_repo):
        rest = PostgrestClient(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        closables.append(rest)
        catalog_repo = catalog_repo or SupabaseCatalogRepository(rest)
        order_repo = order_repo or SupabaseOrderRepository(rest)
        issue_repo = issue_repo or SupabaseIssueRepository(rest)
    if auth_client is None:
        auth_client = SupabaseAuthClient(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        closables.append(auth_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        for client in closables:
            await client.aclose()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    app.state.state_manager = state_manager or StateManager(settings.REDIS_URL)
    app.state.auth_client = auth_client
    app.state.catalog = CatalogReader(catalog_repo)
    app.state.orchestrator = CheckoutOrchestrator(order_repo)
    app.state.confirmation = OrderConfirmationReader(order_repo)
    app.state.chat_sessions = ChatSessionRegistry(issue_repo)
    logger.info(f"✅ {settings.PROJECT_NAME} wired against {settings.SUPABASE_URL}")

    app.add_exception_handler(StorefrontError, storefront_error_handler)

    # Include Routers
    app.include_router(storefront_api.router)
    app.include_router(support_api.router)

    @app.get("/")
    def health_check():
        mode = "redis" if app.state.state_manager.redis_available else "ram"
        return {"status": "active", "system": "HN Mart Storefront", "sessions": mode}

    return app


app = create_app()
