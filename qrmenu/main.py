"""
FastAPI Application Entry Point

QR Menu API - public menu viewer and password protected admin panel.
Every route is a thin wrapper around the data-access layer in
qrmenu.services.

Endpoints:
    - GET /api/restaurant?public=true: Public menu (no admin secret)
    - GET/PUT /api/restaurant: Full data / replace restaurant info
    - POST /api/admin/login, /api/admin/logout: Admin session cookie
    - PUT /api/admin/password: Change the admin secret
    - POST /api/admin/migrate: Bulk import a RestaurantData document
    - /api/categories[/{id}[/items[/{item_id}]]]: Category and item CRUD
    - GET /health: System health check
"""

import logging
import secrets
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qrmenu.core.config import get_settings, setup_logging
from qrmenu.core.exceptions import NotFoundError, StoreUnavailableError, StoreWriteError
from qrmenu.schemas import (
    ActionResponse,
    CategoryCreate,
    CategoryCreateResponse,
    CategoryUpdate,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    MenuCategory,
    MenuItem,
    MenuItemCreate,
    MenuItemCreateResponse,
    MenuItemUpdate,
    PasswordChangeRequest,
    RestaurantData,
    RestaurantInfoUpdate,
)
from qrmenu.services import MenuAggregator, MenuRepository, get_aggregator, get_repository
from qrmenu.services.store import get_document_store

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

SESSION_VALUE = "authenticated"


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Fallback: {settings.fallback_mode.value}")
    logger.info("=" * 60)

    store = get_document_store()
    try:
        await store.init()
        logger.info(f"✅ Document store ready: {store.provider_name}")
    except StoreUnavailableError as e:
        # Reads keep working on the demo dataset (fail-open)
        logger.warning(f"⚠️ Document store unavailable at startup: {e}")

    yield  # Application runs

    logger.info("Shutting down...")
    await store.close()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Digital restaurant menu with an admin panel. Serves a bundled demo "
        "menu until real data has been entered."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# SESSION HELPERS
# =============================================================================

def is_admin(request: Request) -> bool:
    """Check the admin session cookie."""
    return request.cookies.get(settings.session_cookie_name) == SESSION_VALUE


def require_admin(request: Request) -> None:
    """Dependency guarding admin routes."""
    if not is_admin(request):
        raise HTTPException(status_code=401, detail="Unauthorized")


def secrets_match(given: str, stored: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), stored.encode("utf-8"))


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍽️ Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "menu": "/api/restaurant?public=true",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    aggregator: MenuAggregator = Depends(get_aggregator),
) -> HealthResponse:
    """Report store connectivity and whether the demo dataset is being served."""
    store = aggregator.repository.store
    store_ok = await store.health_check()
    using_static = await aggregator.is_using_static_data()

    return HealthResponse(
        status="operational" if store_ok else "degraded",
        store="healthy" if store_ok else "unhealthy",
        store_provider=store.provider_name,
        fallback_mode=aggregator.policy.mode.value,
        using_static_data=using_static,
        timestamp=datetime.now(),
    )


# =============================================================================
# RESTAURANT ENDPOINTS
# =============================================================================

@app.get("/api/restaurant", tags=["Restaurant"], summary="Restaurant Data")
async def get_restaurant(
    request: Request,
    public: bool = Query(False),
    aggregator: MenuAggregator = Depends(get_aggregator),
) -> Response:
    """
    Full restaurant data for admins; with ?public=true, the menu without
    the admin secret and with caching disabled.
    """
    if public:
        data = await aggregator.get_public_snapshot()
        return JSONResponse(
            content=data.model_dump(mode="json", by_alias=True, exclude_none=True),
            headers={"Cache-Control": "no-store, no-cache, must-revalidate"},
        )

    if not is_admin(request):
        raise HTTPException(status_code=401, detail="Unauthorized")

    data = await aggregator.get_full_snapshot()
    return JSONResponse(content=data.model_dump(mode="json", by_alias=True, exclude_none=True))


@app.put(
    "/api/restaurant",
    response_model=ActionResponse,
    tags=["Restaurant"],
    dependencies=[Depends(require_admin)],
)
async def update_restaurant(
    body: RestaurantInfoUpdate,
    repository: MenuRepository = Depends(get_repository),
) -> ActionResponse:
    """Replace the restaurant info."""
    await repository.update_info(body.info)
    return ActionResponse(message="Restaurant info updated")


# =============================================================================
# ADMIN ENDPOINTS
# =============================================================================

@app.post("/api/admin/login", response_model=ActionResponse, tags=["Admin"])
async def login(
    body: LoginRequest,
    response: Response,
    repository: MenuRepository = Depends(get_repository),
) -> ActionResponse:
    """
    Check the admin secret and open a session.

    On an empty store the demo secret is accepted and persisted, so the
    first login turns the tenant into a configured one. A secret that is
    already stored is never overwritten here.
    """
    empty = await repository.is_empty()
    stored = await repository.get_credential()

    if not secrets_match(body.password, stored):
        raise HTTPException(status_code=401, detail="Wrong password")

    if empty:
        try:
            if not await repository.has_stored_credential():
                await repository.update_credential(body.password)
                logger.info("First login: admin password stored")
        except (StoreUnavailableError, StoreWriteError) as e:
            logger.warning(f"Could not store admin password on first login: {e}")

    response.set_cookie(
        key=settings.session_cookie_name,
        value=SESSION_VALUE,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.session_max_age_seconds,
    )
    return ActionResponse(message="Logged in")


@app.post("/api/admin/logout", response_model=ActionResponse, tags=["Admin"])
async def logout(response: Response) -> ActionResponse:
    """Close the admin session."""
    response.delete_cookie(settings.session_cookie_name)
    return ActionResponse(message="Logged out")


@app.put(
    "/api/admin/password",
    response_model=ActionResponse,
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)
async def change_password(
    body: PasswordChangeRequest,
    repository: MenuRepository = Depends(get_repository),
) -> ActionResponse:
    """Change the admin secret; the current one must match."""
    stored = await repository.get_credential()
    if not secrets_match(body.current_password, stored):
        raise HTTPException(status_code=401, detail="Current password is wrong")

    await repository.update_credential(body.new_password)
    return ActionResponse(message="Password changed")


@app.post(
    "/api/admin/migrate",
    response_model=ActionResponse,
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)
async def migrate(
    body: RestaurantData,
    aggregator: MenuAggregator = Depends(get_aggregator),
) -> ActionResponse:
    """Bulk import a complete RestaurantData document."""
    await aggregator.migrate_from_json(body)
    return ActionResponse(
        message=f"Imported {len(body.categories)} categories"
    )


# =============================================================================
# CATEGORY ENDPOINTS
# =============================================================================

@app.get(
    "/api/categories",
    response_model=list[MenuCategory],
    response_model_by_alias=True,
    response_model_exclude_none=True,
    tags=["Categories"],
    dependencies=[Depends(require_admin)],
)
async def list_categories(
    repository: MenuRepository = Depends(get_repository),
) -> list[MenuCategory]:
    return await repository.list_categories()


@app.post(
    "/api/categories",
    response_model=CategoryCreateResponse,
    response_model_exclude_none=True,
    tags=["Categories"],
    dependencies=[Depends(require_admin)],
)
async def create_category(
    body: CategoryCreate,
    repository: MenuRepository = Depends(get_repository),
) -> CategoryCreateResponse:
    category_id = await repository.create_category(body.name, body.description)
    category = await repository.get_category(category_id)
    return CategoryCreateResponse(message="Category created", category=category)


@app.get(
    "/api/categories/{category_id}",
    response_model=MenuCategory,
    response_model_exclude_none=True,
    tags=["Categories"],
    dependencies=[Depends(require_admin)],
)
async def get_category(
    category_id: str,
    repository: MenuRepository = Depends(get_repository),
) -> MenuCategory:
    return await repository.get_category(category_id)


@app.put(
    "/api/categories/{category_id}",
    response_model=ActionResponse,
    tags=["Categories"],
    dependencies=[Depends(require_admin)],
)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    repository: MenuRepository = Depends(get_repository),
) -> ActionResponse:
    await repository.update_category(
        category_id, body.model_dump(by_alias=True, exclude_unset=True)
    )
    return ActionResponse(message="Category updated")


@app.delete(
    "/api/categories/{category_id}",
    response_model=ActionResponse,
    tags=["Categories"],
    dependencies=[Depends(require_admin)],
)
async def delete_category(
    category_id: str,
    repository: MenuRepository = Depends(get_repository),
) -> ActionResponse:
    await repository.delete_category(category_id)
    return ActionResponse(message="Category deleted")


# =============================================================================
# ITEM ENDPOINTS
# =============================================================================

@app.get(
    "/api/categories/{category_id}/items",
    response_model=list[MenuItem],
    response_model_exclude_none=True,
    tags=["Items"],
    dependencies=[Depends(require_admin)],
)
async def list_items(
    category_id: str,
    repository: MenuRepository = Depends(get_repository),
) -> list[MenuItem]:
    category = await repository.get_category(category_id)
    return category.items


@app.post(
    "/api/categories/{category_id}/items",
    response_model=MenuItemCreateResponse,
    response_model_exclude_none=True,
    tags=["Items"],
    dependencies=[Depends(require_admin)],
)
async def create_item(
    category_id: str,
    body: MenuItemCreate,
    repository: MenuRepository = Depends(get_repository),
) -> MenuItemCreateResponse:
    item_id = await repository.create_item(category_id, body.to_document())
    item = await repository.get_item(category_id, item_id)
    return MenuItemCreateResponse(message="Item created", item=item)


@app.get(
    "/api/categories/{category_id}/items/{item_id}",
    response_model=MenuItem,
    response_model_exclude_none=True,
    tags=["Items"],
    dependencies=[Depends(require_admin)],
)
async def get_item(
    category_id: str,
    item_id: str,
    repository: MenuRepository = Depends(get_repository),
) -> MenuItem:
    return await repository.get_item(category_id, item_id)


@app.put(
    "/api/categories/{category_id}/items/{item_id}",
    response_model=ActionResponse,
    tags=["Items"],
    dependencies=[Depends(require_admin)],
)
async def update_item(
    category_id: str,
    item_id: str,
    body: MenuItemUpdate,
    repository: MenuRepository = Depends(get_repository),
) -> ActionResponse:
    await repository.update_item(
        category_id, item_id, body.model_dump(by_alias=True, exclude_unset=True)
    )
    return ActionResponse(message="Item updated")


@app.delete(
    "/api/categories/{category_id}/items/{item_id}",
    response_model=ActionResponse,
    tags=["Items"],
    dependencies=[Depends(require_admin)],
)
async def delete_item(
    category_id: str,
    item_id: str,
    repository: MenuRepository = Depends(get_repository),
) -> ActionResponse:
    await repository.delete_item(category_id, item_id)
    return ActionResponse(message="Item deleted")


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def error_response(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(404, "Not Found", str(exc))


@app.exception_handler(StoreWriteError)
async def store_write_handler(request: Request, exc: StoreWriteError) -> JSONResponse:
    logger.error(f"Write failed on {request.url.path}: {exc}")
    return error_response(
        500,
        "Write Failed",
        str(exc) if settings.debug else f"Could not complete {exc.operation}",
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error(f"Store unavailable on {request.url.path}: {exc}")
    return error_response(503, "Service Unavailable", "Menu data is temporarily unavailable")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")
    return error_response(
        500,
        "Internal Server Error",
        str(exc) if settings.debug else "An unexpected error occurred",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("qrmenu.main:app", host=settings.api_host, port=settings.api_port)
