from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from kivo_admin import queries
from kivo_admin.auth import AuthError, AuthService, bearer_token, get_auth, require_session
from kivo_admin.config import Settings, get_settings
from kivo_admin.log import configure_logging
from kivo_admin.mapping import to_view
from kivo_admin.models import InvalidTransition, ProductStatus, SellerStatus
from kivo_admin.remote import RemoteCollectionService
from kivo_admin.store import SyncedCollectionStore


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(CamelModel):
    email: str
    password: str


class StatusUpdate(CamelModel):
    status: ProductStatus


class BulkApproveRequest(CamelModel):
    ids: list[str]


class AssignDeliveryRequest(CamelModel):
    rider_name: str


def build_store(settings: Settings) -> SyncedCollectionStore:
    remote = RemoteCollectionService.from_settings(settings) if settings.remote_configured else None
    return SyncedCollectionStore(remote, loading_timeout=settings.loading_timeout)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings)
    if app.state.store is None:
        app.state.store = build_store(settings)
    if app.state.auth is None:
        app.state.auth = AuthService.from_settings(settings)

    # load in the background so startup never waits on the remote
    app.state.store.start()
    yield
    await app.state.store.aclose()
    await app.state.auth.close()


def get_store(request: Request) -> SyncedCollectionStore:
    return request.app.state.store


def _not_found(kind: str, record_id: str) -> HTTPException:
    return HTTPException(404, f"{kind} '{record_id}' not found")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SyncedCollectionStore] = None,
    auth: Optional[AuthService] = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Kivo Admin Service",
        version="1.0.0",
        description="Listing review, delivery assignment and seller moderation for Kivo",
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.auth = auth

    admin = [Depends(require_session)]

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    # ── Auth ─────────────────────────────────────────────────────────────────

    @app.post("/api/v1/auth/login", summary="Sign in with email and password")
    async def login(body: LoginRequest, auth: AuthService = Depends(get_auth)):
        try:
            session = await auth.sign_in_with_password(body.email, body.password)
        except AuthError as exc:
            raise HTTPException(401, str(exc))
        return {
            "authenticated": True,
            "email": session.email,
            "accessToken": session.access_token,
            "tokenType": "bearer",
        }

    @app.post("/api/v1/auth/logout", summary="Sign out")
    async def logout(
        token: Optional[str] = Depends(bearer_token),
        auth: AuthService = Depends(get_auth),
    ):
        await auth.sign_out(token)
        return {"authenticated": False}

    @app.get("/api/v1/auth/session", summary="Current session")
    async def current_session(
        token: Optional[str] = Depends(bearer_token),
        auth: AuthService = Depends(get_auth),
    ):
        session = auth.get_session(token)
        return {
            "authenticated": session is not None,
            "email": session.email if session else None,
        }

    # ── State / dashboard ────────────────────────────────────────────────────

    @app.get("/api/v1/state", dependencies=admin, summary="Full snapshot of all collections")
    async def state(store: SyncedCollectionStore = Depends(get_store)):
        snap = store.snapshot()
        return {
            "products": [to_view(p) for p in snap.products],
            "orders": [to_view(o) for o in snap.orders],
            "sellers": [to_view(s) for s in snap.sellers],
            "loading": snap.loading,
        }

    @app.get("/api/v1/dashboard", dependencies=admin, summary="Headline counts and queues")
    async def dashboard(store: SyncedCollectionStore = Depends(get_store)):
        summary = queries.dashboard_summary(store.snapshot())
        return {
            "pendingProducts": summary.pending_products,
            "openOrders": summary.open_orders,
            "activeSellers": summary.active_sellers,
            "recentOrders": [to_view(o) for o in summary.recent_orders],
            "approvalQueue": [to_view(p) for p in summary.approval_queue],
            "loading": store.loading,
        }

    # ── Products ─────────────────────────────────────────────────────────────

    @app.get("/api/v1/products", dependencies=admin, summary="List products")
    async def list_products(
        status: Optional[ProductStatus] = Query(default=None),
        fabric: Optional[str] = Query(default=None),
        store: SyncedCollectionStore = Depends(get_store),
    ):
        products = store.products
        return {
            "products": [to_view(p) for p in queries.filter_products(products, status, fabric)],
            "counts": queries.product_status_counts(products, fabric),
            "fabrics": queries.unique_fabrics(products),
        }

    @app.post("/api/v1/products/{product_id}/status", dependencies=admin, summary="Approve or reject a listing")
    async def set_product_status(
        product_id: str,
        body: StatusUpdate,
        store: SyncedCollectionStore = Depends(get_store),
    ):
        try:
            found = store.update_product_status(product_id, body.status)
        except InvalidTransition as exc:
            raise HTTPException(409, str(exc))
        except ValueError as exc:
            raise HTTPException(400, str(exc))
        if not found:
            raise _not_found("Product", product_id)
        return to_view(store.get_product(product_id))

    @app.post("/api/v1/products/bulk-approve", dependencies=admin, summary="Approve many listings")
    async def bulk_approve(body: BulkApproveRequest, store: SyncedCollectionStore = Depends(get_store)):
        return {"approved": store.bulk_approve_products(body.ids)}

    # ── Orders ───────────────────────────────────────────────────────────────

    @app.get("/api/v1/orders", dependencies=admin, summary="List or search orders")
    async def list_orders(
        q: Optional[str] = Query(default=None, description="Matches id, customer or product"),
        store: SyncedCollectionStore = Depends(get_store),
    ):
        return {"orders": [to_view(o) for o in queries.search_orders(store.orders, q)]}

    @app.post("/api/v1/orders/{order_id}/assign-delivery", dependencies=admin, summary="Hand an order to a rider")
    async def assign_delivery(
        order_id: str,
        body: AssignDeliveryRequest,
        store: SyncedCollectionStore = Depends(get_store),
    ):
        if not body.rider_name.strip():
            raise HTTPException(400, "riderName must not be blank")
        try:
            assigned = store.assign_delivery(order_id, body.rider_name)
        except InvalidTransition as exc:
            raise HTTPException(409, str(exc))
        if not assigned:
            raise _not_found("Order", order_id)
        return to_view(store.get_order(order_id))

    # ── Sellers ──────────────────────────────────────────────────────────────

    @app.get("/api/v1/sellers", dependencies=admin, summary="List sellers")
    async def list_sellers(
        status: Optional[SellerStatus] = Query(default=None),
        store: SyncedCollectionStore = Depends(get_store),
    ):
        return {"sellers": [to_view(s) for s in queries.sellers_by_status(store.sellers, status)]}

    @app.post("/api/v1/sellers/{seller_id}/toggle-status", dependencies=admin, summary="Suspend or reactivate a seller")
    async def toggle_seller(seller_id: str, store: SyncedCollectionStore = Depends(get_store)):
        if not store.toggle_seller_status(seller_id):
            raise _not_found("Seller", seller_id)
        return to_view(store.get_seller(seller_id))

    return app


app = create_app()
