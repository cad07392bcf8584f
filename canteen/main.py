import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from canteen.api import menu_routes, order_routes, user_routes
from canteen.auth.routes import auth_backend, fastapi_users
from canteen.core.config import settings
from canteen.core.constants import Role
from canteen.core.errors import register_error_handlers
from canteen.crud.user import create_user_with_role, get_admin
from canteen.db import async_session, create_db_and_tables
from canteen.realtime import ws_routes
from canteen.schemas.user import UserCreate, UserRead
from canteen.views import routes as view_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


async def seed_default_admin():
    async with async_session() as db:
        if await get_admin(db):
            log.info("🔐 Admin already exists. No seed needed.")
            return
        log.info("👤 No admin found. Creating default admin user...")
        await create_user_with_role(
            db,
            name="Admin",
            email=settings.default_admin_email,
            password=settings.default_admin_password,
            role=Role.admin,
        )
        log.info("✅ Default admin created: %s", settings.default_admin_email)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("🔧 Starting DB setup...")
    await create_db_and_tables()
    log.info("✅ DB schema ready.")
    await seed_default_admin()
    yield


# Create the FastAPI app
app = FastAPI(title="Canteen API", version="1.0.0", lifespan=lifespan)

# Session cookie backs the HTML views (JWT + cart); the JSON API stays stateless
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)
app.add_exception_handler(view_routes.LoginRequired, view_routes.login_required_handler)


# Swagger Bearer token support for "Authorize" button
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Canteen API",
        version="1.0.0",
        description="Menu, cart checkout, orders and bills for the campus canteen.",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }
    for path in openapi_schema["paths"].values():
        for operation in path.values():
            operation["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# Auth routes
app.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/auth/jwt",
    tags=["auth"]
)
app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/auth",
    tags=["auth"]
)
app.include_router(user_routes.router)

# Core app routers
app.include_router(menu_routes.router)
app.include_router(order_routes.router)
app.include_router(ws_routes.router)
app.include_router(view_routes.router)


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse("/ui/", status_code=302)
