# storefront/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# ---------------------------------------------
# LOAD ENVIRONMENT VARIABLES
# ---------------------------------------------
load_dotenv()

from storefront.config import settings
from storefront.db import Base, engine
from storefront.middleware import request_id_middleware
from storefront.routers import health, orders, pay, payments


@asynccontextmanager
async def lifespan(app: FastAPI):
    # local sqlite databases are created on the fly; Postgres goes through alembic
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    yield


# ---------------------------------------------
# APP INIT
# ---------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------
# MIDDLEWARE
# ---------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_id_middleware)

# ---------------------------------------------
# ROUTERS
# ---------------------------------------------
app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])

# Hosted payment page
app.include_router(pay.router, tags=["Payment Pages"])


@app.get("/")
def root():
    return {"app": settings.APP_NAME, "version": settings.APP_VERSION}
