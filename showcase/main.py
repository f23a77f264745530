# showcase/main.py

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import List, Optional
from pydantic import BaseModel

from showcase.config import get_settings
from showcase.models import ProductView
from showcase.session import CatalogSession, build_catalog_session

from showcase.logger import configure_logging, get_logger
configure_logging()

log = get_logger(__name__)
log.info("FastAPI application is starting...")

SHUTDOWN_TIMEOUT = 5.0


class CatalogStatus(BaseModel):
  seeded: bool
  settled: bool
  total: int
  version: int


@asynccontextmanager
async def lifespan(app: FastAPI):
  # View mount: one catalog session for the lifetime of the app
  session = build_catalog_session(get_settings())
  app.state.catalog = session
  session.mount()

  yield

  # View teardown: late resolution results are dropped from here on
  session.teardown(wait=True, timeout=SHUTDOWN_TIMEOUT)


app = FastAPI(title="Product Showcase",
              lifespan=lifespan,
              description="Searchable product grid. Products without a photo get a square-cropped link preview in the background.",
              version="1.0.0")


def _catalog(request: Request) -> CatalogSession:
  return request.app.state.catalog


@app.get("/products", response_model=List[ProductView])
def list_products(
  request: Request,
  search: Optional[str] = Query(None, description="Case-insensitive substring of the product title")
  ) -> List[ProductView]:
  """
  Current store contents filtered by title, newest first.
  Photos may still change between calls while preview images are resolving.
  """
  products = _catalog(request).visible_products(search)
  log.debug(f"/products called with search='{search}', returning {len(products)} products")
  return products


@app.get("/status", response_model=CatalogStatus)
def catalog_status(request: Request) -> CatalogStatus:
  session = _catalog(request)
  return CatalogStatus(
    seeded=session.store.seeded,
    settled=session.settled,
    total=len(session.store),
    version=session.store.version
  )


@app.get("/")
def root():
  return {"messages": "Product Showcase API - endpoints: /products?search=..., /status, /health"}


@app.get("/health")
def healthcheck():
  return {"status": "ok"}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error(f"Global Exception Unhandled Exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
    )
