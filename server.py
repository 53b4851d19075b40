import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import shopifymanager
from routes.cart_route import router as cart_router
from routes.collections_route import router as collections_router
from routes.email_route import router as email_router
from routes.inventory_route import router as inventory_router
from routes.orders_route import router as orders_router
from routes.products_route import router as products_router


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Closing Shopify clients")
    await shopifymanager.close_clients()


app = FastAPI(title="TupperStock", lifespan=lifespan)


app.include_router(products_router)
app.include_router(collections_router)
app.include_router(orders_router)
app.include_router(inventory_router)
app.include_router(cart_router)
app.include_router(email_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,  # the cart travels as a cookie
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    # dict details are the response body as is, e.g. {"error": ..., "variantId": ...}
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body),
                        headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=jsonable_encoder(
        {"error": "Invalid request", "details": exc.errors()}))


@app.get("/")
def connection():
    return {"message": "Connected Successfully"}
