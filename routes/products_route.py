import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
from services.products_service import get_product_by_handle, get_related_products, list_products
from shopifymanager import ShopifyError

router = APIRouter(prefix="/api/products")
logger = logging.getLogger(__name__)


@router.get("")
async def get_products(first: int = Query(20, ge=1, le=250), after: Optional[str] = None,
                       category: Optional[str] = None, search: Optional[str] = None,
                       exclude: Optional[str] = None, sort_by: Optional[str] = None):
    # one catalog page, filtered after reshaping
    try:
        return await list_products(first, after, category, search, exclude, sort_by)
    except ShopifyError as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail={
            "error": "Failed to fetch products", "details": str(e)})


# declared before /{handle} so "related" isn't taken for a handle
@router.get("/related")
async def related_products(productId: Optional[str] = None, limit: int = Query(4, ge=1, le=50),
                           collections: Optional[str] = None):
    if not productId:
        raise HTTPException(status_code=400, detail={"error": "Product ID is required"})
    try:
        return await get_related_products(productId, limit, collections)
    except ShopifyError as e:
        logger.error(f"Error fetching related products: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to fetch related products"})


@router.get("/{handle}")
async def fetch_product(handle: str):
    try:
        return await get_product_by_handle(handle)
    except ShopifyError as e:
        logger.error(f"Error fetching product {handle}: {e}")
        raise HTTPException(status_code=500, detail={"error": "Failed to fetch product"})
