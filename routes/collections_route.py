import logging
from typing import Optional
from fastapi import APIRouter, HTTPException
from services.collections_service import get_collection_products, list_collections
from shopifymanager import ShopifyError

router = APIRouter(prefix="/api/collections")
logger = logging.getLogger(__name__)


@router.get("")
async def get_collections():
    try:
        collections = await list_collections()
    except ShopifyError as e:
        logger.error(f"Error fetching collections: {e}")
        raise HTTPException(status_code=500, detail={
            "error": "Failed to fetch collections", "details": str(e)})
    return {"collections": collections}


@router.get("/{handle}/products")
async def get_products_of_collection(handle: str, first: int = 20, after: Optional[str] = None):
    try:
        return await get_collection_products(handle, first, after)
    except ShopifyError as e:
        logger.error(f"Error fetching collection products: {e}")
        raise HTTPException(status_code=500, detail={
            "error": "Failed to fetch collection products", "details": str(e)})
