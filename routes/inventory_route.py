import logging
from fastapi import APIRouter, HTTPException
from schemas.inventory_schemas import InventoryAdjustSchema
from services.inventory_service import adjust_inventory
from shopifymanager import ShopifyError

router = APIRouter(prefix="/api/inventory")
logger = logging.getLogger(__name__)


@router.post("/adjust")
async def adjust(data: InventoryAdjustSchema):
    # manual increment/decrement of a variant's stock
    try:
        return await adjust_inventory(data)
    except ShopifyError as e:
        logger.error(f"Error adjusting inventory: {e}")
        raise HTTPException(status_code=500, detail={"error": "Internal server error", "details": str(e)})
