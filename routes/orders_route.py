import logging
from fastapi import APIRouter, BackgroundTasks, HTTPException, Response
from schemas.orders_schemas import OrderSchema
from services.cart_service import clear_cart, save_cart
from services.email_service import send_order_confirmation_safely
from services.orders_service import build_confirmation, create_order
from shopifymanager import ShopifyError

router = APIRouter(prefix="/api/orders")
logger = logging.getLogger(__name__)


@router.post("")
async def upload_order(order: OrderSchema, response: Response, background_tasks: BackgroundTasks):
    # validates stock, creates the order on the platform and empties the shopper's cart
    try:
        created = await create_order(order)
    except ShopifyError as e:
        logger.error(f"Error creating order: {e}")
        raise HTTPException(status_code=500, detail={"error": "Internal server error", "details": str(e)})

    customer_info = order.pickupForm if order.deliveryOption == "pickup" else order.deliveryForm
    background_tasks.add_task(send_order_confirmation_safely, build_confirmation(order, created, customer_info))

    save_cart(response, clear_cart())
    return {"success": True, "order": created}
