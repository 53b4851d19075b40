import logging
from fastapi import HTTPException
import shopifymanager
from shopifymanager import ShopifyError, admin_request, extract_numeric_id


logger = logging.getLogger(__name__)


async def get_variant(variant_id):
    # admin view of a variant (inventory_quantity, inventory_item_id, title)
    response = await admin_request("GET", f"variants/{variant_id}.json")
    if response.status_code != 200:
        logger.error(
            f"Failed to get variant {variant_id}: {response.status_code} {response.text}")
        return None
    return response.json().get("variant")


async def set_inventory_level(inventory_item_id, available: int):
    response = await admin_request("POST", "inventory_levels/set.json", json={
        "location_id": shopifymanager.LOCATION_ID,
        "inventory_item_id": inventory_item_id,
        "available": available,
    })
    if response.status_code != 200:
        logger.error(
            f"Failed to set inventory for item {inventory_item_id}: {response.text}")
        return False
    return True


async def adjust_inventory(data):
    if not data.variantId or not data.quantity or not data.action:
        raise HTTPException(status_code=400, detail={
            "error": "Missing required fields: variantId, quantity, action"})
    if data.action not in ("increment", "decrement"):
        raise HTTPException(status_code=400, detail={
            "error": "Invalid action. Must be 'increment' or 'decrement'"})
    if not shopifymanager.admin_configured():
        raise HTTPException(status_code=500, detail={
            "error": "Shopify configuration missing"})

    variant_id = extract_numeric_id(data.variantId)
    variant = await get_variant(variant_id)
    if not variant:
        raise HTTPException(status_code=404, detail={
            "error": "Failed to get variant details"})
    current = variant.get("inventory_quantity") or 0
    if data.action == "increment":
        new_inventory = current + data.quantity
    else:
        new_inventory = max(0, current - data.quantity)

    if not await set_inventory_level(variant["inventory_item_id"], new_inventory):
        raise HTTPException(status_code=500, detail={
            "error": "Failed to update inventory"})
    logger.info(f"Variant {variant_id}: {current} -> {new_inventory}")
    return {
        "success": True,
        "variantId": data.variantId,
        "previousInventory": current,
        "newInventory": new_inventory,
        "action": data.action,
        "quantity": data.quantity,
    }


async def decrement_line_items(line_items):
    # runs after the order exists, so nothing here may fail the request
    for line_item in line_items:
        variant_id = line_item["variant_id"]
        quantity = line_item["quantity"]
        try:
            variant = await get_variant(variant_id)
            if not variant:
                continue
            current = variant.get("inventory_quantity") or 0
            new_inventory = max(0, current - quantity)
            logger.info(f"Variant {variant_id}: {current} -> {new_inventory}")
            if await set_inventory_level(variant["inventory_item_id"], new_inventory):
                logger.info(f"Updated inventory for variant {variant_id}")
        except (ShopifyError, KeyError, ValueError) as e:
            logger.error(f"Error updating inventory for variant {variant_id}: {e}")
