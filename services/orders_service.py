import logging
from fastapi import HTTPException
import shopifymanager
from microservices.customers_microservice import find_existing_customer, format_phone_number, split_name
from shopifymanager import ShopifyError, admin_request, extract_numeric_id
from services.inventory_service import decrement_line_items, get_variant


logger = logging.getLogger(__name__)

PHONE_TAKEN_MESSAGE = ("Este número de telefone já está associado a outro cliente. "
                       "Por favor, use um número diferente ou contacte-nos para assistência.")
POSTAL_CODE_PREFIXES = {"Ponta Delgada": "9500", "Ribeira Grande": "9600", "Lagoa": "9560"}
DEFAULT_ZIP = "9500-445"
AZORES = {
    "region": "Açores",
    "state": "Açores",
    "province": "Açores",
    "province_code": "PT-20",
    "country": "Portugal",
    "country_code": "PT",
}


def get_postal_code_prefix(location):
    return POSTAL_CODE_PREFIXES.get(location, "9500")


def validate_order(order):
    if not order.items:
        raise HTTPException(status_code=400, detail={"error": "No items in order"})
    if not order.deliveryOption:
        raise HTTPException(status_code=400, detail={"error": "Delivery option not selected"})
    customer_info = order.pickupForm if order.deliveryOption == "pickup" else order.deliveryForm
    if customer_info is None:
        raise HTTPException(status_code=400, detail={
            "error": f"Missing {order.deliveryOption} form"})
    if not shopifymanager.admin_configured():
        logger.error("Missing Shopify configuration (domain or admin token)")
        raise HTTPException(status_code=500, detail={"error": "Shopify configuration missing"})
    return customer_info


def is_delivery_fee_item(item):
    return item.id is not None and extract_numeric_id(item.id) == shopifymanager.DELIVERY_FEE_PRODUCT_ID


def build_line_items(order):
    return [
        {"variant_id": extract_numeric_id(item.variantId), "quantity": item.quantity}
        for item in order.items if not is_delivery_fee_item(item)
    ]


def requested_quantities(line_items):
    # lines repeating a variant draw on the same stock
    requested = {}
    for line_item in line_items:
        variant_id = line_item["variant_id"]
        requested[variant_id] = requested.get(variant_id, 0) + line_item["quantity"]
    return requested


async def check_stock(line_items):
    # whole order is rejected on the first variant that can't be served
    for variant_id, requested in requested_quantities(line_items).items():
        variant = await get_variant(variant_id)
        if not variant:
            raise HTTPException(status_code=500, detail={"error": "Erro ao verificar stock do produto"})
        available = variant.get("inventory_quantity") or 0
        if available < requested:
            logger.error(
                f"Insufficient inventory for variant {variant_id}: requested {requested}, available {available}")
            raise HTTPException(status_code=400, detail={
                "error": (f'Produto "{variant.get("title")}" não tem stock suficiente. '
                          f"Disponível: {available}, Solicitado: {requested}"),
                "variantId": variant_id,
                "requestedQuantity": requested,
                "availableQuantity": available,
            })
    logger.info("Inventory validation passed")


async def get_delivery_fee_line():
    product_id = shopifymanager.DELIVERY_FEE_PRODUCT_ID
    try:
        response = await admin_request("GET", f"products/{product_id}/variants.json")
    except ShopifyError as e:
        logger.error(f"Error fetching delivery fee product variants: {e}")
        return None
    if response.status_code != 200:
        logger.warning(f"Failed to fetch delivery fee product variants: {response.status_code}")
        return None
    variants = response.json().get("variants") or []
    if not variants:
        logger.warning("No variants found for delivery fee product")
        return None
    logger.info(f"Adding delivery fee variant {variants[0]['id']}")
    return {"variant_id": variants[0]["id"], "quantity": 1}


def build_shipping_address(order, customer_info):
    first_name, last_name = split_name(customer_info.name)
    address = {"first_name": first_name, "last_name": last_name, **AZORES,
               "phone": format_phone_number(customer_info.phone)}
    if order.deliveryOption == "delivery":
        location = order.selectedLocation or customer_info.city or "Ponta Delgada"
        zip_code = DEFAULT_ZIP
        if customer_info.postalCode:
            zip_code = f"{get_postal_code_prefix(location)}-{customer_info.postalCode}"
        address.update(address1=customer_info.street, address2=customer_info.number,
                       city=location, zip=zip_code)
    else:
        # pickup orders still need an address, use the shop's
        address.update(address1="Rua das Flores, 123", address2="",
                       city="Ponta Delgada", zip=DEFAULT_ZIP)
    return address


def build_order_payload(order, customer_info, line_items):
    first_name, last_name = split_name(customer_info.name)
    pickup = order.deliveryOption == "pickup"
    return {
        "order": {
            "line_items": line_items,
            "total_price": str(order.totalPrice),
            "currency": "EUR",
            "financial_status": "pending",
            "fulfillment_status": "unfulfilled",
            "customer": {
                "first_name": first_name,
                "last_name": last_name,
                "email": customer_info.email,
                "phone": format_phone_number(customer_info.phone),
            },
            "shipping_address": build_shipping_address(order, customer_info),
            "note": f"Tipo de entrega: {'Levantamento Local' if pickup else 'Entrega ao Domicílio'}",
            "tags": ["pickup" if pickup else "delivery"],
        }
    }


def is_phone_conflict(errors):
    if not isinstance(errors, dict):
        return False
    customer_errors = errors.get("customer") or []
    phone_errors = errors.get("customer.phone_number") or []
    return any("phone" in str(e) and "already been taken" in str(e) for e in customer_errors) \
        or any("already been taken" in str(e) for e in phone_errors)


async def submit_order(payload):
    response = await admin_request("POST", "orders.json", json=payload)
    try:
        data = response.json()
    except ValueError:
        data = {"raw": response.text}
    created = data.get("order") if isinstance(data, dict) else None
    if response.status_code in (200, 201) and created:
        return created
    logger.error(f"Order creation failed ({response.status_code}): {data}")
    if isinstance(data, dict) and is_phone_conflict(data.get("errors")):
        raise HTTPException(status_code=409, detail={
            "error": PHONE_TAKEN_MESSAGE, "details": "Phone number already exists"})
    raise HTTPException(status_code=500, detail={
        "error": "Failed to create order via REST API", "details": data})


async def create_order(order):
    customer_info = validate_order(order)
    line_items = build_line_items(order)
    logger.info(f"Prepared line items: {line_items}")
    await check_stock(line_items)

    order_line_items = list(line_items)
    if order.deliveryOption == "delivery":
        fee_line = await get_delivery_fee_line()
        if fee_line:
            order_line_items.append(fee_line)

    payload = build_order_payload(order, customer_info, order_line_items)
    existing_customer = await find_existing_customer(customer_info.email, customer_info.phone)
    if existing_customer:
        logger.info(f"Using existing customer ID: {existing_customer['id']}")
        del payload["order"]["customer"]
        payload["order"]["customer_id"] = existing_customer["id"]
    else:
        logger.info("Creating new customer with the order")

    created = await submit_order(payload)
    logger.info(f"Order {created.get('name')} created ({created.get('id')})")

    # the order is committed from here on
    await decrement_line_items(line_items)

    return {
        "id": created.get("id"),
        "name": created.get("name"),
        "total": created.get("total_price"),
        "currency": created.get("currency"),
        "customer": created.get("customer") or existing_customer,
        "shippingAddress": created.get("shipping_address"),
        "note": created.get("note"),
        "tags": created.get("tags"),
        "createdAt": created.get("created_at"),
    }


def build_confirmation(order, created, customer_info):
    # data for the confirmation email, from the cart lines and the created order
    first_name, last_name = split_name(customer_info.name)
    customer = dict(created.get("customer") or {})
    customer.setdefault("first_name", first_name)
    customer.setdefault("last_name", last_name)
    if not customer.get("email"):
        customer["email"] = customer_info.email
    pickup = None
    if order.deliveryOption == "pickup":
        pickup = {"date": customer_info.date, "time": customer_info.time}
    return {
        "orderId": str(created.get("id")),
        "orderName": created.get("name") or str(created.get("id")),
        "customer": customer,
        "items": [
            {"title": item.name or "Produto", "quantity": item.quantity,
             "price": f"{item.price:.2f}", "image": item.image}
            for item in order.items
        ],
        "total": created.get("total") or f"{order.totalPrice:.2f}",
        "currency": created.get("currency") or "EUR",
        "shippingAddress": created.get("shippingAddress") if order.deliveryOption == "delivery" else None,
        "deliveryOption": order.deliveryOption,
        "pickupDetails": pickup,
        "note": created.get("note"),
        "createdAt": created.get("createdAt") or "",
    }
