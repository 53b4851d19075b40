import logging
import re
from shopifymanager import ShopifyError, admin_request


logger = logging.getLogger(__name__)


def format_phone_number(phone: str):
    # portuguese numbers, stored by the platform in international format
    digits = re.sub(r"\D", "", phone or "")
    if digits.startswith("9") and len(digits) == 9:
        return f"+351{digits}"
    if digits.startswith("351") and len(digits) == 12:
        return f"+{digits}"
    return f"+351{digits}"


def split_name(name: str):
    parts = (name or "").split()
    if not parts:
        return name or "", ""
    return parts[0], " ".join(parts[1:])


async def search_customer(query: str):
    # returns the first customer matching the query or None
    try:
        response = await admin_request(
            "GET", "customers/search.json", params={"query": query})
    except ShopifyError as e:
        logger.warning(f"Customer search '{query}' failed: {e}")
        return None
    if response.status_code != 200:
        logger.warning(
            f"Customer search '{query}' answered {response.status_code}")
        return None
    customers = response.json().get("customers") or []
    return customers[0] if customers else None


async def find_existing_customer(email: str, phone: str):
    # email first, then the phone as typed, then the phone in +351 format
    lookups = [
        ("email", f"email:{email}"),
        ("local phone", f"phone:{phone}"),
        ("international phone", f"phone:{format_phone_number(phone)}"),
    ]
    for label, query in lookups:
        customer = await search_customer(query)
        if customer:
            logger.info(f"Found existing customer by {label}: {customer['id']}")
            return customer
    return None
