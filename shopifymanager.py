import logging
import os
import re

import httpx
from dotenv import load_dotenv


load_dotenv()
logger = logging.getLogger(__name__)


def clean_domain(domain):
    # "https://shop.myshopify.com/" or "shop" -> "shop.myshopify.com"
    domain = re.sub(r"^https?://", "", (domain or "").strip()).rstrip("/")
    if not domain:
        return ""
    return domain.replace(".myshopify.com", "") + ".myshopify.com"


STORE_DOMAIN = clean_domain(os.getenv("SHOPIFY_STORE_DOMAIN")
                            or os.getenv("NEXT_PUBLIC_SHOPIFY_STORE_DOMAIN"))
STOREFRONT_ACCESS_TOKEN = os.getenv("SHOPIFY_STOREFRONT_ACCESS_TOKEN", "")
ADMIN_ACCESS_TOKEN = os.getenv("SHOPIFY_ACCESS_TOKEN", "")
STOREFRONT_API_VERSION = os.getenv("SHOPIFY_STOREFRONT_API_VERSION", "2025-01")
ADMIN_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2025-01")
DELIVERY_FEE_PRODUCT_ID = os.getenv(
    "SHOPIFY_DELIVERY_FEE_PRODUCT_ID", "15259729035648")
LOCATION_ID = int(os.getenv("SHOPIFY_LOCATION_ID", "108441469312"))
TIMEOUT = float(os.getenv("SHOPIFY_TIMEOUT", "30"))

DELIVERY_FEE_PRODUCT_GID = f"gid://shopify/Product/{DELIVERY_FEE_PRODUCT_ID}"

storefront_client = httpx.AsyncClient(
    base_url=f"https://{STORE_DOMAIN}/api/{STOREFRONT_API_VERSION}",
    timeout=TIMEOUT,
    headers={
        "X-Shopify-Storefront-Access-Token": STOREFRONT_ACCESS_TOKEN,
        "Content-Type": "application/json",
    },
)
admin_client = httpx.AsyncClient(
    base_url=f"https://{STORE_DOMAIN}/admin/api/{ADMIN_API_VERSION}",
    timeout=TIMEOUT,
    headers={
        "X-Shopify-Access-Token": ADMIN_ACCESS_TOKEN,
        "Content-Type": "application/json",
    },
)


class ShopifyError(Exception):
    """Raised when the commerce platform can't be reached or answers with errors."""


def admin_configured():
    return bool(STORE_DOMAIN and ADMIN_ACCESS_TOKEN)


def extract_numeric_id(gid):
    # "gid://shopify/ProductVariant/56327039746432" -> "56327039746432"
    match = re.search(r"/(\d+)$", str(gid))
    return match.group(1) if match else str(gid)


async def _graphql(client, query, variables):
    try:
        response = await client.post(
            "/graphql.json", json={"query": query, "variables": variables or {}})
        payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ShopifyError(f"GraphQL request failed: {e}") from e
    if response.status_code >= 400:
        raise ShopifyError(
            f"GraphQL request failed with status {response.status_code}: {payload}")
    if payload.get("errors") and not payload.get("data"):
        raise ShopifyError(f"GraphQL errors: {payload['errors']}")
    if payload.get("errors"):
        logger.warning(f"GraphQL partial errors: {payload['errors']}")
    return payload.get("data") or {}


async def storefront_request(query, variables=None):
    # customer facing catalog reads
    return await _graphql(storefront_client, query, variables)


async def admin_graphql(query, variables=None):
    return await _graphql(admin_client, query, variables)


async def admin_request(method, path, **kwargs):
    # raw admin REST call, the caller decides what a non-2xx status means
    try:
        return await admin_client.request(method, f"/{path.lstrip('/')}", **kwargs)
    except httpx.HTTPError as e:
        raise ShopifyError(f"Admin request {method} {path} failed: {e}") from e


async def close_clients():
    await storefront_client.aclose()
    await admin_client.aclose()
