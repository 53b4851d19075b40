import json
import logging
from fastapi import HTTPException
from microservices.product_microservice import (is_delivery_fee, matches_category, matches_search,
                                                sort_products, transform_product)
from schemas.graphql_queries import (COLLECTION_PRODUCTS_QUERY, METAOBJECT_QUERY, PRODUCT_BY_HANDLE_QUERY,
                                     PRODUCT_METAFIELDS_QUERY, PRODUCTS_QUERY)
from shopifymanager import ShopifyError, admin_graphql, storefront_request


logger = logging.getLogger(__name__)

METAOBJECT_TYPES = ("metaobject_reference", "list.metaobject_reference")


async def fetch_products_page(first: int, after=None):
    variables = {"first": first}
    if after:
        variables["after"] = after
    data = await storefront_request(PRODUCTS_QUERY, variables)
    if not data.get("products"):
        raise ShopifyError("No products data received from Shopify")
    return data["products"]


async def list_products(first=20, after=None, category=None, search=None, exclude=None, sort_by=None):
    page = await fetch_products_page(first, after)
    products = [transform_product(edge["node"]) for edge in page.get("edges", [])]
    products = [
        product for product in products
        if matches_category(product, category)
        and matches_search(product, search)
        and product["id"] != exclude
        and not is_delivery_fee(product)
    ]
    products = sort_products(products, sort_by)
    return {"products": products, "pageInfo": page.get("pageInfo"), "totalCount": len(products)}


async def resolve_metaobject_value(ref):
    # a metaobject is displayed through its title/name/value field, or its first field
    data = await admin_graphql(METAOBJECT_QUERY, {"id": ref})
    metaobject = data.get("metaobject")
    if not metaobject or not metaobject.get("fields"):
        return None
    fields = metaobject["fields"]
    for field in fields:
        if field["key"] in ("title", "name", "value") and field.get("value"):
            return field["value"]
    return fields[0].get("value")


async def display_value(metafield):
    if metafield.get("type") not in METAOBJECT_TYPES:
        return metafield.get("value")
    try:
        refs = json.loads(metafield["value"]) if metafield["type"].startswith("list.") \
            else [metafield["value"]]
    except (TypeError, ValueError) as e:
        logger.warning(f"Error parsing metaobject references {metafield.get('key')}: {e}")
        return metafield.get("value")
    values = []
    for ref in refs:
        try:
            value = await resolve_metaobject_value(ref)
        except ShopifyError as e:
            logger.warning(f"Metaobject {ref} not available: {e}")
            continue
        if value:
            values.append(value)
    return ", ".join(values)


async def fetch_metafields(handle: str):
    try:
        data = await admin_graphql(PRODUCT_METAFIELDS_QUERY, {"handle": handle})
    except ShopifyError as e:
        logger.info(f"Admin API metafields not available for {handle}: {e}")
        return []
    edges = ((data.get("productByHandle") or {}).get("metafields") or {}).get("edges", [])
    metafields = []
    for edge in edges:
        node = edge["node"]
        metafields.append({
            "id": node.get("id"),
            "namespace": node.get("namespace"),
            "key": node.get("key"),
            "value": await display_value(node),
            "type": node.get("type"),
            "description": node.get("description"),
        })
    return metafields


async def get_product_by_handle(handle: str):
    if not handle:
        raise HTTPException(status_code=400, detail={"error": "Product handle is required"})
    data = await storefront_request(PRODUCT_BY_HANDLE_QUERY, {"handle": handle})
    product = data.get("product")
    if not product:
        raise HTTPException(status_code=404, detail={"error": "Product not found"})
    result = transform_product(product)
    result["collections"] = [
        {"id": edge["node"]["id"], "handle": edge["node"]["handle"], "title": edge["node"]["title"]}
        for edge in (product.get("collections") or {}).get("edges", [])
    ]
    result["metafields"] = await fetch_metafields(handle)
    return result


def parse_collections(collections):
    # ?collections=[{"handle": "...", "title": "..."}]
    if not collections:
        return []
    try:
        parsed = json.loads(collections)
    except ValueError as e:
        logger.error(f"Error processing collections: {e}")
        return []
    if not isinstance(parsed, list):
        return []
    return [item for item in parsed if isinstance(item, dict) and item.get("handle")]


def _take(candidates, product_id, seen, related, limit):
    for product in candidates:
        if len(related) >= limit:
            break
        if product["id"] == product_id or product["id"] in seen or is_delivery_fee(product):
            continue
        related.append(product)
        seen.add(product["id"])


async def get_related_products(product_id: str, limit=4, collections=None):
    related = []
    seen = set()
    # products sharing a collection come first
    for collection in parse_collections(collections):
        if len(related) >= limit:
            break
        try:
            data = await storefront_request(COLLECTION_PRODUCTS_QUERY,
                                            {"handle": collection["handle"], "first": limit * 2})
        except ShopifyError as e:
            logger.error(f"Error fetching collection {collection['handle']}: {e}")
            continue
        if not data.get("collection"):
            logger.info(f"Collection {collection['handle']} not found")
            continue
        nodes = [edge["node"] for edge in data["collection"]["products"].get("edges", [])]
        _take(nodes, product_id, seen, related, limit)

    # then fill up from the whole catalog
    if len(related) < limit:
        try:
            page = await fetch_products_page(limit * 3)
            _take([edge["node"] for edge in page.get("edges", [])], product_id, seen, related, limit)
        except ShopifyError as e:
            logger.error(f"Error fetching all products: {e}")

    logger.info(f"Related products for {product_id}: {[p['id'] for p in related]}")
    return [transform_product(product) for product in related]
