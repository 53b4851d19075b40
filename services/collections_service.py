from fastapi import HTTPException
from microservices.product_microservice import transform_product
from schemas.graphql_queries import COLLECTION_PRODUCTS_QUERY, COLLECTIONS_QUERY
from shopifymanager import ShopifyError, storefront_request


async def list_collections(first=50):
    data = await storefront_request(COLLECTIONS_QUERY, {"first": first})
    if not data.get("collections"):
        raise ShopifyError("No collections data received from Shopify")
    return [
        {
            "id": node["id"],
            "title": node["title"],
            "handle": node["handle"],
            "description": node.get("description"),
            "image": (node.get("image") or {}).get("url"),
        }
        for node in (edge["node"] for edge in data["collections"].get("edges", []))
    ]


async def get_collection_products(handle: str, first=20, after=None):
    if not handle:
        raise HTTPException(status_code=400, detail={"error": "Collection handle is required"})
    variables = {"handle": handle, "first": first}
    if after:
        variables["after"] = after
    data = await storefront_request(COLLECTION_PRODUCTS_QUERY, variables)
    collection = data.get("collection")
    if not collection:
        raise HTTPException(status_code=404, detail={"error": "Collection not found"})
    products = [transform_product(edge["node"], prefer_html=False)
                for edge in collection["products"].get("edges", [])]
    return {
        "products": products,
        "pageInfo": collection["products"].get("pageInfo"),
        "totalCount": len(products),
        "collection": {"id": collection["id"], "title": collection["title"], "handle": collection["handle"]},
    }
