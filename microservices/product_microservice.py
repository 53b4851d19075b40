from rapidfuzz import process, utils
from shopifymanager import DELIVERY_FEE_PRODUCT_GID


def _amount(money):
    # money -> {"amount": "12.50", "currencyCode": "EUR"}
    if not money or money.get("amount") in (None, ""):
        return None
    return float(money["amount"])


def transform_variant(variant):
    return {
        "id": variant["id"],
        "title": variant.get("title"),
        "price": _amount(variant.get("price")),
        "availableForSale": variant.get("availableForSale", False),
        "quantityAvailable": variant.get("quantityAvailable"),
        "selectedOptions": variant.get("selectedOptions") or [],
        "image": variant.get("image"),
    }


def transform_product(product, prefer_html=True):
    # reshapes a storefront product node into the flat record the pages use
    price = _amount(product["priceRange"]["minVariantPrice"])
    compare_at = _amount(
        (product.get("compareAtPriceRange") or {}).get("minVariantPrice"))
    images = [edge["node"]["url"]
              for edge in (product.get("images") or {}).get("edges", [])]
    description = product.get("description") or ""
    if prefer_html and product.get("descriptionHtml"):
        description = product["descriptionHtml"]
    result = {
        "id": product["id"],
        "name": product["title"],
        "description": description,
        "price": price,
        # a zero compare-at price means "no discount"
        "originalPrice": compare_at if compare_at else price,
        "category": product.get("productType") or "storage",
        "image": images[0] if images else None,
        "images": images,
        "handle": product.get("handle"),
        "availableForSale": product.get("availableForSale", False),
        "variants": [transform_variant(edge["node"])
                     for edge in (product.get("variants") or {}).get("edges", [])],
        "options": product.get("options") or [],
        "tags": product.get("tags") or [],
        "vendor": product.get("vendor"),
        "productType": product.get("productType"),
        "totalInventory": product.get("totalInventory"),
    }
    if "createdAt" in product:
        result["createdAt"] = product["createdAt"]
    if "updatedAt" in product:
        result["updatedAt"] = product["updatedAt"]
    return result


def is_delivery_fee(product):
    return product.get("id") == DELIVERY_FEE_PRODUCT_GID


def matches_category(product, category):
    if not category or category == "all":
        return True
    return (product["productType"] == category
            or category in product["tags"]
            or product["category"] == category)


def matches_search(product, search):
    if not search:
        return True
    needle = search.lower()
    if needle in product["name"].lower() or needle in product["description"].lower():
        return True
    # fuzzy fallback on the words of the name and on tags, to forgive typos
    choices = [word for word in product["name"].split() if len(word) > 2] + \
        [tag for tag in product["tags"] if len(tag) > 1]
    if not choices:
        return False
    best = process.extractOne(search, choices, processor=utils.default_process)
    return best is not None and best[1] >= 85


def sort_products(products, sort_by):
    match sort_by:
        case 'high-to-low':
            return sorted(products, key=lambda p: p["price"] or 0, reverse=True)
        case 'low-to-high':
            return sorted(products, key=lambda p: p["price"] or 0)
    return products
