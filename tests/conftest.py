import json
import os
import re

os.environ.setdefault("SHOPIFY_STORE_DOMAIN", "tupperstock-test.myshopify.com")
os.environ.setdefault("SHOPIFY_STOREFRONT_ACCESS_TOKEN", "storefront-token")
os.environ.setdefault("SHOPIFY_ACCESS_TOKEN", "admin-token")
os.environ.setdefault("SHOPIFY_DELIVERY_FEE_PRODUCT_ID", "15259729035648")
os.environ.setdefault("SHOPIFY_LOCATION_ID", "108441469312")
os.environ.setdefault("MAIL_SUPPRESS_SEND", "1")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import shopifymanager  # noqa: E402
from server import app  # noqa: E402


def money(amount):
    return {"amount": str(amount), "currencyCode": "EUR"}


def make_product(numeric_id, title, price, handle=None, compare_at=None, tags=None,
                 product_type="Caixas", description="", quantity=5, images=1):
    # storefront product node as returned by the catalog queries
    gid = f"gid://shopify/Product/{numeric_id}"
    return {
        "id": gid,
        "title": title,
        "handle": handle or title.lower().replace(" ", "-"),
        "description": description,
        "descriptionHtml": f"<p>{description}</p>" if description else "",
        "vendor": "Tupperware",
        "productType": product_type,
        "tags": tags or [],
        "totalInventory": quantity,
        "availableForSale": quantity > 0,
        "createdAt": "2026-10-01T10:00:00Z",
        "updatedAt": "2026-10-02T10:00:00Z",
        "priceRange": {"minVariantPrice": money(price), "maxVariantPrice": money(price)},
        "compareAtPriceRange": {"minVariantPrice": money(compare_at or 0), "maxVariantPrice": money(compare_at or 0)},
        "images": {"edges": [
            {"node": {"id": f"img-{numeric_id}-{i}", "url": f"https://cdn.test/{numeric_id}-{i}.jpg",
                      "altText": title, "width": 800, "height": 800}}
            for i in range(images)
        ]},
        "variants": {"edges": [{"node": {
            "id": f"gid://shopify/ProductVariant/{numeric_id}1",
            "title": "Default Title",
            "sku": f"SKU-{numeric_id}",
            "availableForSale": quantity > 0,
            "quantityAvailable": quantity,
            "price": money(price),
            "compareAtPrice": money(compare_at) if compare_at else None,
            "selectedOptions": [{"name": "Title", "value": "Default Title"}],
            "image": None,
        }}]},
        "options": [{"id": f"opt-{numeric_id}", "name": "Title", "values": ["Default Title"]}],
    }


def products_connection(products, has_next=False):
    return {
        "pageInfo": {"hasNextPage": has_next, "hasPreviousPage": False,
                     "startCursor": "start", "endCursor": "end"},
        "edges": [{"node": product} for product in products],
    }


class FakeShopify:
    """In-memory stand-in for the Storefront and Admin APIs."""

    def __init__(self):
        self.calls = []
        # storefront/admin graphql answers keyed by operation name
        self.storefront_data = {}
        self.admin_data = {}
        self.variants = {}
        self.customers = {}
        self.fee_variants = [{"id": 55500011, "product_id": 15259729035648, "price": "5.00"}]
        self.fee_status = 200
        self.order_status = 201
        self.order_body = None
        self.inventory_status = 200
        self.created_orders = []
        self.inventory_updates = []

    def add_variant(self, variant_id, quantity, title="Produto", inventory_item_id=None):
        self.variants[str(variant_id)] = {
            "id": int(variant_id),
            "title": title,
            "inventory_quantity": quantity,
            "inventory_item_id": inventory_item_id or int(variant_id) + 1000,
        }

    def _graphql(self, request, answers, api):
        body = json.loads(request.content)
        operation = re.search(r"query (\w+)", body["query"]).group(1)
        self.calls.append((api, operation, body.get("variables")))
        answer = answers.get(operation)
        if callable(answer):
            answer = answer(body.get("variables") or {})
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json={"data": answer})

    def storefront(self, request):
        return self._graphql(request, self.storefront_data, "storefront")

    def admin(self, request):
        path = request.url.path.split(f"/admin/api/{shopifymanager.ADMIN_API_VERSION}", 1)[-1]
        self.calls.append(("admin", request.method, path, dict(request.url.params)))
        if path == "/graphql.json":
            return self._graphql(request, self.admin_data, "admin-graphql")

        match = re.fullmatch(r"/variants/(\d+)\.json", path)
        if request.method == "GET" and match:
            variant = self.variants.get(match.group(1))
            if not variant:
                return httpx.Response(404, json={"errors": "Not Found"})
            return httpx.Response(200, json={"variant": variant})

        if request.method == "GET" and re.fullmatch(r"/products/\d+/variants\.json", path):
            return httpx.Response(self.fee_status, json={"variants": self.fee_variants})

        if request.method == "GET" and path == "/customers/search.json":
            return httpx.Response(200, json={"customers": self.customers.get(request.url.params["query"], [])})

        if request.method == "POST" and path == "/orders.json":
            payload = json.loads(request.content)
            self.created_orders.append(payload)
            body = self.order_body or {"order": {
                "id": 7001,
                "name": "#1001",
                "total_price": payload["order"]["total_price"],
                "currency": "EUR",
                "customer": payload["order"].get("customer"),
                "shipping_address": payload["order"].get("shipping_address"),
                "note": payload["order"].get("note"),
                "tags": ", ".join(payload["order"].get("tags", [])),
                "created_at": "2026-10-19T14:30:00+01:00",
            }}
            return httpx.Response(self.order_status, json=body)

        if request.method == "POST" and path == "/inventory_levels/set.json":
            payload = json.loads(request.content)
            self.inventory_updates.append(payload)
            return httpx.Response(self.inventory_status, json={"inventory_level": payload})

        return httpx.Response(404, json={"errors": "Not Found"})

    def admin_paths(self, method=None):
        return [call[2] for call in self.calls
                if call[0] == "admin" and (method is None or call[1] == method)]


@pytest.fixture
def shopify(monkeypatch):
    fake = FakeShopify()
    monkeypatch.setattr(shopifymanager, "storefront_client", httpx.AsyncClient(
        base_url=shopifymanager.storefront_client.base_url,
        transport=httpx.MockTransport(fake.storefront)))
    monkeypatch.setattr(shopifymanager, "admin_client", httpx.AsyncClient(
        base_url=shopifymanager.admin_client.base_url,
        transport=httpx.MockTransport(fake.admin)))
    return fake


@pytest.fixture
def client(shopify):
    with TestClient(app) as test_client:
        yield test_client
