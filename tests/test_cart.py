import pytest
from schemas.cart_schemas import Cart, CartProductSchema
from services.cart_service import (CART_COOKIE, CART_FULL_MESSAGE, MAX_COOKIE_BYTES, add_to_cart, clear_cart,
                                   decode_cart, encode_cart, remove_from_cart, update_quantity)


def product(variant="v1", price=12.5, available=3, name="Caixa"):
    return CartProductSchema(id=f"p-{variant}", name=name, price=price, image=None,
                             variantId=variant, quantityAvailable=available)


def assert_totals_consistent(cart):
    assert cart.totalItems == sum(item.quantity for item in cart.items)
    assert cart.totalPrice == pytest.approx(sum(item.price * item.quantity for item in cart.items))


def test_add_new_and_existing_lines():
    cart = add_to_cart(Cart(), product())
    cart = add_to_cart(cart, product())
    cart = add_to_cart(cart, product("v2", price=3.1, available=0))
    assert [(item.variantId, item.quantity) for item in cart.items] == [("v1", 2), ("v2", 1)]
    assert cart.totalItems == 3
    assert cart.totalPrice == 28.1
    assert_totals_consistent(cart)


def test_add_stops_at_known_stock():
    cart = Cart()
    for _ in range(5):
        cart = add_to_cart(cart, product(available=2))
    assert cart.items[0].quantity == 2
    assert_totals_consistent(cart)


def test_unknown_stock_does_not_block():
    cart = Cart()
    for _ in range(4):
        cart = add_to_cart(cart, product(available=None))
    assert cart.items[0].quantity == 4


def test_update_quantity_clamps_and_removes():
    cart = add_to_cart(add_to_cart(Cart(), product(available=3)), product("v2", price=2))
    cart = update_quantity(cart, "v1", 10)
    assert cart.items[0].quantity == 3
    assert_totals_consistent(cart)

    cart = update_quantity(cart, "missing", 4)
    assert len(cart.items) == 2

    cart = update_quantity(cart, "v1", 0)
    assert [item.variantId for item in cart.items] == ["v2"]
    assert_totals_consistent(cart)

    cart = remove_from_cart(cart, "v2")
    assert cart.items == [] and cart.totalItems == 0 and cart.totalPrice == 0


def test_clear_cart_is_empty():
    cart = clear_cart()
    assert cart.items == []
    assert cart.totalItems == 0
    assert cart.totalPrice == 0


def test_stored_cart_recomputes_totals():
    cart = add_to_cart(Cart(), product())
    tampered = cart.model_copy(update={"totalPrice": 0.01, "totalItems": 99})
    restored = decode_cart(encode_cart(tampered))
    assert restored.totalPrice == 12.5
    assert restored.totalItems == 1


def test_corrupt_cookie_gives_empty_cart():
    assert decode_cart("%%%not-base64").items == []
    assert decode_cart("bm90IGpzb24").items == []


def test_cart_endpoints_keep_state_in_cookie(client):
    body = client.get("/cart").json()
    assert body["cart"] == {"items": [], "totalItems": 0, "totalPrice": 0}

    item = {"id": "gid://shopify/Product/101", "name": "Caixa", "price": 12.5, "image": None,
            "variantId": "gid://shopify/ProductVariant/1011", "quantityAvailable": 5}
    client.post("/cart/add-cart-item", json=item)
    response = client.post("/cart/add-cart-item", json=item)
    assert response.json()["cart"]["totalItems"] == 2
    assert CART_COOKIE in response.cookies

    cart = client.get("/cart").json()["cart"]
    assert cart["items"][0]["quantity"] == 2
    assert cart["totalPrice"] == 25

    cart = client.post("/cart/update-quantity", json={"variantId": item["variantId"], "quantity": 4}).json()["cart"]
    assert cart["totalPrice"] == 50

    cart = client.post("/cart/delete-cart-item", json={"variantId": item["variantId"]}).json()["cart"]
    assert cart["items"] == []

    client.post("/cart/add-cart-item", json=item)
    cart = client.post("/cart/clear").json()["cart"]
    assert cart == {"items": [], "totalItems": 0, "totalPrice": 0}


def test_cart_rejects_invalid_item(client):
    response = client.post("/cart/add-cart-item", json={"name": "sem variante"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def shop_line(n):
    return CartProductSchema(
        id=f"gid://shopify/Product/152597290{n:05d}",
        name=f"Caixa Hermética Retangular Eco {n} – 1,5 L Azul Cristal",
        price=24.99,
        image=f"https://cdn.shopify.com/s/files/1/0912/3456/7890/files/caixa-hermetica-eco-{n}.jpg?v=1729341234",
        variantId=f"gid://shopify/ProductVariant/563270397{n:05d}",
        quantityAvailable=12,
    )


def test_stored_cart_is_compact():
    cart = Cart()
    for n in range(12):
        cart = add_to_cart(cart, shop_line(n))
    value = encode_cart(cart)
    assert len(CART_COOKIE) + 1 + len(value) < MAX_COOKIE_BYTES

    restored = decode_cart(value)
    assert restored == cart
    assert restored.items[3].variantId == "gid://shopify/ProductVariant/56327039700003"
    assert restored.items[3].image.startswith("https://cdn.shopify.com/s/files/1/0912/")


def test_full_cart_refuses_more_lines(client):
    accepted = 0
    for n in range(60):
        response = client.post("/cart/add-cart-item", json=shop_line(n).model_dump())
        if response.status_code != 200:
            break
        accepted += 1
        assert len(response.cookies[CART_COOKIE]) + len(CART_COOKIE) + 1 <= MAX_COOKIE_BYTES
    assert response.status_code == 400
    assert response.json() == {"error": CART_FULL_MESSAGE}
    assert accepted > 12

    # the last cart that fit is still there
    cart = client.get("/cart").json()["cart"]
    assert len(cart["items"]) == accepted
