import logging
from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException
from schemas.email_schemas import OrderConfirmationSchema, SendTestEmailSchema
from services.email_service import send_order_confirmation_email

router = APIRouter(prefix="/api/test-email")
logger = logging.getLogger(__name__)

SAMPLE_IMAGE = "https://images.unsplash.com/photo-1582735689369-4fe89db7114c?w=120&h=120&fit=crop&crop=center"


def build_sample_order(email: str, test_type: str, customer_structure):
    customer = {"first_name": "João", "last_name": "Silva", "email": email, "phone": "+351912345678"}
    if customer_structure == "existing":
        # shape of a customer record already known to the platform
        customer["id"] = 12345
    order = {
        "orderId": "12345",
        "orderName": "#TEST-001",
        "customer": customer,
        "items": [
            {"title": "Tupperware Premium Container", "quantity": 2, "price": "24.99",
             "variantTitle": "1.5L - Azul", "image": SAMPLE_IMAGE},
            {"title": "Tupperware Fresh & Go Set", "quantity": 1, "price": "39.99",
             "variantTitle": "Pack de 3", "image": SAMPLE_IMAGE},
        ],
        "total": "64.98" if test_type == "pickup" else "89.97",
        "currency": "EUR",
        "note": "Teste de confirmação de encomenda",
        "createdAt": datetime.now(timezone.utc).isoformat(),
        "deliveryOption": test_type,
    }
    if test_type == "pickup":
        order["pickupDetails"] = {"date": "2024-12-25", "time": "14:30"}
    else:
        order["shippingAddress"] = {
            "first_name": "João", "last_name": "Silva", "address1": "Rua das Flores, 123",
            "address2": "2º Esquerdo", "city": "Ponta Delgada", "country": "Portugal",
            "zip": "9500-445", "phone": "+351912345678",
        }
    return OrderConfirmationSchema(**order)


@router.get("")
def usage():
    return {
        "message": "Email test endpoint",
        "usage": {
            "delivery": "POST with { email: 'test@example.com' } to send a test delivery confirmation email",
            "pickup": "POST with { email: 'test@example.com', testType: 'pickup' } to send a test pickup confirmation email",
            "existingCustomer": "POST with { email: 'test@example.com', customerStructure: 'existing' } to test existing customer structure",
            "orderCustomer": "POST with { email: 'test@example.com', customerStructure: 'order' } to test order customer structure",
        },
    }


@router.post("")
async def send_test_email(data: SendTestEmailSchema):
    if not data.email:
        raise HTTPException(status_code=400, detail={"error": "Email address is required"})
    test_type = "pickup" if data.testType == "pickup" else "delivery"
    try:
        result = await send_order_confirmation_email(
            build_sample_order(data.email, test_type, data.customerStructure))
    except Exception as e:
        logger.error(f"Error sending test email: {e}")
        raise HTTPException(status_code=500, detail={
            "error": "Failed to send test email", "details": str(e)})
    return {
        "success": True,
        "message": f"Test {test_type} email sent successfully",
        "recipient": result["recipient"],
        "testType": test_type,
    }
