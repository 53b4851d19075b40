import logging
from datetime import datetime
from html import escape
from fastapi_mail import FastMail, MessageSchema, MessageType
from fastapi_mail.schemas import MultipartSubtypeEnum
from schemas.email_schemas import OrderConfirmationSchema, conf


logger = logging.getLogger(__name__)

PT_MONTHS = ["janeiro", "fevereiro", "março", "abril", "maio", "junho", "julho",
             "agosto", "setembro", "outubro", "novembro", "dezembro"]
PLACEHOLDER_IMAGE = "https://via.placeholder.com/60x60/e5e7eb/6b7280?text=Produto"
PICKUP_HOURS = "Segunda a sexta, das 17:00 às 20:00, com marcação."

fm = FastMail(conf)


def format_order_date(created_at: str):
    # "2026-10-19T14:30:00Z" -> "19 de outubro de 2026, 14:30"
    try:
        date = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return created_at
    return f"{date.day} de {PT_MONTHS[date.month - 1]} de {date.year}, {date:%H:%M}"


def _address_lines(address):
    return [
        f"{address.first_name or ''} {address.last_name or ''}".strip(),
        f"{address.address1 or ''} {address.address2 or ''}".strip(),
        f"{address.zip or ''} {address.city or ''}".strip(),
        address.country or "",
    ]


def _items_html(items):
    rows = []
    for item in items:
        variant = (f'<div style="font-size: 14px; color: #6b7280;">{escape(item.variantTitle)}</div>'
                   if item.variantTitle else "")
        rows.append(f"""
      <tr style="border-bottom: 1px solid #e5e7eb;">
        <td style="padding: 12px 0; width: 60px;">
          <img src="{escape(item.image or PLACEHOLDER_IMAGE)}" alt="{escape(item.title)}" width="60" height="60" style="border-radius: 8px;">
        </td>
        <td style="padding: 12px 16px; vertical-align: top;">
          <div style="font-weight: 500; color: #374151;">{escape(item.title)}</div>
          {variant}
          <div style="font-size: 14px; color: #6b7280;">
            <strong>Qtd:</strong> {item.quantity} | <strong>Preço:</strong> {escape(item.price)}€
          </div>
        </td>
      </tr>""")
    return "".join(rows)


def _delivery_html(order):
    if order.deliveryOption == "pickup":
        return f"""
      <h3>📦 Informações de Levantamento</h3>
      <p><strong>Horário:</strong> {PICKUP_HOURS}</p>"""
    address = ""
    if order.shippingAddress:
        address = "<br>".join(escape(line)
                              for line in _address_lines(order.shippingAddress))
        address = f"<br><strong>Morada:</strong><br>{address}"
    return f"""
      <h3>🚚 Informações de Entrega</h3>
      <p><strong>Tipo:</strong> Entrega ao Domicílio{address}</p>"""


def build_html(order, order_date):
    return f"""<!DOCTYPE html>
<html lang="pt">
<head>
  <meta charset="utf-8">
  <title>Confirmação de Encomenda - TupperStock</title>
</head>
<body style="font-family: Arial, sans-serif; color: #374151;">
  <h1>Encomenda Confirmada!</h1>
  <p>Obrigado {escape(order.customer.first_name or '')}!</p>
  <h2>Detalhes da Encomenda</h2>
  <p><strong>Número da Encomenda:</strong> {escape(order.orderName)}<br>
     <strong>Data da Encomenda:</strong> {escape(order_date)}</p>
  <h2>Produtos Encomendados</h2>
  <table width="100%" cellpadding="0" cellspacing="0">{_items_html(order.items)}
  </table>
  <p><strong>Total:</strong> {escape(order.total)}€</p>
  {_delivery_html(order)}
  <h3>📋 Termos de Pagamento e Entrega</h3>
  <p>O pagamento é efetuado no ato da entrega ou do levantamento.</p>
  <p>Obrigado por escolher a TupperStock!</p>
  <p style="font-size: 12px; color: #9ca3af;">© TupperStock - Tupperware Stock Açores. Todos os direitos reservados.</p>
</body>
</html>"""


def build_text(order, order_date):
    lines = [
        "TupperStock - Confirmação de Encomenda",
        "",
        f"Olá {order.customer.first_name or ''},",
        "",
        "A sua encomenda foi confirmada com sucesso!",
        "",
        "Detalhes da Encomenda:",
        f"- Número: {order.orderName}",
        f"- Data: {order_date}",
        f"- Total: {order.total}€",
        "",
        "Produtos Encomendados:",
    ]
    for item in order.items:
        variant = f" ({item.variantTitle})" if item.variantTitle else ""
        lines.append(
            f"- {item.title}{variant} - Qtd: {item.quantity} - {item.price}€")
    lines.append("")
    if order.deliveryOption == "pickup":
        lines.append("Tipo de Entrega: Levantamento Local")
        if order.pickupDetails and order.pickupDetails.date:
            lines.append(f"Data: {order.pickupDetails.date}")
        if order.pickupDetails and order.pickupDetails.time:
            lines.append(f"Hora: {order.pickupDetails.time}")
    else:
        lines.append("Tipo de Entrega: Entrega ao Domicílio")
        if order.shippingAddress:
            lines.append("Morada:")
            lines.extend(_address_lines(order.shippingAddress))
    lines += ["", "Obrigado pela sua compra!", "TupperStock - Tupperware Stock Açores"]
    return "\n".join(lines)


async def send_order_confirmation_email(order):
    customer = order.customer
    if not customer or not isinstance(customer.email, str) or not customer.email:
        raise ValueError(f"Invalid customer email: {customer}")
    logger.info(f"Sending confirmation for {order.orderName} to {customer.email}")
    order_date = format_order_date(order.createdAt)
    message = MessageSchema(
        subject=f"Confirmação de Encomenda {order.orderName} - TupperStock",
        recipients=[customer.email],
        body=build_html(order, order_date),
        alternative_body=build_text(order, order_date),
        subtype=MessageType.html,
        multipart_subtype=MultipartSubtypeEnum.alternative,
    )
    await fm.send_message(message)
    logger.info(f"Order confirmation email sent for {order.orderName}")
    return {"success": True, "recipient": customer.email}


async def send_order_confirmation_safely(order_data):
    # background task after checkout, the order is already placed
    try:
        await send_order_confirmation_email(OrderConfirmationSchema(**order_data))
    except Exception as e:
        logger.error(f"Error sending confirmation email for {order_data.get('orderName')}: {e}")
