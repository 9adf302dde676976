import json

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from storefront.checkout import Branding, CustomerInfo, Order, build_widget_options
from storefront.config import settings
from storefront.db import get_db
from storefront.logging_config import bind_order_context
from storefront.models import StoreOrder

router = APIRouter()


def _script_json(value) -> str:
    # keep embedded JSON from closing the <script> element
    return json.dumps(value).replace("</", "<\\/")


@router.get("/pay/{order_id}", response_class=HTMLResponse)
def pay_page(order_id: str, db: Session = Depends(get_db)):
    # 1. Load Order
    stored = db.query(StoreOrder).filter(StoreOrder.id == order_id).first()
    if not stored:
        return HTMLResponse("<h1>Order Not Found</h1>", status_code=404)
    bind_order_context(stored.id, stored.razorpay_order_id)
    if stored.is_paid:
        return "<h1>This order has already been paid</h1>"
    if not stored.razorpay_order_id:
        return HTMLResponse("<h1>Error initializing payment</h1>", status_code=409)

    # 2. Prepare Data
    order = Order(
        id=stored.id,
        total_price=stored.total_price,
        currency=settings.CURRENCY,
        gateway_order_id=stored.razorpay_order_id,
    )
    customer = CustomerInfo(**stored.customer_contact())
    options = build_widget_options(order, customer, settings.RAZORPAY_KEY_ID, Branding.from_settings(settings))

    # 3. Render HTML
    html = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>Pay {settings.STORE_NAME}</title>
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <script src="{settings.RAZORPAY_CHECKOUT_URL}" async></script>
        <style>
            body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; background: #fdf8f3; display: flex; justify-content: center; align-items: center; height: 100vh; margin: 0; }}
            .card {{ background: white; padding: 2rem; border-radius: 1rem; box-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.1); width: 100%; max-width: 400px; text-align: center; }}
            .amount {{ font-size: 2.5rem; font-weight: 800; color: #111827; margin: 1rem 0; }}
            .merchant {{ color: #6b7280; font-size: 0.875rem; text-transform: uppercase; letter-spacing: 0.05em; }}
            .btn {{ background: {settings.THEME_COLOR}; color: white; border: none; padding: 1rem; width: 100%; border-radius: 0.5rem; font-size: 1rem; font-weight: 600; cursor: pointer; margin-top: 1rem; }}
            #status {{ margin-top: 1rem; font-size: 0.9rem; color: #374151; }}
        </style>
    </head>
    <body>
        <div class="card">
            <div class="merchant">Paying {settings.STORE_NAME}</div>
            <div class="amount">{order.currency} {order.total_price:.2f}</div>
            <button id="pay-button" class="btn">Pay Now</button>
            <div id="status"></div>
        </div>

        <script>
            var options = {_script_json(options)};
            var storeOrderId = {_script_json(order.id)};
            var statusEl = document.getElementById('status');

            options.handler = function (response) {{
                fetch('/api/payments/verify', {{
                    method: 'POST',
                    headers: {{ 'Content-Type': 'application/json' }},
                    body: JSON.stringify({{
                        razorpay_order_id: response.razorpay_order_id,
                        razorpay_payment_id: response.razorpay_payment_id,
                        razorpay_signature: response.razorpay_signature,
                        orderId: storeOrderId
                    }})
                }}).then(function (r) {{
                    statusEl.textContent = r.ok ? 'Payment successful!' : 'Payment verification failed';
                }});
            }};
            options.modal = {{
                ondismiss: function () {{
                    statusEl.textContent = 'Payment cancelled by user';
                }}
            }};

            document.getElementById('pay-button').onclick = function (e) {{
                e.preventDefault();
                if (typeof Razorpay === 'undefined') {{
                    statusEl.textContent = 'Failed to load payment gateway';
                    return;
                }}
                try {{
                    new Razorpay(options).open();
                }} catch (err) {{
                    statusEl.textContent = 'Payment initialization failed';
                }}
            }};
        </script>
    </body>
    </html>
    """
    return html
