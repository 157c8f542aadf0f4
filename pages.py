"""HTML pages served to the donor's browser."""

import json
from html import escape

_BASE_STYLE = """
            body { font-family: Arial, sans-serif; text-align: center; padding: 50px; background: #f5f5f5; }
            .container { background: white; padding: 40px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); max-width: 500px; margin: 0 auto; }
            h1 { color: #333; margin-bottom: 20px; }
            p { color: #666; margin-bottom: 30px; line-height: 1.6; }
"""


def _hidden_input(name: str, value: str) -> str:
    return f'<input type="hidden" name="{escape(name)}" value="{escape(value)}" />'


def render_redirect_page(action_url: str, fields, signature: str, amount: str) -> str:
    """Return a page that auto-posts ``fields`` and ``signature`` to PayFast.

    ``fields`` is the list of ``(name, value)`` pairs that was signed.
    """
    inputs = "\n".join(_hidden_input(k, v) for k, v in fields)
    inputs += "\n" + _hidden_input("signature", signature)
    return f"""<!doctype html>
<html><head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Redirecting to PayFast</title>
    <style>{_BASE_STYLE}
            .loading {{ color: #007bff; font-size: 48px; margin-bottom: 20px; }}
    </style>
</head>
<body onload="document.forms[0].submit();">
    <div class="container">
        <div class="loading">&#10227;</div>
        <p>Redirecting to PayFast checkout for R{escape(amount)}...</p>
        <form action="{escape(action_url)}" method="post">
{inputs}
            <noscript>
                <button type="submit">Click here to continue to PayFast</button>
            </noscript>
        </form>
    </div>
</body></html>"""


def _landing_page(title: str, icon: str, icon_class: str, color: str,
                  button_color: str, body: str, app_url: str) -> str:
    url = escape(app_url)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>
    <style>{_BASE_STYLE}
            .{icon_class} {{ color: {color}; font-size: 48px; margin-bottom: 20px; }}
            .button {{ background: {button_color}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; display: inline-block; font-size: 16px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="{icon_class}">{icon}</div>
        {body}
        <a href="{url}" class="button">Return to App</a>
        <script>
            setTimeout(function() {{
                window.location.href = {json.dumps(app_url)};
            }}, 3000);
        </script>
    </div>
</body>
</html>"""


def render_thank_you_page(app_url: str) -> str:
    return _landing_page(
        "Thank You for Your Donation", "&#10003;", "success", "#28a745", "#007bff",
        "<h1>Thank You for Your Donation!</h1>\n"
        "        <p>Your generous contribution will make a meaningful difference in our community. "
        "We appreciate your support.</p>\n"
        "        <p><strong>Payment Status:</strong> Successful</p>",
        app_url,
    )


def render_cancel_page(app_url: str) -> str:
    return _landing_page(
        "Payment Cancelled", "&#10005;", "cancel", "#dc3545", "#6c757d",
        "<h1>Payment Cancelled</h1>\n"
        "        <p>Your payment was cancelled. No charges have been made to your account.</p>",
        app_url,
    )
