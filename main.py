import datetime
import logging
from urllib.parse import parse_qsl

import pytz
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

import config
import payment_gateway
from donation import PAYER_FIELDS, InvalidAmountError, build_payment_fields, format_amount
from itn import ITNVerificationError, confirm_with_gateway, verify_signature
from pages import render_cancel_page, render_redirect_page, render_thank_you_page

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def callback_base_url(settings: config.Settings, request: Request) -> str:
    """Public URL PayFast should call back on, falling back to the request host."""
    if settings.public_base_url:
        return settings.public_base_url
    return f"https://{request.headers.get('host') or request.url.netloc}"


def create_app(settings: config.Settings | None = None) -> FastAPI:
    """Build the donation app. Settings are read from the environment if omitted."""
    if settings is None:
        settings = config.load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = FastAPI(title="PayFast Donations")
    app.state.settings = settings
    tz = pytz.timezone(settings.timezone)

    # ---------------------------
    # Health
    # ---------------------------
    @app.get("/health")
    async def health():
        return {"status": "OK", "timestamp": datetime.datetime.now(tz).isoformat()}

    # ---------------------------
    # Checkout redirect
    # ---------------------------
    @app.get("/pay")
    async def pay(request: Request):
        try:
            amount = format_amount(request.query_params.get("amount", "0"))
        except InvalidAmountError as er:
            logging.info("/pay rejected: %s", er)
            return JSONResponse({"error": "Invalid amount"}, status_code=400)

        try:
            base_url = callback_base_url(settings, request)
            payer = {k: request.query_params[k] for k in PAYER_FIELDS if k in request.query_params}
            fields = build_payment_fields(settings, amount, base_url, payer=payer)
            signature = payment_gateway.sign(fields, settings.passphrase)
            html = render_redirect_page(
                settings.environment.process_url,
                payment_gateway.ordered_fields(fields),
                signature,
                amount,
            )
        except Exception as er:
            logging.exception("/pay: %s", er)
            return JSONResponse({"error": "Server error"}, status_code=500)

        logging.info("Redirecting %s (R%s) to %s", fields["m_payment_id"], amount, settings.environment.host)
        return HTMLResponse(html)

    # ---------------------------
    # Landing pages
    # ---------------------------
    @app.get("/thank-you")
    async def thank_you():
        return HTMLResponse(render_thank_you_page(settings.app_success_url))

    @app.get("/cancel")
    async def cancel():
        return HTMLResponse(render_cancel_page(settings.app_cancel_url))

    # ---------------------------
    # ITN (webhook)
    # ---------------------------
    @app.post("/payfast-itn")
    async def payfast_itn(req: Request):
        body: bytes = await req.body()
        try:
            pairs = parse_qsl(body.decode("utf-8"), keep_blank_values=True)
        except UnicodeDecodeError:
            logging.warning("ITN rejected: body is not valid UTF-8")
            return PlainTextResponse("Invalid notification", status_code=400)
        data = dict(pairs)
        logging.info(
            "ITN received: m_payment_id=%s pf_payment_id=%s status=%s",
            data.get("m_payment_id"),
            data.get("pf_payment_id"),
            data.get("payment_status"),
        )

        try:
            verify_signature(pairs, settings.passphrase)
            if settings.itn_validate:
                await run_in_threadpool(
                    confirm_with_gateway, pairs, settings.environment.validate_url
                )
        except ITNVerificationError as er:
            logging.warning("ITN rejected for %s: %s", data.get("m_payment_id"), er)
            return PlainTextResponse("Invalid notification", status_code=400)

        logging.info("ITN verified: %s %s", data.get("m_payment_id"), data.get("payment_status"))
        return PlainTextResponse("OK")

    return app


# ---------------------------
# Run
# ---------------------------
if __name__ == "__main__":
    settings = config.load_settings()
    app = create_app(settings)
    logging.info("Server running on port %s", settings.port)
    logging.info("Environment: %s", settings.environment.name.lower())
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
    )
