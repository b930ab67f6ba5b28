import logging
from urllib.parse import parse_qsl

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from errors import (
    ConfigurationError,
    InvalidFieldValueError,
    MissingCredentialsError,
    MissingFieldError,
    UnknownServiceError,
)
from payment_gateway import is_authentic
from services import simplepay_form_for

# ---------------------------
# 基本設定
# ---------------------------
app = FastAPI()

# merchant credentials always come from config, never from the visitor
PROTECTED_FIELDS = ("access_key", "account_id", "signature")

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")


# ---------------------------
# FastAPI Endpoints
# ---------------------------
@app.get("/pay/{service_name}", response_class=HTMLResponse)
async def pay(service_name: str, req: Request):
    """Render the signed payment form; query parameters become field values."""
    attributes = {k: v for k, v in req.query_params.items() if k not in PROTECTED_FIELDS}
    try:
        return simplepay_form_for(service_name, attributes)
    except UnknownServiceError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MissingFieldError as e:
        raise HTTPException(status_code=422, detail={"missing": e.fields})
    except InvalidFieldValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigurationError as e:
        logging.exception("form %s: %s", service_name, e)
        raise HTTPException(status_code=500, detail="payment gateway is not configured")


@app.post("/ipn", response_class=PlainTextResponse)
async def ipn(req: Request):
    body: bytes = await req.body()
    try:
        params = dict(parse_qsl(body.decode(), keep_blank_values=True))
    except UnicodeDecodeError:
        logging.warning("ipn: body is not valid UTF-8")
        return PlainTextResponse("Invalid signature", status_code=400)

    try:
        authentic = is_authentic(params)
    except MissingCredentialsError as e:
        logging.exception("ipn: %s", e)
        raise HTTPException(status_code=500, detail="payment gateway is not configured")

    if not authentic:
        logging.warning("ipn: invalid signature for reference %s", params.get("referenceId"))
        return PlainTextResponse("Invalid signature", status_code=400)

    logging.info(
        "ipn: %s %s status=%s",
        params.get("referenceId"),
        params.get("transactionAmount"),
        params.get("status"),
    )
    return "OK"


@app.get("/health")
async def health():
    return {"status": "ok"}


# ---------------------------
# 執行 FastAPI
# ---------------------------
if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, log_level="warning")
