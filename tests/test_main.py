from urllib.parse import urlencode

from fastapi.testclient import TestClient

import config
import payment_gateway
from main import app

client = TestClient(app)


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_pay_renders_form():
    res = client.get("/pay/donation", params={"amount": "12", "description": "Drive"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert 'name="amount" type="hidden" value="USD 12.00"' in res.text


def test_pay_unknown_service():
    assert client.get("/pay/lottery").status_code == 404


def test_pay_missing_fields():
    res = client.get("/pay/donation", params={"amount": "12"})
    assert res.status_code == 422
    assert res.json()["detail"] == {"missing": ["description"]}


def test_pay_invalid_value():
    res = client.get("/pay/donation", params={"amount": "-1", "description": "Drive"})
    assert res.status_code == 422


def test_pay_without_secret(monkeypatch):
    monkeypatch.setattr(config, "SIMPLEPAY_AWS_SECRET_ACCESS_KEY", None)
    res = client.get("/pay/donation", params={"amount": "12", "description": "Drive"})
    assert res.status_code == 500


def test_ipn():
    params = {"referenceId": "order-1", "status": "PS", "transactionAmount": "USD 12.00"}
    params["signature"] = payment_gateway.generate_signature(params)
    headers = {"content-type": "application/x-www-form-urlencoded"}

    res = client.post("/ipn", content=urlencode(params), headers=headers)
    assert res.status_code == 200
    assert res.text == "OK"

    params["status"] = "PF"
    res = client.post("/ipn", content=urlencode(params), headers=headers)
    assert res.status_code == 400
    assert res.text == "Invalid signature"


def test_pay_subscription_with_empty_optional_fields():
    res = client.get(
        "/pay/subscription",
        params={
            "amount": "5",
            "description": "d",
            "recurring_frequency": "1 month",
            "subscription_period": "",
            "recurring_start_date": "",
        },
    )
    assert res.status_code == 200
    assert 'name="subscriptionPeriod" type="hidden" value=""' in res.text
    assert 'name="recurringStartDate" type="hidden" value=""' in res.text


def test_pay_ignores_credentials_from_query():
    res = client.get(
        "/pay/standard",
        params={
            "amount": "5",
            "description": "d",
            "access_key": "OTHERKEY",
            "account_id": "OTHERACCOUNT",
            "signature": "forged",
        },
    )
    assert res.status_code == 200
    assert 'name="accessKey" type="hidden" value="AKIDEXAMPLE"' in res.text
    assert 'name="amazonPaymentsAccountId" type="hidden" value="ACCOUNT123"' in res.text
    assert "OTHERACCOUNT" not in res.text
    assert "forged" not in res.text


def test_pay_without_configured_account(monkeypatch):
    monkeypatch.setattr(config, "SIMPLEPAY_ACCOUNT_ID", None)
    res = client.get(
        "/pay/standard",
        params={"amount": "5", "description": "d", "account_id": "OTHERACCOUNT"},
    )
    assert res.status_code == 422
    assert res.json()["detail"] == {"missing": ["account_id"]}


def test_ipn_rejects_undecodable_body():
    res = client.post(
        "/ipn",
        content=b"signature=\xff\xfe",
        headers={"content-type": "application/x-www-form-urlencoded"},
    )
    assert res.status_code == 400
    assert res.text == "Invalid signature"
