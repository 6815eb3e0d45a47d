import json
from unittest import mock

import requests
from django.test import override_settings
from rest_framework.test import APITestCase


def gateway_response(status_code, payload):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = json.dumps(payload)
    return resp


def echo_order(url, json=None, auth=None, timeout=None):
    return gateway_response(
        200,
        {
            "id": "order_test_1",
            "entity": "order",
            "amount": json["amount"],
            "currency": json["currency"],
            "receipt": json["receipt"],
            "status": "created",
        },
    )


def paid_order(amount):
    """Stands in for requests.get on /orders/<id>, reporting `amount` paise."""

    def _get(url, auth=None, timeout=None):
        return gateway_response(
            200,
            {
                "id": url.rsplit("/", 1)[-1],
                "entity": "order",
                "amount": amount,
                "amount_paid": amount,
                "currency": "INR",
                "status": "paid",
            },
        )

    return _get


@override_settings(RAZORPAY_KEY_ID="rzp_test_key", RAZORPAY_KEY_SECRET="test_secret")
class CreateOrderTests(APITestCase):
    url = "/api/payments/create-order"

    @mock.patch("payments.gateway.requests.post", side_effect=echo_order)
    def test_amount_is_sent_in_paise_with_inr_default(self, mock_post):
        res = self.client.post(self.url, {"amount": 1, "receipt": "r1"}, format="json")

        self.assertEqual(res.status_code, 200, res.data)
        self.assertTrue(res.data["success"])
        self.assertEqual(
            res.data["order"],
            {"id": "order_test_1", "amount": 100, "currency": "INR", "receipt": "r1"},
        )
        _, kwargs = mock_post.call_args
        self.assertEqual(mock_post.call_args[0][0], "https://api.razorpay.com/v1/orders")
        self.assertEqual(kwargs["json"]["payment_capture"], 1)
        self.assertEqual(kwargs["auth"], ("rzp_test_key", "test_secret"))
        self.assertEqual(kwargs["timeout"], 10)

    @mock.patch("payments.gateway.requests.post", side_effect=echo_order)
    def test_currency_and_fractional_amounts(self, mock_post):
        res = self.client.post(self.url, {"amount": "4499.99", "currency": "usd", "receipt": "r2"}, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["order"]["amount"], 449999)
        self.assertEqual(res.data["order"]["currency"], "USD")

    @mock.patch("payments.gateway.requests.post", side_effect=echo_order)
    def test_root_alias(self, mock_post):
        res = self.client.post("/create-order", {"amount": 6499, "receipt": "r3"}, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["order"]["amount"], 649900)

    @mock.patch("payments.gateway.requests.post")
    def test_missing_amount_or_receipt(self, mock_post):
        for payload in ({"receipt": "r1"}, {"amount": 10}, {"amount": 0, "receipt": "r1"}, {}):
            with self.subTest(payload=payload):
                res = self.client.post(self.url, payload, format="json")
                self.assertEqual(res.status_code, 400)
                self.assertEqual(res.data["success"], False)
                self.assertEqual(res.data["message"], "Amount and receipt are required")
        mock_post.assert_not_called()

    @mock.patch("payments.gateway.requests.post")
    def test_non_numeric_or_negative_amount(self, mock_post):
        for amount in ("abc", -5):
            with self.subTest(amount=amount):
                res = self.client.post(self.url, {"amount": amount, "receipt": "r1"}, format="json")
                self.assertEqual(res.status_code, 400)
        mock_post.assert_not_called()

    @mock.patch("payments.gateway.requests.post")
    def test_gateway_error_description_is_forwarded(self, mock_post):
        mock_post.return_value = gateway_response(
            400,
            {"error": {"code": "BAD_REQUEST_ERROR", "description": "The amount must be atleast INR 1.00"}},
        )
        res = self.client.post(self.url, {"amount": 0.5, "receipt": "r1"}, format="json")
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data["message"], "The amount must be atleast INR 1.00")

    @mock.patch("payments.gateway.requests.post", side_effect=requests.ConnectionError("connection refused"))
    def test_network_error(self, mock_post):
        res = self.client.post(self.url, {"amount": 1, "receipt": "r1"}, format="json")
        self.assertEqual(res.status_code, 500)
        self.assertIn("connection refused", res.data["message"])

    @override_settings(RAZORPAY_KEY_ID="", RAZORPAY_KEY_SECRET="")
    @mock.patch("payments.gateway.requests.post")
    def test_unconfigured_gateway(self, mock_post):
        res = self.client.post(self.url, {"amount": 1, "receipt": "r1"}, format="json")
        self.assertEqual(res.status_code, 500)
        self.assertIn("RAZORPAY_KEY_ID", res.data["message"])
        mock_post.assert_not_called()

    @mock.patch("payments.gateway.requests.post")
    def test_currency_must_be_a_code(self, mock_post):
        for currency in (5, ["INR"], "rupees"):
            with self.subTest(currency=currency):
                res = self.client.post(
                    self.url, {"amount": 1, "receipt": "r1", "currency": currency}, format="json"
                )
                self.assertEqual(res.status_code, 400)
                self.assertIn("currency", res.data["errors"])
        mock_post.assert_not_called()
