import re
from smtplib import SMTPException
from unittest import mock

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import override_settings
from rest_framework.test import APITestCase

from customers.models import Customer
from payments.signature import compute_signature
from policies.models import Policy

from .test_create_order import echo_order, gateway_response, paid_order

SECRET = "test_secret"
POLICY_NUMBER_RE = re.compile(r"^RSA-\d{12}-\d{3}$")


def signed_payload(order_id="order_1", payment_id="pay_1", *, policy=None, customer=None, signature=None):
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature or compute_signature(order_id, payment_id, SECRET),
        "policyData": policy or {"id": "Kalyan_002", "policyType": "Premium Coverage", "amount": 4499, "duration": "2 Year"},
        "customerData": customer
        or {
            "customerName": "Ravi Kumar",
            "email": "ravi@example.com",
            "phoneNumber": "9876543210",
            "address": "12 MG Road",
            "city": "Bengaluru",
            "vehicleNumber": "KA 01 AB 1234",
        },
    }


@override_settings(
    RAZORPAY_KEY_ID="rzp_test_key",
    RAZORPAY_KEY_SECRET=SECRET,
    ADMIN_NOTIFICATION_EMAILS=["ops@kalyan.example"],
    CERTIFICATE_TEMPLATE_PDF="",
)
class VerifyAndSaveTests(APITestCase):
    url = "/api/payments/verify-and-save"

    def setUp(self):
        patcher = mock.patch("payments.gateway.requests.get", side_effect=paid_order(449900))
        self.order_lookup = patcher.start()
        self.addCleanup(patcher.stop)

    def test_verified_payment_creates_one_policy_and_customer(self):
        res = self.client.post(self.url, signed_payload(), format="json")

        self.assertEqual(res.status_code, 201, res.data)
        self.assertTrue(res.data["success"])
        self.assertEqual(res.data["message"], "Payment verified and data saved successfully")
        self.assertFalse(res.data["duplicate"])
        self.assertEqual(Policy.objects.count(), 1)
        self.assertEqual(Customer.objects.count(), 1)

        policy = Policy.objects.get()
        customer = Customer.objects.get()
        self.assertEqual(policy.customer_id, customer.id)
        self.assertEqual(res.data["policyId"], policy.id)
        self.assertEqual(res.data["customerId"], customer.id)
        self.assertEqual(customer.vehicle_number, "KA01AB1234")
        self.assertRegex(res.data["data"]["policy"]["policyNumber"], POLICY_NUMBER_RE)
        self.assertEqual(res.data["data"]["customer"]["customerName"], "Ravi Kumar")

    def test_confirmation_emails(self):
        res = self.client.post(self.url, signed_payload(), format="json")

        self.assertEqual(res.data["emails"], {"customer": "sent", "admin": "sent"})
        self.assertEqual(len(mail.outbox), 2)
        customer_mail, admin_mail = mail.outbox
        policy = Policy.objects.get()
        self.assertEqual(customer_mail.to, ["ravi@example.com"])
        self.assertIn(policy.policy_number, customer_mail.body)
        self.assertIn(policy.expiry_date.strftime("%d/%m/%Y"), customer_mail.body)
        self.assertIn("4499.00", customer_mail.body)
        filename, content, mimetype = customer_mail.attachments[0]
        self.assertEqual(filename, f"Policy_{policy.policy_number}.pdf")
        self.assertEqual(mimetype, "application/pdf")
        self.assertTrue(content.startswith(b"%PDF"))
        self.assertEqual(admin_mail.to, ["ops@kalyan.example"])
        self.assertIn("Ravi Kumar", admin_mail.body)

    def test_placeholder_email_skips_customer_mail(self):
        payload = signed_payload()
        payload["customerData"]["email"] = "NA"
        res = self.client.post(self.url, payload, format="json")

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["emails"], {"customer": "skipped", "admin": "sent"})
        self.assertEqual(Customer.objects.get().email, "")
        self.assertEqual([m.to for m in mail.outbox], [["ops@kalyan.example"]])

    def test_mail_failure_does_not_fail_the_save(self):
        with mock.patch("payments.notifications.EmailMessage.send", side_effect=SMTPException("relay down")):
            res = self.client.post(self.url, signed_payload(), format="json")
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["emails"]["customer"], "failed")
        self.assertEqual(Policy.objects.count(), 1)

    def test_bad_signature_writes_nothing(self):
        payload = signed_payload(signature="0" * 64)
        res = self.client.post(self.url, payload, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data, {"success": False, "message": "Invalid payment signature"})
        self.assertEqual(Policy.objects.count(), 0)
        self.assertEqual(Customer.objects.count(), 0)
        self.assertEqual(mail.outbox, [])

    def test_replay_is_idempotent(self):
        first = self.client.post(self.url, signed_payload(), format="json")
        second = self.client.post(self.url, signed_payload(), format="json")

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 200)
        self.assertTrue(second.data["duplicate"])
        self.assertIsNone(second.data["emails"])
        self.assertEqual(second.data["policyId"], first.data["policyId"])
        self.assertEqual(Policy.objects.count(), 1)
        self.assertEqual(Customer.objects.count(), 1)
        self.assertEqual(len(mail.outbox), 2)

    def test_replay_skips_the_order_lookup(self):
        self.client.post(self.url, signed_payload(), format="json")
        self.order_lookup.reset_mock()

        res = self.client.post(self.url, signed_payload(), format="json")

        self.assertEqual(res.status_code, 200)
        self.order_lookup.assert_not_called()

    def test_cheap_order_cannot_buy_an_expensive_plan(self):
        self.order_lookup.side_effect = paid_order(100)
        payload = signed_payload(policy={"id": "Kalyan_003", "amount": 6499})

        res = self.client.post(self.url, payload, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["message"], "amount: Amount does not match the paid order.")
        self.assertEqual(Policy.objects.count(), 0)
        self.assertEqual(Customer.objects.count(), 0)
        self.assertEqual(mail.outbox, [])
        url = self.order_lookup.call_args[0][0]
        self.assertEqual(url, "https://api.razorpay.com/v1/orders/order_1")

    def test_plan_price_is_checked_when_amount_is_omitted(self):
        self.order_lookup.side_effect = paid_order(100)
        res = self.client.post(self.url, signed_payload(policy={"id": "Kalyan_002"}), format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(Policy.objects.count(), 0)

    def test_order_lookup_failure_writes_nothing(self):
        self.order_lookup.side_effect = None
        self.order_lookup.return_value = gateway_response(
            400, {"error": {"code": "BAD_REQUEST_ERROR", "description": "The id provided does not exist"}}
        )
        res = self.client.post(self.url, signed_payload(), format="json")

        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data["message"], "The id provided does not exist")
        self.assertEqual(Policy.objects.count(), 0)

    def test_invalid_customer_data(self):
        payload = signed_payload()
        del payload["customerData"]["vehicleNumber"]
        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("vehicleNumber", res.data["errors"]["customerData"])
        self.assertEqual(Customer.objects.count(), 0)

    def test_amount_mismatch_with_plan_is_rejected(self):
        payload = signed_payload(policy={"id": "Kalyan_003", "amount": 1})
        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(Policy.objects.count(), 0)

    @mock.patch("payments.gateway.requests.post", side_effect=echo_order)
    def test_end_to_end_order_then_verification(self, mock_post):
        self.order_lookup.side_effect = paid_order(100)
        order_res = self.client.post("/create-order", {"amount": 1, "receipt": "r1"}, format="json")
        self.assertEqual(order_res.status_code, 200, order_res.data)
        order = order_res.data["order"]
        self.assertEqual(order["amount"], 100)

        payload = signed_payload(
            order_id=order["id"],
            payment_id="pay_e2e",
            policy={"id": "Kalyan_001", "amount": 1},
        )
        res = self.client.post(self.url, payload, format="json")

        self.assertEqual(res.status_code, 201, res.data)
        policy = Policy.objects.get(pk=res.data["policyId"])
        self.assertEqual(policy.amount, 1)
        self.assertEqual(policy.order_id, "order_test_1")
        self.assertRegex(policy.policy_number, POLICY_NUMBER_RE)


@override_settings(RAZORPAY_KEY_ID="rzp_test_key", RAZORPAY_KEY_SECRET=SECRET)
class VerifyOnlyTests(APITestCase):
    url = "/api/payments/verify"

    def test_valid_signature_is_echoed_without_writes(self):
        payload = signed_payload()
        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["status"], "verified")
        self.assertEqual(res.data["order_id"], "order_1")
        self.assertEqual(res.data["payment_id"], "pay_1")
        self.assertIn("timestamp", res.data)
        self.assertEqual(Policy.objects.count(), 0)

    def test_mismatch(self):
        res = self.client.post(self.url, signed_payload(signature="deadbeef"), format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["message"], "Invalid payment signature")

    def test_missing_fields(self):
        res = self.client.post(self.url, {}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["message"], "Invalid payment signature")


@override_settings(RAZORPAY_KEY_ID="rzp_test_key", RAZORPAY_KEY_SECRET=SECRET)
class PaymentConfigTests(APITestCase):
    def test_admin_only(self):
        res = self.client.get("/api/payments/config")
        self.assertEqual(res.status_code, 401)

    def test_reports_configuration(self):
        admin = get_user_model().objects.create_user(username="admin", password="x", is_staff=True)
        self.client.force_authenticate(user=admin)
        res = self.client.get("/api/payments/config")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["razorpay_configured"])
        self.assertEqual(res.data["default_currency"], "INR")
