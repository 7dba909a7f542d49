"""
Billing Service

Stripe customers and subscriptions through the stripe SDK, webhook
signature verification and the subscription -> tier mapping.
"""

import json
import logging

import stripe
from flask import current_app

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE = 300  # seconds

ACTIVE_STATUSES = {'active', 'trialing'}

SUBSCRIPTION_EXPAND = ['latest_invoice.payment_intent']


class BillingError(Exception):
    """A Stripe API call failed."""


class BillingNotConfiguredError(BillingError):
    """No Stripe secret key is configured."""


class WebhookSignatureError(Exception):
    """Webhook payload failed signature verification."""


def is_configured():
    return bool(current_app.config.get('STRIPE_SECRET_KEY'))


def _request_options():
    """api_key and stripe_version for one call; routes SDK traffic through requests."""
    secret = current_app.config.get('STRIPE_SECRET_KEY')
    if not secret:
        raise BillingNotConfiguredError("Stripe is not configured")

    if not isinstance(stripe.default_http_client, stripe.RequestsClient):
        stripe.default_http_client = stripe.RequestsClient(
            timeout=current_app.config.get('STRIPE_TIMEOUT', 20),
        )

    return {
        'api_key': secret,
        'stripe_version': current_app.config.get('STRIPE_API_VERSION'),
    }


def _plain(obj):
    """SDK objects as plain dicts so callers can use .get() on nested values."""
    to_dict = getattr(obj, 'to_dict', None)
    return to_dict() if callable(to_dict) else obj


def _call(action, method, *args, **params):
    options = _request_options()
    try:
        result = method(*args, **params, **options)
    except stripe.StripeError as e:
        logger.error("Stripe %s failed: %s", action, e)
        raise BillingError(e.user_message or str(e)) from e
    return _plain(result)


def create_customer(email, name):
    return _call('customer create', stripe.Customer.create, email=email, name=name)


def create_subscription(customer_id, price_id):
    return _call(
        'subscription create',
        stripe.Subscription.create,
        customer=customer_id,
        items=[{'price': price_id}],
        payment_behavior='default_incomplete',
        expand=SUBSCRIPTION_EXPAND,
    )


def retrieve_subscription(subscription_id):
    return _call('subscription retrieve', stripe.Subscription.retrieve,
                 subscription_id, expand=SUBSCRIPTION_EXPAND)


def client_secret(subscription):
    """Payment intent client secret of a subscription's latest invoice, if expanded."""
    invoice = subscription.get('latest_invoice')
    if not isinstance(invoice, dict):
        return None
    intent = invoice.get('payment_intent')
    if not isinstance(intent, dict):
        return None
    return intent.get('client_secret')


def verify_webhook(payload, signature_header, secret):
    """
    Verify a Stripe-Signature header and return the decoded event dict.

    Signature checking is delegated to stripe.WebhookSignature; events
    older than WEBHOOK_TOLERANCE seconds are rejected.
    """
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured")
    if not signature_header:
        raise WebhookSignatureError("Missing Stripe-Signature header")

    if isinstance(payload, bytes):
        try:
            payload = payload.decode('utf-8')
        except UnicodeDecodeError as e:
            raise WebhookSignatureError("Payload is not valid UTF-8") from e

    try:
        stripe.WebhookSignature.verify_header(
            payload, signature_header, secret, tolerance=WEBHOOK_TOLERANCE,
        )
    except stripe.SignatureVerificationError as e:
        raise WebhookSignatureError(e.user_message or str(e)) from e
    except ValueError as e:
        # Header fields that are not key=value pairs or have a non-numeric timestamp
        raise WebhookSignatureError("Unable to parse signature header") from e

    try:
        event = json.loads(payload)
    except ValueError as e:
        raise WebhookSignatureError(f"Invalid payload: {e}") from e
    if not isinstance(event, dict):
        raise WebhookSignatureError("Invalid payload: expected a JSON object")
    return event


def _subscription_price_ids(subscription):
    items = (subscription.get('items') or {}).get('data') or []
    return {((item.get('price') or {}).get('id')) for item in items}


def tier_for_subscription(subscription):
    """Map a Stripe subscription object to 'premium', 'pro' or 'free'."""
    if subscription.get('status') not in ACTIVE_STATUSES:
        return 'free'
    prices = _subscription_price_ids(subscription)
    premium = current_app.config.get('STRIPE_PRICE_PREMIUM')
    if premium and premium in prices:
        return 'premium'
    return 'pro'
