import hashlib
import hmac
import json
import time

import pytest
import stripe

from models import db, User
from services import billing

WEBHOOK_SECRET = 'whsec_test'


def signature_header(payload, secret=WEBHOOK_SECRET, timestamp=None):
    timestamp = int(time.time()) if timestamp is None else timestamp
    digest = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


class FakeStripe:
    """Records SDK calls and answers them from canned objects or errors."""

    def __init__(self):
        self.calls = []
        self.results = {}

    def respond(self, action, result):
        self.results[action] = result

    def handler(self, action):
        def call(*args, **params):
            self.calls.append((action, args, params))
            result = self.results.get(action)
            if result is None:
                raise stripe.InvalidRequestError('No such resource', param=None)
            if isinstance(result, Exception):
                raise result
            return result
        return call


@pytest.fixture
def stripe_api(app, monkeypatch):
    """Configure a Stripe key and record the outgoing SDK calls."""
    monkeypatch.setitem(app.config, 'STRIPE_SECRET_KEY', 'sk_test_123')
    fake = FakeStripe()
    monkeypatch.setattr(stripe.Customer, 'create', fake.handler('customer.create'))
    monkeypatch.setattr(stripe.Subscription, 'create', fake.handler('subscription.create'))
    monkeypatch.setattr(stripe.Subscription, 'retrieve', fake.handler('subscription.retrieve'))
    return fake


def subscription(status='active', price='price_pro', sub_id='sub_123', customer='cus_123'):
    return {
        'id': sub_id,
        'customer': customer,
        'status': status,
        'items': {'data': [{'price': {'id': price}}]},
        'latest_invoice': {'payment_intent': {'client_secret': 'pi_secret_abc'}},
    }


def test_verify_webhook_accepts_valid_signature():
    payload = json.dumps({'type': 'ping'})
    event = billing.verify_webhook(payload, signature_header(payload), WEBHOOK_SECRET)
    assert event == {'type': 'ping'}


def test_verify_webhook_accepts_bytes():
    payload = json.dumps({'type': 'ping'})
    event = billing.verify_webhook(payload.encode(), signature_header(payload), WEBHOOK_SECRET)
    assert event == {'type': 'ping'}


def test_verify_webhook_rejects_tampered_payload():
    payload = json.dumps({'type': 'ping'})
    header = signature_header(payload)
    with pytest.raises(billing.WebhookSignatureError):
        billing.verify_webhook(payload.replace('ping', 'pong'), header, WEBHOOK_SECRET)


def test_verify_webhook_rejects_old_timestamp(monkeypatch):
    payload = '{}'
    header = signature_header(payload, timestamp=1_700_000_000)
    monkeypatch.setattr(time, 'time', lambda: 1_700_000_000 + 301)
    with pytest.raises(billing.WebhookSignatureError, match='tolerance'):
        billing.verify_webhook(payload, header, WEBHOOK_SECRET)
    monkeypatch.setattr(time, 'time', lambda: 1_700_000_000 + 300)
    assert billing.verify_webhook(payload, header, WEBHOOK_SECRET) == {}


@pytest.mark.parametrize('header', [None, '', 't=123', 'v1=abc', 'garbage', 't=abc,v1=abc'])
def test_verify_webhook_rejects_malformed_header(header):
    with pytest.raises(billing.WebhookSignatureError):
        billing.verify_webhook('{}', header, WEBHOOK_SECRET)


def test_verify_webhook_rejects_undecodable_payload():
    with pytest.raises(billing.WebhookSignatureError, match='UTF-8'):
        billing.verify_webhook(b'\xff\xfe', signature_header('{}'), WEBHOOK_SECRET)


def test_verify_webhook_needs_a_secret():
    payload = '{}'
    with pytest.raises(billing.WebhookSignatureError):
        billing.verify_webhook(payload, signature_header(payload, secret=''), '')


def test_tier_mapping(app):
    assert billing.tier_for_subscription(subscription(price='price_premium')) == 'premium'
    assert billing.tier_for_subscription(subscription(price='price_pro')) == 'pro'
    assert billing.tier_for_subscription(subscription(status='trialing')) == 'pro'
    assert billing.tier_for_subscription(subscription(status='past_due')) == 'free'
    assert billing.tier_for_subscription(subscription(status='canceled')) == 'free'


def test_client_secret_needs_expanded_invoice():
    assert billing.client_secret(subscription()) == 'pi_secret_abc'
    assert billing.client_secret({'latest_invoice': 'in_123'}) is None


def test_create_subscription_not_configured(auth_client):
    response = auth_client.post('/api/create-subscription', json={'priceId': 'price_pro'})
    assert response.status_code == 503
    assert response.get_json()['error'] == 'STRIPE_NOT_CONFIGURED'


def test_create_subscription_creates_customer_and_subscription(auth_client, user, stripe_api):
    stripe_api.respond('customer.create', {'id': 'cus_123'})
    stripe_api.respond('subscription.create', subscription(status='incomplete'))

    response = auth_client.post('/api/create-subscription', json={'priceId': 'price_pro'})

    assert response.status_code == 200
    assert response.get_json() == {'subscriptionId': 'sub_123', 'clientSecret': 'pi_secret_abc'}
    action, args, params = stripe_api.calls[1]
    assert action == 'subscription.create'
    assert params['customer'] == 'cus_123'
    assert params['items'] == [{'price': 'price_pro'}]
    assert params['payment_behavior'] == 'default_incomplete'
    assert params['expand'] == ['latest_invoice.payment_intent']
    assert params['api_key'] == 'sk_test_123'
    assert params['stripe_version'] == '2023-10-16'

    db.session.refresh(user)
    assert user.stripe_customer_id == 'cus_123'
    assert user.stripe_subscription_id == 'sub_123'
    # Tier changes only through the webhook
    assert user.subscription_status == 'free'


def test_create_subscription_reuses_existing(auth_client, user, stripe_api):
    user.stripe_subscription_id = 'sub_123'
    db.session.commit()
    stripe_api.respond('subscription.retrieve', subscription())

    response = auth_client.post('/api/create-subscription', json={})

    assert response.status_code == 200
    assert response.get_json()['subscriptionId'] == 'sub_123'
    assert [(call[0], call[1]) for call in stripe_api.calls] == [('subscription.retrieve', ('sub_123',))]


def test_stripe_error_is_a_bad_request(auth_client, stripe_api):
    stripe_api.respond('customer.create', stripe.InvalidRequestError('Invalid email', param='email'))
    response = auth_client.post('/api/create-subscription', json={'priceId': 'price_pro'})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Invalid email'


def post_webhook(client, event, secret=WEBHOOK_SECRET):
    payload = json.dumps(event)
    return client.post(
        '/api/stripe/webhook',
        data=payload,
        content_type='application/json',
        headers={'Stripe-Signature': signature_header(payload, secret)},
    )


def test_webhook_upgrades_and_downgrades_tier(client, make_user):
    make_user(email='payer@example.com', stripe_customer_id='cus_123', stripe_subscription_id='sub_123')

    response = post_webhook(client, {
        'type': 'customer.subscription.updated',
        'data': {'object': subscription(price='price_premium')},
    })
    assert response.status_code == 200
    assert response.get_json() == {'received': True}
    assert db.session.get(User, 'payer').subscription_status == 'premium'

    post_webhook(client, {
        'type': 'customer.subscription.deleted',
        'data': {'object': subscription(status='canceled')},
    })
    db.session.expire_all()
    payer = db.session.get(User, 'payer')
    assert payer.subscription_status == 'free'
    assert payer.stripe_subscription_id is None


def test_webhook_finds_user_by_customer(client, make_user):
    make_user(email='payer@example.com', stripe_customer_id='cus_9')
    post_webhook(client, {
        'type': 'customer.subscription.created',
        'data': {'object': subscription(sub_id='sub_new', customer='cus_9')},
    })
    db.session.expire_all()
    payer = db.session.get(User, 'payer')
    assert payer.subscription_status == 'pro'
    assert payer.stripe_subscription_id == 'sub_new'


def test_webhook_with_bad_signature_is_rejected(client, make_user):
    make_user(email='payer@example.com', stripe_subscription_id='sub_123')
    response = post_webhook(client, {
        'type': 'customer.subscription.updated',
        'data': {'object': subscription(price='price_premium')},
    }, secret='whsec_wrong')
    assert response.status_code == 400
    assert response.get_json()['message'].startswith('Webhook Error:')
    db.session.expire_all()
    assert db.session.get(User, 'payer').subscription_status == 'free'


def test_webhook_ignores_other_events(client):
    response = post_webhook(client, {'type': 'invoice.paid', 'data': {'object': {}}})
    assert response.status_code == 200


def test_webhook_with_undecodable_body_is_a_bad_request(client):
    response = client.post(
        '/api/stripe/webhook',
        data=b'\xff\xfe',
        content_type='application/json',
        headers={'Stripe-Signature': signature_header('{}')},
    )
    assert response.status_code == 400
    assert response.get_json()['message'].startswith('Webhook Error:')
