"""Tests for webhook signature verification."""

import hashlib
import hmac

from linear_node.transport.signature import compute_webhook_signature, verify_webhook_signature

SECRET = "whsec_test"
BODY = '{"type":"Issue","action":"create"}'


def _sign(body, secret=SECRET):
    return hmac.new(secret.encode(), body.encode(), hashlib.sha256).hexdigest()


class TestComputeSignature:
    def test_hex_hmac_sha256(self):
        assert compute_webhook_signature(BODY, SECRET) == _sign(BODY)

    def test_bytes_and_str_agree(self):
        assert compute_webhook_signature(BODY.encode(), SECRET) == compute_webhook_signature(BODY, SECRET)


class TestVerifySignature:
    def test_valid_signature(self):
        assert verify_webhook_signature(BODY, _sign(BODY), SECRET) is True

    def test_valid_signature_bytes_body(self):
        assert verify_webhook_signature(BODY.encode(), _sign(BODY), SECRET) is True

    def test_wrong_secret(self):
        assert verify_webhook_signature(BODY, _sign(BODY, "other"), SECRET) is False

    def test_tampered_body(self):
        assert verify_webhook_signature(BODY + " ", _sign(BODY), SECRET) is False

    def test_length_mismatch(self):
        assert verify_webhook_signature(BODY, "abc", SECRET) is False

    def test_missing_signature(self):
        assert verify_webhook_signature(BODY, None, SECRET) is False
        assert verify_webhook_signature(BODY, "", SECRET) is False
