"""End-to-end tests for webhook verification."""

import pytest


class TestWebhookVerification:
    """Test Facebook webhook verification endpoint."""

    def test_webhook_verification_success(self, test_client):
        """Test webhook verification with correct token."""
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "test-verify-token",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 200
        assert response.text == "challenge-123"

    def test_webhook_verification_fails_invalid_token(self, test_client):
        """Test webhook verification fails with incorrect token."""
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "wrong-token",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 403
        assert response.text == ""

    @pytest.mark.parametrize("mode", ["unsubscribe", "", None])
    def test_webhook_verification_fails_wrong_mode(self, test_client, mode):
        """Test webhook verification fails unless mode is 'subscribe'."""
        params = {"hub.verify_token": "test-verify-token", "hub.challenge": "c"}
        if mode is not None:
            params["hub.mode"] = mode

        response = test_client.get("/webhook", params=params)

        assert response.status_code == 403

    def test_webhook_verification_without_challenge(self, test_client):
        """A matching handshake without a challenge echoes an empty body."""
        response = test_client.get(
            "/webhook",
            params={"hub.mode": "subscribe", "hub.verify_token": "test-verify-token"},
        )

        assert response.status_code == 200
        assert response.text == ""
