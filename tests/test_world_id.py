# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from unittest.mock import AsyncMock, patch

import httpx

from fitchain.services.world_id import (
    VerifyResult,
    hash_to_field,
    normalize_app_id,
    verify_cloud_proof,
)
from tests.support import ApiTestCase

PROOF = {
    "proof": "0xproof",
    "merkle_root": "0xroot",
    "nullifier_hash": "0xnullifier",
    "verification_level": "orb",
}


class TestHelpers(unittest.TestCase):
    def test_empty_signal_hash(self) -> None:
        self.assertEqual(
            hash_to_field(""),
            "0x00c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a4",
        )

    def test_hex_signal_is_hashed_as_bytes(self) -> None:
        self.assertEqual(hash_to_field("0x"), hash_to_field(b""))
        self.assertNotEqual(hash_to_field("0xabcd"), hash_to_field("abcd"))

    def test_field_fits_in_248_bits(self) -> None:
        value = hash_to_field("user-42")
        self.assertEqual(len(value), 66)
        self.assertTrue(value.startswith("0x00"))

    def test_normalize_app_id(self) -> None:
        self.assertEqual(normalize_app_id("abc123"), "app_abc123")
        self.assertEqual(normalize_app_id("app_abc123"), "app_abc123")


class TestVerifyCloudProof(unittest.IsolatedAsyncioTestCase):
    async def _verify(self, handler, **kwargs) -> VerifyResult:
        real_client = httpx.AsyncClient

        def client_factory(**options):
            return real_client(transport=httpx.MockTransport(handler), **options)

        with patch(
            "fitchain.services.world_id.httpx.AsyncClient", side_effect=client_factory
        ):
            return await verify_cloud_proof(PROOF, "app_test", "verify-human", **kwargs)

    async def test_success_sends_proof_and_signal_hash(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True})

        result = await self._verify(handler, signal="user-42")

        self.assertTrue(result.success)
        self.assertTrue(seen["url"].endswith("/api/v2/verify/app_test"))
        self.assertEqual(seen["body"]["action"], "verify-human")
        self.assertEqual(seen["body"]["nullifier_hash"], "0xnullifier")
        self.assertEqual(seen["body"]["signal_hash"], hash_to_field("user-42"))

    async def test_failure_relays_code_and_detail(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={
                    "code": "max_verifications_reached",
                    "detail": "This person has already verified for this action.",
                    "attribute": None,
                },
            )

        result = await self._verify(handler)

        self.assertFalse(result.success)
        self.assertEqual(result.code, "max_verifications_reached")
        self.assertEqual(
            result.detail, "This person has already verified for this action."
        )


class TestVerifyRoute(ApiTestCase):
    def test_missing_payload_or_action_is_rejected(self) -> None:
        for body in ({"action": "verify-human"}, {"payload": PROOF}, {}):
            resp = self.client.post("/api/world-id/verify", json=body)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json()["message"], "Missing required fields")

    def test_missing_app_id_is_a_server_error(self) -> None:
        with patch("fitchain.api.routers.world_id.WLD_APP_ID", None):
            resp = self.client.post(
                "/api/world-id/verify",
                json={"payload": PROOF, "action": "verify-human"},
            )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["message"], "World ID not configured")

    def test_success_returns_nullifier(self) -> None:
        verify = AsyncMock(return_value=VerifyResult(success=True))
        with patch("fitchain.api.routers.world_id.WLD_APP_ID", "abc"), patch(
            "fitchain.api.routers.world_id.verify_cloud_proof", verify
        ):
            resp = self.client.post(
                "/api/world-id/verify",
                json={"payload": PROOF, "action": "daily-food-log", "signal": "alice"},
            )

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["verified"])
        self.assertEqual(body["nullifier_hash"], "0xnullifier")
        verify.assert_awaited_once_with(PROOF, "app_abc", "daily-food-log", "alice")

    def test_cloud_rejection_is_relayed(self) -> None:
        verify = AsyncMock(
            return_value=VerifyResult(
                success=False, code="invalid_proof", detail="Proof is invalid"
            )
        )
        with patch("fitchain.api.routers.world_id.WLD_APP_ID", "app_abc"), patch(
            "fitchain.api.routers.world_id.verify_cloud_proof", verify
        ):
            resp = self.client.post(
                "/api/world-id/verify",
                json={"payload": PROOF, "action": "verify-human"},
            )

        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertFalse(body["verified"])
        self.assertEqual(body["code"], "invalid_proof")
        self.assertEqual(body["detail"], "Proof is invalid")
        verify.assert_awaited_once_with(PROOF, "app_abc", "verify-human", "")

    def test_unreachable_cloud_is_a_server_error(self) -> None:
        verify = AsyncMock(side_effect=httpx.ConnectError("portal down"))
        with patch("fitchain.api.routers.world_id.WLD_APP_ID", "app_abc"), patch(
            "fitchain.api.routers.world_id.verify_cloud_proof", verify
        ):
            resp = self.client.post(
                "/api/world-id/verify",
                json={"payload": PROOF, "action": "verify-human"},
            )

        self.assertEqual(resp.status_code, 500)
        self.assertFalse(resp.json()["success"])

    def test_lists_action_catalog(self) -> None:
        resp = self.client.get("/api/world-id/actions")
        self.assertEqual(resp.status_code, 200)
        limits = {item["action"]: item["max_verifications"] for item in resp.json()["actions"]}
        self.assertEqual(limits["verify-human"], 1)
        self.assertEqual(limits["daily-food-log"], 3)
        self.assertEqual(limits["report-content"], 5)


if __name__ == "__main__":
    unittest.main()
