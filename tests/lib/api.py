"""
Shared HTTP client utilities for the integration suite.

Provides a small wrapper around the FastAPI test client with high level
helpers for the resources the integration tests exercise.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import httpx
from fastapi.testclient import TestClient

from portfolio.api.dependencies import ADMIN_PROOF_HEADER
from portfolio.core.config import settings


class PortfolioApiError(RuntimeError):
    """Raised when an API call does not return an expected status code."""

    def __init__(self, method: str, path: str, status: int, body: str):
        super().__init__(f"{method} {path} returned {status}: {body}")
        self.method = method
        self.path = path
        self.status = status
        self.body = body


@dataclass
class AdminCredential:
    """The admin password and the proof clients derive from it."""

    password: str
    proof: str

    def auth_header(self) -> Dict[str, str]:
        return {ADMIN_PROOF_HEADER: self.proof}


class PortfolioApiClient:
    """
    Thin wrapper around TestClient that provides ergonomic helpers.

    Tests should stick to these helpers instead of hand crafting requests.
    """

    def __init__(self, client: TestClient, *, prefix: str | None = None) -> None:
        self._client = client
        self.prefix = (prefix or settings.api_v1_prefix).rstrip("/")

    # ------------------------------------------------------------------ #
    # Generic request helpers
    # ------------------------------------------------------------------ #
    def request(
        self,
        method: str,
        path: str,
        *,
        proof: Optional[str] = None,
        expected: Iterable[int] | None = None,
        absolute: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = kwargs.pop("headers", {}) or {}
        if proof:
            headers[ADMIN_PROOF_HEADER] = proof

        url = path if absolute else f"{self.prefix}{path}"
        response = self._client.request(method, url, headers=headers, **kwargs)
        if expected and response.status_code not in expected:
            raise PortfolioApiError(method, path, response.status_code, response.text)
        return response

    # ------------------------------------------------------------------ #
    # Models
    # ------------------------------------------------------------------ #
    def create_model(self, proof: str, **payload: Any) -> Dict[str, Any]:
        return self.request(
            "POST", "/models/", proof=proof, json=payload, expected=(201,)
        ).json()

    def list_models(self) -> List[Dict[str, Any]]:
        return self.request("GET", "/models/", expected=(200,)).json()

    def get_model(self, model_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/models/{model_id}", expected=(200,)).json()

    def delete_model(self, proof: str, model_id: str) -> None:
        self.request("DELETE", f"/models/{model_id}", proof=proof, expected=(204,))

    # ------------------------------------------------------------------ #
    # Gallery
    # ------------------------------------------------------------------ #
    def get_gallery(self, model_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/models/{model_id}/gallery", expected=(200,)).json()

    def upload_image(
        self,
        proof: str,
        model_id: str,
        *,
        content: bytes,
        filename: str = "upload.png",
        content_type: str = "image/png",
    ) -> Dict[str, Any]:
        return self.request(
            "POST",
            f"/models/{model_id}/images",
            proof=proof,
            files={"file": (filename, content, content_type)},
            expected=(201,),
        ).json()

    def reorder_images(self, proof: str, model_id: str, image_ids: List[str]) -> Dict[str, Any]:
        return self.request(
            "PUT",
            f"/models/{model_id}/images/reorder",
            proof=proof,
            json={"image_ids": image_ids},
            expected=(200,),
        ).json()

    def update_positions(
        self, proof: str, model_id: str, positions: Dict[str, int]
    ) -> Dict[str, Any]:
        return self.request(
            "PATCH",
            f"/models/{model_id}/images/positions",
            proof=proof,
            json={"updates": [{"id": key, "position": value} for key, value in positions.items()]},
            expected=(200,),
        ).json()

    def delete_image(self, proof: str, model_id: str, image_id: str) -> None:
        self.request(
            "DELETE",
            f"/models/{model_id}/images/{image_id}",
            proof=proof,
            expected=(204,),
        )

    @staticmethod
    def ordered_ids(gallery: Dict[str, Any]) -> List[str]:
        """Featured id followed by the gallery ids, as a client renders them."""
        featured = gallery.get("featured") or gallery.get("featured_image")
        head = [featured["id"]] if featured else []
        return head + [image["id"] for image in gallery["gallery"]]
