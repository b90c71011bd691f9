"""
Utility helpers shared across the integration test suite.
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from PIL import Image as PILImage

from tests.lib import PortfolioApiClient


UNKNOWN_UUID = "00000000-0000-0000-0000-000000000000"


@dataclass(frozen=True)
class EndpointCase:
    """
    Declarative representation of an endpoint invocation used by helpers.
    """

    method: str
    path: str
    json: dict[str, Any] | None = None
    files: dict[str, Any] | None = None

    def label(self) -> str:
        return f"{self.method} {self.path}"


def _exercise_cases(
    api_client: PortfolioApiClient,
    cases: Iterable[EndpointCase],
    *,
    proof: str | None = None,
):
    for case in cases:
        request_kwargs: dict[str, Any] = {}
        if case.json is not None:
            request_kwargs["json"] = case.json
        if case.files is not None:
            request_kwargs["files"] = case.files

        response = api_client.request(
            case.method,
            case.path,
            proof=proof,
            **request_kwargs,
        )
        yield case, response


def _format_failure(case: EndpointCase, received: int, expected: Sequence[int]) -> str:
    return f"{case.label()} returned {received}, expected one of {tuple(expected)}"


def assert_status_codes(
    api_client: PortfolioApiClient,
    cases: Iterable[EndpointCase],
    *,
    proof: str | None = None,
    expected_status: Sequence[int] = (200,),
):
    """
    Execute a batch of endpoint cases asserting their HTTP status codes.
    """
    responses = []
    for case, response in _exercise_cases(api_client, cases, proof=proof):
        assert (
            response.status_code in expected_status
        ), _format_failure(case, response.status_code, expected_status)
        responses.append(response)
    return responses


def assert_requires_authentication(
    api_client: PortfolioApiClient,
    cases: Iterable[EndpointCase],
    *,
    proof: str | None = None,
) -> None:
    """
    Assert that each endpoint rejects callers without a valid proof with HTTP 401.
    """
    assert_status_codes(api_client, cases, proof=proof, expected_status=(401,))


def assert_not_found(
    api_client: PortfolioApiClient,
    proof: str,
    cases: Iterable[EndpointCase],
) -> None:
    """
    Assert that each endpoint returns HTTP 404 for missing identifiers.
    """
    assert_status_codes(api_client, cases, proof=proof, expected_status=(404,))


def sample_png_bytes(color: tuple[int, int, int] = (30, 120, 200), size: int = 8) -> bytes:
    """A small PNG; distinct colors give distinct payload refs."""
    buffer = io.BytesIO()
    PILImage.new("RGB", (size, size), color).save(buffer, format="PNG")
    return buffer.getvalue()


def create_model_with_images(
    api_client: PortfolioApiClient,
    proof: str,
    count: int,
    name: str = "Gallery Model",
) -> tuple[dict, list[str]]:
    """Create a model and upload ``count`` distinct images, in upload order."""
    model = api_client.create_model(proof, name=name)
    image_ids = [
        api_client.upload_image(
            proof,
            model["id"],
            content=sample_png_bytes((index * 40 % 256, 80, 160)),
        )["id"]
        for index in range(count)
    ]
    return model, image_ids
