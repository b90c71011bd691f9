"""
Portfolio model API coverage.
"""
from tests.integration.helpers import (
    EndpointCase,
    UNKNOWN_UUID,
    assert_not_found,
    assert_requires_authentication,
    create_model_with_images,
)
from tests.lib import AdminCredential, PortfolioApiClient


def test_create_and_fetch_model(api_client: PortfolioApiClient, admin: AdminCredential):
    created = api_client.create_model(
        admin.proof,
        name="Mila Stone",
        instagram="@mila",
        stats={"height": "176", "hair_color": "brown"},
    )

    fetched = api_client.get_model(created["id"])

    assert created["slug"] == "mila-stone"
    assert fetched["stats"]["height"] == "176"
    assert fetched["stats"]["waist"] == ""
    assert fetched["featured_image"] is None
    assert fetched["gallery"] == []


def test_duplicate_explicit_slug_rejected(api_client: PortfolioApiClient, admin: AdminCredential):
    api_client.create_model(admin.proof, name="One", slug="same")

    response = api_client.request(
        "POST", "/models/", proof=admin.proof, json={"name": "Two", "slug": "same"}
    )

    assert response.status_code == 400


def test_listing_carries_featured_and_gallery(
    api_client: PortfolioApiClient, admin: AdminCredential
):
    model, (a, b, c) = create_model_with_images(api_client, admin.proof, 3)
    api_client.reorder_images(admin.proof, model["id"], [b, c, a])

    listing = api_client.list_models()

    entry = next(item for item in listing if item["id"] == model["id"])
    assert api_client.ordered_ids(entry) == [b, c, a]


def test_reorder_models(api_client: PortfolioApiClient, admin: AdminCredential):
    first = api_client.create_model(admin.proof, name="First")
    second = api_client.create_model(admin.proof, name="Second")

    api_client.request(
        "PUT",
        "/models/reorder",
        proof=admin.proof,
        json={"model_ids": [second["id"], first["id"]]},
        expected=(204,),
    )

    assert [item["id"] for item in api_client.list_models()] == [second["id"], first["id"]]


def test_update_model(api_client: PortfolioApiClient, admin: AdminCredential):
    model = api_client.create_model(admin.proof, name="Before")

    updated = api_client.request(
        "PUT",
        f"/models/{model['id']}",
        proof=admin.proof,
        json={"name": "After", "stats": {"shoe_size": "39"}},
        expected=(200,),
    ).json()

    assert updated["name"] == "After"
    assert updated["slug"] == model["slug"]
    assert updated["stats"]["shoe_size"] == "39"


def test_delete_model_removes_gallery(api_client: PortfolioApiClient, admin: AdminCredential):
    model, (image_id,) = create_model_with_images(api_client, admin.proof, 1)

    api_client.delete_model(admin.proof, model["id"])

    assert api_client.request("GET", f"/models/{model['id']}").status_code == 404
    assert api_client.request("GET", f"/images/{image_id}/content").status_code == 404


def test_model_mutations_require_admin_proof(
    api_client: PortfolioApiClient, admin: AdminCredential
):
    model = api_client.create_model(admin.proof, name="Guarded")
    cases = [
        EndpointCase("POST", "/models/", json={"name": "Intruder"}),
        EndpointCase("PUT", f"/models/{model['id']}", json={"name": "Changed"}),
        EndpointCase("PUT", "/models/reorder", json={"model_ids": [model["id"]]}),
        EndpointCase("DELETE", f"/models/{model['id']}"),
    ]

    assert_requires_authentication(api_client, cases)
    assert api_client.get_model(model["id"])["name"] == "Guarded"


def test_unknown_model_returns_404(api_client: PortfolioApiClient, admin: AdminCredential):
    assert_not_found(
        api_client,
        admin.proof,
        [
            EndpointCase("GET", f"/models/{UNKNOWN_UUID}"),
            EndpointCase("PUT", f"/models/{UNKNOWN_UUID}", json={"name": "Nobody"}),
            EndpointCase("DELETE", f"/models/{UNKNOWN_UUID}"),
        ],
    )


def test_health(api_client: PortfolioApiClient):
    response = api_client.request("GET", "/health", absolute=True)
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
