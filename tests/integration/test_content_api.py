"""
Integration tests for categories, testimonials and the dosage calculator.
"""
import pytest

pytestmark = pytest.mark.asyncio

API = "/api/v1"


async def test_public_categories_are_active_and_ordered(anon_client, store):
    store.add_category("longevity", "Longevity", sort_order=0)
    store.add_category("retired", "Retired", sort_order=3, active=False)

    r = await anon_client.get(f"{API}/categories")

    assert [c["id"] for c in r.json()] == ["longevity", "recovery-repair", "weight-management"]


async def test_create_category(client, store):
    r = await client.post(f"{API}/admin/categories", json={"name": "Cognitive Health", "icon": "🧠"})

    assert r.status_code == 201
    assert r.json()["id"] == "cognitive-health"
    assert r.json()["sort_order"] == 3
    assert "cognitive-health" in store.categories


async def test_create_category_validation(client):
    bad = await client.post(f"{API}/admin/categories", json={"id": "Not_Kebab", "name": "X", "icon": "x"})
    dup = await client.post(f"{API}/admin/categories", json={"id": "recovery-repair", "name": "X", "icon": "x"})

    assert bad.status_code == 400
    assert "kebab-case" in bad.json()["detail"]
    assert dup.status_code == 409


async def test_delete_category_in_use(client, store):
    store.add_product(category="recovery-repair")

    r = await client.delete(f"{API}/admin/categories/recovery-repair")
    assert r.status_code == 409
    assert r.json()["detail"] == "Cannot delete category: 1 product(s) still use it"

    assert (await client.delete(f"{API}/admin/categories/weight-management")).status_code == 204
    assert "weight-management" not in store.categories


async def test_update_and_reorder_categories(client, store):
    r = await client.patch(f"{API}/admin/categories/recovery-repair", json={"active": False})
    assert r.json()["active"] is False

    r = await client.put(f"{API}/admin/categories/order", json={"ids": ["weight-management", "recovery-repair"]})
    assert r.status_code == 200
    assert [(c["id"], c["sort_order"]) for c in r.json()] == [("weight-management", 1), ("recovery-repair", 2)]

    missing = await client.put(f"{API}/admin/categories/order", json={"ids": ["nope"]})
    assert missing.status_code == 404


async def test_patch_rejects_null_on_required_fields(client, store):
    testimonial = store.add_testimonial("kept", display_order=0)
    testimonial.description = "Recovered in six weeks"

    category = await client.patch(f"{API}/admin/categories/recovery-repair", json={"name": None})
    assert category.status_code == 422
    assert store.categories["recovery-repair"].name == "Recovery & Repair"

    title = await client.patch(f"{API}/admin/testimonials/{testimonial.id}", json={"title": None})
    assert title.status_code == 422
    assert testimonial.title == "kept"

    cleared = await client.patch(f"{API}/admin/testimonials/{testimonial.id}", json={"description": None})
    assert cleared.status_code == 200
    assert cleared.json()["description"] is None


async def test_testimonials(client, anon_client, store):
    store.add_testimonial("second", display_order=1)
    store.add_testimonial("first", display_order=0)
    store.add_testimonial("hidden", display_order=2, active=False)

    public = await anon_client.get(f"{API}/testimonials")
    assert [t["title"] for t in public.json()] == ["first", "second"]

    r = await client.post(
        f"{API}/admin/testimonials",
        json={"title": "new", "image_url": "https://cdn.example.com/new.jpg"},
    )
    assert r.status_code == 201
    assert r.json()["display_order"] == 3
    new_id = r.json()["id"]

    r = await client.patch(f"{API}/admin/testimonials/{new_id}", json={"active": False})
    assert r.json()["active"] is False

    everything = await client.get(f"{API}/admin/testimonials")
    assert len(everything.json()) == 4

    assert (await client.delete(f"{API}/admin/testimonials/{new_id}")).status_code == 204
    assert len(store.testimonials) == 3


async def test_first_testimonial_starts_at_zero(client):
    r = await client.post(
        f"{API}/admin/testimonials",
        json={"title": "only", "image_url": "https://cdn.example.com/only.jpg"},
    )
    assert r.json()["display_order"] == 0


async def test_dosage_calculator(anon_client):
    r = await anon_client.post(
        f"{API}/calculator/dosage",
        json={"vial_mg": 5, "water_ml": 2, "desired_dose": 250, "unit": "mcg"},
    )
    assert r.status_code == 200
    assert r.json() == {
        "units": 10.0,
        "ml_needed": 0.1,
        "concentration_mg_per_ml": 2.5,
        "concentration_mcg_per_unit": 25.0,
    }

    bad = await anon_client.post(
        f"{API}/calculator/dosage",
        json={"vial_mg": 0, "water_ml": 2, "desired_dose": 250},
    )
    assert bad.status_code == 422
