import pytest

from dealsense.models import Profile
from dealsense.schemas import ProfileInput
from dealsense.services.errors import ProfileNotFoundError
from dealsense.services.interests import delete_interests, list_interests, upsert_interests
from dealsense.stores import profiles as profiles_store


@pytest.mark.asyncio
async def test_upsert_normalizes_terms(monkeypatch) -> None:
    captured: dict = {}

    async def fake_upsert_profile(session, **kwargs):
        captured.update(kwargs)
        return Profile(profile_id="p_generated", **{k: v for k, v in kwargs.items() if k != "profile_id"})

    monkeypatch.setattr(profiles_store, "upsert_profile", fake_upsert_profile)

    result = await upsert_interests(
        None,
        ProfileInput(
            profile_id="   ",
            categories=[" 캠핑 ", "캠핑", ""],
            keywords=["Tent", "tent", "침낭"],
            price_max=50000,
            min_discount_rate=20,
        ),
    )

    assert captured["profile_id"] is None
    assert captured["categories"] == ["캠핑"]
    assert captured["keywords"] == ["Tent", "침낭"]
    assert result.profile_id == "p_generated"
    assert result.normalized.keywords == ["Tent", "침낭"]
    assert result.summary == "Categories: 캠핑 | Keywords: Tent, 침낭 | Max price: 50,000원 | Min discount: 20%"


@pytest.mark.asyncio
async def test_list_interests(monkeypatch, make_profile) -> None:
    profiles = [make_profile(profile_id="p_1", categories=["주방"]), make_profile(profile_id="p_2")]

    async def fake_list_profiles(session, profile_id=None):
        return [p for p in profiles if profile_id in (None, p.profile_id)]

    monkeypatch.setattr(profiles_store, "list_profiles", fake_list_profiles)

    result = await list_interests(None)
    assert [p.profile_id for p in result.profiles] == ["p_1", "p_2"]
    assert result.profiles[0].summary == "Categories: 주방"
    assert result.profiles[1].summary == "No filters set"

    single = await list_interests(None, "p_2")
    assert [p.profile_id for p in single.profiles] == ["p_2"]


@pytest.mark.asyncio
async def test_delete_interests(monkeypatch) -> None:
    async def fake_delete_profile(session, profile_id):
        return profile_id == "p_1"

    monkeypatch.setattr(profiles_store, "delete_profile", fake_delete_profile)

    assert (await delete_interests(None, "p_1")).status == "ok"
    with pytest.raises(ProfileNotFoundError):
        await delete_interests(None, "p_missing")
