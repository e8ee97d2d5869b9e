from leadscan.core.models import Business, SocialFootprint
from leadscan.etl import scoring


def _business(**overrides):
    return Business(id="NODE-TEST-0001", name="Acme", **overrides)


def test_base_score_without_bonuses():
    assert scoring.fidelity_score(_business()) == 40


def test_all_bonuses_reach_exactly_one_hundred():
    business = _business(
        email="ceo@acme.com",
        phone="555-0100",
        leader_name="Jane Doe",
        social_footprint=SocialFootprint(linkedin="https://linkedin.com/in/janedoe"),
    )
    assert scoring.fidelity_score(business) == 100


def test_individual_bonuses():
    assert scoring.fidelity_score(_business(email="ceo@acme.com")) == 60
    assert scoring.fidelity_score(_business(email="not-an-email")) == 40
    assert scoring.fidelity_score(_business(phone="555-0100")) == 50
    assert scoring.fidelity_score(_business(phone="12345")) == 40
    assert scoring.fidelity_score(_business(leader_name="Jane")) == 55
    assert scoring.fidelity_score(_business(leader_name="Bo")) == 40
    linked = _business(social_footprint=SocialFootprint(linkedin="https://www.linkedin.com/company/acme"))
    assert scoring.fidelity_score(linked) == 55
    other = _business(social_footprint=SocialFootprint(linkedin="https://x.com/acme"))
    assert scoring.fidelity_score(other) == 40


def test_cap_binds_when_extra_bonuses_are_added():
    business = _business(
        email="ceo@acme.com",
        phone="555-0100",
        leader_name="Jane Doe",
        social_footprint=SocialFootprint(linkedin="https://linkedin.com/in/janedoe"),
    )
    extra = scoring.FIDELITY_BONUSES + ((lambda b: True, 25),)
    assert scoring.fidelity_score(business, bonuses=extra) == 100


def test_score_is_recomputed_and_bounded():
    businesses = [_business(), _business(email="a@b.co", phone="5550100")]
    scored = scoring.score_businesses(businesses)

    assert [score for _, score in scored] == [40, 70]
    assert all(0 <= score <= 100 for _, score in scored)
