import pytest

from services.ttl_policy import TTLTier, classify, expiry_for


@pytest.mark.parametrize(
    "path, tier",
    [
        ("/votes/44-1/928/", TTLTier.DETAIL),
        ("/votes/", TTLTier.LIST),
        ("/bills/44-1/C-69/", TTLTier.DETAIL),
        ("/bills/", TTLTier.LIST),
        ("/politicians/jane-doe/votes/", TTLTier.MEMBER_VOTES),
        ("/politicians/", TTLTier.LIST),
        ("/politicians/jane-doe/", TTLTier.DETAIL),
        ("/debates/", TTLTier.LIST),
        ("", TTLTier.LIST),
        ("not a path", TTLTier.LIST),
    ],
)
def test_classify(path, tier):
    assert classify(path) is tier


def test_vote_detail_rule_wins_over_member_votes():
    # A path with a trailing segment after /votes/ hits the first rule
    assert classify("/politicians/jane-doe/votes/page-2") is TTLTier.DETAIL


def test_tier_durations():
    assert TTLTier.LIST.seconds == 300
    assert TTLTier.DETAIL.seconds == 1800
    assert TTLTier.MEMBER_VOTES.seconds == 600


def test_expiry_for_adds_tier_duration():
    assert expiry_for("/politicians/", 1000.0) == 1300.0
    assert expiry_for("/politicians/jane-doe/", 1000.0) == 2800.0
    assert expiry_for("/politicians/jane-doe/votes/", 1000.0) == 1600.0
