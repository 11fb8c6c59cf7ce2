from dealsense.services.dedup import deduplicate_deals, generate_fingerprint


def test_fingerprint_format(make_deal) -> None:
    deal = make_deal(
        title="free-shipping Kobea 2-person tent flash-sale",
        merchant="CampingKorea",
        price_current=45000,
    )
    assert generate_fingerprint(deal) == "kobea 2person tent|campingkorea|45000"


def test_fingerprint_tolerates_cosmetic_variation(make_deal) -> None:
    a = make_deal(title="Kobea 2-person tent", merchant="CampingKorea", price_current=45000)
    b = make_deal(title="FREE SHIPPING kobea 2-person TENT!", merchant="Camping Korea", price_current=46000)
    assert generate_fingerprint(a) == generate_fingerprint(b)


def test_fingerprint_differs_across_price_bands(make_deal) -> None:
    a = make_deal(price_current=45000)
    b = make_deal(price_current=52000)
    assert generate_fingerprint(a) != generate_fingerprint(b)


def test_deduplicate_keeps_best_scoring_member(make_deal) -> None:
    low = make_deal(deal_id="d_low", fingerprint="fp")
    high = make_deal(deal_id="d_high", fingerprint="fp")
    scores = {"d_low": 0.62, "d_high": 0.81}

    result = deduplicate_deals([low, high], score_fn=lambda d: scores[d.deal_id])

    assert [d.deal_id for d in result] == ["d_high"]


def test_deduplicate_tie_keeps_earliest(make_deal) -> None:
    first = make_deal(deal_id="d_first", fingerprint="fp")
    second = make_deal(deal_id="d_second", fingerprint="fp")

    result = deduplicate_deals([first, second], score_fn=lambda d: 0.5)

    assert [d.deal_id for d in result] == ["d_first"]


def test_deduplicate_preserves_group_discovery_order(make_deal) -> None:
    deals = [
        make_deal(deal_id="a1", fingerprint="a"),
        make_deal(deal_id="b1", fingerprint="b"),
        make_deal(deal_id="a2", fingerprint="a"),
        make_deal(deal_id="c1", fingerprint="c"),
    ]
    scores = {"a1": 0.1, "b1": 0.5, "a2": 0.9, "c1": 0.3}

    result = deduplicate_deals(deals, score_fn=lambda d: scores[d.deal_id])

    assert [d.deal_id for d in result] == ["a2", "b1", "c1"]
    assert len(deals) == 4


def test_deduplicate_with_custom_key() -> None:
    items = [("x", 0.2), ("y", 0.4), ("x", 0.3)]
    result = deduplicate_deals(items, score_fn=lambda i: i[1], key_fn=lambda i: i[0])
    assert result == [("x", 0.3), ("y", 0.4)]
