import pytest

from product_ethics.db import models
from product_ethics.db.repositories import changelog as changelog_repo
from product_ethics.services.company_service import CompanyService
from product_ethics.services.infochannel_service import InfoChannelService
from product_ethics.services.product_category_service import ProductCategoryService
from product_ethics.services.product_service import ProductService
from product_ethics.services.product_tag_service import ProductTagService
from product_ethics.services.recommendation_service import (
    RecommendationService,
    subject_type_of,
)
from product_ethics.services.store_service import StoreService


@pytest.fixture
def setup(db, make_client):
    owner = make_client()
    channels = InfoChannelService(db)
    channel = channels.create_info_channel(owner, "Consumer Watch")
    products = ProductService(db)
    product = products.create_product(owner, barcode="5700000000001", name="Palm Cookies")
    return {
        "owner": owner,
        "channel": channel,
        "channels": channels,
        "products": products,
        "product": product,
        "service": RecommendationService(db, info_channel_service=channels, product_service=products),
    }


def test_create_recommendation_with_references(db, setup):
    service = setup["service"]
    recommendation = service.create_recommendation(
        setup["owner"], setup["channel"], "Contains unsustainable palm oil", "thumbs_down",
        setup["product"], ["https://news.example.com/palm", "https://ngo.example.org/report"],
    )

    assert recommendation.subject_type == "product"
    assert recommendation.subject_id == setup["product"].id
    assert recommendation.score == "thumbs_down"
    assert sorted(r.url for r in recommendation.info_source_references) == [
        "https://news.example.com/palm",
        "https://ngo.example.org/report",
    ]
    assert all(r.info_channel_id == setup["channel"].id for r in recommendation.info_source_references)
    assert service.get_recommendation(recommendation.id).id == recommendation.id
    assert service.get_recommendation_for_subject(setup["channel"], setup["product"]).id == recommendation.id


def test_one_recommendation_per_channel_and_subject(db, setup):
    service = setup["service"]
    args = (setup["owner"], setup["channel"], "Fine", "thumbs_up", setup["product"], ["https://example.com/a"])
    service.create_recommendation(*args)
    with pytest.raises(ValueError, match="already has a recommendation"):
        service.create_recommendation(*args)


@pytest.mark.parametrize(
    "score,urls,message",
    [
        ("great", ["https://example.com/a"], "Invalid recommendation score"),
        ("neutral", [], "At least one info source reference url"),
        ("neutral", ["https://example.com/a", "http://"], "extract domain"),
        ("neutral", ["https://example.com/a", "http://a..b.com/x"], "Invalid domain"),
    ],
)
def test_create_recommendation_validation(db, setup, score, urls, message):
    with pytest.raises(ValueError, match=message):
        setup["service"].create_recommendation(
            setup["owner"], setup["channel"], "Summary", score, setup["product"], urls
        )
    assert db.query(models.Recommendation).count() == 0
    assert db.query(models.InfoSourceReference).count() == 0


def test_create_recommendation_requires_contributor(db, make_client, setup):
    with pytest.raises(PermissionError):
        setup["service"].create_recommendation(
            make_client(), setup["channel"], "Summary", "neutral", setup["product"], ["https://example.com/a"]
        )


def test_subject_type_of(db, setup, make_client):
    assert subject_type_of(setup["product"]) == "product"
    company = CompanyService(db).create_company(setup["owner"], "Cookie Corp")
    assert subject_type_of(company) == "company"
    store = StoreService(db).create_store(setup["owner"], "Corner")
    with pytest.raises(ValueError, match="Unsupported"):
        subject_type_of(store)


def test_recommendations_follow_product_assignments(db, make_client, setup):
    owner, channel, products, product = setup["owner"], setup["channel"], setup["products"], setup["product"]
    service = setup["service"]
    category = ProductCategoryService(db).create_product_category(owner, "Biscuits")
    tag = ProductTagService(db).create_product_tag(owner, "palm-oil")
    company = CompanyService(db).create_company(owner, "Cookie Corp")
    products.assign_category_to_product(owner, product, category)
    products.assign_tag_to_product(owner, product, tag)
    products.assign_company_to_product(owner, product, company)

    on_category = service.create_recommendation(owner, channel, "c", "neutral", category, ["https://example.com/c"])
    on_tag = service.create_recommendation(owner, channel, "t", "thumbs_down", tag, ["https://example.com/t"])
    on_company = service.create_recommendation(owner, channel, "co", "thumbs_up", company, ["https://example.com/co"])
    unrelated = products.create_product(owner, name="Other")
    service.create_recommendation(owner, channel, "o", "neutral", unrelated, ["https://example.com/o"])

    found = {r.id for r in service.get_recommendations(owner, product)}
    assert found == {on_category.id, on_tag.id, on_company.id}


def test_recommendations_only_from_followed_channels(db, make_client, setup):
    owner, channel, product = setup["owner"], setup["channel"], setup["product"]
    service = setup["service"]
    recommendation = service.create_recommendation(
        owner, channel, "Avoid", "thumbs_down", product, ["https://example.com/a"]
    )

    reader = make_client(verified=False)
    assert service.get_recommendations(reader, product) == []
    setup["channels"].follow_info_channel(reader, channel)
    assert [r.id for r in service.get_recommendations(reader, product)] == [recommendation.id]

    result = setup["products"].scan_product(reader, product.barcode)
    assert result.product.id == product.id
    assert [r.id for r in result.recommendations] == [recommendation.id]


def test_recommendations_for_channels_without_matches(db, setup):
    service = setup["service"]
    assert service.get_recommendations_for_info_channels([], setup["product"]) == []
    assert service.get_recommendations_for_info_channels([setup["channel"]], setup["product"]) == []


def test_retry_after_malformed_reference_host_succeeds(db, setup):
    service = setup["service"]
    args = (setup["owner"], setup["channel"], "Palm oil", "thumbs_down", setup["product"])
    with pytest.raises(ValueError, match="Invalid domain"):
        service.create_recommendation(*args, ["http://a..b.com/x"])
    assert db.query(models.Recommendation).count() == 0
    assert db.query(models.InfoSource).count() == 0

    recommendation = service.create_recommendation(*args, ["https://example.com/a"])
    assert service.get_recommendation_for_subject(setup["channel"], setup["product"]).id == recommendation.id


def test_create_recommendation_is_logged(db, setup):
    owner = setup["owner"]
    recommendation = setup["service"].create_recommendation(
        owner, setup["channel"], "Fine", "thumbs_up", setup["product"],
        ["https://example.com/a", "https://example.com/b"],
    )

    logs = changelog_repo.get_change_logs(db, entity_id=recommendation.id, entity_type="recommendation")
    assert [(log.change_type, log.client_id, log.change_text) for log in logs] == [
        ("created", owner.id, f"product:{setup['product'].id}:thumbs_up")
    ]
    references = changelog_repo.get_change_logs(db, entity_type="info_source_reference", change_type="created")
    assert sorted(log.entity_id for log in references) == sorted(r.id for r in recommendation.info_source_references)
    assert {log.client_id for log in references} == {owner.id}
