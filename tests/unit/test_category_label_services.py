import pytest

from product_ethics.db import models
from product_ethics.db.repositories import changelog as changelog_repo
from product_ethics.services.contribution_service import TrustVoteType
from product_ethics.services.product_category_service import ProductCategoryService
from product_ethics.services.product_label_service import ProductLabelService
from product_ethics.services.product_tag_service import ProductTagService


def test_product_category_lifecycle(db, make_client):
    service = ProductCategoryService(db)
    category = service.create_product_category(make_client(trust_level=0.9), "Coffee")
    assert service.get_product_category(category.id).name == "Coffee"

    assert not service.can_edit_product_category_name(make_client(), category)
    veteran = make_client(trust_level=0.9)
    assert service.can_edit_product_category_name(veteran, category)
    service.edit_product_category_name(veteran, category, "Coffee & Tea")
    db.refresh(category)
    assert category.name == "Coffee & Tea"

    vote = service.trust_vote_product_category_name(make_client(), category, TrustVoteType.TRUSTED)
    assert vote.contribution_id == service.product_category_name_contribution(category).id


def test_product_label_lifecycle(db, make_client):
    service = ProductLabelService(db)
    label = service.create_product_label(make_client(), "EU Organic")
    assert service.get_product_label(label.id).name == "EU Organic"
    assert service.can_edit_product_label_name(make_client(), label)

    vote = service.trust_vote_product_label_name(make_client(), label, "not_trusted")
    assert vote.vote == "not_trusted"
    assert service.product_label_name_contribution(label).trust_score < 0.5

    with pytest.raises(ValueError):
        service.edit_product_label_name(make_client(), label, " ")
    with pytest.raises(PermissionError):
        service.create_product_label(make_client(verified=False), "Nordic Swan")


def _logs(db, entity):
    return [
        (log.change_type, log.client_id, log.change_text)
        for log in changelog_repo.get_change_logs(db, entity_id=entity.id)
    ]


def test_category_create_and_edit_are_logged(db, make_client):
    service = ProductCategoryService(db)
    creator = make_client()
    category = service.create_product_category(creator, "Tea")
    assert _logs(db, category) == [("created", creator.id, "Tea")]

    editor = make_client()
    service.edit_product_category_name(editor, category, "Green Tea")
    edited = changelog_repo.get_change_logs(db, entity_id=category.id, entity_type="product_category",
                                            change_type="edited")
    assert [(log.client_id, log.change_text) for log in edited] == [(editor.id, "Green Tea")]
    assert len(_logs(db, category)) == 2


def test_label_create_and_edit_are_logged(db, make_client):
    service = ProductLabelService(db)
    creator = make_client()
    label = service.create_product_label(creator, "Nordic Swan")
    assert _logs(db, label) == [("created", creator.id, "Nordic Swan")]

    editor = make_client()
    service.edit_product_label_name(editor, label, "Nordic Swan Ecolabel")
    edited = changelog_repo.get_change_logs(db, entity_id=label.id, entity_type="product_label",
                                            change_type="edited")
    assert [(log.client_id, log.change_text) for log in edited] == [(editor.id, "Nordic Swan Ecolabel")]
    assert len(_logs(db, label)) == 2


def test_tag_create_is_logged(db, make_client):
    creator = make_client()
    tag = ProductTagService(db).create_product_tag(creator, " Palm-Free ")
    logs = changelog_repo.get_change_logs(db, entity_id=tag.id, entity_type="product_tag")
    assert [(log.change_type, log.client_id, log.change_text) for log in logs] == [
        ("created", creator.id, "palm-free")
    ]


def test_blank_names_leave_no_rows(db, make_client):
    client = make_client()
    with pytest.raises(ValueError, match="name must be provided"):
        ProductCategoryService(db).create_product_category(client, "  ")
    with pytest.raises(ValueError, match="name must be provided"):
        ProductLabelService(db).create_product_label(client, "")
    assert db.query(models.ProductCategory).count() == 0
    assert db.query(models.ProductLabel).count() == 0
    assert changelog_repo.get_change_logs(db) == []
