"""
Tests for provider record normalization.
"""
from __future__ import annotations

from newslens.services.normalize_svc import has_required_fields, normalize_articles


def guardian_record(**overrides):
    record = {
        "webUrl": "https://www.theguardian.com/world/2024/mar/10/flood",
        "webTitle": "Floods hit northern towns",
        "webPublicationDate": "2024-03-10T12:00:00Z",
        "fields": {
            "trailText": "Residents evacuated as river bursts its banks",
            "bodyText": "Full body text of the article.",
            "thumbnail": "https://media.guim.co.uk/thumb.jpg",
        },
        "tags": [{"type": "keyword", "webTitle": "Floods"}, {"type": "contributor", "webTitle": "Jane Reporter"}],
    }
    record.update(overrides)
    return record


def test_guardian_record_maps_to_canonical_fields():
    [article] = normalize_articles([guardian_record()], "guardian")

    assert article.source == "guardian"
    assert article.url == "https://www.theguardian.com/world/2024/mar/10/flood"
    assert article.title == "Floods hit northern towns"
    assert article.description == "Residents evacuated as river bursts its banks"
    assert article.content == "Full body text of the article."
    assert article.image_url == "https://media.guim.co.uk/thumb.jpg"
    assert article.author == "Jane Reporter"
    assert article.published_at == "2024-03-10T12:00:00Z"
    assert article.language == "en"
    assert article.id.startswith("guardian-")
    assert len(article.id) == len("guardian-") + 8


def test_guardian_description_falls_back_to_body_excerpt():
    record = guardian_record(fields={"bodyText": "x" * 300})
    [article] = normalize_articles([record], "guardian")

    assert article.description == "x" * 200


def test_gdelt_record_uses_alternate_field_names():
    record = {
        "url": "https://example.org/story",
        "title": "Election results announced",
        "seendate": "20240310T120000Z",
        "socialimage": "",
        "domain": "example.org",
        "source": "Example Org",
    }
    [article] = normalize_articles([record], "gdelt")

    assert article.source == "gdelt"
    assert article.published_at == "20240310T120000Z"
    assert article.author == "Example Org"
    assert article.published_datetime is not None
    assert article.published_datetime.year == 2024


def test_currents_record_maps_published_and_image():
    record = {
        "url": "https://currents.example.com/a",
        "title": "Markets rally on rate news",
        "description": "Stocks climbed.",
        "published": "2024-03-10 12:00:00 +0000",
        "image": "https://currents.example.com/a.jpg",
        "author": "Desk",
        "language": "en",
    }
    [article] = normalize_articles([record], "currents")

    assert article.description == "Stocks climbed."
    assert article.content == "Stocks climbed."
    assert article.image_url == "https://currents.example.com/a.jpg"
    assert article.published_at == "2024-03-10 12:00:00 +0000"


def test_records_without_url_or_title_are_dropped():
    records = [
        {"title": "No url here"},
        {"url": "https://example.com/no-title"},
        {"url": "", "title": ""},
        "not a dict",
        {"url": "https://example.com/ok", "title": "Kept"},
    ]
    articles = normalize_articles(records, "currents")

    assert [a.title for a in articles] == ["Kept"]
    assert all(a.url and a.title for a in articles)


def test_whitespace_only_title_is_dropped_after_mapping():
    articles = normalize_articles([{"url": "https://example.com/a", "title": "   "}], "currents")

    assert articles == []


def test_unknown_source_returns_empty():
    assert normalize_articles([{"url": "https://x.com", "title": "t"}], "reddit") == []


def test_non_list_input_returns_empty():
    assert normalize_articles(None, "guardian") == []
    assert normalize_articles({"webUrl": "x"}, "guardian") == []


def test_article_ids_are_stable():
    first = normalize_articles([guardian_record()], "guardian")
    second = normalize_articles([guardian_record()], "guardian")

    assert first[0].id == second[0].id


def test_has_required_fields_accepts_any_provider_spelling():
    assert has_required_fields({"webUrl": "u", "webTitle": "t"})
    assert has_required_fields({"articleurl": "u", "seotitle": "t"})
    assert not has_required_fields({"link": "u", "headline": "t"})
