"""
Tests for greedy story clustering.
"""
from __future__ import annotations

from newslens.services.cluster_svc import ClusterService
from newslens.services.similarity_svc import SimilarityWeights

NO_BONUS = SimilarityWeights(time_bonus=0.0, domain_bonus=0.0)


def test_empty_input_yields_no_groups():
    assert ClusterService().cluster([]) == []


def test_every_article_lands_in_exactly_one_group(make_article):
    articles = [
        make_article("Parliament passes climate bill after long debate", source="guardian"),
        make_article("Climate bill passes parliament after debate", source="gdelt"),
        make_article("Local team wins championship final", source="currents"),
        make_article("Championship final won by local team", source="guardian"),
        make_article("Unrelated weather update for weekend", source="gdelt"),
    ]
    groups = ClusterService(NO_BONUS).cluster(articles)

    clustered_ids = [a.id for g in groups for a in g.articles]
    assert sorted(clustered_ids) == sorted(a.id for a in articles)
    assert len(clustered_ids) == len(set(clustered_ids))


def test_similar_articles_are_grouped_and_sorted_by_size(make_article):
    articles = [
        make_article("Unrelated weather update for weekend", source="gdelt"),
        make_article("Parliament passes climate bill after debate", source="guardian"),
        make_article("Climate bill passes parliament after debate", source="gdelt"),
        make_article("Parliament climate bill passes after debate", source="currents"),
    ]
    groups = ClusterService(NO_BONUS).cluster(articles)

    assert [len(g.articles) for g in groups] == [3, 1]
    assert groups[0].group_id == "group-2"
    assert groups[0].representative.source == "guardian"
    assert groups[1].group_id == "group-1"


def test_threshold_one_keeps_articles_apart(make_article):
    articles = [
        make_article("Parliament passes climate bill", source="guardian"),
        make_article("Parliament passes climate bill today", source="gdelt"),
    ]
    groups = ClusterService(NO_BONUS).cluster(articles, threshold=1.0)
    assert len(groups) == 2


def test_higher_threshold_never_produces_fewer_groups(make_article):
    articles = [
        make_article("Parliament passes climate bill after debate", source="guardian"),
        make_article("Climate bill passes parliament", source="gdelt"),
        make_article("Climate protest outside parliament", source="currents"),
        make_article("Protest outside parliament over climate", source="guardian"),
    ]
    counts = [len(ClusterService(NO_BONUS).cluster(articles, t)) for t in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)]
    assert counts == sorted(counts)


def test_tie_goes_to_earliest_group(make_article):
    first = make_article("alpha bravo", source="guardian")
    second = make_article("charlie delta", source="gdelt")
    joiner = make_article("alpha bravo charlie delta", source="currents")

    groups = ClusterService(NO_BONUS).cluster([first, second, joiner], threshold=0.3)

    by_id = {g.group_id: g for g in groups}
    assert [a.id for a in by_id["group-1"].articles] == [first.id, joiner.id]
    assert [a.id for a in by_id["group-2"].articles] == [second.id]


def test_result_depends_on_input_order(make_article):
    a = make_article("alpha bravo charlie delta", source="guardian")
    b = make_article("alpha bravo echo foxtrot", source="gdelt")
    c = make_article("echo foxtrot golf hotel", source="currents")
    service = ClusterService(NO_BONUS)

    forward = service.cluster([a, b, c], threshold=0.3)
    backward = service.cluster([c, b, a], threshold=0.3)

    assert [len(g.articles) for g in forward] == [2, 1]
    assert forward[0].representative.id == a.id
    assert backward[0].representative.id == c.id
