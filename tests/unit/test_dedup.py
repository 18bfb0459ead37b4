"""Tests for duplicate detection and merging."""

import pytest
from clinic_pipeline.dedup import (
    are_duplicates,
    completeness_score,
    deduplicate_clinics,
    duplicate_score,
    group_duplicates,
    merge_duplicates,
    string_similarity,
)
from clinic_pipeline.dedup.similarity import get_domain, normalize_name
from clinic_pipeline.models import ClinicLocation, Coach, Price


class TestSimilarity:
    """Dice coefficient over character bigrams."""

    @pytest.mark.parametrize("a,b,expected", [
        ("night", "nacht", 0.25),
        ("hockey", "hockey", 1.0),
        ("aaaa", "aa", 0.5),
        ("a", "ab", 0.0),
        ("", "", 1.0),
    ])
    def test_dice(self, a: str, b: str, expected: float):
        assert string_similarity(a, b) == pytest.approx(expected)

    def test_symmetric(self):
        a, b = "summer hockey camp", "summer hockey clinic"
        assert string_similarity(a, b) == pytest.approx(string_similarity(b, a))

    def test_normalize_name(self):
        assert normalize_name("  Summer Hockey-Camp 2026! ") == "summer hockeycamp 2026"

    def test_get_domain(self):
        assert get_domain("https://www.rinkrats.org/camps?x=1") == "www.rinkrats.org"
        assert get_domain("") == ""
        assert get_domain("not a url") == ""


class TestDuplicateScore:
    """Additive evidence with a 2.5 threshold."""

    def test_identical_name_and_dates(self, clinic_factory):
        a = clinic_factory(city="Boston", website_url="https://a.org/x")
        b = clinic_factory(city="Toronto", website_url="https://b.org/y")
        assert duplicate_score(a, b) == 3.0
        assert are_duplicates(a, b)

    def test_all_signals(self, clinic_factory):
        a = clinic_factory(id="a")
        b = clinic_factory(id="b")
        assert duplicate_score(a, b) == 4.0

    def test_similar_name_alone_not_enough(self, clinic_factory):
        # "summer hockey camp" vs "summer hockey clinic" is between 0.6 and 0.8
        a = clinic_factory(name="Summer Hockey Camp", city="Boston", website_url="https://a.org")
        b = clinic_factory(
            name="Summer Hockey Clinic",
            start="2026-08-01",
            end="2026-08-05",
            city="Denver",
            website_url="https://b.org",
        )
        similarity = string_similarity(normalize_name(a.name), normalize_name(b.name))
        assert 0.6 < similarity <= 0.8
        assert duplicate_score(a, b) == 1.0
        assert not are_duplicates(a, b)

    def test_threshold_boundary(self, clinic_factory):
        # Same name (2) + same start only (0.5) = 2.5
        a = clinic_factory(end="2026-07-18", city="Boston", website_url="https://a.org")
        b = clinic_factory(end="2026-07-19", city="Denver", website_url="https://b.org")
        assert duplicate_score(a, b) == 2.5
        assert are_duplicates(a, b)

    def test_unknown_city_never_matches(self, clinic_factory):
        a = clinic_factory(name="Alpha Camp", start="2026-01-01", end="2026-01-01", city="Unknown",
                           website_url="")
        b = clinic_factory(name="Omega Clinic", start="2026-02-01", end="2026-02-01", city="Unknown",
                           website_url="")
        assert duplicate_score(a, b) == 0.0


class TestMerge:

    def test_most_complete_is_base(self, clinic_factory, sample_clinic):
        sparse = clinic_factory(id="sparse", contact_email="camps@example.org")
        merged = merge_duplicates([sparse, sample_clinic])

        assert merged.id == sample_clinic.id
        assert merged.description == sample_clinic.description
        assert merged.contact_email == "camps@example.org"

    def test_fills_and_unions(self, clinic_factory):
        base = clinic_factory(
            id="base",
            description="Full week of skating",
            price=Price(amount=400),
            age_groups=["peewee"],
            tags=["summer"],
            rating=4.2,
        )
        other = clinic_factory(
            id="other",
            contact_phone="555-123-4567",
            coaches=[Coach(id="c1", name="Jane Doe")],
            tags=["goaltending", "summer"],
            rating=4.8,
            review_count=120,
            featured=True,
        )
        merged = merge_duplicates([base, other])

        assert merged.id == "base"
        assert merged.contact_phone == "555-123-4567"
        assert [c.name for c in merged.coaches] == ["Jane Doe"]
        assert merged.tags == ["summer", "goaltending"]
        assert merged.rating == 4.8
        assert merged.review_count == 120
        assert merged.featured
        assert merged.price.amount == 400
        assert merged.age_groups == ["peewee"]

    def test_specific_groups_replace_all(self, clinic_factory):
        base = clinic_factory(id="base", description="x", contact_email="a@b.org")
        other = clinic_factory(id="other", age_groups=["bantam"])
        merged = merge_duplicates([base, other])
        assert merged.age_groups == ["bantam"]

    def test_inputs_not_mutated(self, clinic_factory, sample_clinic):
        sparse = clinic_factory(id="sparse", contact_email="camps@example.org")
        merge_duplicates([sample_clinic, sparse])
        assert sample_clinic.contact_email == ""

    def test_completeness(self, clinic_factory, sample_clinic):
        assert completeness_score(sample_clinic) > completeness_score(clinic_factory())

    def test_merge_only_increases_completeness(self, clinic_factory, sample_clinic):
        other = clinic_factory(id="other", contact_phone="555-123-4567", amenities=["pro shop"])
        merged = merge_duplicates([sample_clinic, other])
        assert completeness_score(merged) >= max(completeness_score(sample_clinic), completeness_score(other))


class TestDeduplicate:

    def test_collapses_duplicates(self, clinic_factory):
        clinics = [
            clinic_factory(id="a"),
            clinic_factory(id="b", name="Goalie School", start="2026-08-01", end="2026-08-05"),
            clinic_factory(id="c", contact_email="info@camp.org"),
        ]
        result = deduplicate_clinics(clinics)

        assert len(result) == 2
        assert result[0].contact_email == "info@camp.org"
        assert result[1].name == "Goalie School"

    def test_idempotent_without_chains(self, clinic_factory):
        clinics = [
            clinic_factory(id="a"),
            clinic_factory(id="b", contact_email="info@camp.org"),
            clinic_factory(id="c", name="Goalie School", start="2026-08-01", end="2026-08-05"),
        ]
        once = deduplicate_clinics(clinics)
        twice = deduplicate_clinics(once)
        assert [c.model_dump() for c in twice] == [c.model_dump() for c in once]

    def test_chain_can_collapse_on_second_pass(self, clinic_factory):
        # a~b on name and start; a≁c; the merged ab then matches c on end, city and domain
        a = clinic_factory(id="a", start="2026-07-01", end="2026-07-05",
                           location=ClinicLocation(city="Unknown"), website_url="")
        b = clinic_factory(id="b", start="2026-07-01", end="2026-07-09",
                           website_url="https://b.com/camp", contact_email="info@b.com")
        c = clinic_factory(id="c", start="2026-07-02", end="2026-07-09", website_url="https://b.com/camp")

        once = deduplicate_clinics([a, b, c])
        assert [x.id for x in once] == ["b", "c"]
        assert len(deduplicate_clinics(once)) == 1

    def test_greedy_grouping_is_not_transitive(self, clinic_factory):
        # a~b share name, end date and city; b~c share name and start date; a≁c
        a = clinic_factory(id="a", start="2026-07-14", end="2026-07-18", city="Boston", website_url="")
        b = clinic_factory(id="b", start="2026-07-15", end="2026-07-18", city="Boston", website_url="")
        c = clinic_factory(id="c", start="2026-07-15", end="2026-07-20", city="Denver", website_url="")
        assert are_duplicates(a, b)
        assert are_duplicates(b, c)
        assert not are_duplicates(a, c)

        groups = group_duplicates([a, b, c])
        assert [[x.id for x in g] for g in groups] == [["a", "b"], ["c"]]

    def test_empty(self):
        assert deduplicate_clinics([]) == []
