"""Tests for the curated seed clinics."""

import json
from pathlib import Path

from clinic_pipeline.seeds import filter_seeds, load_seed_clinics


class TestLoadSeeds:

    def test_bundled_file(self):
        seeds = load_seed_clinics()
        assert len(seeds) == 8
        assert len({s.id for s in seeds}) == 8
        assert all(s.location.has_coordinates for s in seeds)

    def test_invalid_entries_skipped(self, tmp_path: Path):
        path = tmp_path / "seeds.json"
        path.write_text(json.dumps([
            {"id": "seed-ok", "name": "Spring Skills Clinic", "dates": {"start": "2027-04-10", "end": "2027-04-11"}},
            {"id": "seed-bad", "name": "Broken", "rating": "not a number", "dates": {"start": "2027-04-10", "end": "2027-04-11"}},
            {"id": "seed-no-dates", "name": "Undated"},
        ]))

        seeds = load_seed_clinics(path)
        assert [s.id for s in seeds] == ["seed-ok"]


class TestFilterSeeds:

    def test_no_query_returns_all(self):
        seeds = load_seed_clinics()
        assert filter_seeds(seeds, None) == seeds
        assert filter_seeds(seeds, "   ") == seeds

    def test_any_word_matches(self):
        seeds = load_seed_clinics()
        names = [s.name for s in filter_seeds(seeds, "Toronto Stockholm")]
        assert names == ["GTA Goaltending School", "Stockholm Summer Hockey School"]

    def test_matches_tags(self, clinic_factory):
        clinic = clinic_factory(tags=["girls-hockey"])
        assert filter_seeds([clinic], "girls") == [clinic]
        assert filter_seeds([clinic], "goalie") == []
