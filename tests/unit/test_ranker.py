"""Tests for presentation ranking."""

from candidate_discovery.core.config import RankingWeights
from candidate_discovery.core.schemas import EducationSummary, NormalizedCandidate, RawProfile
from candidate_discovery.pipeline.normalizer import normalize_profile
from candidate_discovery.pipeline.ranker import (
    mention_bonus,
    mention_needles,
    mention_position,
    rank_candidates,
    richness_score,
)


def _candidate(
    name: str,
    *,
    public_id: str | None = None,
    about: str | None = None,
    title: str | None = None,
    company: str | None = None,
    location: str | None = None,
    education: bool = False,
    logo: bool = False,
) -> NormalizedCandidate:
    return NormalizedCandidate(
        public_id=public_id or name.lower().replace(" ", "-"),
        name=name,
        about=about,
        title=title,
        company=company,
        location=location,
        education=[EducationSummary(school="MIT")] if education else None,
        company_logo_url="https://logo.example/acme.png" if logo else None,
        profile_url="https://example.com",
    )


def _rich(name: str) -> NormalizedCandidate:
    return _candidate(
        name,
        about="a" * 200,
        title="Principal Machine Learning Engineer",
        company="Acme Corporation",
        location="San Francisco Bay Area",
        education=True,
        logo=True,
    )


class TestRichnessScore:
    def test_empty_candidate_scores_zero(self) -> None:
        assert richness_score(_candidate("A"), RankingWeights()) == 0.0

    def test_full_candidate(self) -> None:
        # 15 about + 8 education + 5 logo + 4 title + 2 location + 3 company
        assert richness_score(_rich("A"), RankingWeights()) == 37.0

    def test_about_tiers(self) -> None:
        w = RankingWeights()
        assert richness_score(_candidate("A", about="a" * 101), w) == 15.0
        assert richness_score(_candidate("A", about="a" * 100), w) == 10.0
        assert richness_score(_candidate("A", about="a" * 51), w) == 10.0
        assert richness_score(_candidate("A", about="a" * 50), w) == 0.0

    def test_title_tiers(self) -> None:
        w = RankingWeights()
        assert richness_score(_candidate("A", title="t" * 21), w) == 4.0
        assert richness_score(_candidate("A", title="t" * 11), w) == 2.0
        assert richness_score(_candidate("A", title="t" * 10), w) == 0.0

    def test_location_tiers(self) -> None:
        w = RankingWeights()
        assert richness_score(_candidate("A", location="l" * 11), w) == 2.0
        assert richness_score(_candidate("A", location="l" * 6), w) == 1.0
        assert richness_score(_candidate("A", location="l" * 5), w) == 0.0

    def test_trivial_company_ignored(self) -> None:
        w = RankingWeights()
        assert richness_score(_candidate("A", company="IBM"), w) == 0.0
        assert richness_score(_candidate("A", company="Google"), w) == 3.0

    def test_weights_are_configurable(self) -> None:
        w = RankingWeights(education_bonus=100.0)
        assert richness_score(_candidate("A", education=True), w) == 100.0


class TestMentions:
    def test_position_by_name(self) -> None:
        assert mention_position(_candidate("Jane Doe"), "Top pick: Jane Doe.") == 10

    def test_position_by_identity(self) -> None:
        c = _candidate("Jane Doe", public_id="jdoe-42")
        assert mention_position(c, "See [profile](jdoe-42)") == 14

    def test_earliest_of_name_and_identity(self) -> None:
        c = _candidate("Jane Doe", public_id="jdoe-42")
        assert mention_position(c, "jdoe-42 ... later Jane Doe") == 0

    def test_not_mentioned(self) -> None:
        assert mention_position(_candidate("Jane Doe"), "Nobody here") is None

    def test_placeholder_name_and_identity_not_matched(self) -> None:
        nameless = normalize_profile(RawProfile())
        assert nameless.name == "Unknown"
        assert mention_needles(nameless) == []
        assert mention_position(nameless, "Unknown, unknown and more unknowns.") is None

    def test_placeholder_identity_with_company_not_matched(self) -> None:
        nameless = normalize_profile(RawProfile(company="Acme"))
        assert nameless.public_id == "unknown-at-acme"
        assert mention_position(nameless, "unknown-at-acme") is None

    def test_real_name_kept_when_identity_is_placeholder(self) -> None:
        c = normalize_profile(RawProfile(first_name="Ann", last_name="Lee"))
        assert c.public_id == "unknown"
        assert mention_needles(c) == ["Ann Lee"]

    def test_bonus_decreases_with_position(self) -> None:
        w = RankingWeights()
        assert mention_bonus(0, 100, w) == 50.0
        assert mention_bonus(50, 100, w) == 40.0
        assert mention_bonus(100, 100, w) == 30.0


class TestRankCandidates:
    def test_richer_first_without_narrative(self) -> None:
        plain = _candidate("Plain Person")
        rich = _rich("Rich Person")
        assert rank_candidates([plain, rich]) == [rich, plain]

    def test_mention_dominates_richness(self) -> None:
        plain = _candidate("Plain Person")
        rich = _rich("Rich Person")
        ranked = rank_candidates([rich, plain], "I recommend Plain Person.")
        assert ranked == [plain, rich]

    def test_mention_dominates_even_with_huge_richness_weights(self) -> None:
        plain = _candidate("Plain Person")
        rich = _rich("Rich Person")
        weights = RankingWeights(about_long_bonus=1000.0)
        assert rank_candidates([rich, plain], "Plain Person", weights)[0] == plain

    def test_mentioned_only_one_of_identical(self) -> None:
        a = _candidate("Ann Lee", about="a" * 60)
        b = _candidate("Bob Ray", about="a" * 60)
        assert rank_candidates([a, b], "Consider Bob Ray first.") == [b, a]

    def test_earlier_mention_ranks_higher(self) -> None:
        a = _candidate("Ann Lee")
        b = _candidate("Bob Ray")
        narrative = "Bob Ray is strong. " + "filler " * 20 + "Ann Lee also fits."
        assert rank_candidates([a, b], narrative) == [b, a]

    def test_ties_keep_input_order(self) -> None:
        a, b, c = _candidate("A One"), _candidate("B Two"), _candidate("C Three")
        assert rank_candidates([a, b, c]) == [a, b, c]

    def test_does_not_mutate_input(self) -> None:
        plain, rich = _candidate("Plain Person"), _rich("Rich Person")
        original = [plain, rich]
        rank_candidates(original)
        assert original == [plain, rich]

    def test_empty_list(self) -> None:
        assert rank_candidates([], "anything") == []

    def test_word_unknown_does_not_promote_empty_record(self) -> None:
        ann = _rich("Ann Lee")
        empty = normalize_profile(RawProfile())
        ranked = rank_candidates([ann, empty], "Some profiles had unknown or missing data.")
        assert [c.name for c in ranked] == ["Ann Lee", "Unknown"]
