"""Tests for the candidate scorer."""

import pytest

from answerscope_core.candidate_scorer import (
    DEFAULT_RULES,
    ScoringContext,
    apply_rules,
    query_keywords,
    score_candidates,
    score_page,
)
from answerscope_core.config import Thresholds
from answerscope_core.models import LocatorKind

from mocks.fake_browser import FakePage, FakeSite, make_text

QUERY = "climate change effects"

ANSWER_SENTENCE = "According to recent reports, climate change effects include rising seas. "


def element(text, **kwargs):
    record = {
        "tag": "div",
        "id": "",
        "idUnique": False,
        "classes": [],
        "attributes": {},
        "childContainers": 0,
        "path": "body > div:nth-of-type(1)",
        "text": text,
    }
    record.update(kwargs)
    return record


def context_for(text, query=QUERY, attributes=None):
    return ScoringContext(
        text=text,
        lower=text.lower(),
        query=query,
        query_words=query_keywords(query),
        attributes=attributes or {},
        thresholds=Thresholds(),
    )


class TestScenarios:
    """End-to-end scoring scenarios."""

    def test_answer_with_query_and_attribution_ranks_first(self):
        """An answer quoting the query with attribution outranks page noise."""
        answer = element(make_text(ANSWER_SENTENCE, 3000), id="answer", idUnique=True)
        noise = element(make_text("Weather forecast for today and tomorrow. ", 800))

        candidates = score_candidates([noise, answer], QUERY)

        assert candidates
        top = candidates[0]
        assert top.locator.selector == "div#answer"
        assert top.locator.kind is LocatorKind.INFERRED
        assert top.confidence_score > Thresholds().acceptance_threshold
        assert "query_match" in top.reasons
        assert "attribution_phrasing" in top.reasons
        assert top.text_length == 3000

    def test_short_element_and_navigation_chrome_are_rejected(self):
        """Tiny labels and navigation chrome never become candidates."""
        short = element(make_text("Tiny label. ", 50))
        chrome = element(make_text("search images videos ", 4000))

        assert score_candidates([short, chrome], QUERY) == []

    def test_no_element_above_floor_returns_empty(self):
        """Elements below the candidate floor are not scored."""
        snapshot = [element(make_text(ANSWER_SENTENCE, n)) for n in (10, 120, 499)]

        assert score_candidates(snapshot, QUERY) == []

    def test_empty_snapshot(self):
        assert score_candidates([], QUERY) == []


class TestFiltering:

    def test_wrapper_with_large_fanout_is_skipped(self):
        """Wrappers around many containers are skipped."""
        wrapper = element(make_text(ANSWER_SENTENCE, 3000), childContainers=11)

        assert score_candidates([wrapper], QUERY) == []

    def test_fanout_at_threshold_is_kept(self):
        block = element(make_text(ANSWER_SENTENCE, 3000), childContainers=10)

        assert len(score_candidates([block], QUERY)) == 1

    def test_score_equal_to_threshold_is_rejected(self):
        """Acceptance needs a score strictly above the threshold."""
        # keyword_match (30) + attribution_phrasing (20) == 50
        text = make_text("Based on tide tables the ocean moves with the moon ", 600)
        snapshot = [element(text)]

        assert score_candidates(snapshot, "ocean tides moon") == []

    def test_platform_attribute_lifts_candidate_over_threshold(self):
        """A platform attribute adds the last ten points."""
        text = make_text("Based on tide tables the ocean moves with the moon ", 600)
        snapshot = [element(
            text, classes=["answer", "qJYHHd"], attributes={"jsname": "htVhGf"},
            selectorMatches={"answer": 1, "qJYHHd": 3, "": 2},
        )]

        candidates = score_candidates(snapshot, "ocean tides moon")

        assert len(candidates) == 1
        assert candidates[0].confidence_score == 60
        assert candidates[0].reasons == ("keyword_match", "attribution_phrasing", "platform_attribute")
        assert candidates[0].locator.selector == 'div.answer[jsname="htVhGf"]'

    def test_shared_class_locates_the_answer_not_the_first_match(self):
        """Two elements share a class; the answer gets its structural path."""
        nav = element(
            make_text("Home News Weather Sports Travel ", 520),
            classes=["panel"], selectorMatches={"panel": 2}, path="body > div:nth-of-type(1)",
        )
        answer = element(
            make_text(ANSWER_SENTENCE, 3000),
            classes=["panel"], selectorMatches={"panel": 2}, path="body > div:nth-of-type(2)",
        )

        candidates = score_candidates([nav, answer], QUERY)

        assert candidates[0].locator.selector == "body > div:nth-of-type(2)"


class TestOrdering:

    def test_sorted_by_score_then_length(self):
        """Equal scores are ordered by text length."""
        strong = element(make_text(ANSWER_SENTENCE, 2500), id="strong", idUnique=True)
        weaker_long = element(
            make_text("Based on studies, climate change and its effects matter ", 1500),
            id="weaker-long", idUnique=True, attributes={"data-ved": "2ahUKE"},
        )
        weaker_short = element(
            make_text("Based on studies, climate change and its effects matter ", 1200),
            id="weaker-short", idUnique=True, attributes={"data-ved": "2ahUKF"},
        )

        candidates = score_candidates([weaker_short, weaker_long, strong], QUERY)

        assert [c.locator.selector for c in candidates] == [
            "div#strong", "div#weaker-long", "div#weaker-short",
        ]
        assert candidates[1].confidence_score == candidates[2].confidence_score

    def test_scoring_is_deterministic(self):
        """Same snapshot, same candidates."""
        snapshot = [
            element(make_text(ANSWER_SENTENCE, 2500), id="a", idUnique=True),
            element(make_text(ANSWER_SENTENCE, 2500), id="b", idUnique=True),
            element(make_text("Based on studies, climate change effects. ", 900), id="c", idUnique=True),
        ]

        assert score_candidates(snapshot, QUERY) == score_candidates(list(snapshot), QUERY)

    def test_preview_is_capped(self):
        candidates = score_candidates([element(make_text(ANSWER_SENTENCE, 3000))], QUERY)

        assert len(candidates[0].content_preview) == 200


class TestRules:
    """Each rule is an independent predicate with a fixed weight."""

    def test_rule_weights(self):
        weights = {rule.reason: rule.weight for rule in DEFAULT_RULES}
        assert weights == {
            "query_match": 40,
            "keyword_match": 30,
            "attribution_phrasing": 20,
            "generation_status": 15,
            "prose_structure": 25,
            "site_chrome": -40,
            "platform_attribute": 10,
        }

    def test_query_match_needs_substantial_text(self):
        """The verbatim query only counts in substantial text."""
        short = make_text("climate change effects matter. ", 900)
        long = make_text("climate change effects matter. ", 1100)

        assert "query_match" not in apply_rules(context_for(short))[1]
        assert "query_match" in apply_rules(context_for(long))[1]

    def test_keyword_match_needs_two_distinct_words(self):
        """One matching keyword is not enough."""
        one = make_text("The climate is mild here. ", 600)
        two = make_text("The climate is changing and the effects are visible. ", 600)

        assert "keyword_match" not in apply_rules(context_for(one))[1]
        assert "keyword_match" in apply_rules(context_for(two))[1]

    def test_short_query_words_are_ignored(self):
        assert query_keywords("is it an ox or a cow cow") == ("cow",)

    def test_generation_status_phrasing(self):
        score, reasons = apply_rules(context_for(make_text("Putting it all together now ", 600), query="zzz"))

        assert reasons == ("generation_status",)
        assert score == 15

    def test_prose_structure_needs_sentences(self):
        """Long text without sentence terminators is not prose."""
        prose = make_text("Short sentence here. ", 2100)
        run_on = make_text("one long run on clause without any stop ", 2100)

        assert "prose_structure" in apply_rules(context_for(prose, query="zzz"))[1]
        assert "prose_structure" not in apply_rules(context_for(run_on, query="zzz"))[1]

    @pytest.mark.parametrize("phrase", ["Accept cookie settings", "Read our privacy policy", "Sign in to continue"])
    def test_legal_vocabulary_penalty(self, phrase):
        score, reasons = apply_rules(context_for(make_text(phrase + " ", 600), query="zzz"))

        assert reasons == ("site_chrome",)
        assert score == -40

    def test_navigation_words_must_co_occur(self):
        """A single navigation word is not site chrome."""
        only_search = make_text("research search results ", 600)

        assert "site_chrome" not in apply_rules(context_for(only_search, query="zzz"))[1]


class TestScorePage:

    @pytest.mark.asyncio
    async def test_scores_live_snapshot(self):
        """Snapshot is taken from the page and scored."""
        page = FakePage(site=FakeSite(snapshot=[element(make_text(ANSWER_SENTENCE, 3000), id="answer", idUnique=True)]))

        candidates = await score_page(page, QUERY)

        assert candidates[0].locator.selector == "div#answer"

    @pytest.mark.asyncio
    async def test_snapshot_failure_means_no_candidates(self):
        """A failing snapshot script yields no candidates."""
        page = FakePage()

        async def broken(script, arg=None):
            raise RuntimeError("Execution context was destroyed")

        page.evaluate = broken

        assert await score_page(page, QUERY) == []
