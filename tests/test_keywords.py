"""Tests for keyword extraction and the Chinese→English glossary."""

from __future__ import annotations

import pytest

from citation_search.application.search.keywords import (
    KEYWORD_TRANSLATIONS,
    MAX_KEYWORDS,
    KeywordExtractor,
    translate_keywords,
)


@pytest.fixture
def extractor() -> KeywordExtractor:
    return KeywordExtractor()


# ============================================================
# Basic Extraction
# ============================================================


class TestExtract:
    def test_english_query(self, extractor):
        assert extractor.extract("deep learning, for image recognition!") == [
            "deep",
            "learning",
            "image",
            "recognition",
        ]

    def test_chinese_query_with_punctuation(self, extractor):
        assert extractor.extract("机器学习，深度学习；神经网络") == ["机器学习", "深度学习", "神经网络"]

    def test_unpunctuated_chinese_sentence_is_one_token(self, extractor):
        assert extractor.extract("机器学习在医疗中的应用") == ["机器学习在医疗中的应用"]

    def test_stop_words_dropped_case_insensitively(self, extractor):
        assert extractor.extract("The Impact OF climate change") == ["Impact", "climate", "change"]

    def test_chinese_stop_words_dropped(self, extractor):
        assert extractor.extract("我 的 机器学习 和 没有 数据") == ["机器学习", "数据"]

    def test_short_tokens_dropped(self, extractor):
        assert extractor.extract("a b c AI ok") == ["AI", "ok"]

    def test_symbols_split_tokens(self, extractor):
        assert extractor.extract("COVID-19 + vaccine$efficacy") == ["COVID", "19", "vaccine", "efficacy"]

    def test_duplicates_keep_first_occurrence(self, extractor):
        assert extractor.extract("graph neural graph networks neural") == ["graph", "neural", "networks"]

    def test_at_most_five_keywords(self, extractor):
        keywords = extractor.extract("alpha beta gamma delta epsilon zeta eta theta")
        assert keywords == ["alpha", "beta", "gamma", "delta", "epsilon"]
        assert len(keywords) == MAX_KEYWORDS

    @pytest.mark.parametrize("query", ["", "   ", "!!! ??? ...", "的 了 在", "a b c", None])
    def test_degenerate_input_yields_nothing(self, extractor, query):
        assert extractor.extract(query) == []

    def test_custom_limits(self):
        extractor = KeywordExtractor(stop_words=frozenset({"foo"}), max_keywords=2, min_length=3)
        assert extractor.extract("foo bar ba bazz quux") == ["bar", "bazz"]


# ============================================================
# Properties
# ============================================================


class TestExtractProperties:
    @pytest.mark.parametrize(
        "query",
        [
            "deep learning, for image recognition!",
            "机器学习，深度学习；神经网络 in healthcare",
            "COVID-19: the vaccine & its (efficacy) -- a review of reviews",
            "alpha beta gamma delta epsilon zeta",
        ],
    )
    def test_idempotent_on_own_output(self, extractor, query):
        keywords = extractor.extract(query)
        assert extractor.extract(" ".join(keywords)) == keywords

    @pytest.mark.parametrize(
        "query",
        [
            "deep learning, for image recognition!",
            "graph graph graph neural neural",
            "x y z 的 了 是 AI ML NLP CV RL GAN VAE",
        ],
    )
    def test_output_invariants(self, extractor, query):
        keywords = extractor.extract(query)
        assert len(keywords) <= MAX_KEYWORDS
        assert len(set(keywords)) == len(keywords)
        assert all(len(k) >= 2 for k in keywords)
        assert not any(extractor.is_stop_word(k) for k in keywords)


# ============================================================
# Translation Glossary
# ============================================================


class TestTranslateKeywords:
    def test_known_terms(self):
        assert translate_keywords(["机器学习", "深度学习"]) == ["machine learning", "deep learning"]

    def test_unknown_terms_pass_through(self):
        assert translate_keywords(["量子计算", "robotics"]) == ["量子计算", "robotics"]

    def test_glossary_size(self):
        assert len(KEYWORD_TRANSLATIONS) == 8

    def test_empty(self):
        assert translate_keywords([]) == []
