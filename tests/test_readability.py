import pytest

from writing_assistant.domains.analysis import NO_CONTENT, ReadabilityMetrics, count_syllables, recommendations, score
from writing_assistant.domains.analysis.readability import count_sentences, readability_level, round_half_up


def test_empty_text_has_no_content():
    for text in ("", "   ", "\n\t"):
        metrics = score(text)
        assert metrics.word_count == 0
        assert metrics.sentence_count == 0
        assert metrics.syllable_count == 0
        assert metrics.flesch_reading_ease == 0
        assert metrics.flesch_kincaid_grade == 0
        assert metrics.readability_level == NO_CONTENT


def test_short_sentence_counts():
    metrics = score("Cat sat.")
    assert metrics.sentence_count == 1
    assert metrics.word_count == 2
    assert metrics.syllable_count == 2
    # ease уходит выше 100 и обрезается
    assert metrics.flesch_reading_ease == 100
    assert metrics.flesch_kincaid_grade == 0
    assert metrics.readability_level == "Very Easy"


def test_ease_matches_closed_form():
    text = "The quick brown fox jumps over the lazy sleeping dog."
    metrics = score(text)

    assert metrics.word_count == 10
    assert metrics.sentence_count == 1
    assert metrics.syllable_count == 13

    expected_ease = 206.835 - 1.015 * 10 - 84.6 * (13 / 10)
    expected_grade = 0.39 * 10 + 11.8 * (13 / 10) - 15.59
    assert metrics.raw_ease == pytest.approx(expected_ease)
    assert metrics.flesch_reading_ease == pytest.approx(expected_ease, abs=0.05)
    assert metrics.flesch_kincaid_grade == pytest.approx(expected_grade, abs=0.06)
    assert metrics.average_words_per_sentence == 10.0
    assert metrics.average_syllables_per_word == 1.3
    assert metrics.readability_level == "Easy"


def test_tokens_without_letters_are_not_words():
    metrics = score("Version 2 - 100 % done!")
    assert metrics.word_count == 2


def test_text_without_terminator_is_one_sentence():
    assert count_sentences("no punctuation here") == 1
    assert count_sentences("One. Two! Three?") == 3
    assert count_sentences("Wait... what?!") == 2


@pytest.mark.parametrize("word,expected", [
    ("", 0),
    ("123", 0),
    ("the", 1),
    ("make", 1),
    ("over", 2),
    ("beautiful", 3),
    ("Reading!", 2),
])
def test_count_syllables(word, expected):
    assert count_syllables(word) == expected


@pytest.mark.parametrize("ease,label", [
    (95, "Very Easy"),
    (90, "Very Easy"),
    (85, "Easy"),
    (72, "Fairly Easy"),
    (60, "Standard"),
    (55, "Fairly Difficult"),
    (45, "Difficult"),
    (10, "Very Difficult"),
])
def test_readability_level_thresholds(ease, label):
    assert readability_level(ease) == label


def test_metrics_round_trip_through_storage_format():
    metrics = score("A plain sentence. Another plain sentence follows it.")
    data = metrics.to_dict()

    assert set(data) == {
        "word_count", "sentence_count", "syllable_count", "average_words_per_sentence",
        "average_syllables_per_word", "flesch_reading_ease", "flesch_kincaid_grade",
        "readability_level",
    }
    restored = ReadabilityMetrics.from_dict(data)
    assert restored.to_dict() == data
    assert ReadabilityMetrics.from_dict(None) == ReadabilityMetrics()


def test_recommendations():
    assert recommendations(score("")) == []

    short = recommendations(score("Cat sat."))
    assert "Consider adding more content for a more comprehensive analysis" in short

    dense = score(
        "Institutional accountability considerations necessitate comprehensive "
        "organizational restructuring initiatives throughout multinational "
        "telecommunications conglomerates operating internationally."
    )
    advice = recommendations(dense)
    assert "Consider using shorter sentences to improve readability" in advice
    assert "Consider using simpler words with fewer syllables" in advice
    assert "The text may be too complex for general audiences" in advice


def test_halves_round_up():
    assert round_half_up(2.25, 1) == 2.3
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(2.24, 1) == 2.2

    metrics = score("One two. Three four. Five six. Seven eight nine.")
    assert (metrics.word_count, metrics.sentence_count) == (9, 4)
    assert metrics.average_words_per_sentence == 2.3
