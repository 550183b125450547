"""Tests for the insight synthesizer."""

from __future__ import annotations

import pytest

from src.extraction.insights import InsightSubject, InsightSynthesizer


@pytest.fixture
def subject(rick):
    return InsightSubject.from_character(rick)


class TestInsightSubject:
    def test_from_character(self, subject):
        assert subject.name == "Rick Sanchez"
        assert subject.origin == "Earth (C-137)"
        assert subject.location == "Citadel of Ricks"

    def test_defaults_for_unknown_subject(self):
        subject = InsightSubject()
        assert subject.name == "This character"
        assert subject.status == "Unknown"


class TestInsightSynthesizer:
    def test_synthesize_is_deterministic(self, subject):
        synthesizer = InsightSynthesizer()
        first = synthesizer.synthesize(subject, 5)
        assert first == synthesizer.synthesize(subject, 5)
        assert len(first) == 5
        assert len(set(first)) == 5
        assert first[0].startswith("Rick Sanchez is a Alive Human")

    def test_synthesize_beyond_templates_stays_unique(self, subject):
        insights = InsightSynthesizer().synthesize(subject, 10)
        assert len(set(insights)) == 10

    @pytest.mark.parametrize("extracted_count", [0, 1, 2, 3, 4, 5])
    def test_pad_keeps_extracted_prefix(self, subject, extracted_count):
        extracted = [f"Extracted insight number {i}" for i in range(extracted_count)]

        padded = InsightSynthesizer().pad(extracted, subject, 5)

        assert len(padded) == 5
        assert padded[:extracted_count] == extracted

    def test_pad_truncates_long_lists(self, subject):
        extracted = [f"Extracted insight number {i}" for i in range(8)]
        assert InsightSynthesizer().pad(extracted, subject, 5) == extracted[:5]

    def test_pad_skips_duplicates(self, subject):
        synthesizer = InsightSynthesizer()
        first_synthetic = synthesizer.synthesize(subject, 1)[0]

        padded = synthesizer.pad([first_synthetic.upper()], subject, 5)

        assert len(padded) == 5
        assert first_synthetic not in padded
