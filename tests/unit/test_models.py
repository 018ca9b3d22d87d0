"""Tests for data models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from snipcut.errors import InvalidDeletionError
from snipcut.models.edl import (
    DeletionRef,
    DeletionSet,
    EditDecisionList,
    LeadingPauseDeletion,
    PauseDeletion,
    SilenceDeletion,
    TrailingPauseDeletion,
    WordDeletion,
    parse_deletion_id,
)
from snipcut.models.interval import TimeInterval
from snipcut.models.silence import (
    Aggressiveness,
    RawSilence,
    SilenceSegment,
    SilenceSource,
    SilenceType,
    get_preset,
)
from snipcut.models.timeline import Caption, CaptionWord
from snipcut.models.transcript import Word, words_for_clip


class TestTimeInterval:
    def test_create(self) -> None:
        iv = TimeInterval(start=1.0, end=2.5)
        assert iv.duration == 1.5
        assert iv.duration_ms == 1500.0

    def test_zero_length_is_legal(self) -> None:
        assert TimeInterval(start=3.0, end=3.0).duration == 0.0

    def test_invalid_range(self) -> None:
        with pytest.raises(ValueError):
            TimeInterval(start=2.0, end=1.0)

    def test_negative_start(self) -> None:
        with pytest.raises(ValidationError):
            TimeInterval(start=-0.5, end=1.0)

    def test_overlap(self) -> None:
        a = TimeInterval(start=1.0, end=3.0)
        b = TimeInterval(start=2.0, end=4.0)
        assert a.overlap(b) == 1.0
        assert a.overlap(TimeInterval(start=5.0, end=6.0)) == 0.0

    def test_contains(self) -> None:
        iv = TimeInterval(start=1.0, end=2.0)
        assert iv.contains(1.0)
        assert not iv.contains(2.0)


class TestWord:
    def test_interval(self) -> None:
        word = Word(id="w1", text="hi", start=0.5, end=0.9)
        assert word.interval() == TimeInterval(start=0.5, end=0.9)

    def test_malformed_word_rejected_on_interval(self) -> None:
        word = Word(id="w1", text="hi", start=1.0, end=0.5)
        with pytest.raises(ValidationError):
            word.interval()

    def test_words_for_clip(self) -> None:
        words = [
            Word(id="b", text="b", start=2.0, end=2.5, clip_index=0),
            Word(id="x", text="x", start=0.0, end=0.5, clip_index=1),
            Word(id="a", text="a", start=0.0, end=0.5, clip_index=0),
        ]
        assert [w.id for w in words_for_clip(words, 0)] == ["a", "b"]


class TestSilenceModels:
    def test_segment_duration(self) -> None:
        seg = SilenceSegment(id="s", start=1.0, end=1.75, source=SilenceSource.FFMPEG)
        assert seg.duration == 0.75
        assert seg.type == SilenceType.MID
        assert not seg.is_boundary

    def test_confidence_bounds(self) -> None:
        with pytest.raises(ValidationError):
            SilenceSegment(id="s", start=0.0, end=1.0, source="ffmpeg", confidence=1.2)

    def test_raw_sentinel(self) -> None:
        assert RawSilence(start=9.0, end=-1, duration=-1).extends_to_eof
        assert not RawSilence(start=1.0, end=2.0, duration=1.0).extends_to_eof

    @pytest.mark.parametrize(
        "name,min_duration,min_confidence,noise_db",
        [
            ("tight", 0.3, 0.5, -25.0),
            ("natural", 0.5, 0.6, -30.0),
            ("conservative", 0.8, 0.7, -35.0),
        ],
    )
    def test_presets(self, name: str, min_duration: float, min_confidence: float, noise_db: float) -> None:
        preset = get_preset(name)
        assert preset.min_duration == min_duration
        assert preset.min_confidence == min_confidence
        assert preset.noise_db == noise_db

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError):
            get_preset("extreme")

    def test_preset_by_enum(self) -> None:
        assert get_preset(Aggressiveness.TIGHT).min_duration == 0.3


class TestDeletionRefs:
    def test_legacy_ids(self) -> None:
        assert WordDeletion(word_id="word-0-3").to_id() == "word-0-3"
        assert PauseDeletion(after_word_id="word-0-3").to_id() == "pause-after-word-0-3"
        assert SilenceDeletion(clip_index=1, segment_id="dedup-1-0").to_id() == "silence-1-dedup-1-0"
        assert LeadingPauseDeletion(clip_index=2).to_id() == "pause-before-clip-2"
        assert TrailingPauseDeletion(clip_index=2).to_id() == "pause-after-clip-2-last-word"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("word-0-3", WordDeletion(word_id="word-0-3")),
            ("pause-after-word-0-3", PauseDeletion(after_word_id="word-0-3")),
            ("silence-1-dedup-1-0", SilenceDeletion(clip_index=1, segment_id="dedup-1-0")),
            ("pause-before-clip-2", LeadingPauseDeletion(clip_index=2)),
            ("pause-before-clip-2-first-word", LeadingPauseDeletion(clip_index=2)),
            ("pause-after-clip-4-last-word", TrailingPauseDeletion(clip_index=4)),
            ("pause-clip-0-word-0-1-word-0-2", PauseDeletion(after_word_id="word-0-1")),
            ("pause-clip-3-word-3-10-word-3-11", PauseDeletion(after_word_id="word-3-10")),
        ],
    )
    def test_parse(self, raw: str, expected: DeletionRef) -> None:
        assert parse_deletion_id(raw) == expected

    def test_parse_round_trips_to_id(self) -> None:
        for raw in ["w7", "pause-after-w7", "silence-0-ffmpeg-adj-0-2", "pause-before-clip-0"]:
            assert parse_deletion_id(raw).to_id() == raw

    def test_parse_empty(self) -> None:
        with pytest.raises(InvalidDeletionError):
            parse_deletion_id("  ")

    def test_refs_are_hashable(self) -> None:
        refs = {WordDeletion(word_id="a"), WordDeletion(word_id="a"), PauseDeletion(after_word_id="a")}
        assert len(refs) == 2

    def test_discriminated_union_from_json(self) -> None:
        adapter = TypeAdapter(list[DeletionRef])
        refs = adapter.validate_python(
            [
                {"kind": "word", "word_id": "a"},
                {"kind": "silence", "clip_index": 0, "segment_id": "dedup-0-0"},
                {"kind": "trailing_pause", "clip_index": 0},
            ]
        )
        assert isinstance(refs[0], WordDeletion)
        assert isinstance(refs[1], SilenceDeletion)
        assert isinstance(refs[2], TrailingPauseDeletion)


class TestDeletionSet:
    def test_views(self) -> None:
        ds = DeletionSet(
            clip_index=0,
            refs=[
                WordDeletion(word_id="a"),
                PauseDeletion(after_word_id="b"),
                SilenceDeletion(clip_index=0, segment_id="s1"),
                LeadingPauseDeletion(clip_index=0),
            ],
        )
        assert ds.word_ids == {"a"}
        assert ds.pause_after_word_ids == {"b"}
        assert ds.silence_segment_ids == {"s1"}
        assert ds.leading_pause
        assert not ds.trailing_pause
        assert not ds.is_empty

    def test_empty(self) -> None:
        assert DeletionSet(clip_index=3).is_empty


class TestEditDecisionList:
    def test_durations(self) -> None:
        edl = EditDecisionList(
            clip_index=0,
            clip_duration=10.0,
            merged_deleted=[TimeInterval(start=2.0, end=4.05)],
            keep_segments=[TimeInterval(start=0.0, end=2.0), TimeInterval(start=4.05, end=10.0)],
        )
        assert edl.output_duration == pytest.approx(7.95)
        assert edl.removed_duration == pytest.approx(2.05)
        assert not edl.is_empty

    def test_empty(self) -> None:
        edl = EditDecisionList(
            clip_index=0,
            clip_duration=2.0,
            merged_deleted=[TimeInterval(start=0.0, end=2.0)],
        )
        assert edl.is_empty
        assert edl.output_duration == 0


class TestCaption:
    def test_shifted(self) -> None:
        caption = Caption(
            text="hello world",
            start_ms=100.0,
            end_ms=900.0,
            words=[
                CaptionWord(word="hello", start_ms=100.0, end_ms=400.0),
                CaptionWord(word="world", start_ms=500.0, end_ms=900.0),
            ],
        )
        shifted = caption.shifted(1000.0)
        assert shifted.start_ms == 1100.0
        assert shifted.end_ms == 1900.0
        assert [w.start_ms for w in shifted.words] == [1100.0, 1500.0]
        assert caption.start_ms == 100.0
