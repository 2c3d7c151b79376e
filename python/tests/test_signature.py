"""Tests for voice signature extraction, averaging and storage format."""

import json

import numpy as np
import pytest

from conftest import synth_phrase
from voxgate.errors import (
    DimensionMismatchError,
    EmptyAudioError,
    EmptyEnrollmentError,
    InsufficientAudioError,
    VoxgateError,
)
from voxgate.signature import (
    average_signatures,
    compute_delta,
    compute_energy,
    compute_variance,
    compute_voice_signature,
    compute_zero_crossing_rate,
    convert_legacy_signature,
    deserialize_signature,
    extract_voice_signature,
    serialize_signature,
)
from voxgate.types import VoiceSignature


def _signature(mean, frame_count=100.0):
    n = len(mean)
    return VoiceSignature(
        mean=list(mean),
        variance=[1.0] * n,
        delta_mean=[0.5] * n,
        energy=0.02,
        zero_crossing_rate=0.1,
        frame_count=frame_count,
    )


class TestFrameStatistics:
    def test_mean(self):
        frames = np.array([[1.0, 2.0], [3.0, 6.0]])
        assert compute_voice_signature(frames).tolist() == [2.0, 4.0]

    def test_mean_of_nothing_is_empty(self):
        assert compute_voice_signature([]).size == 0

    def test_population_variance(self):
        frames = np.array([[1.0, 0.0], [3.0, 0.0]])
        variance = compute_variance(frames, compute_voice_signature(frames))
        assert variance.tolist() == [1.0, 0.0]

    def test_delta(self):
        frames = np.array([[0.0], [1.0], [4.0], [9.0]])
        assert compute_delta(frames).tolist() == [[2.0], [4.0]]

    def test_delta_passthrough_below_three_frames(self):
        frames = np.array([[1.0, 2.0], [3.0, 4.0]])
        assert np.array_equal(compute_delta(frames), frames)

    def test_energy(self):
        assert compute_energy([0.5, -0.5, 0.5, -0.5]) == pytest.approx(0.25)

    def test_zero_crossing_rate(self):
        assert compute_zero_crossing_rate([1.0, -1.0, 1.0, -1.0]) == pytest.approx(0.75)

    def test_zero_counts_as_positive(self):
        assert compute_zero_crossing_rate([0.0, 1.0, 0.0, 2.0]) == 0.0
        assert compute_zero_crossing_rate([-1.0, 0.0]) == pytest.approx(0.5)


class TestExtractVoiceSignature:
    def test_fields(self):
        sig = extract_voice_signature(synth_phrase(0))
        assert len(sig.mean) == 13
        assert len(sig.variance) == 13
        assert len(sig.delta_mean) == 13
        assert sig.frame_count == 186.0
        assert sig.energy > 0
        assert 0 < sig.zero_crossing_rate < 1
        assert all(v >= 0 for v in sig.variance)
        assert sig.is_consistent
        assert not sig.is_degraded

    def test_deterministic(self):
        audio = synth_phrase(1)
        assert extract_voice_signature(audio) == extract_voice_signature(audio.copy())

    def test_accepts_float32_lists(self):
        audio = synth_phrase(2, duration=1.0).astype(np.float32)
        sig = extract_voice_signature(audio.tolist())
        assert sig.frame_count == 61.0

    def test_empty_audio(self):
        with pytest.raises(EmptyAudioError):
            extract_voice_signature(np.array([]))

    def test_shorter_than_one_frame(self):
        with pytest.raises(InsufficientAudioError):
            extract_voice_signature(np.ones(100) * 0.1)

    def test_short_audio_is_degraded_not_rejected(self):
        sig = extract_voice_signature(synth_phrase(3, duration=0.125))
        assert sig.frame_count == 6.0
        assert sig.is_degraded

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            extract_voice_signature([])


class TestAverageSignatures:
    def test_identical_samples_keep_mean(self, phrase_signature):
        avg = average_signatures([phrase_signature] * 3)
        np.testing.assert_allclose(avg.mean, phrase_signature.mean, rtol=1e-12)
        np.testing.assert_allclose(avg.variance, phrase_signature.variance, rtol=1e-12)
        assert avg.frame_count == pytest.approx(phrase_signature.frame_count)

    def test_element_wise_average(self):
        a = _signature([1.0, 2.0], frame_count=10.0)
        b = _signature([3.0, 6.0], frame_count=20.0)
        b.energy = 0.04
        avg = average_signatures([a, b])
        assert avg.mean == [2.0, 4.0]
        assert avg.energy == pytest.approx(0.03)
        assert avg.frame_count == 15.0

    def test_empty_list_raises(self):
        with pytest.raises(EmptyEnrollmentError):
            average_signatures([])

    def test_empty_list_is_voxgate_error(self):
        with pytest.raises(VoxgateError):
            average_signatures([])

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            average_signatures([_signature([1.0, 2.0]), _signature([1.0, 2.0, 3.0])])


class TestSerialization:
    def test_round_trip(self, phrase_signature):
        restored = deserialize_signature(serialize_signature(phrase_signature))
        assert restored == phrase_signature

    def test_stable_field_names(self, phrase_signature):
        data = json.loads(serialize_signature(phrase_signature))
        assert set(data) == {
            "mean", "variance", "deltaMean", "energy", "zeroCrossingRate", "frameCount",
        }

    def test_legacy_array(self):
        legacy = [float(i) for i in range(1, 14)]
        sig = deserialize_signature(json.dumps(legacy))
        assert sig == convert_legacy_signature(legacy)
        assert sig.mean == legacy
        assert sig.variance == [0.1] * 13
        assert sig.delta_mean == [0.0] * 13
        assert sig.energy == 0.01
        assert sig.zero_crossing_rate == 0.1
        assert sig.frame_count == 50

    def test_missing_optional_fields_use_defaults(self):
        sig = deserialize_signature(json.dumps({"mean": [1.0, 2.0], "variance": [0.5, 0.5]}))
        assert sig.delta_mean == [0.0, 0.0]
        assert sig.frame_count == 50

    @pytest.mark.parametrize("blob", [
        "not json",
        "",
        "{}",
        "42",
        "[]",
        '{"mean": [1, 2]}',
        '{"mean": [1, 2], "variance": [1]}',
        '{"mean": [1, "x"], "variance": [1, 1]}',
        '[1, 2, "three"]',
        '{"mean": [1, 2], "variance": [1, 1], "energy": "loud"}',
        "[" + "9" * 400 + "]",
        '{"mean": [1, 2], "variance": [1, 1], "frameCount": ' + "9" * 400 + "}",
        "[" * 100000,
    ])
    def test_corrupt_blobs_return_none(self, blob):
        assert deserialize_signature(blob) is None

    def test_non_string_input_returns_none(self):
        assert deserialize_signature(None) is None
