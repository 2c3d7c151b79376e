"""Tests for signature similarity scoring and strict verification."""

import numpy as np
import pytest

from conftest import synth_phrase, white_noise
from voxgate.errors import DimensionMismatchError
from voxgate.signature import average_signatures, extract_voice_signature
from voxgate.types import VoiceSignature
from voxgate.verify import (
    VoiceVerifier,
    cosine_similarity,
    verify_voice_strict,
    weighted_distance,
)


def _unit(i, n=13):
    v = [0.0] * n
    v[i] = 1.0
    return v


def _padded(values, n=13):
    return list(values) + [0.0] * (n - len(values))


def _signature(mean, variance=None, delta=None, energy=0.02, zcr=0.1, frames=100.0):
    return VoiceSignature(
        mean=list(mean),
        variance=list(variance) if variance is not None else [1.0] * len(mean),
        delta_mean=list(delta) if delta is not None else [1.0] * len(mean),
        energy=energy,
        zero_crossing_rate=zcr,
        frame_count=frames,
    )


class TestCosineSimilarity:
    def test_identical(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0

    def test_opposite(self):
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_zero_norm(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0

    def test_empty(self):
        assert cosine_similarity([], []) == 0.0

    def test_length_mismatch_returns_zero(self):
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0

    def test_symmetric(self):
        rng = np.random.default_rng(0)
        for _ in range(20):
            a, b = rng.standard_normal(13), rng.standard_normal(13)
            assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a), rel=1e-12)

    def test_scale_invariant(self):
        assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)


class TestWeightedDistance:
    def test_self_score_is_one(self, phrase_signature):
        assert weighted_distance(phrase_signature, phrase_signature) == pytest.approx(1.0)

    def test_energy_and_zcr_ratios(self):
        stored = _signature(_unit(0), energy=0.04, zcr=0.2)
        test = _signature(_unit(0), energy=0.02, zcr=0.1)
        # Energy ratio 0.5 costs 0.05, ZCR ratio 0.5 costs 0.025
        assert weighted_distance(test, stored) == pytest.approx(1.0 - 0.05 - 0.025)

    def test_frame_count_difference(self):
        stored = _signature(_unit(0), frames=100.0)
        assert weighted_distance(_signature(_unit(0), frames=150.0), stored) == pytest.approx(0.95)
        # Differences beyond 100% of the stored length bottom out
        assert weighted_distance(_signature(_unit(0), frames=500.0), stored) == pytest.approx(0.90)

    def test_zero_energy_on_both_sides(self):
        a = _signature(_unit(0), energy=0.0, zcr=0.0)
        assert weighted_distance(a, a) == pytest.approx(1.0)

    def test_zero_stored_frames(self):
        stored = _signature(_unit(0), frames=0.0)
        assert weighted_distance(_signature(_unit(0), frames=0.0), stored) == pytest.approx(1.0)
        assert weighted_distance(_signature(_unit(0), frames=10.0), stored) == pytest.approx(0.9)

    def test_negative_similarity_not_clamped_by_default(self):
        stored = _signature(_unit(0))
        test = _signature([-1.0] + [0.0] * 12)
        # mean term contributes -0.35 instead of +0.35
        assert weighted_distance(test, stored) == pytest.approx(1.0 - 0.70)

    def test_clamped_similarity(self):
        verifier = VoiceVerifier(clamp_similarity=True)
        stored = _signature(_unit(0))
        test = _signature([-1.0] + [0.0] * 12)
        assert verifier.weighted_distance(test, stored) == pytest.approx(1.0 - 0.35)


class TestVerifyVoiceStrict:
    def test_self_similarity(self, phrase_signature):
        result = verify_voice_strict(phrase_signature, phrase_signature, 0.92)
        assert result.match is True
        assert result.confidence == pytest.approx(1.0)
        assert result.details.mean_passed is True
        assert result.details.variance_passed is True
        assert result.degraded is False

    def test_confidence_is_overall_score(self, phrase_signature):
        other = extract_voice_signature(synth_phrase(12))
        result = verify_voice_strict(other, phrase_signature)
        assert result.confidence == result.details.overall_score
        assert result.details.overall_score == pytest.approx(weighted_distance(other, phrase_signature))

    def test_mean_gate_at_088_passes(self):
        # [22, 10, 5, 4] has norm 25, so its cosine with e0 is exactly 22/25
        stored = _signature(_unit(0))
        test = _signature(_padded([22.0, 10.0, 5.0, 4.0]))
        result = verify_voice_strict(test, stored)
        assert result.details.mean_similarity == 0.88
        assert result.details.mean_passed is True

    def test_mean_gate_at_087_fails(self):
        # [87, 49, 5, 2, 1] has norm 100
        stored = _signature(_unit(0))
        test = _signature(_padded([87.0, 49.0, 5.0, 2.0, 1.0]))
        result = verify_voice_strict(test, stored)
        assert result.details.mean_similarity == 0.87
        assert result.details.mean_passed is False
        assert result.match is False

    def test_variance_gate_alone_blocks_match(self):
        stored = _signature(_unit(0), variance=_unit(0))
        test = _signature(_unit(0), variance=_padded([3.0, 4.0]))  # cosine 0.6
        result = verify_voice_strict(test, stored, threshold=0.5)
        assert result.details.mean_passed is True
        assert result.details.variance_passed is False
        assert result.details.overall_score > 0.5
        assert result.match is False

    def test_overall_threshold_blocks_match(self):
        stored = _signature(_unit(0), energy=0.1)
        test = _signature(_unit(0), energy=0.01, frames=500.0)
        result = verify_voice_strict(test, stored)
        assert result.details.mean_passed and result.details.variance_passed
        assert result.details.overall_score < 0.92
        assert result.match is False

    def test_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            verify_voice_strict(_signature([1.0] * 13), _signature([1.0] * 12))

    def test_inconsistent_signature_raises(self):
        broken = _signature([1.0] * 13, variance=[1.0] * 5)
        with pytest.raises(DimensionMismatchError):
            verify_voice_strict(broken, _signature([1.0] * 13))

    def test_degraded_flag(self, phrase_signature):
        short = extract_voice_signature(synth_phrase(13, duration=0.125))
        result = verify_voice_strict(short, phrase_signature)
        assert result.degraded is True

    def test_deterministic(self, phrase_signature):
        other = extract_voice_signature(synth_phrase(14))
        assert verify_voice_strict(other, phrase_signature) == verify_voice_strict(other, phrase_signature)

    def test_custom_gates(self):
        verifier = VoiceVerifier(thresholds={'mean_similarity': 0.5})
        stored = _signature(_unit(0))
        test = _signature(_padded([87.0, 49.0, 5.0, 2.0, 1.0]))
        assert verifier.verify(test, stored).details.mean_passed is True
        assert VoiceVerifier.THRESHOLDS['mean_similarity'] == 0.88


class TestEndToEnd:
    """Enroll three takes, then verify a fresh take and an impostor."""

    @pytest.fixture()
    def enrolled(self, enrollment_audio):
        return average_signatures([extract_voice_signature(a) for a in enrollment_audio])

    def test_same_speaker_matches(self, enrolled, probe_audio):
        result = verify_voice_strict(extract_voice_signature(probe_audio), enrolled, 0.92)
        assert result.match is True
        assert result.confidence >= 0.92

    def test_white_noise_rejected(self, enrolled):
        result = verify_voice_strict(extract_voice_signature(white_noise()), enrolled, 0.92)
        assert result.match is False
