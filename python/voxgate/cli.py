"""Command-line interface for Voxgate."""
import argparse
import json
import logging
import sys
from pathlib import Path

from .audio_io import load_audio
from .auth import VoiceAuthenticator
from .config import MAX_PASSPHRASE_DURATION, MIN_PASSPHRASE_DURATION, SAMPLE_RATE
from .deepfake import DeepfakeDetector
from .errors import VoxgateError
from .signature import deserialize_signature, serialize_signature


def _read_audio(path_str):
    path = Path(path_str)
    if not path.exists():
        print(f"Error: File not found: {path_str}", file=sys.stderr)
        sys.exit(1)
    try:
        audio = load_audio(path.read_bytes())
    except VoxgateError as e:
        print(f"Error: {path_str}: {e}", file=sys.stderr)
        sys.exit(1)

    duration = len(audio) / SAMPLE_RATE
    if not MIN_PASSPHRASE_DURATION <= duration <= MAX_PASSPHRASE_DURATION:
        print(
            f"⚠ {path_str}: {duration:.1f}s is outside the recommended "
            f"{MIN_PASSPHRASE_DURATION}-{MAX_PASSPHRASE_DURATION}s passphrase length",
            file=sys.stderr,
        )
    return audio


def _analysis_dict(analysis):
    return {
        "isHuman": analysis.is_human,
        "confidence": analysis.confidence,
        "reasons": analysis.reasons,
        "metrics": {
            "spectralFlatness": analysis.metrics.spectral_flatness,
            "temporalVariation": analysis.metrics.temporal_variation,
            "pitchVariation": analysis.metrics.pitch_variation,
            "breathDetected": analysis.metrics.breath_detected,
            "microVariations": analysis.metrics.micro_variations,
        },
    }


def detect_command(args):
    """Liveness check command."""
    audio = _read_audio(args.file)
    analysis = DeepfakeDetector().detect(audio)

    if args.json:
        print(json.dumps(_analysis_dict(analysis), indent=2))
    else:
        print(f"\n{'='*60}")
        print("  Voice Liveness Report")
        print(f"{'='*60}\n")
        print(f"File: {Path(args.file).resolve()}")
        print(f"Verdict: {'HUMAN' if analysis.is_human else 'SYNTHETIC'}")
        print(f"Confidence: {analysis.confidence:.0%}")
        print("\nReasons:")
        for reason in analysis.reasons:
            print(f"  • {reason}")
        m = analysis.metrics
        print("\nMetrics:")
        print(f"  spectral flatness:  {m.spectral_flatness:.4f}")
        print(f"  temporal variation: {m.temporal_variation:.4f}")
        print(f"  pitch variation:    {m.pitch_variation:.4f}")
        print(f"  breath detected:    {m.breath_detected}")
        print(f"  micro-variations:   {m.micro_variations:.4f}")
        print(f"\n{'='*60}\n")

    sys.exit(0 if analysis.is_human else 1)


def enroll_command(args):
    """Enroll a speaker from several recordings."""
    authenticator = VoiceAuthenticator(required_samples=len(args.files))
    samples = [_read_audio(f) for f in args.files]

    try:
        result = authenticator.enroll(samples)
    except VoxgateError as e:
        print(f"Error: Enrollment failed: {e}", file=sys.stderr)
        sys.exit(1)

    output_path = Path(args.output)
    output_path.write_text(serialize_signature(result.signature))

    if args.json:
        print(json.dumps({
            "signature": str(output_path.resolve()),
            "samplesUsed": result.samples_used,
            "frameCount": result.signature.frame_count,
            "degraded": result.signature.is_degraded,
        }, indent=2))
    else:
        print(f"\n✓ Voice enrolled from {result.samples_used} samples!\n")
        print(f"Signature saved to: {output_path.resolve()}")
        if result.signature.is_degraded:
            print("⚠ Recordings are short; matching will be unreliable.")


def verify_command(args):
    """Verify a recording against an enrolled signature."""
    signature_path = Path(args.signature)
    if not signature_path.exists():
        print(f"Error: Signature not found: {args.signature}", file=sys.stderr)
        sys.exit(1)

    stored = deserialize_signature(signature_path.read_text())
    if stored is None:
        print(f"Error: Invalid signature file: {args.signature}", file=sys.stderr)
        sys.exit(1)

    audio = _read_audio(args.file)
    authenticator = VoiceAuthenticator(threshold=args.threshold)
    try:
        result = authenticator.verify(audio, stored)
    except VoxgateError as e:
        print(f"Error: Verification failed: {e}", file=sys.stderr)
        sys.exit(1)

    details = result.verification.details if result.verification else None
    if args.json:
        print(json.dumps({
            "match": result.match,
            "confidence": result.confidence,
            "reason": result.reason,
            "deepfake": _analysis_dict(result.deepfake_analysis),
            "details": None if details is None else {
                "meanSimilarity": details.mean_similarity,
                "varianceSimilarity": details.variance_similarity,
                "overallScore": details.overall_score,
                "meanPassed": details.mean_passed,
                "variancePassed": details.variance_passed,
            },
        }, indent=2))
    else:
        print(f"\n{'='*60}")
        print("  Voice Verification Report")
        print(f"{'='*60}\n")
        print(f"File: {Path(args.file).resolve()}")
        print(f"Result: {'MATCH' if result.match else 'NO MATCH'}")
        print(f"Confidence: {result.confidence:.0%}")
        if not result.deepfake_analysis.is_human:
            print("\nRejected by liveness check:")
            for reason in result.deepfake_analysis.reasons:
                print(f"  • {reason}")
        if details is not None:
            print("\nComponents:")
            icon = "✓" if details.mean_passed else "✗"
            print(f"  {icon} mean similarity:     {details.mean_similarity:.3f}")
            icon = "✓" if details.variance_passed else "✗"
            print(f"  {icon} variance similarity: {details.variance_similarity:.3f}")
            print(f"    overall score:       {details.overall_score:.3f}")
        print(f"\n{'='*60}\n")

    sys.exit(0 if result.match else 1)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="voxgate",
        description="CLI tool for voice enrollment, verification and liveness checks"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    enroll_parser = subparsers.add_parser("enroll", help="Enroll a speaker")
    enroll_parser.add_argument("files", nargs="+", help="WAV recordings of the passphrase")
    enroll_parser.add_argument("-o", "--output", default="signature.json", help="Signature output path")
    enroll_parser.add_argument("-j", "--json", action="store_true", help="Output as JSON")
    enroll_parser.set_defaults(func=enroll_command)

    verify_parser = subparsers.add_parser("verify", help="Verify a recording")
    verify_parser.add_argument("file", help="WAV recording to verify")
    verify_parser.add_argument("-s", "--signature", required=True, help="Path to enrolled signature")
    verify_parser.add_argument("-t", "--threshold", type=float, default=0.92, help="Match threshold (default: 0.92)")
    verify_parser.add_argument("-j", "--json", action="store_true", help="Output as JSON")
    verify_parser.set_defaults(func=verify_command)

    detect_parser = subparsers.add_parser("detect", help="Check a recording for synthetic speech")
    detect_parser.add_argument("file", help="WAV recording to analyse")
    detect_parser.add_argument("-j", "--json", action="store_true", help="Output as JSON")
    detect_parser.set_defaults(func=detect_command)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
