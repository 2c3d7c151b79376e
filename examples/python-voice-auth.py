import os
import sys
from pathlib import Path

# Add python directory to path to import voxgate
sys.path.append(os.path.join(os.path.dirname(__file__), '../python'))

from voxgate import VoiceAuthenticator, load_audio, serialize_signature


def main():
    print("--- Voice Enrollment and Verification (Python) ---")

    # Paths
    base_dir = Path(__file__).parent.parent
    speaker_dir = base_dir / "test-data" / "speaker-a"
    takes = [speaker_dir / f"take{i}.wav" for i in (1, 2, 3)]
    probe = speaker_dir / "take4.wav"
    impostor = base_dir / "test-data" / "speaker-b" / "take1.wav"

    missing = [p for p in takes + [probe, impostor] if not p.exists()]
    if missing:
        print("Test data not found! Run scripts/generate-test-data.py first.")
        for path in missing:
            print(f"  missing: {path}")
        sys.exit(1)

    auth = VoiceAuthenticator()

    enrollment = auth.enroll([load_audio(p.read_bytes()) for p in takes])
    stored = serialize_signature(enrollment.signature)
    print(f"Enrolled from {enrollment.samples_used} takes ({len(stored)} bytes stored)")

    for label, path in (("same speaker", probe), ("other speaker", impostor)):
        result = auth.verify_serialized(load_audio(path.read_bytes()), stored)
        print(f"\n[{label}: {path.name}]")
        print(f"Match: {result.match}")
        print(f"Confidence: {result.confidence:.3f}")
        if result.reason:
            print(f"Reason: {result.reason}")


if __name__ == "__main__":
    main()
