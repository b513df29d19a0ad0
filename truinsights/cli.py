#!/usr/bin/env python3
"""
TruInsights command line client.

Records a journal from the default microphone and submits it to the
backend, or lists recent journals.

Usage:
    truinsights record --email me@example.com
    truinsights journals --token <access-token>
"""

import argparse
import getpass
import os
import sys

from truinsights.core.exceptions import DeviceUnavailable, RecorderBusy
from truinsights.core.utils import format_duration, mood_label
from truinsights.services.audio import Recorder, RecorderState, create_capture
from truinsights.ui.api_client import APIClient, APIError

RECORD_HELP = """
Commands:
  [Enter]  start / stop recording
  p        pause / resume
  s        submit the stopped recording
  d        discard the current recording
  q        quit
"""


def authenticate(client: APIClient, args: argparse.Namespace) -> str:
    """Return an access token from --token, $TRUINSIGHTS_TOKEN or a sign-in prompt."""
    token = args.token or os.environ.get("TRUINSIGHTS_TOKEN")
    if token:
        return token
    email = args.email or input("Email: ").strip()
    password = getpass.getpass("Password: ")
    return client.sign_in(email, password)["access_token"]


def print_submission(result: dict) -> None:
    journal = result["journal"]
    print(f"\nJournal saved: {journal['id']}")
    if result.get("transcription_error"):
        print(f"  Transcription failed: {result['transcription_error']}")
        return
    print(f"  Transcript: {journal['transcript']}")
    if result.get("extraction_error"):
        print(f"  Insight extraction failed: {result['extraction_error']}")
        return
    insights = journal["insights"]
    print(
        f"  Energy {insights['energy_level']}/10, "
        f"difficulty {insights['difficulty_rating']}/10, mood {mood_label(insights['mood'])}"
    )
    if insights["tags"]:
        print(f"  Tags: {', '.join(insights['tags'])}")


def record(client: APIClient, token: str, recorder: Recorder) -> int:
    """Interactive record/pause/stop/submit loop."""
    print(RECORD_HELP)
    while True:
        state = recorder.state
        prompt = f"[{state.value} {format_duration(recorder.elapsed_seconds)}] > "
        try:
            command = input(prompt).strip().lower()
        except EOFError:
            command = "q"

        try:
            if command == "":
                if state is RecorderState.idle:
                    recorder.start()
                elif state in (RecorderState.recording, RecorderState.paused):
                    artifact = recorder.stop()
                    print(f"Stopped after {format_duration(artifact.duration_seconds)}.")
                    if artifact.playback_path:
                        print(f"Playback file: {artifact.playback_path}")
                else:
                    print("Submit (s) or discard (d) the current recording first.")
            elif command == "p":
                if state is RecorderState.recording:
                    recorder.pause()
                else:
                    recorder.resume()
            elif command == "s":
                artifact = recorder.recording
                if artifact is None:
                    print("Nothing to submit; stop a recording first.")
                    continue
                print("Submitting...")
                result = client.submit_journal(
                    token,
                    artifact.data,
                    artifact.mime_type,
                    artifact.duration_seconds,
                    filename=artifact.playback_path.name if artifact.playback_path else "journal.wav",
                )
                print_submission(result)
                recorder.discard()
            elif command == "d":
                recorder.discard()
                print("Discarded.")
            elif command == "q":
                recorder.discard()
                return 0
            else:
                print(RECORD_HELP)
        except (DeviceUnavailable, RecorderBusy) as exc:
            print(f"Error: {exc.detail}")
        except APIError as exc:
            print(f"Error saving journal: {exc.message}")


def list_journals(client: APIClient, token: str, limit: int) -> int:
    stats = client.get_stats(token)
    average = stats.get("average_energy")
    print(
        f"Total: {stats['total_journals']}  This week: {stats['this_week']}  "
        f"Avg energy: {f'{average:.1f}' if average is not None else '-'}\n"
    )
    journals = client.list_journals(token, limit=limit)
    if not journals:
        print("No journals yet.")
    for journal in journals:
        insights = journal.get("insights")
        energy = f"energy {insights['energy_level']}/10" if insights else "unprocessed"
        duration = format_duration(journal["audio_duration_seconds"])
        print(f"{journal['created_at'][:16]}  {duration:>6}  {energy:<14} {journal['id']}")
        if journal.get("transcript"):
            print(f"    {journal['transcript'][:100]}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="TruInsights voice journal client")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("TRUINSIGHTS_API_URL", "http://localhost:8000"),
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument("--token", help="Access token (or set TRUINSIGHTS_TOKEN)")
    parser.add_argument("--email", help="Sign in with this email (prompts for password)")

    sub = parser.add_subparsers(dest="command", required=True)
    rec = sub.add_parser("record", help="Record and submit a journal")
    rec.add_argument("--device", help="Input device name or index")
    rec.add_argument("--sample-rate", type=int, default=16000)
    ls = sub.add_parser("journals", help="List recent journals")
    ls.add_argument("--limit", type=int, default=5)

    args = parser.parse_args()
    client = APIClient(base_url=args.api_url)

    try:
        token = authenticate(client, args)
        if args.command == "record":
            device = int(args.device) if args.device and args.device.isdigit() else args.device
            capture = create_capture(sample_rate=args.sample_rate, device=device)
            return record(client, token, Recorder(capture))
        return list_journals(client, token, args.limit)
    except APIError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
