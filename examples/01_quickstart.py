#!/usr/bin/env python3
"""
Findr Quickstart Example

Shows the basic flow: sign up, capture a photo, look at the stats.
Runs without any hosted backend: sightings go to an in-memory store and,
without a classifier API key, captures fall back to manual entry.

Usage:
    python examples/01_quickstart.py path/to/photo.jpg
    FINDR_GEMINI_API_KEY=... python examples/01_quickstart.py path/to/photo.jpg
"""

import asyncio
import sys
import tempfile

from findr import CaptureStatus, Findr, SightingDraft, configure_logging, get_settings


async def main(photo: str) -> None:
    """Capture one photo and print the resulting stats."""
    configure_logging("WARNING")

    with tempfile.TemporaryDirectory() as data_dir:
        settings = get_settings(database_url="memory://", data_dir=data_dir)

        async with Findr.from_settings(settings) as app:
            user = await app.identity.sign_up("ana@example.com", "s3cret", "ana")
            print(f"✓ Signed up as {user.username} ({user.id})")

            outcome = await app.pipeline.capture(photo, user.id, 40.7128, -74.0060)
            if outcome.status is CaptureStatus.LOGGED:
                s = outcome.sighting
                print(f"✓ Logged {s.name} ({s.confidence}% confident, {s.origin.value})")
            else:
                print(f"✗ {outcome.status.value}, logging manually instead")
                draft = outcome.draft or SightingDraft(
                    user_id=user.id, name="Unidentified", latitude=40.7128, longitude=-74.0060
                )
                await app.pipeline.log_manual(draft, outcome.classification, photo)

            stats = app.stats_for(user.id)
            print(f"✓ Sightings: {stats.total}, streak: {stats.streak}, score: {stats.score}")

            earned = [status.badge.name for status in app.badges_for(user.id) if status.earned]
            print(f"✓ Badges: {', '.join(earned) or 'none yet'}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit(__doc__)
    asyncio.run(main(sys.argv[1]))
