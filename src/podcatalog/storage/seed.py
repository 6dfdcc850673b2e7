"""Fixed sample rows inserted into an empty catalog."""

from datetime import datetime, timedelta

from podcatalog.storage.tables import EpisodeRecord, PodcastRecord, UserRecord

SEED_USERS = [
    {"id": 1, "username": "johndoe", "email": "john@example.com"},
    {"id": 2, "username": "janesmith", "email": "jane@example.com"},
]

SEED_PODCASTS = [
    {
        "id": 1,
        "title": "Tech Talk",
        "description": "Weekly conversations about software, hardware and the people who build them.",
        "cover_image_url": "https://example.com/covers/tech-talk.jpg",
        "author_id": 1,
    },
    {
        "id": 2,
        "title": "Mindful Living",
        "description": "Practical advice for a calmer, more focused everyday life.",
        "cover_image_url": "https://example.com/covers/mindful-living.jpg",
        "author_id": 2,
    },
    {
        "id": 3,
        "title": "Code Review",
        "description": "Two developers read real-world code out loud and argue about it.",
        "cover_image_url": None,
        "author_id": 1,
    },
]

# (podcast_id, title, description, audio file, duration seconds, days before seeding)
SEED_EPISODES = [
    (1, "The Future of AI", "What large language models mean for working engineers.", "tech-talk-1.mp3", 1800, 14),
    (1, "Web Development Trends", "Frameworks, build tools and what is worth learning this year.", "tech-talk-2.mp3", 2400, 7),
    (2, "Starting a Meditation Practice", "Ten minutes a day and how to keep it up.", "mindful-living-1.mp3", 1500, 10),
    (3, "Reading Legacy Code", "Strategies for finding your way around an unfamiliar codebase.", "code-review-1.mp3", 3000, 3),
]

AUDIO_BASE_URL = "https://example.com/audio/"


def build_seed_records(
    now: datetime,
) -> tuple[list[UserRecord], list[PodcastRecord], list[EpisodeRecord]]:
    """Build the seed rows, one group per table in foreign-key order.

    Args:
        now: Reference time; episode publish dates are spread out before it.

    Returns:
        Users, podcasts and episodes ready to be added to a session.
    """
    users = [UserRecord(**user) for user in SEED_USERS]
    podcasts = [PodcastRecord(**podcast) for podcast in SEED_PODCASTS]

    episodes: list[EpisodeRecord] = []
    for episode_id, (podcast_id, title, description, audio_file, duration, days_ago) in enumerate(
        SEED_EPISODES, 1
    ):
        episodes.append(
            EpisodeRecord(
                id=episode_id,
                podcast_id=podcast_id,
                title=title,
                description=description,
                audio_url=AUDIO_BASE_URL + audio_file,
                duration=duration,
                published_at=now - timedelta(days=days_ago),
            )
        )

    return users, podcasts, episodes
