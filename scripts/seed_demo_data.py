"""Utility script to seed a small demo social graph."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from fanout.application.use_cases.events import create_event
from fanout.application.use_cases.notifications import process_event
from fanout.domain.entities import EVENT_TYPES, User, UserPreferences, UserProfile
from fanout.infrastructure.database import SessionLocal, initialize_database
from fanout.infrastructure.repositories import UserRepository

DEMO_USERS = (
    ("u1", "alice", "Architect at Studio North"),
    ("u2", "bruno", "Interior designer"),
    ("u3", "chen", "Landscape architect"),
    ("u4", "dana", "Urban planner"),
)

# follower -> followee
DEMO_FOLLOWS = (
    ("u2", "u1"),
    ("u3", "u1"),
    ("u4", "u1"),
    ("u1", "u2"),
    ("u3", "u2"),
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed demo users, follow edges and sample events.",
    )
    parser.add_argument(
        "--with-events",
        action="store_true",
        help="Also record and fan out a few sample events.",
    )
    parser.add_argument(
        "--all-types",
        action="store_true",
        help="Subscribe demo users to every notification type, SHARE included.",
    )
    return parser.parse_args()


def _seed_users(repository: UserRepository, *, all_types: bool) -> list[User]:
    created: list[User] = []
    for user_id, username, company in DEMO_USERS:
        if repository.get(user_id) is not None:
            continue
        preferences = UserPreferences()
        if all_types:
            preferences.notification_types = list(EVENT_TYPES)
        created.append(
            repository.create(
                User(
                    user_id=user_id,
                    username=username,
                    email=f"{username}@example.com",
                    preferences=preferences,
                    profile=UserProfile(company=company),
                )
            )
        )
    for follower_id, followee_id in DEMO_FOLLOWS:
        repository.follow(follower_id, followee_id)
    return created


def _seed_events(session) -> int:
    samples = (
        ("POST_CREATE", "u1", None, {"post_id": "p1", "content": "New residential project"}),
        ("LIKE", "u2", "u1", {"post_id": "p1"}),
        ("COMMENT", "u3", "u1", {"post_id": "p1", "content": "Beautiful use of natural light"}),
        ("FOLLOW", "u4", "u2", {}),
        ("MENTION", "u2", None, {"post_id": "p2", "mentioned_users": ["u1", "u3"]}),
    )
    total = 0
    for event_type, source, target, data in samples:
        event = create_event(
            session,
            event_type=event_type,
            source_user_id=source,
            target_user_id=target,
            data=data,
        )
        total += len(process_event(session, event.event_id))
    return total


def main() -> None:
    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        created = _seed_users(UserRepository(session), all_types=args.all_types)
        notifications = _seed_events(session) if args.with_events else 0
    except (ValueError, SQLAlchemyError) as exc:
        session.rollback()
        raise SystemExit(f"Could not seed demo data: {exc}") from exc
    else:
        print(f"Users created: {len(created)}\nNotifications generated: {notifications}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
