"""Persistence layer for user data consumed by the fan-out core."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fanout.domain.entities import User, UserPreferences, UserProfile
from fanout.infrastructure.models import UserModel, user_follow_table
from fanout.utils import ensure_utc, to_storage_datetime


class UserRepository:
    """Read users and their relationships; create users for seeding."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str, *, include_edges: bool = False) -> User | None:
        """Return the user; follow edges are only loaded when ``include_edges``."""

        model = self.session.get(UserModel, user_id)
        if model is None:
            return None
        if not include_edges:
            return self._to_entity(model)
        followers, following = self._edges([model.user_id])
        return self._to_entity(
            model,
            followers=followers.get(model.user_id, []),
            following=following.get(model.user_id, []),
        )

    def get_map_by_ids(self, user_ids: Sequence[str]) -> dict[str, User]:
        if not user_ids:
            return {}
        models = self.session.scalars(
            select(UserModel).where(UserModel.user_id.in_(set(user_ids)))
        ).all()
        return {model.user_id: self._to_entity(model) for model in models}

    def list_follower_ids(self, user_id: str) -> list[str]:
        """Return identities of users whose following set contains ``user_id``."""

        query = (
            select(user_follow_table.c.follower_id)
            .where(user_follow_table.c.followee_id == user_id)
            .order_by(user_follow_table.c.follower_id)
        )
        return list(self.session.scalars(query).all())

    def create(self, user: User) -> User:
        model = UserModel(user_id=user.user_id)
        self._apply_entity_to_model(model, user)
        if user.created_at is not None:
            model.created_at = to_storage_datetime(user.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def follow(self, follower_id: str, followee_id: str) -> bool:
        """Record that ``follower_id`` follows ``followee_id``; ``False`` if it already did."""

        if follower_id == followee_id:
            raise ValueError("Users cannot follow themselves")
        try:
            self.session.execute(
                user_follow_table.insert().values(
                    follower_id=follower_id, followee_id=followee_id
                )
            )
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            return False
        return True

    def unfollow(self, follower_id: str, followee_id: str) -> bool:
        """Remove the follow edge; ``False`` if there was none."""

        result = self.session.execute(
            delete(user_follow_table).where(
                user_follow_table.c.follower_id == follower_id,
                user_follow_table.c.followee_id == followee_id,
            )
        )
        self.session.commit()
        return bool(result.rowcount)

    def _edges(
        self, user_ids: Sequence[str]
    ) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
        followers: defaultdict[str, list[str]] = defaultdict(list)
        following: defaultdict[str, list[str]] = defaultdict(list)
        if not user_ids:
            return followers, following
        rows = self.session.execute(
            select(user_follow_table.c.follower_id, user_follow_table.c.followee_id)
            .where(
                user_follow_table.c.follower_id.in_(user_ids)
                | user_follow_table.c.followee_id.in_(user_ids)
            )
            .order_by(user_follow_table.c.follower_id, user_follow_table.c.followee_id)
        ).all()
        for follower_id, followee_id in rows:
            followers[followee_id].append(follower_id)
            following[follower_id].append(followee_id)
        return followers, following

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.username = user.username
        model.email = user.email.strip().lower()
        model.email_notifications = user.preferences.email_notifications
        model.push_notifications = user.preferences.push_notifications
        model.notification_types = list(user.preferences.notification_types)
        model.bio = user.profile.bio
        model.location = user.profile.location
        model.company = user.profile.company
        model.website = user.profile.website

    @staticmethod
    def _to_entity(
        model: UserModel,
        *,
        followers: Sequence[str] = (),
        following: Sequence[str] = (),
    ) -> User:
        return User(
            user_id=model.user_id,
            username=model.username,
            email=model.email,
            preferences=UserPreferences(
                email_notifications=model.email_notifications,
                push_notifications=model.push_notifications,
                notification_types=list(model.notification_types or []),
            ),
            profile=UserProfile(
                bio=model.bio,
                location=model.location,
                company=model.company,
                website=model.website,
            ),
            followers=list(followers),
            following=list(following),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["UserRepository"]
