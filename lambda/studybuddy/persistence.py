"""
Persistence layer for the Study Buddy skill.

This module provides an abstraction over DynamoDB storage using the
ASK SDK persistence adapter. All data for a user is stored in a single
DynamoDB item with the user_id as partition key, split into independent
attribute keys:
- Student profile (grade, board, language, onboarding step)
- Chapter progress (the whole progress map)
- Mistakes (the list of open mistakes)
- Daily mission (today's mission and its completion state)

Storage is best effort: failed or corrupted loads degrade to "no data"
and failed saves are logged and dropped, never raised to the caller.
"""

import logging
from typing import TYPE_CHECKING, Any

from studybuddy.models import StudentProfile

if TYPE_CHECKING:
    from ask_sdk_core.handler_input import HandlerInput

logger = logging.getLogger(__name__)

# Attribute keys in the persistent store
ATTR_STUDENT_PROFILE = "student_profile"
ATTR_CHAPTER_PROGRESS = "chapter_progress"
ATTR_MISTAKES = "student_mistakes"
ATTR_DAILY_MISSION = "daily_mission"


class PersistenceManager:
    """
    Manages persistence of user data for the Study Buddy skill.

    Exposes a small key-value interface (load, save, commit) that the
    progress, mistake and mission stores are built on, plus helpers for
    the student profile.
    """

    def __init__(self, handler_input: "HandlerInput"):
        """
        Initialize the persistence manager.

        Args:
            handler_input: The ASK SDK handler input containing
                          the attributes manager.
        """
        self._handler_input = handler_input
        self._attributes_manager = handler_input.attributes_manager
        self._persistent_attrs: dict | None = None
        self._dirty = False  # Track if we have unsaved changes

    def _get_user_id(self) -> str:
        """Get the unique user ID from the request."""
        return self._handler_input.request_envelope.context.system.user.user_id

    def _load_persistent_attributes(self) -> dict:
        """
        Lazy-load persistent attributes from DynamoDB.

        Returns:
            Dictionary of persistent attributes, empty if loading failed.
        """
        if self._persistent_attrs is None:
            try:
                attrs = self._attributes_manager.persistent_attributes
            except Exception:
                logger.warning("Could not load persistent attributes", exc_info=True)
                attrs = None
            self._persistent_attrs = attrs if isinstance(attrs, dict) else {}
        return self._persistent_attrs

    def load(self, key: str) -> Any | None:
        """
        Load the blob stored under a key.

        Returns:
            The stored value, or None if absent.
        """
        return self._load_persistent_attributes().get(key)

    def save(self, key: str, value: Any) -> None:
        """Stage a blob under a key. Call commit() to write it."""
        attrs = self._load_persistent_attributes()
        attrs[key] = value
        self._dirty = True

    def delete(self, key: str) -> None:
        """Remove a key from the store. Call commit() to write it."""
        attrs = self._load_persistent_attributes()
        if key in attrs:
            del attrs[key]
            self._dirty = True

    def commit(self) -> None:
        """
        Commit all pending changes to DynamoDB.

        Failures are logged and the changes dropped; tracking is best effort.
        """
        if not self._dirty or self._persistent_attrs is None:
            return
        try:
            self._attributes_manager.persistent_attributes = self._persistent_attrs
            self._attributes_manager.save_persistent_attributes()
        except Exception:
            logger.error("Could not save persistent attributes", exc_info=True)
        self._dirty = False

    def get_student_profile(self) -> StudentProfile:
        """
        Load or create the student profile.

        Returns:
            StudentProfile for the current user, defaults if none is stored
            or the stored one is unreadable.
        """
        data = self.load(ATTR_STUDENT_PROFILE)
        if isinstance(data, dict):
            try:
                return StudentProfile.from_dict(data)
            except (KeyError, TypeError, ValueError):
                logger.warning("Discarding unreadable student profile", exc_info=True)

        return StudentProfile(user_id=self._get_user_id())

    def save_student_profile(self, profile: StudentProfile) -> None:
        """Save the student profile to persistent storage."""
        self.save(ATTR_STUDENT_PROFILE, profile.to_dict())

    def reset_student_profile(self) -> StudentProfile:
        """Remove the stored profile and return a fresh default one."""
        self.delete(ATTR_STUDENT_PROFILE)
        self.commit()
        return StudentProfile(user_id=self._get_user_id())

    def is_first_time_user(self) -> bool:
        """
        Check if this is a first-time user.

        Returns:
            True if the user has no stored profile.
        """
        return self.load(ATTR_STUDENT_PROFILE) is None


def get_persistence_manager(handler_input: "HandlerInput") -> PersistenceManager:
    """
    Factory function to get a PersistenceManager.

    Args:
        handler_input: The ASK SDK handler input.

    Returns:
        A PersistenceManager instance.
    """
    return PersistenceManager(handler_input)
