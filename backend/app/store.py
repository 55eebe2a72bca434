from __future__ import annotations
import logging
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from .models import ProfileRecord
from .schemas import UserProfile

logger = logging.getLogger(__name__)


class ProfileStore:
	"""Durable read/replace access to one JSON profile blob per username.

	Writes are whole-profile replacements with last-write-wins semantics;
	callers are expected to debounce repeated triggers.
	"""

	def __init__(self, db: Session) -> None:
		self.db = db

	def get(self, username: str) -> Optional[UserProfile]:
		row = self.db.get(ProfileRecord, username)
		if row is None:
			return None
		try:
			return UserProfile.model_validate_json(row.profile_json)
		except ValidationError:
			logger.exception("Stored profile for %s is corrupt; ignoring it", username)
			return None

	def create(self, username: str, **fields: Any) -> UserProfile:
		profile = UserProfile(username=username, **fields)
		return self.replace(profile)

	def get_or_create(self, username: str) -> UserProfile:
		return self.get(username) or self.create(username)

	def replace(self, profile: UserProfile) -> UserProfile:
		payload = profile.model_dump_json(by_alias=True)
		row = self.db.get(ProfileRecord, profile.username)
		if row is None:
			row = ProfileRecord(username=profile.username, profile_json=payload)
		else:
			row.profile_json = payload
		self.db.add(row)
		self.db.commit()
		return profile

	def delete(self, username: str) -> bool:
		row = self.db.get(ProfileRecord, username)
		if row is None:
			return False
		self.db.delete(row)
		self.db.commit()
		return True
