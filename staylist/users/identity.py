"""
Adapter for the external identity provider.

The marketplace only ever needs ``{id, display_name, avatar_url}`` for a batch
of user ids. Lookups tolerate partial results: ids the provider does not know
are simply absent from the returned mapping.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from django.conf import settings
from django.utils.module_loading import import_string

from .models import UserProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: str
    display_name: str
    avatar_url: str | None = None

    def as_dict(self):
        return {"id": self.id, "display_name": self.display_name, "avatar_url": self.avatar_url}


class ProfileIdentityProvider:
    """Serves identities from the locally synced UserProfile rows."""

    def lookup(self, user_ids: Iterable[str]) -> dict[str, Identity]:
        ids = {uid for uid in user_ids if uid}
        if not ids:
            return {}
        profiles = UserProfile.objects.filter(user_id__in=ids)
        found = {
            p.user_id: Identity(id=p.user_id, display_name=p.display_name, avatar_url=p.avatar_url or None)
            for p in profiles
        }
        missing = len(ids) - len(found)
        if missing:
            logger.debug("identity lookup: %s of %s ids unresolved", missing, len(ids))
        return found


def get_identity_provider():
    path = getattr(settings, "IDENTITY_PROVIDER", "staylist.users.identity.ProfileIdentityProvider")
    return import_string(path)()


def lookup_identities(user_ids: Iterable[str]) -> dict[str, Identity]:
    return get_identity_provider().lookup(user_ids)
