from django.db import models
from django.utils.translation import gettext_lazy as _


class UserProfile(models.Model):
    """
    Local copy of a user record owned by the external identity provider.
    Refreshed from the provider; rentals tables never reference it by FK.
    """
    user_id = models.CharField(_("provider user id"), max_length=64, unique=True)
    username = models.CharField(_("username"), max_length=150, blank=True, default="")
    first_name = models.CharField(_("first name"), max_length=150, blank=True, default="")
    last_name = models.CharField(_("last name"), max_length=150, blank=True, default="")
    avatar_url = models.URLField(_("avatar url"), max_length=500, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["user_id"]

    def __str__(self):
        return self.display_name or self.user_id

    @property
    def display_name(self):
        return self.username or f"{self.first_name} {self.last_name}".strip()
