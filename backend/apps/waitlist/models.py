from django.db import models


class WaitlistEntry(models.Model):
    """A person waiting for the marketplace to open to them."""
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    joined_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "waitlist"
        ordering = ["-joined_at", "-id"]
        verbose_name_plural = "Waitlist entries"

    def __str__(self):
        return f"{self.name} <{self.email}>"
