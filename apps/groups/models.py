# ==========================================
# apps/groups/models.py
# ==========================================

from django.db import models
import uuid


class MembershipStatus(models.TextChoices):
    INVITED = 'invited', 'Invited'
    ACCEPTED = 'accepted', 'Accepted'


class Group(models.Model):
    """Shared-expense circle of users."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    theme = models.CharField(max_length=50, blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_groups'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['created_at'], name='groups_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def has_member(self, user):
        """True for accepted members only; pending invitees are not members yet."""
        return self.memberships.filter(
            user=user,
            status=MembershipStatus.ACCEPTED
        ).exists()

    def is_admin(self, user):
        return self.memberships.filter(
            user=user,
            status=MembershipStatus.ACCEPTED,
            is_administrator=True
        ).exists()

    def get_administrator_ids(self):
        return list(
            self.memberships
            .filter(status=MembershipStatus.ACCEPTED, is_administrator=True)
            .values_list('user_id', flat=True)
        )


class GroupMembership(models.Model):
    """
    Relation between a user and a group.

    Lifecycle: created as ``invited``, moves once to ``accepted`` or is
    deleted on decline. Exclusion and group deletion delete the row.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    status = models.CharField(
        max_length=20,
        choices=MembershipStatus.choices,
        default=MembershipStatus.INVITED
    )
    is_administrator = models.BooleanField(default=False)
    invited_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sent_invitations'
    )
    invited_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'group_memberships'
        unique_together = [['user', 'group']]
        indexes = [
            models.Index(fields=['group', 'status'], name='membership_group_status_idx'),
            models.Index(fields=['user', 'status'], name='membership_user_status_idx'),
        ]
        ordering = ['invited_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name} ({self.status})"

    @property
    def has_accepted_invitation(self):
        return self.status == MembershipStatus.ACCEPTED

    @property
    def has_pending_invitation(self):
        return self.status == MembershipStatus.INVITED
