from django.urls import path
from . import views

app_name = 'groups'

urlpatterns = [
    # Groups
    # GET    /v1/groups                     - List user's groups
    # POST   /v1/groups                     - Create group
    # GET    /v1/groups/{id}                - Get group details
    # PATCH  /v1/groups/{id}                - Update group (admin)
    # DELETE /v1/groups/{id}                - Delete group (admin)
    path('groups', views.groups, name='groups'),
    path('groups/sole-administrator', views.sole_administrator_groups, name='sole-administrator'),
    path('groups/<uuid:group_id>', views.group_detail, name='group-detail'),

    # Invitations
    path('groups/memberships', views.invite, name='invite'),
    path('groups/memberships/invitations', views.invitations, name='invitations'),
    path('groups/memberships/invitations/count', views.invitation_count, name='invitation-count'),

    # Members
    path(
        'groups/memberships/<uuid:group_id>/members',
        views.group_members,
        name='members'
    ),
    path(
        'groups/memberships/<uuid:group_id>/members/status',
        views.member_statuses,
        name='member-statuses'
    ),
    path(
        'groups/memberships/<uuid:group_id>/<uuid:user_id>',
        views.membership_detail,
        name='membership-detail'
    ),
]
