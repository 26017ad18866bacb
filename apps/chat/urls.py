from django.urls import path
from . import views

app_name = 'chat'

urlpatterns = [
    # POST /v1/messages/group                             - Post message
    # GET  /v1/messages/group/{group}?offset=&limit=      - Page of messages
    # GET  /v1/messages/group/{group}/count               - Message count
    path('messages/group', views.send, name='send'),
    path('messages/group/<uuid:group_id>', views.group_messages, name='group-messages'),
    path('messages/group/<uuid:group_id>/count', views.message_count, name='count'),
]
