import pytest
from django.urls import reverse
from rest_framework import status
from apps.chat.models import Message
from apps.chat.services import post_message


@pytest.mark.django_db
class TestMessages:
    """Tests for /v1/messages/group"""

    def test_post_message(self, bob_client, group):
        data = {'group_id': str(group.id), 'content': 'Who bought the milk?'}
        response = bob_client.post(reverse('chat:send'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['sender_pseudonym'] == 'bob'
        assert response.data['content'] == 'Who bought the milk?'
        assert Message.objects.filter(group=group).count() == 1

    def test_post_blank_message(self, bob_client, group):
        data = {'group_id': str(group.id), 'content': ''}
        response = bob_client.post(reverse('chat:send'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'].startswith('content:')

    def test_post_as_outsider(self, carol_client, group):
        data = {'group_id': str(group.id), 'content': 'Hi'}
        response = carol_client.post(reverse('chat:send'), data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_messages(self, alice_client, group, alice, bob):
        post_message(group_id=group.id, sender=alice, content='first')
        post_message(group_id=group.id, sender=bob, content='second')

        url = reverse('chat:group-messages', args=[group.id])
        response = alice_client.get(url, {'limit': 1})

        assert response.status_code == status.HTTP_200_OK
        assert [message['content'] for message in response.data] == ['second']

    def test_list_negative_offset(self, alice_client, group):
        url = reverse('chat:group-messages', args=[group.id])
        response = alice_client.get(url, {'offset': -1})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_count(self, bob_client, group, alice):
        post_message(group_id=group.id, sender=alice, content='hello')

        response = bob_client.get(reverse('chat:count', args=[group.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'count': 1}
