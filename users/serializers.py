"""
User representations, camelCase on the wire.
"""

from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = User
        fields = ['id', 'firstName', 'lastName', 'email', 'age', 'createdAt', 'updatedAt']


class UserSummarySerializer(serializers.ModelSerializer):
    """What ``GET /users`` lists: enough to pick an id."""

    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')

    class Meta:
        model = User
        fields = ['id', 'firstName', 'lastName']
