from rest_framework import serializers

from .models import Comment


class CommentSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = Comment
        fields = ['id', 'content', 'createdAt', 'updatedAt']
