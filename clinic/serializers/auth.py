from rest_framework import serializers

from ..models import User
from .common import clean_text


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})
    password = serializers.CharField(trim_whitespace=False, write_only=True)
    fullName = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    role = serializers.CharField()

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v

    def validate_password(self, v):
        if not v or not v.strip():
            raise serializers.ValidationError('Password is required')
        return v

    def validate_fullName(self, v):
        return clean_text(v)

    def validate_role(self, v):
        v = (v or '').strip().upper()
        valid = [c for c, _ in User.ROLE_CHOICES]
        if v not in valid:
            raise serializers.ValidationError(f"Invalid role. Valid values are: {', '.join(valid)}")
        return v


class RefreshSerializer(serializers.Serializer):
    refreshToken = serializers.CharField(error_messages={'blank': 'Refresh token is required', 'required': 'Refresh token is required'})


class UserProfileSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source='full_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'fullName', 'role']
        read_only_fields = fields
