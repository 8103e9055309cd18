from rest_framework import serializers

from ..models import Patient, phone_validator
from .common import INT_MAX, PageQuerySerializer, clean_text


class PatientSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Patient
        fields = ['id', 'name', 'age', 'gender', 'phone', 'email', 'createdAt']
        read_only_fields = fields


class PatientInputSerializer(serializers.Serializer):
    """Body of POST /patients and PUT /patients/{id}."""
    name = serializers.CharField(max_length=255, error_messages={'blank': 'Name is required', 'required': 'Name is required'})
    age = serializers.IntegerField(min_value=0, max_value=INT_MAX, error_messages={'min_value': 'Age must be positive', 'required': 'Age is required'})
    gender = serializers.CharField(max_length=32, error_messages={'blank': 'Gender is required', 'required': 'Gender is required'})
    phone = serializers.CharField(validators=[phone_validator], error_messages={'blank': 'Phone is required', 'required': 'Phone is required'})
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format', 'blank': 'Email is required', 'required': 'Email is required'})

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_gender(self, v):
        return clean_text(v)

    def validate_phone(self, v):
        return (v or '').strip()


class PatientSearchQuerySerializer(PageQuerySerializer):
    name = serializers.CharField(required=False, allow_blank=True)
    gender = serializers.CharField(required=False, allow_blank=True)
    minAge = serializers.IntegerField(required=False, min_value=0, max_value=INT_MAX)
    maxAge = serializers.IntegerField(required=False, min_value=0, max_value=INT_MAX)

    def validate(self, attrs):
        lo, hi = attrs.get('minAge'), attrs.get('maxAge')
        if lo is not None and hi is not None and lo > hi:
            raise serializers.ValidationError({'minAge': 'minAge must not exceed maxAge'})
        return attrs
