from rest_framework import serializers

from ..models import Doctor
from .common import PageQuerySerializer, clean_text


class DoctorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ['id', 'name', 'specialization', 'phone', 'email', 'active']
        read_only_fields = fields


class DoctorInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    specialization = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=20)
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})
    # Omitted on create -> active; omitted on update -> unchanged
    active = serializers.BooleanField(required=False, allow_null=True, default=None)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_specialization(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Specialization is required')
        return v

    def validate_phone(self, v):
        return (v or '').strip()


class DoctorSearchQuerySerializer(PageQuerySerializer):
    name = serializers.CharField(required=False, allow_blank=True)
    specialization = serializers.CharField(required=False, allow_blank=True)
    active = serializers.BooleanField(required=False, allow_null=True, default=None)
