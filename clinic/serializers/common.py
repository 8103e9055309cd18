import bleach
from rest_framework import serializers

from ..services.pagination import DEFAULT_SIZE, MAX_SIZE, PageRequest

# Column ranges: 32-bit for IntegerField/PositiveIntegerField, 64-bit for BigAutoField ids
INT_MAX = 2147483647
ID_MAX = 9223372036854775807


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=0, max_value=INT_MAX, default=0)
    size = serializers.IntegerField(required=False, min_value=1, max_value=MAX_SIZE, default=DEFAULT_SIZE)
    sortBy = serializers.CharField(required=False, allow_blank=True)
    sortDir = serializers.CharField(required=False, allow_blank=True)

    def validate_sortDir(self, v):
        v = (v or '').strip().lower()
        if v and v not in ('asc', 'desc'):
            raise serializers.ValidationError('sortDir must be asc or desc')
        return v

    def page_request(self, sort_by: str = 'id', sort_dir: str = 'asc') -> PageRequest:
        vd = self.validated_data
        return PageRequest(
            page=vd.get('page', 0),
            size=vd.get('size', DEFAULT_SIZE),
            sort_by=(vd.get('sortBy') or '').strip() or sort_by,
            sort_dir=vd.get('sortDir') or sort_dir,
        )


def clean_text(v) -> str:
    """Trim and drop any markup from a free-text field."""
    return bleach.clean((v or '').strip(), tags=set(), strip=True)
