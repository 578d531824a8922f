from django.db.models import Q
from django_filters import rest_framework as df

from ..models import Listing


class ListingFilter(df.FilterSet):
    price_min = df.NumberFilter(field_name='price', lookup_expr='gte', label='Price per day min')
    price_max = df.NumberFilter(field_name='price', lookup_expr='lte', label='Price per day max')

    q    = df.CharFilter(method='filter_q', label='Search')
    tags = df.CharFilter(method='filter_tags', label='Tag (repeatable, all must match)')
    mine = df.BooleanFilter(method='filter_mine', label='Only my listings')

    def filter_q(self, queryset, name, value):
        terms = [t.strip() for t in (value or "").split() if t.strip()]
        for term in terms:
            queryset = queryset.filter(
                Q(title__icontains=term) |
                Q(location__icontains=term) |
                Q(country__icontains=term)
            )
        return queryset

    def filter_tags(self, queryset, name, value):
        """
        ?tags=SUV&tags=Electric keeps listings carrying every given tag.
        Tags are stored as a JSON list, so each one is matched as a quoted string.
        """
        req = getattr(self, 'request', None)
        wanted = req.query_params.getlist('tags') if req else [value]
        for tag in {t.strip() for t in wanted if t and t.strip()}:
            queryset = queryset.filter(tags__icontains=f'"{tag}"')
        return queryset

    def filter_mine(self, queryset, name, value):
        """Return only listings owned by the current authenticated user."""
        if not value:
            return queryset

        req = getattr(self, 'request', None)
        user = getattr(req, 'user', None)

        if not user or not user.is_authenticated:
            return queryset.none()

        return queryset.filter(owner=user)

    class Meta:
        model = Listing
        fields = ['q', 'tags', 'price_min', 'price_max', 'mine']
