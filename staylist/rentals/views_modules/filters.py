from django_filters import rest_framework as df

from ..models import Booking, Review


class BookingFilter(df.FilterSet):
    status = df.ChoiceFilter(choices=Booking.STATUS_CHOICES, label='Status')
    listing = df.NumberFilter(field_name='listing_id', label='Listing id')
    starts_after = df.DateFilter(field_name='start_date', lookup_expr='gte', label='Stay starts on/after (YYYY-MM-DD)')
    starts_before = df.DateFilter(field_name='start_date', lookup_expr='lt', label='Stay starts before (YYYY-MM-DD)')

    class Meta:
        model = Booking
        fields = ['status', 'listing', 'starts_after', 'starts_before']


class ReviewFilter(df.FilterSet):
    listing = df.NumberFilter(field_name='listing_id', label='Listing id')
    author = df.CharFilter(field_name='author_id', label='Author id')
    stars_min = df.NumberFilter(field_name='stars', lookup_expr='gte', label='Stars min')
    stars_max = df.NumberFilter(field_name='stars', lookup_expr='lte', label='Stars max')

    class Meta:
        model = Review
        fields = ['listing', 'author', 'stars_min', 'stars_max']
