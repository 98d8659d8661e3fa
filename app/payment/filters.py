import django_filters as filters
from django_filters.rest_framework import FilterSet

from .enums import PAYMENT_STATUS_OPTIONS, OWNER_TYPE_OPTIONS
from .models import PaymentHeader


class PaymentHeaderFilter(FilterSet):
    payment_status = filters.ChoiceFilter(choices=PAYMENT_STATUS_OPTIONS)
    owner_type = filters.ChoiceFilter(choices=OWNER_TYPE_OPTIONS)
    overdue = filters.BooleanFilter(method="filter_overdue")
    due_from = filters.DateFilter(field_name="due_date", lookup_expr="gte")
    due_to = filters.DateFilter(field_name="due_date", lookup_expr="lte")

    @staticmethod
    def filter_overdue(queryset, name, value):
        overdue_ids = PaymentHeader.objects.overdue().values("id")
        if value:
            return queryset.filter(id__in=overdue_ids)
        return queryset.exclude(id__in=overdue_ids)

    class Meta:
        model = PaymentHeader
        fields = ("payment_status", "owner_type", "overdue", "due_from", "due_to")
