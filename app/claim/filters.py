import django_filters as filters
from django_filters.rest_framework import FilterSet

from .enums import CLAIM_STATUS_OPTIONS
from .models import ExpenseClaim


class ExpenseClaimFilter(FilterSet):
    status = filters.ChoiceFilter(choices=CLAIM_STATUS_OPTIONS)
    division = filters.CharFilter(lookup_expr="iexact")
    start_date = filters.DateFilter(field_name="submission_date", lookup_expr="gte")
    end_date = filters.DateFilter(field_name="submission_date", lookup_expr="lte")

    class Meta:
        model = ExpenseClaim
        fields = ("status", "division", "approver", "start_date", "end_date")
