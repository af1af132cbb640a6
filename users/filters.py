"""django-filter filtersets for the employee directory."""

from common.choices import Department
from django.db.models import Q
from django_filters import rest_framework as filters

from .models import User


class EmployeeFilterSet(filters.FilterSet):
    search = filters.CharFilter(method="filter_search")
    department = filters.ChoiceFilter(choices=Department.choices)

    class Meta:
        model = User
        fields = ["department"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(first_name__icontains=value)
            | Q(last_name__icontains=value)
            | Q(email__icontains=value)
            | Q(username__icontains=value)
        )
