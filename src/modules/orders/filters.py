import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    customer_email = django_filters.CharFilter(
        field_name="customer_email", lookup_expr="iexact"
    )
    customer_name = django_filters.CharFilter(
        field_name="customer_name", lookup_expr="icontains"
    )
    start_date = django_filters.DateFilter(field_name="order_date", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="order_date", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "customer_email",
            "customer_name",
            "start_date",
            "end_date",
        ]
