import django_filters

from .models import Product


class ProductFilter(django_filters.FilterSet):
    """
    Storefront query params. Invalid or negative prices fail validation (400).
    """
    category = django_filters.CharFilter(method="filter_category")
    minPrice = django_filters.NumberFilter(field_name="price", lookup_expr="gte", min_value=0)
    maxPrice = django_filters.NumberFilter(field_name="price", lookup_expr="lte", min_value=0)
    featured = django_filters.CharFilter(method="filter_featured")

    class Meta:
        model = Product
        fields = ["category", "minPrice", "maxPrice", "featured"]

    def filter_category(self, queryset, name, value):
        if value == "all":
            return queryset
        return queryset.filter(category=value)

    def filter_featured(self, queryset, name, value):
        if value == "true":
            return queryset.filter(featured=True)
        return queryset
