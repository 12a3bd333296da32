# apps/analytics/serializers.py
from rest_framework import serializers


class BestSellerSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    images = serializers.ListField(child=serializers.CharField())
    total_sold = serializers.IntegerField()


class LowStockSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    stock = serializers.IntegerField()
    images = serializers.ListField(child=serializers.CharField())


class DashboardSerializer(serializers.Serializer):
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_orders = serializers.IntegerField()
    today_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    best_selling_products = BestSellerSerializer(many=True)
    low_stock_products = LowStockSerializer(many=True)
