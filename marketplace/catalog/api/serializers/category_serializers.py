from rest_framework import serializers

from marketplace.catalog.domain.models.category import Category


class MinimalCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name"]
        read_only_fields = ["id", "name"]
