# products/views/category.py

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import ledger_error_response, request_actor
from core.exceptions import LedgerError
from products.models import Category
from products.serializers.category import CategorySerializer
from products.services import create_category, delete_category, rename_category


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API

    Writes go through the registry services so each one is audited.
    Deleting a category keeps its products (category cleared).
    """

    queryset = Category.objects.all().order_by("name")
    serializer_class = CategorySerializer
    permission_classes = [IsAuthenticated]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            category = create_category(
                name=serializer.validated_data["name"], **request_actor(request)
            )
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(self.get_serializer(category).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            category = rename_category(
                kwargs.get("pk"), name=serializer.validated_data["name"], **request_actor(request)
            )
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(self.get_serializer(category).data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_category(kwargs.get("pk"), **request_actor(request))
        except LedgerError as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
