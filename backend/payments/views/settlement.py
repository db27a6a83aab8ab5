"""
Settlement endpoints.

POST settles a set of orders; GET returns a stored settlement receipt.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core_backend.exceptions import NotFoundError
from ..models import Payment
from ..serializers import PaymentSerializer
from ..services import SettlementService

logger = logging.getLogger(__name__)


class SettlementView(APIView):
    hub = None

    def post(self, request):
        result = SettlementService(self.hub).settle(request.data, actor=request.user)
        return Response(result, status=status.HTTP_201_CREATED)


class PaymentDetailView(APIView):
    def get(self, request, pk):
        try:
            payment = Payment.objects.get(pk=pk)
        except Payment.DoesNotExist:
            raise NotFoundError(f"Payment {pk} not found.", code="payment_not_found")
        return Response(PaymentSerializer(payment).data)
