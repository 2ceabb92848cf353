import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from screener.auth import ApiTokenPermission
from screener.serializers import ScreenRequestSerializer
from screener.services import build_screen_response, screen_manuscript
from screener.text_sources import TextExtractionError, clip_text, ensure_upload_size, extract_text

logger = logging.getLogger(__name__)

DEFAULT_TEXT_TITLE = 'Manuscript'


def _extraction_error_response(error: TextExtractionError) -> Response:
    return Response(
        {
            'error': error.code,
            'detail': error.message,
        },
        status=error.http_status,
    )


class HealthAPIView(APIView):
    throttle_scope = 'default'
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({'status': 'ok', 'timestamp': timezone.now(), 'version': settings.APP_VERSION})


class ScreenAPIView(APIView):
    throttle_scope = 'screen'
    authentication_classes = []
    permission_classes = [ApiTokenPermission]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def post(self, request):
        serializer = ScreenRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = serializer.validated_data
        upload = payload.get('file')
        title = (payload.get('title') or '').strip()

        if upload is not None:
            try:
                ensure_upload_size(upload.size)
                text = extract_text(upload.name, upload.read())
            except TextExtractionError as error:
                logger.info('Rejected manuscript upload %s: %s', upload.name, error.code)
                return _extraction_error_response(error)
            title = title or upload.name
        else:
            text = clip_text(payload['text'])
            title = title or DEFAULT_TEXT_TITLE

        logger.info('Screening %s (auth=%s).', title, request.screener_auth_mode)
        verdict = screen_manuscript(text, title=title)
        response_payload = build_screen_response(
            verdict,
            include_checks=payload.get('include_checks', True),
            include_evidence=payload.get('include_evidence', False),
        )
        return Response(response_payload, status=status.HTTP_200_OK)
