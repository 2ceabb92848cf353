from rest_framework import serializers


class ScreenRequestSerializer(serializers.Serializer):
    text = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    file = serializers.FileField(required=False, allow_empty_file=False)
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    include_checks = serializers.BooleanField(required=False, default=True)
    include_evidence = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        has_text = bool((attrs.get('text') or '').strip())
        has_file = attrs.get('file') is not None
        if has_text and has_file:
            raise serializers.ValidationError('Provide either text or file, not both.')
        if not has_text and not has_file:
            raise serializers.ValidationError('Manuscript text or a .txt, .docx or .pdf file is required.')
        return attrs
