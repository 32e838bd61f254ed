from rest_framework import serializers

from services.verification.extractor import IDENTIFIER_EXTRACTORS


class DocumentCheckSerializer(serializers.Serializer):
    """Typed identifier plus the photo it should appear on"""
    document_class = serializers.ChoiceField(
        choices=sorted(IDENTIFIER_EXTRACTORS),
        error_messages={"invalid_choice": "Unsupported document class."},
    )
    identifier = serializers.CharField(max_length=30)
    photo = serializers.CharField(trim_whitespace=False)
