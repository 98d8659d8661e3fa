from rest_framework import serializers


class StrictFieldsMixin:
    """Reject payload keys the serializer does not declare."""

    def to_internal_value(self, data):
        if hasattr(data, "keys"):
            known = set(self.fields.keys())
            unknown = sorted(set(data.keys()) - known)
            if unknown:
                raise serializers.ValidationError(
                    {field: ["Unknown field."] for field in unknown}
                )
        return super().to_internal_value(data)
