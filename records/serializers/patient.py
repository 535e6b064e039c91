import bleach
from rest_framework import serializers

from records.models import Patient


class PatientSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source='first_name', max_length=150)
    lastName = serializers.CharField(source='last_name', max_length=150)
    dob = serializers.DateField(format='%Y-%m-%d', input_formats=['%Y-%m-%d'])
    gender = serializers.ChoiceField(choices=[c for c, _ in Patient.GENDER_CHOICES])
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Patient
        fields = ['id', 'firstName', 'lastName', 'dob', 'gender', 'createdAt', 'updatedAt']
        read_only_fields = ['id']

    def _clean_name(self, v, label):
        v = bleach.clean((v or '').strip(), tags=set(), strip=True)
        if not v:
            raise serializers.ValidationError(f'{label} is required')
        return v

    def validate_firstName(self, v):
        return self._clean_name(v, 'first name')

    def validate_lastName(self, v):
        return self._clean_name(v, 'last name')
