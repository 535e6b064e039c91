import bleach
from rest_framework import serializers

from records.models import User

VALID_ROLES = {choice for choice, _ in User.ROLE_CHOICES}


def _clean(v):
    return bleach.clean((v or '').strip(), tags=set(), strip=True)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True, default='')
    password = serializers.CharField(required=False, allow_blank=True, default='', trim_whitespace=False)

    def validate(self, attrs):
        if not attrs.get('username', '').strip() or not attrs.get('password'):
            raise serializers.ValidationError('Username and password are required')
        attrs['username'] = attrs['username'].strip()
        return attrs


class RegisterSerializer(serializers.Serializer):
    """Registration payload.

    Checks run in a fixed order and stop at the first failure so the
    client always gets a single, specific message.
    """
    username = serializers.CharField(required=False, allow_blank=True, default='')
    password = serializers.CharField(required=False, allow_blank=True, default='', trim_whitespace=False)
    email = serializers.CharField(required=False, allow_blank=True, default='')
    firstName = serializers.CharField(required=False, allow_blank=True, default='')
    lastName = serializers.CharField(required=False, allow_blank=True, default='')
    role = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        username = attrs['username'].strip()
        password = attrs['password']
        email = attrs['email'].strip()
        first_name = _clean(attrs['firstName'])
        last_name = _clean(attrs['lastName'])
        role = attrs['role'].strip()

        if not username:
            raise serializers.ValidationError('username is required')
        if len(username) < 3:
            raise serializers.ValidationError('username must be at least 3 characters long')
        if not password:
            raise serializers.ValidationError('password is required')
        if len(password) < 6:
            raise serializers.ValidationError('password must be at least 6 characters long')
        if not email:
            raise serializers.ValidationError('email is required')
        if '@' not in email:
            raise serializers.ValidationError('invalid email format')
        if not first_name:
            raise serializers.ValidationError('first name is required')
        if not last_name:
            raise serializers.ValidationError('last name is required')
        if not role:
            raise serializers.ValidationError('role is required')
        if role not in VALID_ROLES:
            raise serializers.ValidationError('invalid role specified')

        return {
            'username': username,
            'password': password,
            'email': email,
            'first_name': first_name,
            'last_name': last_name,
            'role': role,
        }
