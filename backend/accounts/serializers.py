import re

from rest_framework import serializers
from django.contrib.auth import authenticate

from .models import User

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{6,}$")


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "name",
            "gender",
            "age",
            "role",
            "mobile_number",
            "created_at",
        ]
        read_only_fields = ["id", "role", "created_at"]


class UserContactSerializer(serializers.ModelSerializer):
    """Name and contact only; used when showing riders to a provider."""

    class Meta:
        model = User
        fields = ["id", "name", "mobile_number"]


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(username=data["username"], password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid username or password")
        return user


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6)
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150)
    gender = serializers.ChoiceField(choices=User.GENDER_CHOICES)
    age = serializers.IntegerField(min_value=18, max_value=100)
    mobile_number = serializers.RegexField(
        r"^\d{10}$",
        error_messages={"invalid": "Mobile number must be 10 digits"},
    )
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)

    class Meta:
        model = User
        fields = ['username', 'password', 'email', 'name', 'gender', 'age', 'mobile_number', 'role']

    def validate_password(self, value):
        if not PASSWORD_PATTERN.match(value):
            raise serializers.ValidationError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already exists")
        return value

    def validate_mobile_number(self, value):
        if User.objects.filter(mobile_number=value).exists():
            raise serializers.ValidationError("Mobile number already exists")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data['username'],
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
            gender=validated_data['gender'],
            age=validated_data['age'],
            mobile_number=validated_data['mobile_number'],
            role=validated_data.get('role', 'rider'),
        )


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
