# serializers.py
from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from account.models import User, Role


class UserRegistrationSerializer(serializers.ModelSerializer):
    password2 = serializers.CharField(style={'input_type': 'password'}, write_only=True)
    role = serializers.ChoiceField(choices=Role.ROLE_CHOICES, default=Role.ADMIN, write_only=True)

    class Meta:
        model = User
        fields = ['email', 'name', 'phone', 'password', 'password2', 'role']
        extra_kwargs = {
            'password': {'write_only': True}
        }

    # Validating Password and Confirm Password while Registration
    def validate(self, attrs):
        password = attrs.get('password')
        password2 = attrs.get('password2')
        if password != password2:
            raise serializers.ValidationError("Password and Confirm Password doesn't match")
        validate_password(password)
        return attrs

    def create(self, validated_data):
        role, _ = Role.objects.get_or_create(name=validated_data.pop('role'))
        user = User.objects.create_user(
            email=validated_data['email'],
            name=validated_data['name'],
            password=validated_data['password'],
            role=role,
        )
        if validated_data.get('phone'):
            user.phone = validated_data['phone']
            user.save(update_fields=['phone'])
        return user


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(style={'input_type': 'password'})


class UserProfileSerializer(serializers.ModelSerializer):
    role = serializers.CharField(source='role_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'phone', 'role']
        read_only_fields = ['id', 'email']


class UserChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(max_length=255, style={'input_type': 'password'}, write_only=True)
    new_password = serializers.CharField(max_length=255, style={'input_type': 'password'}, write_only=True)

    def validate(self, attrs):
        current_password = attrs.get('current_password')
        new_password = attrs.get('new_password')
        user = self.context.get('user')

        if not user.check_password(current_password):
            raise serializers.ValidationError({"current_password": "Current password is not correct"})

        if current_password == new_password:
            raise serializers.ValidationError({"new_password": "New password cannot be same as current password"})

        validate_password(new_password, user)
        return attrs

    def save(self, **kwargs):
        user = self.context.get('user')
        user.set_password(self.validated_data['new_password'])
        user.save()
        return user
