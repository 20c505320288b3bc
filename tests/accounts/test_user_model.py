import pytest

from accounts.models import User


@pytest.mark.django_db
class TestUserModel:
    def test_create_user_defaults_to_sales_role(self):
        user = User.objects.create_user(email="Someone@Example.COM", password="testpass123")

        assert user.role == User.Role.SALES
        assert user.email == "Someone@example.com"
        assert user.is_privileged is False
        assert user.check_password("testpass123")

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="testpass123")

    def test_create_superuser_is_superadmin(self):
        user = User.objects.create_superuser(email="root@test.com", password="testpass123")

        assert user.role == User.Role.SUPERADMIN
        assert user.is_staff is True
        assert user.is_superuser is True
        assert user.is_privileged is True

    def test_create_superuser_rejects_non_staff(self):
        with pytest.raises(ValueError):
            User.objects.create_superuser(email="root@test.com", password="x", is_staff=False)

    def test_superadmin_role_is_privileged(self, superadmin_user):
        assert superadmin_user.is_superadmin is True
        assert superadmin_user.is_privileged is True

    def test_display_name_falls_back_to_email(self):
        user = User.objects.create_user(email="nameless@test.com", password="testpass123")

        assert user.display_name == "nameless@test.com"
        assert str(user) == "nameless@test.com"

    def test_display_name_uses_full_name(self, sales_user):
        assert sales_user.display_name == "Sales User"
        assert sales_user.is_sales is True
