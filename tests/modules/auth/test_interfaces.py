from modules.auth.interfaces import IAuthService
from modules.auth.service import AuthService


class TestAuthInterface:
    def test_interface_methods_exist(self):
        """IAuthService should define required methods."""
        for method in ["validate_token", "resolve_caller"]:
            assert hasattr(IAuthService, method)

    def test_auth_service_has_interface_methods(self):
        """AuthService should have all IAuthService methods."""
        for method in ["validate_token", "resolve_caller"]:
            assert callable(getattr(AuthService, method))

    def test_service_satisfies_protocol(self):
        assert isinstance(AuthService(), IAuthService)
