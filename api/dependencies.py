"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.billing.entitlements import EntitlementResolver
    from modules.billing.interfaces import IProfileRepository
    from modules.budget.calculator import TokenBudgetCalculator
    from modules.debates.interfaces import IDebateRepository, IDebateService
    from providers.base import LLMProvider


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._auth_service: "IAuthService | None" = None
        self._profile_repository: "IProfileRepository | None" = None
        self._debate_repository: "IDebateRepository | None" = None
        self._entitlements: "EntitlementResolver | None" = None
        self._budget: "TokenBudgetCalculator | None" = None
        self._debate_service: "IDebateService | None" = None

    @property
    def profile_repository(self) -> "IProfileRepository":
        """Get the profile repository instance."""
        if self._profile_repository is None:
            from modules.billing.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    @property
    def debate_repository(self) -> "IDebateRepository":
        """Get the debate repository instance."""
        if self._debate_repository is None:
            from modules.debates.repository import DebateRepository
            from shared.database import get_supabase_client
            self._debate_repository = DebateRepository(get_supabase_client())
        return self._debate_repository

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(profiles=self.profile_repository)
        return self._auth_service

    @property
    def provider(self) -> "LLMProvider":
        """Get the model provider instance."""
        from providers.factory import get_model_provider
        return get_model_provider()

    @property
    def entitlements(self) -> "EntitlementResolver":
        """Get the entitlement resolver instance."""
        if self._entitlements is None:
            from modules.billing.entitlements import EntitlementResolver
            from shared.config import get_settings
            settings = get_settings()
            self._entitlements = EntitlementResolver(
                self.profile_repository,
                trial_limit=settings.pro_trial_limit,
                allow_bypass=settings.allow_validation_bypass,
            )
        return self._entitlements

    @property
    def budget(self) -> "TokenBudgetCalculator":
        """Get the token budget calculator instance."""
        if self._budget is None:
            from modules.budget.calculator import TokenBudgetCalculator
            from shared.config import get_settings
            self._budget = TokenBudgetCalculator(
                min_completion_tokens=get_settings().min_completion_tokens,
            )
        return self._budget

    @property
    def debates(self) -> "IDebateService":
        """Get the debate service instance."""
        if self._debate_service is None:
            from modules.debates.service import DebateService
            self._debate_service = DebateService(
                repository=self.debate_repository,
                provider=self.provider,
                entitlements=self.entitlements,
                budget=self.budget,
            )
        return self._debate_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None
        self._profile_repository = None
        self._debate_repository = None
        self._entitlements = None
        self._budget = None
        self._debate_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_debate_service() -> "IDebateService":
    """FastAPI dependency for debate service."""
    return get_container().debates
