from __future__ import annotations

from dependency_injector import containers, providers

from core.settings import SETTINGS
from infra.resources import DatabaseResource


class InfrastructureContainer(containers.DeclarativeContainer):
    config = providers.Configuration()
    settings = providers.Object(SETTINGS)

    # Database
    database = providers.Resource(
        DatabaseResource,
        database_url=str(SETTINGS.DATABASE.DATABASE_URL),
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    conversation_service = providers.Factory(
        "api.features.conversation.service.ConversationService",
        preview_length=SETTINGS.MESSAGING.PREVIEW_LENGTH,
        search_limit=SETTINGS.MESSAGING.SEARCH_LIMIT,
    )

    notification_service = providers.Factory(
        "api.features.notifications.service.NotificationService",
        list_limit=SETTINGS.MESSAGING.NOTIFICATION_LIMIT,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    conversation_controller = providers.Factory(
        "api.features.conversation.controller.ConversationController",
        conversation_service=services.conversation_service,
        notification_service=services.notification_service,
    )

    notification_controller = providers.Factory(
        "api.features.notifications.controller.NotificationController",
        notification_service=services.notification_service,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.main",
            "api.shared.db",
            "api.features.conversation.router",
            "api.features.notifications.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
