from dependency_injector import containers, providers
from dataporter.v1_0.v1_containers import APIContainer


class ApplicationContainer(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
                "dataporter.v1_0.routers.porter_router",
                "dataporter.v1_0.routers.realtime_router",
            ]
    )

    api_container = providers.Container(
        APIContainer
    )
