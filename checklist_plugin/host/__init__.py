from .contract import (
    HAP,
    Characteristic,
    HostAPI,
    HostUser,
    HttpService,
    HttpServiceFactory,
    PlatformAccessory,
    Service,
    SetCallback,
    SetHandler,
    UUIDGenerator,
)

__all__ = [
    "HAP",
    "Characteristic",
    "HostAPI",
    "HostUser",
    "HttpService",
    "HttpServiceFactory",
    "PlatformAccessory",
    "Service",
    "SetCallback",
    "SetHandler",
    "UUIDGenerator",
]
