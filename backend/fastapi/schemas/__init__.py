from .mountain import (
    Location,
    Mountain,
    MountainList,
    Code,
    ApiInfo,
    ErrorMessages,
    Message,
    MountainImportLocation,
    MountainImport,
)

__all__ = [
    "Location",
    "Mountain",
    "MountainList",
    "Code",
    "ApiInfo",
    "ErrorMessages",
    "Message",
    "MountainImportLocation",
    "MountainImport",
]
