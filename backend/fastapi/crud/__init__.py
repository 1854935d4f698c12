from .mountain import (
    AttributeRow,
    MountainStore,
    get_store,
    create_attributes,
    delete_attributes,
)

__all__ = [
    "AttributeRow",
    "MountainStore",
    "get_store",
    "create_attributes",
    "delete_attributes",
]
