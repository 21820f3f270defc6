"""Enum definitions for readings and callers."""

from enum import Enum


class OperationType(str, Enum):
    """Kind of operation a reading was taken during."""

    MANUAL = "manual"  # Regular metering
    DUMPING = "dumping"  # Gas transfer between two storages
    STOP = "stop"  # Closes a metering session


class Role(str, Enum):
    """Caller role."""

    ADMIN = "admin"
    OPERATOR = "operator"


class ReadingRemark(str, Enum):
    """Remarks that mark readings written by change and dumping transactions."""

    CHANGE_OLD_OUT = "Change: Old Storage Out"
    CHANGE_NEW_IN = "Change: New Storage In"
    DUMPING_DESTINATION_BEFORE = "Dumping: Destination Before"
    DUMPING_SOURCE_BEFORE = "Dumping: Source Before"
    DUMPING_SOURCE_AFTER = "Dumping: Source After"
    DUMPING_DESTINATION_AFTER = "Dumping: Destination After"


class StorageType(str, Enum):
    """Storage ownership kind: mobile tubes circulate, fixed tanks stay on a customer's site."""

    MOBILE = "mobile"
    FIXED = "fixed"
