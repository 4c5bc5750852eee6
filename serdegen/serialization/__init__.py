"""Runtime support for generated Python modules."""

from serdegen.serialization.api import Deserializer, Serializer
from serdegen.serialization.bcs import BcsDeserializer, BcsSerializer
from serdegen.serialization.bincode import BincodeDeserializer, BincodeSerializer
from serdegen.serialization.types import UNIT, Option, Slice, Unit

__all__ = [
    "Serializer",
    "Deserializer",
    "BcsSerializer",
    "BcsDeserializer",
    "BincodeSerializer",
    "BincodeDeserializer",
    "Unit",
    "UNIT",
    "Option",
    "Slice",
]
