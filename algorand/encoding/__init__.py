"""
algorand.encoding
=================

Canonical msgpack codec (`msgpack`), the record layer it is built on (`record`)
and the derived JSON view (`algorand.encoding.json`, imported explicitly).
"""

from .msgpack import decode, decode_obj, encode
from .record import FieldReader, Record, WireFormat, is_nonzero, to_wire

__all__ = [
    "encode",
    "decode",
    "decode_obj",
    "FieldReader",
    "Record",
    "WireFormat",
    "is_nonzero",
    "to_wire",
]
