"""
quorumsig/protocol/messages.py

Wire objects of the multisig scheme and their canonical encoding.

    MultiSigPublicKey { pk_map: vector<vector<u8>>, threshold: vector<u8> }
    MultiSigAggregate { sigs: vector<vector<u8>>, bitmap: vector<u16>,
                        multisig_pk: MultiSigPublicKey }

Each pk_map entry is raw public key bytes followed by the member's weight
byte. Each sigs entry is a compressed signature (scheme flag followed by the
raw signature). bitmap[i] is the pk_map index of the signer of sigs[i].
"""

import logging
from dataclasses import dataclass, field
from typing import List

from ..errors import MalformedAggregateError
from .bcs import Deserializer, Serializer

logger = logging.getLogger("quorumsig.protocol.messages")


@dataclass
class MultiSigPublicKey:
    """The committee as the ledger sees it."""
    pk_map: List[bytes] = field(default_factory=list)
    threshold: bytes = b""

    def serialize(self, serializer: Serializer) -> None:
        serializer.sequence(self.pk_map, Serializer.to_bytes)
        serializer.to_bytes(self.threshold)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> "MultiSigPublicKey":
        pk_map = deserializer.sequence(Deserializer.to_bytes)
        for index, entry in enumerate(pk_map):
            if len(entry) < 2:
                raise MalformedAggregateError(
                    f"pk_map entry {index} is {len(entry)} bytes, need key and weight"
                )
        threshold = deserializer.to_bytes()
        return MultiSigPublicKey(pk_map=pk_map, threshold=threshold)

    def to_bytes(self) -> bytes:
        ser = Serializer()
        self.serialize(ser)
        return ser.output()

    @classmethod
    def from_bytes(cls, data: bytes) -> "MultiSigPublicKey":
        der = Deserializer(data)
        value = cls.deserialize(der)
        der.finish()
        return value

    def weights(self) -> List[int]:
        """Trailing weight byte of each pk_map entry."""
        return [entry[-1] for entry in self.pk_map]

    def threshold_value(self) -> int:
        return int.from_bytes(self.threshold, "little")

    def to_dict(self) -> dict:
        return {
            "pk_map": [entry.hex() for entry in self.pk_map],
            "threshold": self.threshold.hex(),
        }


@dataclass
class MultiSigAggregate:
    """An assembled multisig signature."""
    sigs: List[bytes] = field(default_factory=list)
    bitmap: List[int] = field(default_factory=list)
    multisig_pk: MultiSigPublicKey = field(default_factory=MultiSigPublicKey)

    def serialize(self, serializer: Serializer) -> None:
        serializer.sequence(self.sigs, Serializer.to_bytes)
        serializer.sequence(self.bitmap, Serializer.u16)
        self.multisig_pk.serialize(serializer)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> "MultiSigAggregate":
        sigs = deserializer.sequence(Deserializer.to_bytes)
        bitmap = deserializer.sequence(Deserializer.u16)
        multisig_pk = MultiSigPublicKey.deserialize(deserializer)
        if len(sigs) != len(bitmap):
            raise MalformedAggregateError(
                f"Aggregate has {len(sigs)} signatures but {len(bitmap)} bitmap entries"
            )
        return MultiSigAggregate(sigs=sigs, bitmap=bitmap, multisig_pk=multisig_pk)

    def to_bytes(self) -> bytes:
        ser = Serializer()
        self.serialize(ser)
        return ser.output()

    @classmethod
    def from_bytes(cls, data: bytes) -> "MultiSigAggregate":
        der = Deserializer(data)
        value = cls.deserialize(der)
        der.finish()
        logger.debug(
            f"Decoded aggregate: {len(value.sigs)} sigs, "
            f"{len(value.multisig_pk.pk_map)} committee members"
        )
        return value

    def to_dict(self) -> dict:
        return {
            "sigs": [sig.hex() for sig in self.sigs],
            "bitmap": list(self.bitmap),
            "multisig_pk": self.multisig_pk.to_dict(),
        }
