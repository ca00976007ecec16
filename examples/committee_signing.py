"""
quorumsig/examples/committee_signing.py

Example of a weighted committee signing for a shared account.

This shows how a coordinator uses quorumsig to:
1. Derive the committee's multisig address
2. Collect partial signatures from members using different schemes
3. Combine them into one multisig signature for the ledger
4. Decode a multisig signature to audit who signed

Usage:
    python examples/committee_signing.py
"""

import hashlib
import logging
from typing import List

from quorumsig import (
    Ed25519Keypair,
    PartialSignature,
    Secp256k1Keypair,
    Secp256r1Keypair,
    WeightedKey,
    combine_partial_signatures,
    decode_multisig,
    derive_multisig_address,
    total_weight,
    verify_partial,
)
from quorumsig.publickey import find_member

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s [COMMITTEE] %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


class Coordinator:
    """
    Collects partial signatures for one committee and one transaction.

    The coordinator never holds secrets; members sign on their own side
    and hand over serialized partial signatures.
    """

    def __init__(self, committee: List[WeightedKey], threshold: int):
        self.committee = committee
        self.threshold = threshold
        self.address = derive_multisig_address(committee, threshold)
        self.partials: List[PartialSignature] = []

    def collect(self, serialized: str, digest: bytes) -> bool:
        """Accept a member's serialized partial if it verifies."""
        partial = PartialSignature.from_serialized(serialized)
        if not verify_partial(digest, partial):
            logger.warning(f"Rejected partial from {partial.public_key!r}: bad signature")
            return False
        self.partials.append(partial)
        return True

    @property
    def collected_weight(self) -> int:
        weight = 0
        for partial in self.partials:
            index = find_member(self.committee, partial.public_key)
            if index >= 0:
                weight += self.committee[index].weight
        return weight

    def finalize(self) -> str:
        if self.collected_weight < self.threshold:
            logger.info(
                f"Only {self.collected_weight} of {self.threshold} weight collected; "
                f"the ledger will reject this multisig"
            )
        return combine_partial_signatures(self.partials, self.committee, self.threshold)


def main():
    alice = Ed25519Keypair.generate()
    bob = Secp256k1Keypair.generate()
    carol = Secp256r1Keypair.generate()

    committee = [
        WeightedKey(alice.public_key, 1),
        WeightedKey(bob.public_key, 2),
        WeightedKey(carol.public_key, 3),
    ]
    coordinator = Coordinator(committee, threshold=3)
    logger.info(f"Committee address: {coordinator.address}")
    logger.info(f"Total weight {total_weight(committee)}, threshold {coordinator.threshold}")

    digest = hashlib.blake2b(b"transfer 100 to 0x2", digest_size=32).digest()

    # Carol and Alice sign; Bob is offline
    for member in (carol, alice):
        coordinator.collect(member.sign_partial(digest).to_serialized(), digest)

    multisig = coordinator.finalize()
    logger.info(f"Multisig signature: {multisig}")

    for partial in decode_multisig(multisig):
        logger.info(f"Signed by {partial.scheme.value} key {partial.public_key.to_base64()}")


if __name__ == "__main__":
    main()
