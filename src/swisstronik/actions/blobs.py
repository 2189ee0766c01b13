"""
EIP-4844 blob commitments, versioned hashes, proofs and sidecars.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union, runtime_checkable

import ckzg

from swisstronik.errors import InvalidRequestError
from swisstronik.types.transaction import BlobSidecar
from swisstronik.utils.encoding import HexLike, to_bytes, to_hex_data

VERSIONED_HASH_VERSION_KZG = 1


@runtime_checkable
class Kzg(Protocol):
    """KZG backend: anything able to commit to a blob and prove it."""

    def blob_to_kzg_commitment(self, blob: bytes) -> bytes:
        ...

    def compute_blob_kzg_proof(self, blob: bytes, commitment: bytes) -> bytes:
        ...


class CkzgSetup:
    """
    ``ckzg`` bound to a loaded trusted setup.

    Example:
        ```python
        kzg = CkzgSetup.load("trusted_setup.txt")
        commitments = blobs_to_commitments(blobs, kzg)
        ```
    """

    def __init__(self, settings: object) -> None:
        self._settings = settings

    @classmethod
    def load(cls, path: Union[str, Path], precompute: int = 0) -> "CkzgSetup":
        return cls(ckzg.load_trusted_setup(str(path), precompute))

    def blob_to_kzg_commitment(self, blob: bytes) -> bytes:
        return ckzg.blob_to_kzg_commitment(blob, self._settings)

    def compute_blob_kzg_proof(self, blob: bytes, commitment: bytes) -> bytes:
        return ckzg.compute_blob_kzg_proof(blob, commitment, self._settings)


def blobs_to_commitments(blobs: Sequence[HexLike], kzg: Kzg) -> List[str]:
    return [to_hex_data(kzg.blob_to_kzg_commitment(to_bytes(blob))) for blob in blobs]


def blobs_to_proofs(
    blobs: Sequence[HexLike],
    commitments: Sequence[HexLike],
    kzg: Kzg,
) -> List[str]:
    """
    KZG proof for each blob, index-aligned with ``blobs``.

    Raises:
        InvalidRequestError: If blobs and commitments differ in length
    """
    if len(blobs) != len(commitments):
        raise InvalidRequestError(
            f"Got {len(blobs)} blobs but {len(commitments)} commitments",
            field="blobs",
        )
    return [
        to_hex_data(kzg.compute_blob_kzg_proof(to_bytes(blob), to_bytes(commitment)))
        for blob, commitment in zip(blobs, commitments)
    ]


def commitment_to_versioned_hash(
    commitment: HexLike,
    version: int = VERSIONED_HASH_VERSION_KZG,
) -> str:
    """``version || sha256(commitment)[1:]``"""
    digest = hashlib.sha256(to_bytes(commitment)).digest()
    return to_hex_data(bytes([version]) + digest[1:])


def commitments_to_versioned_hashes(commitments: Sequence[HexLike]) -> List[str]:
    return [commitment_to_versioned_hash(commitment) for commitment in commitments]


def to_blob_sidecars(
    blobs: Sequence[HexLike],
    commitments: Sequence[HexLike],
    proofs: Sequence[HexLike],
) -> List[BlobSidecar]:
    if not len(blobs) == len(commitments) == len(proofs):
        raise InvalidRequestError(
            "blobs, commitments and proofs must have the same length",
            field="sidecars",
        )
    return [
        BlobSidecar(
            blob=to_hex_data(blob),
            commitment=to_hex_data(commitment),
            proof=to_hex_data(proof),
        )
        for blob, commitment, proof in zip(blobs, commitments, proofs)
    ]


@dataclass(frozen=True)
class BlobCommitmentSet:
    """Artifacts derived from a list of blobs, index-aligned with it."""

    commitments: List[str]
    versioned_hashes: Optional[List[str]] = None
    proofs: Optional[List[str]] = None
    sidecars: Optional[List[BlobSidecar]] = None


def build_blob_commitments(
    blobs: Sequence[HexLike],
    kzg: Kzg,
    *,
    versioned_hashes: bool = True,
    sidecars: bool = False,
) -> BlobCommitmentSet:
    """
    Derive the requested blob artifacts.

    Commitments are always computed; proofs only when sidecars are
    requested.

    Args:
        blobs: Raw blobs
        kzg: KZG backend
        versioned_hashes: Whether to derive versioned hashes
        sidecars: Whether to derive proofs and sidecars
    """
    commitments = blobs_to_commitments(blobs, kzg)
    hashes = commitments_to_versioned_hashes(commitments) if versioned_hashes else None
    proofs = blob_sidecars = None
    if sidecars:
        proofs = blobs_to_proofs(blobs, commitments, kzg)
        blob_sidecars = to_blob_sidecars(blobs, commitments, proofs)
    return BlobCommitmentSet(
        commitments=commitments,
        versioned_hashes=hashes,
        proofs=proofs,
        sidecars=blob_sidecars,
    )
