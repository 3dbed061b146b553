"""Keyed-hash capabilities used to compute the OTP digest."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from otp_codec.errors import GenerationFailed, HashCapabilityFailed, InvalidConfig


logger = logging.getLogger(__name__)


class HashAlgorithm(Enum):
    """Hash algorithms supported by the built-in HMAC capability."""

    SHA1 = ("SHA1", 160)
    SHA256 = ("SHA256", 256)
    SHA512 = ("SHA512", 512)

    def __init__(self, label: str, digest_bits: int):
        self.label = label
        self.digest_bits = digest_bits

    @classmethod
    def from_name(cls, name: str) -> "HashAlgorithm":
        normalized = name.strip().upper().replace("-", "")
        for algorithm in cls:
            if algorithm.label == normalized:
                return algorithm
        raise InvalidConfig(f"Invalid algorithm {name!r}, must be SHA1, SHA256 or SHA512")


class KeyedHash(ABC):
    """
    A keyed-hash function mapping (key, message) to a fixed-size digest.

    Calling the instance runs the underlying primitive and checks its result,
    so every failure surfaces as HashCapabilityFailed or GenerationFailed.
    """

    name: str = "keyed-hash"
    digest_bits: int = 0

    @property
    def digest_size(self) -> int:
        return self.digest_bits // 8

    @abstractmethod
    def compute(self, key: bytes, message: bytes) -> bytes:
        """Return the raw digest of message keyed with key."""

    def __call__(self, key: bytes, message: bytes) -> bytes:
        try:
            digest = self.compute(key, message)
        except HashCapabilityFailed:
            raise
        except Exception as e:
            raise HashCapabilityFailed(f"{self.name} failed: {e}") from e

        if not isinstance(digest, (bytes, bytearray, memoryview)):
            logger.debug("%s returned %s instead of bytes", self.name, type(digest).__name__)
            raise HashCapabilityFailed(
                f"{self.name} returned {type(digest).__name__}, expected bytes"
            )
        if not digest:
            logger.debug("%s returned an empty result", self.name)
            raise HashCapabilityFailed(f"{self.name} returned no digest")
        if len(digest) != self.digest_size:
            logger.debug("%s returned %d bytes, expected %d", self.name, len(digest), self.digest_size)
            raise GenerationFailed(
                f"{self.name} returned {len(digest)} bytes, expected {self.digest_size}"
            )
        return bytes(digest)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, digest_bits={self.digest_bits})"


class HmacHash(KeyedHash):
    """HMAC over one of the SHA family hashes, backed by cryptography."""

    _HASHES = {
        HashAlgorithm.SHA1: hashes.SHA1,
        HashAlgorithm.SHA256: hashes.SHA256,
        HashAlgorithm.SHA512: hashes.SHA512,
    }

    def __init__(self, algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA1):
        if isinstance(algorithm, str):
            algorithm = HashAlgorithm.from_name(algorithm)
        self.algorithm = algorithm
        self.name = f"HMAC-{algorithm.label}"
        self.digest_bits = algorithm.digest_bits

    def compute(self, key: bytes, message: bytes) -> bytes:
        try:
            mac = hmac.HMAC(key, self._HASHES[self.algorithm]())
        except UnsupportedAlgorithm as e:
            raise HashCapabilityFailed(f"{self.name} is not supported by this backend") from e
        mac.update(message)
        return mac.finalize()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HmacHash) and other.algorithm is self.algorithm

    def __hash__(self) -> int:
        return hash(self.algorithm)


class FunctionHash(KeyedHash):
    """Adapts a plain ``(key, message) -> digest`` callable."""

    def __init__(
        self,
        func: Callable[[bytes, bytes], bytes],
        digest_bits: int,
        name: str = "",
    ):
        self.func = func
        self.digest_bits = digest_bits
        self.name = name or getattr(func, "__name__", "keyed-hash")

    def compute(self, key: bytes, message: bytes) -> bytes:
        return self.func(key, message)


DigestSpec = Union[KeyedHash, HashAlgorithm, str, Callable[[bytes, bytes], bytes], None]


def resolve_hash(digest: DigestSpec, digest_bits: Optional[int] = None) -> KeyedHash:
    """
    Turn a digest specification into a keyed-hash capability.

    Args:
        digest: A KeyedHash instance, a HashAlgorithm, an algorithm name such
            as "SHA256", a plain ``(key, message) -> digest`` callable, or
            None for HMAC-SHA1.
        digest_bits: Output size of the digest in bits. Required for plain
            callables, checked against the capability otherwise.

    Returns:
        The keyed-hash capability.

    Raises:
        InvalidConfig: If the specification is not recognised or its size
            disagrees with digest_bits.
    """
    if digest is None:
        capability: KeyedHash = HmacHash(HashAlgorithm.SHA1)
    elif isinstance(digest, KeyedHash):
        capability = digest
    elif isinstance(digest, (HashAlgorithm, str)):
        capability = HmacHash(digest)
    elif callable(digest):
        if digest_bits is None:
            raise InvalidConfig("digest_bits is required when digest is a plain function")
        return FunctionHash(digest, digest_bits)
    else:
        raise InvalidConfig(f"Unsupported digest {digest!r}")

    if digest_bits is not None and digest_bits != capability.digest_bits:
        raise InvalidConfig(
            f"{capability.name} produces {capability.digest_bits} bits, not {digest_bits}"
        )
    return capability
