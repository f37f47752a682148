import os
import zlib

import numpy as np
import pytest


def pytest_configure(config):
    """
    Hook that runs before test collection.
    Clear environment overrides so config defaults are the documented ones.
    """
    os.environ.pop("CODECBENCH_OUTPUT_DIR", None)
    os.environ.pop("CODECBENCH_LOOP_COUNT", None)


from codecbench.errors import CodecError  # noqa: E402
from codecbench.image import FrameInfo  # noqa: E402


class ZlibCodec:
    """Lossless stand-in adapter; records how the harness drives it."""

    name = "zlib"
    version = zlib.ZLIB_VERSION

    def __init__(self) -> None:
        self.encoders_created = 0
        self.decoders_created = 0
        self.destinations: list[int] = []

    def estimate_max_encoded_size(self, frame: FrameInfo) -> int:
        return frame.raw_size_bytes + 1024

    def encoder(self, frame, destination):
        self.encoders_created += 1
        self.destinations.append(id(destination))
        return _ZlibEncoder(destination)

    def decoder(self, encoded):
        self.decoders_created += 1
        return _ZlibDecoder(encoded)


class _ZlibEncoder:
    def __init__(self, destination: bytearray):
        self.destination = destination

    def encode(self, samples: np.ndarray) -> int:
        encoded = zlib.compress(samples.tobytes())
        if len(encoded) > len(self.destination):
            raise CodecError("destination buffer too small")
        self.destination[: len(encoded)] = encoded
        return len(encoded)


class _ZlibDecoder:
    def __init__(self, encoded):
        self.encoded = encoded

    def decode(self, destination: np.ndarray) -> None:
        raw = np.frombuffer(zlib.decompress(bytes(self.encoded)), dtype=destination.dtype)
        np.copyto(destination, raw.reshape(destination.shape))


class CorruptingCodec(ZlibCodec):
    """Decodes correctly, then damages samples at fixed flat indices."""

    def __init__(self, indices=(10, 20)) -> None:
        super().__init__()
        self.indices = indices

    def decoder(self, encoded):
        inner = super().decoder(encoded)
        indices = self.indices

        class _Corrupt:
            def decode(self, destination):
                inner.decode(destination)
                flat = destination.reshape(-1)
                for i in indices:
                    flat[i] = (int(flat[i]) + 1) % 4096

        return _Corrupt()


class FailingCodec(ZlibCodec):
    def encoder(self, frame, destination):
        raise CodecError("invalid frame configuration")


class CrashingCodec(ZlibCodec):
    def decoder(self, encoded):
        raise RuntimeError("decoder state lost")


@pytest.fixture
def small_frame() -> FrameInfo:
    return FrameInfo(width=64, height=32, bits_per_sample=12, component_count=1)


@pytest.fixture
def zlib_codec() -> ZlibCodec:
    return ZlibCodec()


@pytest.fixture
def corrupting_codec() -> CorruptingCodec:
    return CorruptingCodec()


@pytest.fixture
def failing_codec() -> FailingCodec:
    return FailingCodec()


@pytest.fixture
def crashing_codec() -> CrashingCodec:
    return CrashingCodec()
