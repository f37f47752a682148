"""
Codec adapters.

The harness only talks to a codec through `CodecAdapter`: a size estimate
for preallocating the destination, plus encoder/decoder objects that are
bound (untimed) to their buffers before the timed call.
"""

from __future__ import annotations

import logging
from typing import Protocol

import imagecodecs
import numpy as np

from codecbench.errors import CodecError
from codecbench.image import FrameInfo

logger = logging.getLogger(__name__)

# Header/marker overhead allowance on top of the raw sample bytes
HEADER_ALLOWANCE = 1024


class Encoder(Protocol):
    def encode(self, samples: np.ndarray) -> int: ...


class Decoder(Protocol):
    def decode(self, destination: np.ndarray) -> None: ...


class CodecAdapter(Protocol):
    name: str

    @property
    def version(self) -> str: ...

    def estimate_max_encoded_size(self, frame: FrameInfo) -> int: ...

    def encoder(self, frame: FrameInfo, destination: bytearray) -> Encoder: ...

    def decoder(self, encoded: memoryview) -> Decoder: ...


def check_frame(frame: FrameInfo, samples: np.ndarray) -> None:
    """Raise CodecError if `samples` does not match `frame`."""
    if samples.size != frame.pixel_count:
        raise CodecError(
            f"Sample count {samples.size} does not match frame {frame.width}x{frame.height}x{frame.component_count}"
        )
    if not 2 <= frame.bits_per_sample <= 16:
        raise CodecError(f"Unsupported bits per sample: {frame.bits_per_sample}")


class JpegLsEncoder:
    """Lossless JPEG-LS encoder bound to one frame and destination buffer.

    The bitstream is written straight into the destination, so a timed
    encode neither allocates nor copies the output.
    """

    def __init__(self, frame: FrameInfo, destination: bytearray):
        self.frame = frame
        self.destination = destination

    def encode(self, samples: np.ndarray) -> int:
        check_frame(self.frame, samples)
        data = samples.reshape(self.frame.height, self.frame.width)
        try:
            encoded = imagecodecs.jpegls_encode(data, level=0, out=self.destination)
        except (imagecodecs.JpeglsError, ValueError) as e:
            raise CodecError(f"Encode into {len(self.destination)} byte destination failed: {e}") from e
        return len(encoded)


class JpegLsDecoder:
    """JPEG-LS decoder bound to one encoded bitstream."""

    def __init__(self, encoded: memoryview):
        self.encoded = encoded

    def decode(self, destination: np.ndarray) -> None:
        try:
            decoded = imagecodecs.jpegls_decode(self.encoded, out=destination)
        except imagecodecs.JpeglsError as e:
            raise CodecError(str(e)) from e

        if decoded is not destination:
            if decoded.size != destination.size:
                raise CodecError(f"Decoded {decoded.size} samples, expected {destination.size}")
            np.copyto(destination, decoded.reshape(destination.shape), casting="same_kind")


class JpegLsCodec:
    """CharLS JPEG-LS via imagecodecs."""

    name = "CharLS"

    @property
    def version(self) -> str:
        return imagecodecs.__version__

    def estimate_max_encoded_size(self, frame: FrameInfo) -> int:
        return frame.pixel_count * frame.bytes_per_sample + HEADER_ALLOWANCE

    def encoder(self, frame: FrameInfo, destination: bytearray) -> JpegLsEncoder:
        return JpegLsEncoder(frame, destination)

    def decoder(self, encoded: memoryview) -> JpegLsDecoder:
        return JpegLsDecoder(encoded)
