import base64
import struct

from tales.core.errors import AudioEncodingError

WAV_HEADER_SIZE = 44
CHANNELS = 1
BITS_PER_SAMPLE = 16
PCM_FORMAT_TAG = 1

# RIFF header, "fmt " chunk and "data" chunk header, all little-endian
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_MAX_CHUNK_SIZE = 0xFFFFFFFF


def encode_wav(pcm: bytes, sample_rate: int) -> bytes:
    """
    Wrap raw little-endian 16-bit mono PCM in a minimal RIFF/WAVE container.

    The samples are copied after the 44-byte header unchanged. No resampling
    or channel mixing is done, so the caller must already hold mono s16le
    audio at ``sample_rate``.
    """
    if sample_rate <= 0:
        raise AudioEncodingError(f"sample rate must be positive, got {sample_rate}")
    if len(pcm) % 2:
        raise AudioEncodingError(
            f"16-bit PCM needs an even number of bytes, got {len(pcm)}"
        )
    if len(pcm) + WAV_HEADER_SIZE - 8 > _MAX_CHUNK_SIZE:
        raise AudioEncodingError("PCM payload too large for a RIFF container")

    block_align = CHANNELS * BITS_PER_SAMPLE // 8
    byte_rate = sample_rate * block_align
    header = _HEADER.pack(
        b"RIFF",
        36 + len(pcm),
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        CHANNELS,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        len(pcm),
    )
    return header + bytes(pcm)


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
