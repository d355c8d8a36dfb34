from qoi_codec.errors import QoiError, QoiReadError, QoiDecodeError
from qoi_codec.reader import DecodeStatus, QoiImage, read, read_image, read_file
from qoi_codec.writer import write, encode, write_image, write_file

__all__ = [
    "QoiError", "QoiReadError", "QoiDecodeError",
    "DecodeStatus", "QoiImage", "read", "read_image", "read_file",
    "write", "encode", "write_image", "write_file",
]
