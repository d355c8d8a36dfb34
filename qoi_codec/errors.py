class QoiError(Exception):
    """ Base class for every error raised by qoi_codec """


class QoiReadError(QoiError, EOFError):
    """ Raised when a byte source runs out before the codec is done with it """

    def __init__(self, offset: int, wanted: int, available: int):
        self.offset = offset
        super().__init__(
            f"tried to read {wanted} byte(s) at offset {offset}, only {available} available"
        )


class QoiDecodeError(QoiError, ValueError):
    """ Raised by the image helpers when a stream does not decode cleanly """

    def __init__(self, status):
        self.status = status
        super().__init__(f"invalid QOI stream: {status.name.lower()}")
