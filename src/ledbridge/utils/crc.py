"""CRC-16/XMODEM checksum used by the LEDSC framing."""

import binascii


def crc16_xmodem(data: bytes, init: int = 0x0000) -> int:
    """
    Compute CRC-16/XMODEM (poly 0x1021, no reflection, no final xor).

    Example:
        >>> format(crc16_xmodem(b"[CPV]"), "X")
        '7D02'
    """
    return binascii.crc_hqx(data, init)
