import base64


def strip_0x(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value


def hex_to_base64(value: str) -> str:
    return base64.b64encode(bytes.fromhex(strip_0x(value))).decode()


def hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(strip_0x(value))
