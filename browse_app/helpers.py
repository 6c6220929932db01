HEXDUMP_LINE_BYTES = 16
HEXDUMP_HEX_WIDTH = 40


def decode_lossy(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def _hex_words(chunk: bytes) -> str:
    words = []
    for i in range(0, len(chunk), 2):
        word = chunk[i:i + 2]
        if len(word) == 2:
            words.append(f"{word[0]:02x}{word[1]:02x} ")
        else:
            words.append(f"{word[0]:02x}   ")
    return "".join(words)


def _ascii_gutter(chunk: bytes) -> str:
    return "".join(chr(byte) if 0x21 <= byte <= 0x7E else "." for byte in chunk)


def format_hexdump(data: bytes) -> str:
    lines = []
    for offset in range(0, len(data), HEXDUMP_LINE_BYTES):
        chunk = data[offset:offset + HEXDUMP_LINE_BYTES]
        hex_words = _hex_words(chunk)
        lines.append(f"{offset:08x}: {hex_words:<{HEXDUMP_HEX_WIDTH}} {_ascii_gutter(chunk)}")
    return "\n".join(lines)
