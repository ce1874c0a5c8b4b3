"""Low-level terminal input decoding.

Reads raw bytes from the tty and translates them into normalized key tokens
(``"UP"``, ``"PAGE_DOWN"``, ``"SHIFT_DELETE"``, or the typed character).
Handles ESC-sequence timing, CSI/SS3 navigation sequences, and multi-byte
UTF-8 input.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_TOKENS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x12": "CTRL_R",
    b"\x15": "CTRL_U",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}

_CSI_FINAL_TOKENS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
    b"Z": "BACKTAB",
}

# ESC [ <n> ~ sequences, keyed by the parameter text.
_CSI_TILDE_TOKENS: dict[str, str] = {
    "1": "HOME",
    "7": "HOME",
    "4": "END",
    "8": "END",
    "2": "INSERT",
    "3": "DELETE",
    "3;2": "SHIFT_DELETE",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}

_SS3_TOKENS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_utf8_char(fd: int, lead: bytes) -> str:
    """Complete a multi-byte UTF-8 character that starts with ``lead``."""
    data = bytearray(lead)
    for _ in range(_utf8_length(lead[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data.extend(nxt)
    return bytes(data).decode("utf-8", errors="replace")


def _read_csi(fd: int) -> str:
    """Decode the remainder of an ``ESC [`` sequence."""
    params = bytearray()
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if 0x40 <= part[0] <= 0x7E:
            final = part
            break
        params.extend(part)
        if len(params) > 16:
            return "ESC"

    param_text = params.decode("ascii", errors="replace")
    if final == b"~":
        return _CSI_TILDE_TOKENS.get(param_text, "UNKNOWN")
    token = _CSI_FINAL_TOKENS.get(final)
    if token is None:
        return "UNKNOWN"
    # Modified arrows (ESC [ 1 ; 5 A) still move the selection.
    return token


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``.

    Returns ``""`` on timeout or end of input. A lone ESC is reported after a
    short wait so it does not need a second key press; bytes read while
    probing for a sequence are replayed on the next call.
    """
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    token = _CONTROL_TOKENS.get(ch)
    if token is not None:
        return token

    if ch != b"\x1b":
        if ch[0] >= 0x80:
            return _read_utf8_char(fd, ch)
        return ch.decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _SS3_TOKENS.get(final, "UNKNOWN")
    _PENDING_BYTES.append(seq)
    return "ESC"
