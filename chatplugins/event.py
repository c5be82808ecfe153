"""Friend-request and group-invite handling: flags, auto-accept options, notices."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntFlag

_BASE = 0x4E00
_TAIL = 0x3D00
_MASK14 = 0x3FFF


class AutoAccept(IntFlag):
    APPLY = 0b001
    INVITE = 0b010
    MASTER_OFF = 0b100


def base14_encode(data: bytes) -> str:
    """Encode bytes as base16384: every 7 bytes become 4 CJK characters."""
    out = []
    for start in range(0, len(data), 7):
        chunk = data[start:start + 7]
        value = int.from_bytes(chunk.ljust(7, b"\0"), "big")
        chars = [(value >> shift) & _MASK14 for shift in (42, 28, 14, 0)]
        needed = -(-len(chunk) * 8 // 14)
        out.extend(chr(_BASE + c) for c in chars[:needed])
        if len(chunk) < 7:
            out.append(chr(_TAIL + len(chunk)))
    return "".join(out)


def base14_decode(text: str) -> bytes:
    """Decode a base16384 string produced by base14_encode."""
    tail = 0
    if text and _TAIL < ord(text[-1]) < _TAIL + 7:
        tail = ord(text[-1]) - _TAIL
        text = text[:-1]
    codes = []
    for char in text:
        code = ord(char) - _BASE
        if not 0 <= code <= _MASK14:
            raise ValueError(f"invalid base16384 character: {char!r}")
        codes.append(code)
    out = bytearray()
    for start in range(0, len(codes), 4):
        group = codes[start:start + 4]
        group += [0] * (4 - len(group))
        value = 0
        for code in group:
            value = (value << 14) | code
        out += value.to_bytes(7, "big")
    if tail:
        out = out[: len(out) - 7 + tail]
    return bytes(out)


def encode_flag(flag) -> str:
    """Encode a numeric request flag as four base16384 characters."""
    number = int(flag) & 0xFFFFFFFFFFFFFFFF
    return base14_encode(number.to_bytes(8, "big")[1:])


def decode_flag(code: str) -> str:
    """Decode four base16384 characters back into the request flag string."""
    raw = base14_decode(code)[:7].ljust(7, b"\0")
    return str(int.from_bytes(b"\0" + raw, "big", signed=True))


def set_option(flags, target: str, option: str) -> AutoAccept:
    """Apply "开启"/"关闭" to the "申请", "邀请" or "主人" auto-accept setting."""
    value = int(flags)
    on = option == "开启"
    if target == "申请":
        value = value | 0b001 if on else value & 0b110
    elif target == "邀请":
        value = value | 0b010 if on else value & 0b101
    elif target == "主人":
        value = value | 0b100 if option == "关闭" else value & 0b011
    else:
        raise ValueError(f"unknown target: {target}")
    return AutoAccept(value)


def should_auto_accept(flags, kind: str, from_superuser: bool) -> bool:
    """Whether a "friend" or "invite" request is accepted without asking."""
    flags = AutoAccept(int(flags))
    wanted = {"friend": AutoAccept.APPLY, "invite": AutoAccept.INVITE}[kind]
    if flags & wanted:
        return True
    return not flags & AutoAccept.MASTER_OFF and from_superuser


@dataclass(frozen=True)
class Decision:
    accept: bool
    kind: str
    flag: str
    reason: str


_DECISION = re.compile(r"^(同意|拒绝)(申请|邀请)\s*([一-踀]{4})\s*(.*)\Z", re.ASCII)
_TOGGLE = re.compile(r"^(开启|关闭)自动同意(申请|邀请|主人)\Z")


def parse_decision(text: str) -> Decision | None:
    """Parse "同意/拒绝 申请/邀请 <code> [reason]", or return None."""
    match = _DECISION.match(text)
    if not match:
        return None
    cmd, kind, code, reason = match.groups()
    return Decision(accept=cmd == "同意", kind=kind, flag=decode_flag(code), reason=reason)


def parse_toggle(text: str) -> tuple[str, str] | None:
    """Parse "开启/关闭自动同意申请/邀请/主人" into (option, target)."""
    match = _TOGGLE.match(text)
    return (match.group(1), match.group(2)) if match else None


def format_invite_notice(now, username, userid, groupname, groupid, code, accepted) -> list[str]:
    """Texts of the forwarded nodes sent to the owner about a group invite."""
    body = (
        f"收到来自\n用户:[{username}]({userid})的群聊邀请"
        f"\n群聊:[{groupname}]({groupid})"
    )
    if accepted:
        return [f"已自动同意在{now}{body}\nflag:{code}"]
    return [f"在{now}{body}\n请在下方复制flag并在前面加上:\n同意/拒绝邀请，来决定同意还是拒绝", code]


def format_friend_notice(now, username, userid, comment, code, accepted) -> list[str]:
    """Texts of the forwarded nodes sent to the owner about a friend request."""
    body = f"收到来自\n用户:[{username}]({userid})\n的好友请求:{comment}"
    if accepted:
        return [f"已自动同意在{now}{body}\nflag:{code}"]
    return [f"在{now}{body}\n请在下方复制flag并在前面加上:\n同意/拒绝申请，来决定同意还是拒绝", code]