"""Minimal EVM bytecode disassembler used by the ``code`` tool."""

from __future__ import annotations

from typing import Dict, List

_NAMED = {
    0x00: "STOP", 0x01: "ADD", 0x02: "MUL", 0x03: "SUB", 0x04: "DIV", 0x05: "SDIV",
    0x06: "MOD", 0x07: "SMOD", 0x08: "ADDMOD", 0x09: "MULMOD", 0x0A: "EXP", 0x0B: "SIGNEXTEND",
    0x10: "LT", 0x11: "GT", 0x12: "SLT", 0x13: "SGT", 0x14: "EQ", 0x15: "ISZERO",
    0x16: "AND", 0x17: "OR", 0x18: "XOR", 0x19: "NOT", 0x1A: "BYTE", 0x1B: "SHL",
    0x1C: "SHR", 0x1D: "SAR",
    0x20: "KECCAK256",
    0x30: "ADDRESS", 0x31: "BALANCE", 0x32: "ORIGIN", 0x33: "CALLER", 0x34: "CALLVALUE",
    0x35: "CALLDATALOAD", 0x36: "CALLDATASIZE", 0x37: "CALLDATACOPY", 0x38: "CODESIZE",
    0x39: "CODECOPY", 0x3A: "GASPRICE", 0x3B: "EXTCODESIZE", 0x3C: "EXTCODECOPY",
    0x3D: "RETURNDATASIZE", 0x3E: "RETURNDATACOPY", 0x3F: "EXTCODEHASH",
    0x40: "BLOCKHASH", 0x41: "COINBASE", 0x42: "TIMESTAMP", 0x43: "NUMBER",
    0x44: "DIFFICULTY", 0x45: "GASLIMIT", 0x46: "CHAINID", 0x47: "SELFBALANCE",
    0x48: "BASEFEE", 0x49: "BLOBHASH", 0x4A: "BLOBBASEFEE",
    0x50: "POP", 0x51: "MLOAD", 0x52: "MSTORE", 0x53: "MSTORE8", 0x54: "SLOAD",
    0x55: "SSTORE", 0x56: "JUMP", 0x57: "JUMPI", 0x58: "PC", 0x59: "MSIZE", 0x5A: "GAS",
    0x5B: "JUMPDEST", 0x5C: "TLOAD", 0x5D: "TSTORE", 0x5E: "MCOPY", 0x5F: "PUSH0",
    0xF0: "CREATE", 0xF1: "CALL", 0xF2: "CALLCODE", 0xF3: "RETURN", 0xF4: "DELEGATECALL",
    0xF5: "CREATE2", 0xFA: "STATICCALL", 0xFD: "REVERT", 0xFE: "INVALID", 0xFF: "SELFDESTRUCT",
}


def _build_table() -> Dict[int, str]:
    table = dict(_NAMED)
    for n in range(1, 33):
        table[0x5F + n] = f"PUSH{n}"
    for n in range(1, 17):
        table[0x7F + n] = f"DUP{n}"
        table[0x8F + n] = f"SWAP{n}"
    for n in range(5):
        table[0xA0 + n] = f"LOG{n}"
    return table


OPCODES = _build_table()


def push_size(opcode: int) -> int:
    if 0x60 <= opcode <= 0x7F:
        return opcode - 0x5F
    return 0


def disassemble(code: bytes) -> str:
    """
    Render bytecode as one ``{pc:08x}: OPCODE [0xIMMEDIATE]`` line per instruction.

    Truncated PUSH immediates at the end of the code are printed as far as
    they go; unknown bytes are rendered as ``UNKNOWN(0x..)``.
    """
    lines: List[str] = []
    pc = 0
    while pc < len(code):
        opcode = code[pc]
        name = OPCODES.get(opcode, f"UNKNOWN(0x{opcode:02x})")
        size = push_size(opcode)
        if size:
            immediate = code[pc + 1 : pc + 1 + size]
            lines.append(f"{pc:08x}: {name} 0x{immediate.hex()}")
        else:
            lines.append(f"{pc:08x}: {name}")
        pc += 1 + size
    return "\n".join(lines)
