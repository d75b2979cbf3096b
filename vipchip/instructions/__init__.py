"""CHIP-8 instruction table, one module per opcode group."""
