"""Tests for ALU operations (8xxx)."""

import pytest
from vipchip import execute
from conftest import set_registers


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation, VF untouched."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F, VF=0x07)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0x07

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0
        assert state.V[15] == 0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = set_registers(fresh_state, V1=0xFF, V2=0xF0)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0x0F
        assert state.V[15] == 0

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR with same value should be 0."""
        state = set_registers(fresh_state, V3=0xAA, V4=0xAA)

        state = execute(state, 0x8343)  # V3 ^= V4

        assert state.V[3] == 0x00


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = set_registers(fresh_state, V1=0x10, V2=0x20)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - V0=0xFF + V1=0x01 wraps to 0 with carry."""
        state = set_registers(fresh_state, V0=0xFF, V1=0x01)

        state = execute(state, 0x8014)  # V0 += V1

        assert state.V[0] == 0x00
        assert state.V[15] == 1

    @pytest.mark.parametrize("vx, vy", [(0, 0), (0x80, 0x7F), (0x80, 0x80), (0xFF, 0xFF), (0x01, 0xFE)])
    def test_alu_add_carry_iff_sum_exceeds_byte(self, fresh_state, vx, vy):
        """8XY4 - VF = 1 exactly when the unwrapped sum is above 255."""
        state = set_registers(fresh_state, V1=vx, V2=vy)

        state = execute(state, 0x8124)

        assert state.V[1] == (vx + vy) % 256
        assert state.V[15] == (1 if vx + vy > 255 else 0)

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1  # VX > VY

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, with borrow."""
        state = set_registers(fresh_state, V3=0x10, V4=0x30)

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == 0xE0  # 16 - 48 = -32 → 224
        assert state.V[15] == 0

    def test_alu_sub_xy_equal_operands(self, fresh_state):
        """8XY5 - Equal operands give 0 and VF = 0 (strict comparison)."""
        state = set_registers(fresh_state, V1=0x42, V2=0x42)

        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 0

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, no borrow."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20  # 48 - 16 = 32
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - VY < VX wraps and clears VF."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0

    def test_alu_sub_flag_uses_operands_before_subtraction(self, fresh_state):
        """8XY5 with Y = F: the flag compares the original VX and VF."""
        state = set_registers(fresh_state, V1=0x05, VF=0x03)

        state = execute(state, 0x81F5)  # V1 -= VF

        assert state.V[1] == 0x02
        assert state.V[15] == 1


class TestALUShifts:
    """Test shift operations (COSMAC VIP dialect operates on VX)."""

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Shift right, even number."""
        state = set_registers(fresh_state, V1=0x04, V2=0xFF)  # V2 should be ignored

        state = execute(state, 0x8126)  # V1 >>= 1

        assert state.V[1] == 0x02
        assert state.V[2] == 0xFF
        assert state.V[15] == 0

    def test_shift_right_odd(self, fresh_state):
        """8XY6 - Shift right, odd number."""
        state = set_registers(fresh_state, V3=0x05, V4=0xFF)

        state = execute(state, 0x8346)  # V3 >>= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left with overflow."""
        state = set_registers(fresh_state, V3=0x81, V4=0x00)  # 10000001

        state = execute(state, 0x834E)  # V3 <<= 1

        assert state.V[3] == 0x02  # 129 << 1 = 258 → 2
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        """8XYE - MSB clear leaves VF = 0."""
        state = set_registers(fresh_state, V3=0x41, V4=0xFF)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x82
        assert state.V[15] == 0

    def test_shift_ignores_vy(self, fresh_state):
        """8XY6 never reads VY, whatever it holds."""
        state = set_registers(fresh_state, V1=0x08, V2=0x03)

        state = execute(state, 0x8126)

        assert state.V[1] == 0x04
        assert state.V[15] == 0


class TestALUEdgeCases:
    """Test edge cases and comprehensive scenarios."""

    def test_alu_undefined_operations(self, fresh_state):
        """Undefined 8XYN leave every register alone."""
        undefined_ops = [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF]

        for op in undefined_ops:
            state = set_registers(fresh_state, V1=0x42, V2=0x99, VF=0x5)

            state = execute(state, 0x8120 | op)

            assert state.V[1] == 0x42, f"Undefined op {op:X} changed VX"
            assert state.V[15] == 0x5, f"Undefined op {op:X} changed VF"
            assert state.pc == fresh_state.pc

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = set_registers(fresh_state, V5=0xAA)

        # V5 ^= V5 (should become 0)
        state = execute(state, 0x8553)
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        # Reset and test self ADD
        state = set_registers(state, V5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_register_operations(self, fresh_state):
        """Test that operations on VF work correctly."""
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52, "Addition with VF as source failed"
        assert state.V[15] == 0, "VF should be overwritten by operation result"

    def test_flag_wins_when_vf_is_destination(self, fresh_state):
        """8FY4 - The carry is written after the sum."""
        state = set_registers(fresh_state, VF=0xFF, V1=0x01)

        state = execute(state, 0x8F14)

        assert state.V[15] == 1
