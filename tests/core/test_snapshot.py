# tests/core/test_snapshot.py
"""
retro_arcade.core.snapshotモジュールの単体テスト。
"""
import pytest
from retro_arcade.core.state import CpuState
from retro_arcade.core.snapshot import Operation, Metadata, Snapshot

# @intent:test_suite 1命令分の実行結果を記録する不変データ構造の検証。

class TestOperation:
    # @intent:test_case_init 既定値が正しく設定されることを検証します。
    def test_operation_defaults(self):
        op = Operation(address=0x0200, opcode_hex="EA", mnemonic="NOP")
        assert op.operands == []
        assert op.operand_bytes == []
        assert op.cycle_count == 0

    # @intent:test_case_immutability Operationが不変であることを検証します。
    def test_operation_immutability(self):
        op = Operation(address=0x0200, opcode_hex="A9", mnemonic="LDA", operands=["#$42"])
        with pytest.raises(AttributeError):
            op.mnemonic = "STA"

class TestSnapshot:
    # @intent:test_case_init Snapshotが状態、命令、メタデータを保持することを検証します。
    def test_snapshot_init(self):
        state = CpuState(pc=0x0202, sp=0xFD)
        op = Operation(address=0x0200, opcode_hex="A9", mnemonic="LDA", cycle_count=2)
        snapshot = Snapshot(state=state, operation=op, metadata=Metadata(cycle_count=8))
        assert snapshot.state.pc == 0x0202
        assert snapshot.operation.cycle_count == 2
        assert snapshot.metadata.cycle_count == 8

    # @intent:test_case_immutability Snapshotが不変であることを検証します。
    def test_snapshot_immutability(self):
        snapshot = Snapshot(
            state=CpuState(),
            operation=Operation(address=0, opcode_hex="EA", mnemonic="NOP"),
            metadata=Metadata(cycle_count=0),
        )
        with pytest.raises(AttributeError):
            snapshot.metadata = Metadata(cycle_count=1)
