# retro_arcade/core/errors.py
"""
致命的なエミュレーション障害の定義。

いずれもリトライ不能であり、スケジューラの外へそのまま伝播します。
"""

class EmulatorFault(Exception):
    """エミュレータの致命的な障害の基底クラス。"""


# @intent:responsibility 不正なオペコード、または命令とアドレッシングモードの不正な組み合わせ。
class DecodeFault(EmulatorFault):
    def __init__(self, address: int, opcode: int):
        self.address = address
        self.opcode = opcode
        super().__init__(
            f"Invalid op code {opcode:02X} encountered at address {address:04X}. Processor hung."
        )


# @intent:responsibility DVGの4段コールスタックのオーバーフロー/アンダーフロー。
class StackFault(EmulatorFault):
    def __init__(self, pc: int, kind: str):
        self.pc = pc
        self.kind = kind
        super().__init__(f"DVG stack {kind} at {pc:03X}")


# @intent:responsibility プログラムイメージの欠落やサイズ不正。
class AssetLoadFault(EmulatorFault):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load program image {path}: {reason}")
