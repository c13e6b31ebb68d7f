# src/retro_arcade/display/renderer.py
"""
描画コラボレータのインターフェース。

DVGは線分/点のプリミティブを論理座標 (0-1023, 原点は左下) で出力し、
物理ピクセルへのマッピングは各Rendererが担う。
"""
from abc import ABC, abstractmethod
from typing import List, Tuple

# @intent:constant DVGの論理座標空間の幅
LOGICAL_SIZE = 1024
# @intent:constant 輝度(0-15)からアルファ値への倍率
ALPHA_PER_INTENSITY = 17

# @intent:responsibility DVGが描画プリミティブを送る先の抽象インターフェース。
class Renderer(ABC):
    @abstractmethod
    def draw_segment(self, x0: int, y0: int, x1: int, y1: int, intensity: int) -> None:
        pass

    @abstractmethod
    def draw_point(self, x: int, y: int, intensity: int) -> None:
        pass

    # @intent:responsibility 物理出力サイズ (width, height) を返す。
    @abstractmethod
    def output_size(self) -> Tuple[int, int]:
        pass

    @abstractmethod
    def begin_frame(self) -> None:
        pass

    @abstractmethod
    def present_frame(self) -> None:
        pass

# @intent:responsibility 論理座標を物理ピクセル座標へ変換する（Y軸を反転）。
def to_physical(x: int, y: int, width: int, height: int) -> Tuple[int, int]:
    return (int(x * width / LOGICAL_SIZE), height - int(y * height / LOGICAL_SIZE))

# @intent:responsibility 輝度をアルファ値 (0-255) へ変換する。
def intensity_to_alpha(intensity: int) -> int:
    return (intensity & 0x0F) * ALPHA_PER_INTENSITY

# @intent:responsibility プリミティブの座標列を、Rendererの出力サイズに合わせた物理座標へ変換する。
def physical_points(renderer: Renderer, primitive: tuple) -> List[Tuple[int, int]]:
    w, h = renderer.output_size()
    if primitive[0] == "segment":
        _, x0, y0, x1, y1, _ = primitive
        return [to_physical(x0, y0, w, h), to_physical(x1, y1, w, h)]
    _, x, y, _ = primitive
    return [to_physical(x, y, w, h)]

# @intent:responsibility 描画内容をメモリ上に記録するRenderer。ヘッドレス実行とテストで使用する。
class RecordingRenderer(Renderer):
    """
    primitives には現在のフレームのプリミティブが
    ("segment", x0, y0, x1, y1, intensity) / ("point", x, y, intensity) の形で記録される。
    present_frame() で frames に確定する。
    """
    def __init__(self, width: int = LOGICAL_SIZE, height: int = LOGICAL_SIZE):
        self._size = (width, height)
        self.primitives: List[tuple] = []
        self.frames: List[List[tuple]] = []
        self.in_frame = False

    def draw_segment(self, x0: int, y0: int, x1: int, y1: int, intensity: int) -> None:
        self.primitives.append(("segment", x0, y0, x1, y1, intensity))

    def draw_point(self, x: int, y: int, intensity: int) -> None:
        self.primitives.append(("point", x, y, intensity))

    def output_size(self) -> Tuple[int, int]:
        return self._size

    def begin_frame(self) -> None:
        self.primitives = []
        self.in_frame = True

    def present_frame(self) -> None:
        self.frames.append(self.primitives)
        self.in_frame = False

    @property
    def frame_count(self) -> int:
        return len(self.frames)
