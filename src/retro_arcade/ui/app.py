# src/retro_arcade/ui/app.py
"""
Qtアプリケーションのエントリポイント。
設定とプログラムイメージを読み込み、マシンを構築してメインウィンドウを起動します。
"""
import argparse
import sys

from PySide6.QtWidgets import QApplication

from retro_arcade.core.errors import EmulatorFault
from retro_arcade.config.loader import ConfigLoader
from retro_arcade.config.builder import MachineBuilder
from .main_window import MainWindow
from .vector_display import VectorDisplay

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="retro-arcade", description="Asteroids arcade board emulator")
    parser.add_argument("--debug", action="store_true", help="trace every CPU and DVG step to the console")
    return parser.parse_args(argv)

# @intent:responsibility アプリケーションを起動し、終了コードを返します (致命的障害は1)。
def main():
    args = parse_args()
    app = QApplication(sys.argv[:1])

    try:
        config = ConfigLoader().load_default()
        config.debug = args.debug
        display = VectorDisplay()
        machine = MachineBuilder().build(config, display.renderer)
    except (EmulatorFault, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    main_win = MainWindow(display, machine)
    main_win.show()
    main_win.start()
    app.exec()
    sys.exit(main_win.exit_code)

if __name__ == '__main__':
    main()
