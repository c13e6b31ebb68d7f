"""
Retro Arcade Core

6502 CPU と Digital Vector Generator (DVG) を命令レベルで再現するエミュレータ。
"""
__version__ = "0.1.0"
