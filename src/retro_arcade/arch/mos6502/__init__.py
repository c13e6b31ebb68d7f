# src/retro_arcade/arch/mos6502/__init__.py
"""
MOS 6502 Architecture Package
"""
from .cpu import Mos6502Cpu
from .state import Mos6502CpuState
