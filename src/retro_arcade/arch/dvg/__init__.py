# src/retro_arcade/arch/dvg/__init__.py
"""
DVG (Digital Vector Generator) Architecture Package
"""
from .processor import VectorProcessor
from .state import DvgState
