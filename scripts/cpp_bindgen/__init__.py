"""
cpp_bindgen - C++ binding generation framework for C libraries

This framework generates object-oriented C++ wrappers from a class table
describing the types and functions of a C library (isl style: reference
counted objects with __isl_take/__isl_keep ownership annotations).
The wrappers manage the C objects with value semantics and turn errors
into exceptions, or leave them to the caller when generated without
exceptions.
"""

from .ir import IR, IRError, ClassInfo, FuncInfo, ParamInfo, EnumInfo, EnumItem, Ownership
from .config import GenConfig
from .codegen import CodeGen, GenerationError
from .types import TypeConverter, Category, CallbackType, UnsupportedTypeError
from .callback import CallbackGenerator
from .func import MethodGenerator, MethodKind
from .klass import ClassGenerator
from .enum import EnumGenerator
from .generator import (
    Generator, generate,
    emit_forward_declarations, emit_declarations, emit_implementations,
)

__all__ = [
    'IR', 'IRError', 'ClassInfo', 'FuncInfo', 'ParamInfo', 'EnumInfo', 'EnumItem', 'Ownership',
    'GenConfig',
    'CodeGen', 'GenerationError',
    'TypeConverter', 'Category', 'CallbackType', 'UnsupportedTypeError',
    'CallbackGenerator',
    'MethodGenerator', 'MethodKind',
    'ClassGenerator',
    'EnumGenerator',
    'Generator', 'generate',
    'emit_forward_declarations', 'emit_declarations', 'emit_implementations',
]
