"""
Type conversion module

Maps C type spellings to their C++ counterparts and to the semantic
category that drives the rest of the code generation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .codegen import (
    GenerationError, is_int_type, is_enum_spelling, is_string_ptr,
    is_func_ptr, is_ptr_type, extract_ptr_type, normalize_ptr_type, parse_func_ptr,
    split_annotation, strip_param_name, strip_prefix, replace_first,
)

if TYPE_CHECKING:
    from .ir import IR, ClassInfo
    from .config import GenConfig


class UnsupportedTypeError(GenerationError):
    """C type outside the set of types the bindings know how to wrap"""


class Category(Enum):
    """Semantic category of a C type"""
    HANDLE = 'handle'
    CTX = 'ctx'
    BOOL = 'bool'
    STAT = 'stat'
    ENUM = 'enum'
    INTEGER = 'integer'
    STRING = 'string'
    CALLBACK = 'callback'


@dataclass(frozen=True)
class CallbackType:
    """Decomposed callback function pointer type"""
    return_type: str
    args: tuple[str, ...]   # bare C argument types, user pointer included
    takes_args: bool        # the callback takes ownership of its arguments

    @property
    def public_args(self) -> tuple[str, ...]:
        """Arguments visible to the C++ callback (no user pointer)"""
        return self.args[:-1]


def parse_callback(type_str: str, prefix: str) -> CallbackType:
    """Parse a callback type, recording the ownership of its arguments

    Argument names, if spelled out, are dropped.  The last argument must
    be the "void *" user pointer.

    Example: "isl_stat (*)(__isl_take isl_map *map, void *user)"
        -> CallbackType("isl_stat", ("isl_map *", "void *"), True)
    """
    result_type, raw_args = parse_func_ptr(type_str)
    if not raw_args or normalize_ptr_type(strip_param_name(raw_args[-1])) != 'void*':
        raise UnsupportedTypeError(f'callback without user pointer: {type_str}')
    args = []
    takes = False
    for arg in raw_args:
        kind, bare = split_annotation(strip_param_name(arg), prefix)
        takes = takes or kind == 'take'
        args.append(bare)
    return CallbackType(result_type, tuple(args), takes)


class TypeConverter:
    """Classifies C types and translates them to C++"""

    def __init__(self, ir: 'IR', config: 'GenConfig'):
        self.ir = ir
        self.config = config

    def category(self, type_str: str) -> Category:
        return self.classify(type_str)[0]

    def to_cpp(self, type_str: str) -> str:
        return self.classify(type_str)[1]

    def classify(self, type_str: str) -> tuple[Category, str]:
        """Return the category and C++ spelling of C type "type_str"

        Handles and the context are translated to their wrapper class.
        Without exceptions, the library boolean and status types map to
        wrapper types able to represent failure; with exceptions they map
        to "bool" and "void" and failure is reported by throwing.
        """
        config = self.config
        if self.is_handle(type_str):
            pointee = extract_ptr_type(type_str)
            cpp = config.qualify(strip_prefix(pointee, config.prefix))
            if pointee == config.c_ctx:
                return Category.CTX, cpp
            return Category.HANDLE, cpp

        if type_str == config.c_bool:
            return Category.BOOL, config.bool_type

        if type_str == config.c_stat:
            return Category.STAT, config.stat_type

        is_enum = is_enum_spelling(type_str) or self.ir.is_enum_type(type_str)
        if is_enum and config.extensions:
            return Category.ENUM, replace_first(type_str, config.prefix, config.namespace + '::')

        if is_enum or is_int_type(type_str):
            return Category.INTEGER, type_str

        if is_string_ptr(type_str):
            return Category.STRING, 'std::string'

        if is_func_ptr(type_str):
            return Category.CALLBACK, self.callback_type(type_str)

        raise UnsupportedTypeError(f'Cannot convert type to C++ type: {type_str}')

    def class_name(self, clazz: 'ClassInfo') -> str:
        """C++ name of a wrapper class, using the subclass name if any"""
        return strip_prefix(clazz.subclass_name, self.config.prefix)

    def super_name(self, clazz: 'ClassInfo') -> str:
        """C++ name of the class that owns the C object of a subclass view"""
        return strip_prefix(clazz.name, self.config.prefix)

    def is_handle(self, type_str: str) -> bool:
        """Check if type points to a library object (the context included)

        Only a single level of indirection qualifies; "isl_val **" is an
        output parameter, not an object.
        """
        if not is_ptr_type(type_str) or normalize_ptr_type(type_str).count('*') != 1:
            return False
        return extract_ptr_type(type_str).startswith(self.config.prefix)

    def is_object(self, type_str: str) -> bool:
        """Check if type points to a library object other than the context"""
        return self.is_handle(type_str) and extract_ptr_type(type_str) != self.config.c_ctx

    def callback_args(self, cb: CallbackType) -> str:
        """C++ argument list of a callback, without the user pointer"""
        return ', '.join(self.to_cpp(arg) for arg in cb.public_args)

    def callback_type(self, type_str: str) -> str:
        """Full C++ type of a callback

        For a callback of type

            isl_stat (*)(__isl_take isl_map *map, void *user)

        the type std::function<void(isl::map)> is generated
        (std::function<isl::stat(isl::map)> without exceptions).
        """
        cb = parse_callback(type_str, self.config.prefix)
        return f'std::function<{self.to_cpp(cb.return_type)}({self.callback_args(cb)})>'
