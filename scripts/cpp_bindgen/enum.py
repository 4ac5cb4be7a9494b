"""
Enum binding generation module

Generates scoped C++ enums aliasing the constants of the C enums.
"""

from typing import TYPE_CHECKING

from .codegen import CodeGen, strip_prefix, is_identifier

if TYPE_CHECKING:
    from .ir import EnumInfo
    from .config import GenConfig

# C++ keywords and alternative tokens that can show up as enum items
CPP_KEYWORDS = {
    'and', 'and_eq', 'bitand', 'bitor', 'compl', 'not', 'not_eq', 'or',
    'or_eq', 'xor', 'xor_eq', 'for', 'if', 'else', 'while', 'do', 'switch',
    'case', 'default', 'break', 'continue', 'return', 'goto', 'true',
    'false', 'int', 'long', 'short', 'char', 'bool', 'void', 'float',
    'double', 'signed', 'unsigned', 'const', 'static', 'union', 'struct',
    'class', 'enum', 'delete', 'new', 'this', 'operator', 'template',
    'typename', 'public', 'private', 'protected', 'friend', 'virtual',
    'namespace', 'using', 'try', 'catch', 'throw', 'auto', 'register',
    'volatile', 'extern', 'inline', 'sizeof', 'typedef', 'mutable',
}


class EnumGenerator:
    """Generates enum declarations"""

    def __init__(self, config: 'GenConfig'):
        self.config = config

    def generate(self, enum: 'EnumInfo', gen: CodeGen):
        """Generate a scoped enum

        For isl_dim_type this gives

            enum class dim_type {
              cst = isl_dim_cst,
              param = isl_dim_param,
              ...
            };
        """
        cpp_name = strip_prefix(enum.name, self.config.prefix)
        with gen.block(f'enum class {cpp_name} {{', '};'):
            for item in enum.items:
                gen.line(f'{self.item_name(enum, item.name)} = {item.name},')

    def item_name(self, enum: 'EnumInfo', item_name: str) -> str:
        """Short C++ name of an enum item"""
        short = self._get_short_name(enum.name, item_name)
        if short in CPP_KEYWORDS:
            short += '_'
        if not is_identifier(short):
            short = '_' + short
        return short

    def _get_short_name(self, enum_name: str, item_name: str) -> str:
        """Get short name for enum item by stripping common prefix"""
        item_lower = item_name.lower()

        # isl_dim_type -> isl_dim_, isl_ast_op_type -> isl_ast_op_
        enum_lower = enum_name.lower()
        possible_prefixes = []
        if enum_lower.endswith('_type'):
            possible_prefixes.append(enum_lower[:-len('type')])
        possible_prefixes.append(enum_lower + '_')
        possible_prefixes.append(self.config.prefix.lower())

        for pfx in possible_prefixes:
            if item_lower.startswith(pfx) and len(item_lower) > len(pfx):
                return item_name[len(pfx):]

        return item_name
