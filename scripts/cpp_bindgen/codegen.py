"""
Code generation utilities

Provides the line buffer used by every emitter and helpers for picking
apart C type spellings.
"""

import re


class GenerationError(Exception):
    """Fatal error raised while generating bindings"""


class CodeGen:
    """Code generation helper with indentation support"""

    def __init__(self):
        self._lines: list[str] = []
        self._indent: int = 0
        self._indent_str: str = '  '  # 2 spaces, matching the isl headers

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append('')

    def raw(self, text: str):
        """Add raw text without indentation processing"""
        self._lines.append(text)

    def indent(self):
        """Increase indentation"""
        self._indent += 1

    def dedent(self):
        """Decrease indentation"""
        if self._indent > 0:
            self._indent -= 1

    def block(self, header: str, footer: str = '}'):
        """Context manager for code blocks"""
        return _BlockContext(self, header, footer)

    def extend(self, other: 'CodeGen'):
        """Append the lines of another buffer at the current indentation"""
        for text in other._lines:
            self.line(text)

    def empty(self) -> bool:
        """Check if nothing has been generated yet"""
        return not self._lines

    def output(self) -> str:
        """Get generated code as string, one trailing newline per line"""
        return ''.join(text + '\n' for text in self._lines)


class _BlockContext:
    """Context manager for indented code blocks"""

    def __init__(self, gen: CodeGen, header: str, footer: str):
        self._gen = gen
        self._header = header
        self._footer = footer

    def __enter__(self):
        self._gen.line(self._header)
        self._gen.indent()
        return self

    def __exit__(self, *args):
        self._gen.dedent()
        self._gen.line(self._footer)


def strip_prefix(name: str, prefix: str) -> str:
    """Drop a fixed-length library prefix from a C identifier

    Examples:
        isl_set -> set
        isl_ast_node_for -> ast_node_for
    """
    return name[len(prefix):]


def replace_first(text: str, old: str, new: str) -> str:
    """Replace only the first occurrence of "old" in "text"

    Example:
        enum isl_dim_type -> enum isl::dim_type
    """
    pos = text.find(old)
    if pos < 0:
        return text
    return text[:pos] + new + text[pos + len(old):]


def annotation(prefix: str, kind: str) -> str:
    """Ownership annotation macro, e.g. __isl_take"""
    return f'__{prefix}{kind}'


def split_annotation(type_str: str, prefix: str) -> tuple[str, str]:
    """Split a leading ownership annotation off a type spelling

    Returns (annotation kind, bare type); the kind is '' when absent.
    Example: "__isl_take isl_map *" -> ("take", "isl_map *")
    """
    type_str = type_str.strip()
    for kind in ('take', 'keep', 'give'):
        macro = annotation(prefix, kind)
        if type_str.startswith(macro + ' '):
            return kind, type_str[len(macro):].strip()
    return '', type_str


INT_TYPES = {
    'int', 'char', 'short', 'long', 'long long',
    'unsigned', 'unsigned int', 'unsigned char', 'unsigned short',
    'unsigned long', 'unsigned long long',
    'signed char', 'long int', 'unsigned long int',
    'int8_t', 'uint8_t',
    'int16_t', 'uint16_t',
    'int32_t', 'uint32_t',
    'int64_t', 'uint64_t',
    'size_t', 'uintptr_t', 'intptr_t',
}


def is_int_type(type_str: str) -> bool:
    """Check if type is an integer type"""
    return type_str in INT_TYPES


def is_enum_spelling(type_str: str) -> bool:
    """Check if type is spelled as an elaborated enum"""
    return type_str.startswith('enum ')


def is_string_ptr(type_str: str) -> bool:
    """Check if type is a C string"""
    return normalize_ptr_type(type_str) in ('const char*', 'char*')


def is_func_ptr(type_str: str) -> bool:
    """Check if type is a function pointer"""
    return '(*)' in type_str


def is_ptr_type(type_str: str) -> bool:
    """Check if type is a plain (non-function) pointer"""
    return type_str.rstrip().endswith('*') and not is_func_ptr(type_str)


def extract_ptr_type(type_str: str) -> str:
    """Extract pointed-to type from pointer type"""
    # "const isl_set *" -> "isl_set"
    # "isl_set *" -> "isl_set"
    tokens = type_str.replace('*', '').split()
    if tokens[0] == 'const':
        return tokens[1] if len(tokens) > 1 else ''
    return tokens[0]


def normalize_ptr_type(type_str: str) -> str:
    """Normalize pointer type spacing"""
    return type_str.replace(' *', '*').replace('* ', '*')


def c_declarator(type_str: str, name: str) -> str:
    """Join a type spelling and a variable name into a declaration"""
    if type_str.endswith('*'):
        return f'{type_str}{name}'
    return f'{type_str} {name}'


def parse_func_ptr(type_str: str) -> tuple[str, list[str]]:
    """Parse function pointer type

    Returns (return_type, args_list)
    Example: "isl_stat (*)(isl_map *, void *)" -> ("isl_stat", ["isl_map *", "void *"])
    """
    if '(*)' not in type_str:
        return '', []
    result_type = type_str[:type_str.index('(*)')].strip()
    args_str = type_str[type_str.index('(*)')+4:-1]
    args = [arg.strip() for arg in args_str.split(',') if arg.strip() and arg.strip() != 'void']
    return result_type, args


_IDENT_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def is_identifier(name: str) -> bool:
    """Check if name is a valid C identifier"""
    return _IDENT_RE.match(name) is not None


def strip_param_name(decl: str) -> str:
    """Drop the parameter name from a C parameter declaration

    Examples:
        void *user -> void *
        __isl_take isl_map *map -> __isl_take isl_map *
        enum isl_dim_type type -> enum isl_dim_type
        int n -> int
    """
    decl = decl.strip()
    if '*' in decl:
        head, _, tail = decl.rpartition('*')
        return head + '*' if is_identifier(tail.strip()) else decl
    tokens = decl.split()
    if len(tokens) < 2 or decl in INT_TYPES:
        return decl
    if tokens[0] == 'enum' and len(tokens) == 2:
        return decl
    return ' '.join(tokens[:-1])
