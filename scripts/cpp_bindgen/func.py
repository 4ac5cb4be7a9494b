"""
Method binding generation module

Generates declarations and definitions of the C++ methods, static
methods and constructors that wrap a single C function.
"""

from enum import Enum
from typing import Optional, TYPE_CHECKING

from .codegen import CodeGen, GenerationError, extract_ptr_type
from .types import Category
from .ownership import HANDLE_CATEGORIES, param_use, param_decl

if TYPE_CHECKING:
    from .ir import IR, ClassInfo, FuncInfo, ParamInfo
    from .types import TypeConverter
    from .callback import CallbackGenerator
    from .config import GenConfig


class MethodKind(Enum):
    """Kind of C++ function generated for a C function"""
    CONSTRUCTOR = 'constructor'
    STATIC = 'static'
    INSTANCE = 'instance'


def throw_null_input(config: 'GenConfig', gen: CodeGen):
    """Generate code throwing an exception on NULL input"""
    gen.line(f'  throw {config.qualify("exception")}::create({config.prefix}error_invalid,')
    gen.line('      "NULL input", __FILE__, __LINE__);')


class MethodGenerator:
    """Generates C++ wrappers for C functions"""

    def __init__(self, ir: 'IR', type_conv: 'TypeConverter',
                 callback_gen: 'CallbackGenerator', config: 'GenConfig'):
        self.ir = ir
        self.type_conv = type_conv
        self.callback_gen = callback_gen
        self.config = config

    def method_kind(self, clazz: 'ClassInfo', func: 'FuncInfo') -> MethodKind:
        """Kind of a (non-constructor) method of "clazz"

        A method whose first argument is an object of the class becomes an
        instance method operating on "this"; anything else is static.
        """
        if not func.params:
            return MethodKind.STATIC
        first = func.params[0].type
        if self.type_conv.is_handle(first) and extract_ptr_type(first) == clazz.name:
            return MethodKind.INSTANCE
        return MethodKind.STATIC

    def return_type(self, clazz: 'ClassInfo', func: 'FuncInfo') -> tuple[str, bool]:
        """C++ return type of "func" and whether it was narrowed to a subclass

        If "clazz" is a subclass based on a type function and the return
        type is its superclass, the subclass is returned instead.
        """
        rettype = self.type_conv.to_cpp(func.return_type)
        if clazz.is_type_subclass and rettype == self.config.qualify(self.type_conv.super_name(clazz)):
            return self.config.qualify(self.type_conv.class_name(clazz)), True
        return rettype, False

    def is_implicit_conversion(self, clazz: 'ClassInfo', cons: 'FuncInfo') -> bool:
        """Check if "cons" is an implicit conversion constructor of "clazz"

        This is the case for a single argument that is an object of a
        subclass of the class being generated.
        """
        if len(cons.params) != 1:
            return False
        ptype = cons.params[0].type
        return self.type_conv.is_object(ptype) and self.ir.is_subclass(ptype, clazz)

    def generate_header(self, clazz: 'ClassInfo', name: str, func: 'FuncInfo',
                        kind: MethodKind, is_declaration: bool) -> str:
        """Header of a declaration or definition of the wrapper of "func"

        Instance methods drop the first C argument, which is taken from
        "this", and are const since they create new objects instead of
        modifying the current one.  The user pointer of a callback never
        shows up.  Constructors are "explicit" unless they implement an
        implicit conversion, which is marked with a comment instead.
        """
        classname = self.type_conv.class_name(clazz)
        rettype, _ = self.return_type(clazz, func)
        header = ''

        if is_declaration:
            if kind is MethodKind.STATIC:
                header += 'static '
            header += 'inline '
            if kind is MethodKind.CONSTRUCTOR:
                if self.is_implicit_conversion(clazz, func):
                    header += '/* implicit */ '
                else:
                    header += 'explicit '

        if kind is not MethodKind.CONSTRUCTOR:
            header += f'{rettype} '
        if not is_declaration:
            header += f'{classname}::'
        if kind is MethodKind.CONSTRUCTOR:
            header += classname
        else:
            header += self.config.rename(name)

        params = []
        for i, param in func.wrapped_params():
            if i == 0 and kind is MethodKind.INSTANCE:
                continue
            category, cpp = self.type_conv.classify(param.type)
            params.append(param_decl(param, category, cpp))
        header += f'({", ".join(params)})'

        if kind is MethodKind.INSTANCE:
            header += ' const'
        if is_declaration:
            header += ';'
        return header

    def generate_decl(self, clazz: 'ClassInfo', name: str, func: 'FuncInfo',
                      kind: MethodKind, gen: CodeGen):
        gen.line(self.generate_header(clazz, name, func, kind, True))

    def generate_impl(self, clazz: 'ClassInfo', name: str, func: 'FuncInfo',
                      kind: MethodKind, gen: CodeGen):
        """Generate the definition of the wrapper of "func"

        Unless bindings without exceptions are generated, the inputs are
        first checked for being valid objects, the context used for
        reporting errors is saved and the library is told not to print
        error messages of its own while the function runs.  Failures of
        the call itself, or of a callback, are turned into exceptions.

        Constructors do not return anything but store the result in the
        newly created object.
        """
        rettype, returns_super = self.return_type(clazz, func)
        callbacks = [p for _, p in func.wrapped_params() if p.is_callback]

        gen.line(self.generate_header(clazz, name, func, kind, False))
        with gen.block('{'):
            self._gen_validity_check(func, kind, gen)
            self._gen_save_ctx(func, kind, gen)
            self._gen_on_error_continue(func, kind, gen)
            for param in callbacks:
                self.callback_gen.generate_local(param, gen)
            gen.line(f'auto res = {func.name}({self.call_args(func, kind)});')
            self._gen_exceptional_execution_check(func, kind, callbacks, gen)
            self._gen_result(func, kind, rettype, returns_super, bool(callbacks), gen)

    def call_args(self, func: 'FuncInfo', kind: MethodKind) -> str:
        """Arguments of the call to the C function, in C order"""
        args = []
        for i, param in func.wrapped_params():
            receiver = i == 0 and kind is MethodKind.INSTANCE
            category = self.type_conv.category(param.type)
            args.append(param_use(param, category, self.config, receiver))
        return ', '.join(args)

    def _gen_validity_check(self, func: 'FuncInfo', kind: MethodKind, gen: CodeGen):
        """Throw if any object argument, "this" included, is NULL"""
        if not self.config.exceptions:
            return
        checks = []
        for i, param in func.wrapped_params():
            if i == 0 and kind is MethodKind.INSTANCE:
                checks.append('!ptr')
            elif self.type_conv.is_object(param.type):
                checks.append(f'{param.name}.is_null()')
        if not checks:
            return
        gen.line(f'if ({" || ".join(checks)})')
        throw_null_input(self.config, gen)

    def ctx_source(self, func: 'FuncInfo', kind: MethodKind) -> Optional['ParamInfo']:
        """Parameter providing the context for error reporting

        Returns None for instance methods, which use the context of "this".
        """
        if kind is MethodKind.INSTANCE:
            return None
        for param in func.params:
            if self.type_conv.is_handle(param.type):
                return param
        raise GenerationError(f'{func.name}: no {self.config.c_ctx} available for error reporting')

    def method_ctx(self, func: 'FuncInfo', kind: MethodKind) -> str:
        """Expression for the context of the method

        This is get_ctx() for instance methods, the context argument if
        there is one and otherwise the copy saved by _gen_save_ctx.
        """
        source = self.ctx_source(func, kind)
        if source is None:
            return 'get_ctx()'
        if self.type_conv.category(source.type) is Category.CTX:
            return source.name
        return 'ctx'

    def _gen_save_ctx(self, func: 'FuncInfo', kind: MethodKind, gen: CodeGen):
        """Save the context of the first object argument

        The argument may have been released by the time an error needs to
        be reported, so the context is obtained before the call.
        """
        if not self.config.exceptions:
            return
        source = self.ctx_source(func, kind)
        if source is None or self.type_conv.category(source.type) is Category.CTX:
            return
        gen.line(f'auto ctx = {source.name}.get_ctx();')

    def _gen_on_error_continue(self, func: 'FuncInfo', kind: MethodKind, gen: CodeGen):
        """Keep the library quiet on error, the message ends up in the exception"""
        if not self.config.exceptions:
            return
        ctx = self.method_ctx(func, kind)
        gen.line(f'options_scoped_set_on_error saved_on_error({ctx}, {self.config.on_error_continue});')

    def _gen_exceptional_execution_check(self, func: 'FuncInfo', kind: MethodKind,
                                         callbacks: list['ParamInfo'], gen: CodeGen):
        """Check whether the call succeeded

        An exception caught inside a callback is rethrown first.  Then a
        negative status or boolean, or a NULL object, is reported as the
        last error of the context.
        """
        if not self.config.exceptions:
            return
        for param in callbacks:
            self.callback_gen.generate_check(param, gen)

        category = self.type_conv.category(func.return_type)
        if category in (Category.STAT, Category.BOOL):
            gen.line('if (res < 0)')
        elif category in HANDLE_CATEGORIES:
            gen.line('if (!res)')
        else:
            return
        gen.line(f'  throw exception::create_from_last_error({self.method_ctx(func, kind)});')

    def _gen_result(self, func: 'FuncInfo', kind: MethodKind, rettype: str,
                    returns_super: bool, has_callback: bool, gen: CodeGen):
        """Convert the result of the C function to the C++ return value"""
        if kind is MethodKind.CONSTRUCTOR:
            gen.line('ptr = res;')
            return

        category, cpp = self.type_conv.classify(func.return_type)
        if category in HANDLE_CATEGORIES or (not self.config.exceptions and category is Category.BOOL):
            if returns_super:
                gen.line(f'return manage(res).as<{rettype}>();')
            else:
                gen.line('return manage(res);')
        elif rettype == 'void':
            pass
        elif has_callback:
            gen.line(f'return {rettype}(res);')
        elif category is Category.STRING:
            gen.line('std::string tmp(res);')
            if func.gives:
                gen.line('free(res);')
            gen.line('return tmp;')
        elif category is Category.ENUM:
            gen.line(f'return static_cast<{cpp}>(res);')
        else:
            gen.line('return res;')
