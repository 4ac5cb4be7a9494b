"""
Callback binding generation module

Generates the local data holder and trampoline that let a std::function
be passed where the C library expects a function pointer plus a user
pointer.
"""

from typing import TYPE_CHECKING

from .codegen import CodeGen, c_declarator
from .types import Category, CallbackType, UnsupportedTypeError, parse_callback

if TYPE_CHECKING:
    from .ir import IR, ParamInfo
    from .types import TypeConverter
    from .config import GenConfig


class CallbackGenerator:
    """Generates callback trampolines"""

    def __init__(self, ir: 'IR', type_conv: 'TypeConverter', config: 'GenConfig'):
        self.ir = ir
        self.type_conv = type_conv
        self.config = config

    def parse(self, param: 'ParamInfo') -> CallbackType:
        return parse_callback(param.type, self.config.prefix)

    def trampoline_args(self, cb: CallbackType) -> str:
        """C argument list of the trampoline, matching the C callback

        For isl_stat (*)(isl_map *, void *) this is
        "isl_map *arg_0, void *arg_1".
        """
        return ', '.join(c_declarator(arg, f'arg_{i}') for i, arg in enumerate(cb.args))

    def arg_wrap(self, cb: CallbackType, i: int) -> str:
        """Expression turning raw callback argument i into its C++ value"""
        arg = cb.args[i]
        var = f'arg_{i}'
        category, cpp = self.type_conv.classify(arg)
        if category in (Category.HANDLE, Category.CTX):
            manage = 'manage' if cb.takes_args else 'manage_copy'
            return f'{self.config.qualify(manage)}({var})'
        if category is Category.ENUM:
            return f'static_cast<{cpp}>({var})'
        if category in (Category.INTEGER, Category.STRING):
            return var
        raise UnsupportedTypeError(f'Cannot pass {arg} to a C++ callback')

    def generate_local(self, param: 'ParamInfo', gen: CodeGen):
        """Generate the data holder and trampoline for callback "param"

        For a callback of the form

            isl_stat (*fn)(__isl_take isl_map *map, void *user)

        the following is generated:

            struct fn_data {
              const std::function<void(isl::map)> *func;
              std::exception_ptr eptr;
            } fn_data = { &fn };
            auto fn_lambda = [](isl_map *arg_0, void *arg_1) -> isl_stat {
              auto *data = static_cast<struct fn_data *>(arg_1);
              try {
                (*data->func)(isl::manage(arg_0));
                return isl_stat_ok;
              } catch (...) {
                data->eptr = std::current_exception();
                return isl_stat_error;
              }
            };

        The exception slot is left out without exceptions.
        """
        name = param.name
        cb = self.parse(param)
        cpp_type = self.type_conv.callback_type(param.type)
        last_idx = len(cb.args) - 1

        wrapped = ', '.join(self.arg_wrap(cb, i) for i in range(last_idx))
        call = f'(*data->func)({wrapped})'

        with gen.block(f'struct {name}_data {{', f'}} {name}_data = {{ &{name} }};'):
            gen.line(f'const {cpp_type} *func;')
            if self.config.exceptions:
                gen.line('std::exception_ptr eptr;')
        header = f'auto {name}_lambda = []({self.trampoline_args(cb)}) -> {cb.return_type} {{'
        with gen.block(header, '};'):
            gen.line(f'auto *data = static_cast<struct {name}_data *>(arg_{last_idx});')
            self._gen_wrapped_call(call, cb.return_type, gen)

    def _gen_wrapped_call(self, call: str, rtype: str, gen: CodeGen):
        """Generate the call to the C++ callback and the conversion of its result"""
        category = self.type_conv.category(rtype)
        if category not in (Category.STAT, Category.BOOL, Category.HANDLE):
            raise UnsupportedTypeError(f'Cannot return {rtype} from a callback')

        if not self.config.exceptions:
            gen.line(f'auto ret = {call};')
            if category is Category.STAT:
                gen.line(f'return {self.config.c_stat}(ret);')
            else:
                gen.line('return ret.release();')
            return

        c_stat = self.config.c_stat
        c_bool = self.config.c_bool
        gen.line('try {')
        gen.indent()
        if category is Category.STAT:
            gen.line(f'{call};')
            gen.line(f'return {c_stat}_ok;')
        elif category is Category.BOOL:
            gen.line(f'auto ret = {call};')
            gen.line(f'return ret ? {c_bool}_true : {c_bool}_false;')
        else:
            gen.line(f'auto ret = {call};')
            gen.line('return ret.release();')
        gen.dedent()
        with gen.block('} catch (...) {'):
            gen.line('data->eptr = std::current_exception();')
            if category is Category.STAT:
                gen.line(f'return {c_stat}_error;')
            elif category is Category.BOOL:
                gen.line(f'return {c_bool}_error;')
            else:
                gen.line('return NULL;')

    def generate_check(self, param: 'ParamInfo', gen: CodeGen):
        """Rethrow an exception captured inside the C++ callback"""
        gen.line(f'if ({param.name}_data.eptr)')
        gen.line(f'  std::rethrow_exception({param.name}_data.eptr);')
