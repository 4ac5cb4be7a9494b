"""
Ownership and parameter passing rules

Decides how a parameter appears in a wrapper signature and how the
wrapper hands it to the underlying C function.
"""

from typing import TYPE_CHECKING

from .types import Category, UnsupportedTypeError

if TYPE_CHECKING:
    from .ir import ParamInfo
    from .config import GenConfig

HANDLE_CATEGORIES = (Category.HANDLE, Category.CTX)


def handle_access(param: 'ParamInfo', receiver: bool) -> str:
    """Expression that extracts the C pointer from a wrapper object

    A value taken from "this" must be preserved and is therefore copied.
    Explicit arguments are already copies of the caller's objects, so
    their pointer can be released instead, saving a copy.

        receiver, keep  -> get()
        receiver, take  -> copy()
        argument, keep  -> name.get()
        argument, take  -> name.release()
    """
    if param.keeps:
        accessor = 'get()'
    elif receiver:
        accessor = 'copy()'
    else:
        accessor = 'release()'
    if receiver:
        return accessor
    return f'{param.name}.{accessor}'


def param_use(param: 'ParamInfo', category: Category, config: 'GenConfig',
              receiver: bool = False) -> str:
    """Argument expression passing "param" to the C function

    A callback expands to two arguments: the trampoline stored in
    <name>_lambda and the data holder <name>_data used as user pointer.
    """
    name = param.name
    if category is Category.ENUM:
        return f'static_cast<{param.type}>({name})'
    if category is Category.INTEGER:
        return name
    if category is Category.BOOL:
        return f'{name} ? {config.c_bool}_true : {config.c_bool}_false'
    if category is Category.STRING:
        return f'{name}.c_str()'
    if category is Category.CALLBACK:
        return f'{name}_lambda, &{name}_data'
    if category in HANDLE_CATEGORIES:
        return handle_access(param, receiver)
    raise UnsupportedTypeError(f'Cannot pass {param.type} parameter {name}')


def pass_by_reference(param: 'ParamInfo', category: Category) -> bool:
    """Borrowed objects, strings and callbacks are passed as const references"""
    return param.keeps or category in (Category.STRING, Category.CALLBACK)


def param_decl(param: 'ParamInfo', category: Category, cpp_type: str) -> str:
    """Declaration of "param" in a wrapper signature"""
    if pass_by_reference(param, category):
        return f'const {cpp_type} &{param.name}'
    return f'{cpp_type} {param.name}'
