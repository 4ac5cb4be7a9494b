"""
Class binding generation module

Generates the declaration and the implementation of the C++ wrapper
class of a single C object type: factories, constructors, assignment,
destructor, pointer accessors, downcasts, printing and methods.
"""

from typing import Callable, TYPE_CHECKING

from .codegen import CodeGen, annotation
from .func import MethodKind, throw_null_input

if TYPE_CHECKING:
    from .ir import IR, ClassInfo, FuncInfo
    from .types import TypeConverter
    from .func import MethodGenerator
    from .config import GenConfig


class ClassGenerator:
    """Generates wrapper classes"""

    def __init__(self, ir: 'IR', type_conv: 'TypeConverter',
                 method_gen: 'MethodGenerator', config: 'GenConfig'):
        self.ir = ir
        self.type_conv = type_conv
        self.method_gen = method_gen
        self.config = config

    def _take(self) -> str:
        return annotation(self.config.prefix, 'take')

    def _keep(self) -> str:
        return annotation(self.config.prefix, 'keep')

    def _give(self) -> str:
        return annotation(self.config.prefix, 'give')

    def constructors(self, clazz: 'ClassInfo') -> list['FuncInfo']:
        return [c for c in clazz.constructors if c.name not in self.config.ignores]

    def methods(self, clazz: 'ClassInfo') -> list[tuple[str, list['FuncInfo']]]:
        """Method groups of "clazz" without ignored functions"""
        result = []
        for name, funcs in clazz.methods:
            kept = [f for f in funcs if f.name not in self.config.ignores]
            if kept:
                result.append((name, kept))
        return result

    def generate_forward_decl(self, clazz: 'ClassInfo', gen: CodeGen):
        gen.line(f'class {self.type_conv.class_name(clazz)};')

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def generate_decl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Generate the declaration of the wrapper class

        A subclass based on a type function inherits from its superclass
        and does not hold a pointer of its own, it refers to the same C
        object.  A superclass with a type function declares "isa" and "as".
        """
        cppname = self.type_conv.class_name(clazz)
        qualified = self.config.qualify(cppname)

        gen.line(f'// declarations for {qualified}')
        self._gen_factory_decl(clazz, '', gen)
        gen.line()
        if clazz.is_type_subclass:
            gen.line(f'class {cppname} : public {self.type_conv.super_name(clazz)} {{')
        else:
            gen.line(f'class {cppname} {{')
        gen.indent()
        self._gen_subclass_type(clazz, gen)
        self._gen_factory_decl(clazz, 'friend ', gen)
        gen.line()
        gen.raw('protected:')
        if not clazz.is_type_subclass:
            gen.line(f'{clazz.name} *ptr = nullptr;')
            gen.line()
        gen.line(f'inline explicit {cppname}({self._take()} {clazz.name} *ptr);')
        gen.line()
        gen.raw('public:')
        gen.line(f'inline /* implicit */ {cppname}();')
        gen.line(f'inline /* implicit */ {cppname}(const {qualified} &obj);')
        for cons in self.constructors(clazz):
            self.method_gen.generate_decl(clazz, cons.name, cons, MethodKind.CONSTRUCTOR, gen)
        gen.line(f'inline {qualified} &operator=({qualified} obj);')
        if not clazz.is_type_subclass:
            gen.line(f'inline ~{cppname}();')
            self._gen_ptr_decl(clazz, gen)
        if clazz.type_fn is not None:
            gen.line(f'template <class T> inline {self.config.bool_type} isa();')
            gen.line('template <class T> inline T as();')
        gen.line(f'inline {self.config.ctx_type} get_ctx() const;')
        if self.config.extensions and clazz.to_str_fn is not None:
            gen.line('inline std::string to_str() const;')
        gen.line()
        for name, funcs in self.methods(clazz):
            for func in funcs:
                kind = self.method_gen.method_kind(clazz, func)
                self.method_gen.generate_decl(clazz, name, func, kind, gen)
        gen.line(f'typedef {clazz.name}* {self.config.prefix}ptr_t;')
        gen.dedent()
        gen.line('};')

    def _gen_subclass_type(self, clazz: 'ClassInfo', gen: CodeGen):
        """Give "isa" and "as" of the superclass access to a type subclass

        "isa" compares against the "type" constant, "as" needs the
        protected constructor.
        """
        if not clazz.is_type_subclass:
            return
        cppname = self.type_conv.class_name(clazz)
        supername = self.type_conv.super_name(clazz)
        gen.line(f'friend {self.config.bool_type} {supername}::isa<{cppname}>();')
        gen.line(f'friend {cppname} {supername}::as<{cppname}>();')
        gen.line(f'static const auto type = {clazz.subclass_name};')

    def _gen_factory_decl(self, clazz: 'ClassInfo', prefix: str, gen: CodeGen):
        """Declare manage() and manage_copy()

        Type subclasses share the C type of their superclass and therefore
        get no factories of their own.
        """
        if clazz.is_type_subclass:
            return
        qualified = self.config.qualify(self.type_conv.class_name(clazz))
        gen.line(f'{prefix}inline {qualified} manage({self._take()} {clazz.name} *ptr);')
        gen.line(f'{prefix}inline {qualified} manage_copy({self._keep()} {clazz.name} *ptr);')

    def _gen_ptr_decl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Declare copy(), get(), release(), is_null() and operator bool

        copy() is deleted for r-values, which should use release().
        """
        name = clazz.name
        gen.line(f'inline {self._give()} {name} *copy() const &;')
        gen.line(f'inline {self._give()} {name} *copy() && = delete;')
        gen.line(f'inline {self._keep()} {name} *get() const;')
        gen.line(f'inline {self._give()} {name} *release();')
        gen.line('inline bool is_null() const;')
        gen.line('inline explicit operator bool() const;')

    # ------------------------------------------------------------------
    # Implementations
    # ------------------------------------------------------------------

    def generate_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Generate the implementation of the wrapper class"""
        gen.line(f'// implementations for {self.config.qualify(self.type_conv.class_name(clazz))}')
        sections: list[Callable[['ClassInfo', CodeGen], None]] = [
            self._gen_factory_impl,
            self._gen_public_constructors_impl,
            self._gen_protected_constructor_impl,
            self._gen_constructors_impl,
            self._gen_copy_assignment_impl,
            self._gen_destructor_impl,
            self._gen_ptr_impl,
        ]
        if self.config.extensions:
            sections += [self._gen_operators_impl, self._gen_str_impl]
        sections += [
            self._gen_downcast_impl,
            self._gen_get_ctx_impl,
            self._gen_methods_impl,
        ]
        first = True
        for section in sections:
            part = CodeGen()
            section(clazz, part)
            if part.empty():
                continue
            if not first:
                gen.line()
            first = False
            gen.extend(part)

    def _gen_factory_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Define manage() and manage_copy()

        With exceptions, both require a non-NULL argument and manage_copy()
        throws if the copy fails.
        """
        if clazz.is_type_subclass:
            return
        name = clazz.name
        cppname = self.type_conv.class_name(clazz)
        qualified = self.config.qualify(cppname)
        exceptions = self.config.exceptions

        with gen.block(f'{qualified} manage({self._take()} {name} *ptr) {{'):
            if exceptions:
                gen.line('if (!ptr)')
                throw_null_input(self.config, gen)
            gen.line(f'return {cppname}(ptr);')
        with gen.block(f'{qualified} manage_copy({self._keep()} {name} *ptr) {{'):
            if exceptions:
                gen.line('if (!ptr)')
                throw_null_input(self.config, gen)
                gen.line(f'auto ctx = {name}_get_ctx(ptr);')
            gen.line(f'ptr = {name}_copy(ptr);')
            if exceptions:
                gen.line('if (!ptr)')
                gen.line('  throw exception::create_from_last_error(ctx);')
            gen.line(f'return {cppname}(ptr);')

    def _gen_public_constructors_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Define the default and copy constructors

        A subclass view delegates both to its superclass.  Otherwise the
        copy constructor throws if copying the C object failed.
        """
        cppname = self.type_conv.class_name(clazz)
        supername = self.type_conv.super_name(clazz)
        subclass = clazz.is_type_subclass

        gen.line(f'{cppname}::{cppname}()')
        gen.line(f'    : {supername}() {{}}' if subclass else '    : ptr(nullptr) {}')
        gen.line()
        gen.line(f'{cppname}::{cppname}(const {self.config.qualify(cppname)} &obj)')
        gen.line(f'    : {supername}(obj)' if subclass else '    : ptr(obj.copy())')
        with gen.block('{'):
            if self.config.exceptions and not subclass:
                gen.line('if (obj.ptr && !ptr)')
                gen.line(f'  throw exception::create_from_last_error({clazz.name}_get_ctx(obj.ptr));')

    def _gen_protected_constructor_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        cppname = self.type_conv.class_name(clazz)
        gen.line(f'{cppname}::{cppname}({self._take()} {clazz.name} *ptr)')
        if clazz.is_type_subclass:
            gen.line(f'    : {self.type_conv.super_name(clazz)}(ptr) {{}}')
        else:
            gen.line('    : ptr(ptr) {}')

    def _gen_constructors_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        for i, cons in enumerate(self.constructors(clazz)):
            if i:
                gen.line()
            self.method_gen.generate_impl(clazz, cons.name, cons, MethodKind.CONSTRUCTOR, gen)

    def _gen_copy_assignment_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Copy-and-swap: "obj" is a copy, the old pointer dies with it"""
        cppname = self.type_conv.class_name(clazz)
        with gen.block(f'{cppname} &{cppname}::operator=({self.config.qualify(cppname)} obj) {{'):
            gen.line('std::swap(this->ptr, obj.ptr);')
            gen.line('return *this;')

    def _gen_destructor_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        if clazz.is_type_subclass:
            return
        cppname = self.type_conv.class_name(clazz)
        with gen.block(f'{cppname}::~{cppname}() {{'):
            gen.line('if (ptr)')
            gen.line(f'  {clazz.name}_free(ptr);')

    def _gen_ptr_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Define the pointer accessors, shared by type subclasses"""
        if clazz.is_type_subclass:
            return
        name = clazz.name
        cppname = self.type_conv.class_name(clazz)
        with gen.block(f'{self._give()} {name} *{cppname}::copy() const & {{'):
            gen.line(f'return {name}_copy(ptr);')
        gen.line()
        with gen.block(f'{self._keep()} {name} *{cppname}::get() const {{'):
            gen.line('return ptr;')
        gen.line()
        with gen.block(f'{self._give()} {name} *{cppname}::release() {{'):
            gen.line(f'{name} *tmp = ptr;')
            gen.line('ptr = nullptr;')
            gen.line('return tmp;')
        gen.line()
        with gen.block(f'bool {cppname}::is_null() const {{'):
            gen.line('return ptr == nullptr;')
        gen.line(f'{cppname}::operator bool() const')
        with gen.block('{'):
            gen.line('return !is_null();')

    def _gen_operators_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Define operator<< and operator== from to_str and is_equal"""
        cppname = self.type_conv.class_name(clazz)
        if clazz.to_str_fn is not None:
            with gen.block(f'inline std::ostream& operator<<(std::ostream& os, const {cppname}& C) {{'):
                gen.line('os << C.to_str();')
                gen.line('return os;')
        if clazz.is_equal_fn is not None:
            if clazz.to_str_fn is not None:
                gen.line()
            rettype = self.type_conv.to_cpp(clazz.is_equal_fn.return_type)
            with gen.block(f'inline {rettype} operator==(const {cppname}& C1, const {cppname}& C2) {{'):
                gen.line('return C1.is_equal(C2);')

    def _gen_str_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        if clazz.to_str_fn is None:
            return
        cppname = self.type_conv.class_name(clazz)
        with gen.block(f'std::string {cppname}::to_str() const {{'):
            gen.line(f'char *Tmp = {clazz.to_str_fn.name}(get());')
            gen.line('if (!Tmp)')
            gen.line('  return "";')
            gen.line('std::string S(Tmp);')
            gen.line('free(Tmp);')
            gen.line('return S;')

    def _gen_downcast_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Define "isa" and "as" for a superclass with a type function

        On an invalid object, "isa" throws, or returns an invalid boolean
        without exceptions.  "as" returns an invalid object if the object
        is not of the requested type.
        """
        if clazz.type_fn is None:
            return
        cppname = self.type_conv.class_name(clazz)
        gen.line('template <class T>')
        gen.line(f'{self.config.bool_type} {cppname}::isa()')
        with gen.block('{'):
            gen.line('if (is_null())')
            if self.config.exceptions:
                throw_null_input(self.config, gen)
            else:
                gen.line(f'  return {self.config.bool_type}();')
            gen.line(f'return {clazz.type_fn.name}(get()) == T::type;')
        gen.line('template <class T>')
        gen.line(f'T {cppname}::as()')
        with gen.block('{'):
            if not self.config.exceptions:
                gen.line('if (is_null())')
                gen.line('  return T();')
            gen.line('return isa<T>() ? T(copy()) : T();')

    def _gen_get_ctx_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        cppname = self.type_conv.class_name(clazz)
        ctx_type = self.config.ctx_type
        with gen.block(f'{ctx_type} {cppname}::get_ctx() const {{'):
            gen.line(f'return {ctx_type}({clazz.name}_get_ctx(ptr));')

    def _gen_methods_impl(self, clazz: 'ClassInfo', gen: CodeGen):
        """Define all methods, one blank line between overloads and groups"""
        first = True
        for name, funcs in self.methods(clazz):
            for func in funcs:
                if not first:
                    gen.line()
                first = False
                kind = self.method_gen.method_kind(clazz, func)
                self.method_gen.generate_impl(clazz, name, func, kind, gen)
